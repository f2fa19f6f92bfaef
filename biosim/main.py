"""Entry point for the island ecosystem simulation."""

from __future__ import annotations

import argparse
import os
import sys
import time


def build_parser() -> argparse.ArgumentParser:
    from biosim.core.config import DEFAULT_CARNIVORE_YEAR, DEFAULT_SEED, DEFAULT_YEARS

    parser = argparse.ArgumentParser(
        description="Island Ecosystem Simulation",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--years", type=int, default=DEFAULT_YEARS, help="Number of years to simulate")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Random seed for reproducibility")
    parser.add_argument("--map", type=str, default=None, help="Path to an island map file (default: built-in map)")
    parser.add_argument("--herbivores", type=int, default=None, help="Initial herbivores in the default cell")
    parser.add_argument("--carnivore-year", type=int, default=DEFAULT_CARNIVORE_YEAR,
                        help="Year carnivores are introduced (negative: never)")
    parser.add_argument("--feeding-order", type=str, default="weakest_first",
                        choices=["weakest_first", "fittest_first"], help="Herbivore grazing order")
    parser.add_argument("--verbosity", type=int, default=0, choices=[0, 1, 2], help="Log verbosity level")
    parser.add_argument("--output-dir", type=str, default="results", help="Output directory for results")
    parser.add_argument("--no-dashboard", action="store_true", help="Disable real-time dashboard")
    parser.add_argument("--log-file", type=str, default=None, help="Path to log file")
    return parser


def build_engine(args: argparse.Namespace) -> "SimulationEngine":  # noqa: F821
    """Build and stock an engine from parsed options.

    Raises ValueError (or a subclass) for a bad map or population.
    """
    from biosim.core.config import DEFAULT_ISLAND_MAP, DEFAULT_POPULATION
    from biosim.simulation.engine import SimulationEngine
    from biosim.viz.logger import SimLogger

    island_map = DEFAULT_ISLAND_MAP
    if args.map:
        with open(args.map, encoding="utf-8") as f:
            island_map = f.read()

    ini_pop = list(DEFAULT_POPULATION)
    if args.herbivores is not None:
        ini_pop = [(loc, species, args.herbivores) for loc, species, _ in DEFAULT_POPULATION]

    engine = SimulationEngine(
        island_map=island_map, ini_pop=ini_pop, seed=args.seed, feeding_order=args.feeding_order,
    )
    engine.logger = SimLogger(
        verbosity=args.verbosity,
        log_file=args.log_file or os.path.join(args.output_dir, "simulation.log"),
        stdout=(args.verbosity > 0),
    )
    engine.initialize()
    return engine


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # Import here to allow --help without loading everything
    from biosim.core.config import DEFAULT_CARNIVORE_POPULATION

    print(f"=== Island Ecosystem Simulation ===")
    print(f"Years: {args.years} | Seed: {args.seed} | Carnivores from year: {args.carnivore_year}")
    print(f"Output: {args.output_dir}")
    print()

    try:
        engine = build_engine(args)
    except ValueError as e:
        print(f"Application error: {e}", file=sys.stderr)
        return 1

    print(f"  Island: {engine.island.width}x{engine.island.height} cells")
    print(f"  Population: {engine.island.population()}")
    print()

    # Set up dashboard
    dashboard = None
    if not args.no_dashboard:
        try:
            from biosim.viz.dashboard import Dashboard
            dashboard = Dashboard(engine.island)
            dashboard.initialize()
            engine.set_year_callback(lambda year, metrics: dashboard.update(year, metrics))
            print("Real-time dashboard enabled")
        except Exception as e:
            print(f"Dashboard unavailable ({e}), continuing without visualization")
            dashboard = None

    print(f"Running simulation for {args.years} years...")
    t0 = time.time()

    try:
        for _ in range(args.years):
            if engine.year == args.carnivore_year:
                engine.add_population(DEFAULT_CARNIVORE_POPULATION)
            engine.run(1)
    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")

    elapsed = time.time() - t0
    years_run = engine.year
    print(f"\nSimulation complete: {years_run} years in {elapsed:.2f}s ({years_run / max(0.01, elapsed):.0f} years/sec)")

    # Export results
    os.makedirs(args.output_dir, exist_ok=True)

    csv_path = os.path.join(args.output_dir, "metrics.csv")
    engine.metrics.export_csv(csv_path)
    print(f"Metrics exported to {csv_path}")

    try:
        from biosim.viz.dashboard import Dashboard as DashClass
        DashClass.comprehensive_report(engine.metrics, args.output_dir, engine.island)
    except Exception as e:
        print(f"Could not generate plots: {e}")

    print()
    print(engine.metrics.summary_report())

    if dashboard:
        dashboard.save(os.path.join(args.output_dir, "dashboard_final.png"))
        dashboard.close()

    engine.logger.export_json(os.path.join(args.output_dir, "events.json"))
    engine.logger.close()

    print(f"\nAll results saved to {args.output_dir}/")
    return 0


if __name__ == "__main__":
    sys.exit(main())
