"""
Island Simulation Runner
========================
Run the island with a progress readout, then show every plot in one window.

Usage:
    python run_simulation.py                              # defaults: 200 years, seed 42
    python run_simulation.py --years 100 --seed 7         # custom run
    python run_simulation.py --carnivore-year -1          # herbivores only
    python run_simulation.py --help                       # full options
"""

from __future__ import annotations

import os
import sys
import time

# Ensure biosim package is importable
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# (row, col, title, [(snapshot attribute, style, label), ...])
_PANELS = [
    (0, 0, "Population", [
        ("herbivores", "g-", "Herbivores"),
        ("carnivores", "r-", "Carnivores"),
    ]),
    (0, 1, "Herbivore Turnover", [
        ("herbivore_births", "g-", "Herb. births"),
        ("herbivore_deaths", "g--", "Herb. deaths"),
        ("kills", "k:", "Kills"),
    ]),
    (0, 2, "Average Fitness", [
        ("avg_herbivore_fitness", "g-", "Herbivores"),
        ("avg_carnivore_fitness", "r-", "Carnivores"),
    ]),
    (1, 0, "Migrations per Year", [
        ("herbivore_migrations", "g-", "Herbivores"),
        ("carnivore_migrations", "r-", "Carnivores"),
    ]),
]


def run(argv: list[str] | None = None) -> int:
    from biosim.core.config import DEFAULT_CARNIVORE_POPULATION
    from biosim.main import build_engine, build_parser

    args = build_parser().parse_args(argv)

    print("=" * 60)
    print("  Island Ecosystem Simulation")
    print("=" * 60)
    print(f"  Years      : {args.years}")
    print(f"  Seed       : {args.seed}")
    print(f"  Carnivores : from year {args.carnivore_year}")
    print(f"  Output     : {args.output_dir}/")
    print("=" * 60)

    try:
        engine = build_engine(args)
    except ValueError as e:
        print(f"Application error: {e}", file=sys.stderr)
        return 1

    print(f"\n  Island {engine.island.width}x{engine.island.height}, population {engine.island.population()}\n")

    t0 = time.time()
    step = max(1, args.years // 10)
    try:
        for done in range(1, args.years + 1):
            if engine.year == args.carnivore_year:
                engine.add_population(DEFAULT_CARNIVORE_POPULATION)
            snap = engine.tick()
            if done % step == 0 or done == args.years:
                rate = done / max(0.01, time.time() - t0)
                print(
                    f"  Year {snap.year:>4}  ({done / args.years * 100:5.1f}%)  |  "
                    f"Herb: {snap.herbivores:>5}  Carn: {snap.carnivores:>5}  |  {rate:.1f} years/s"
                )
    except KeyboardInterrupt:
        print("\n  Interrupted by user.")
    print(f"\nSimulation finished in {time.time() - t0:.1f}s\n")

    os.makedirs(args.output_dir, exist_ok=True)
    engine.metrics.export_csv(os.path.join(args.output_dir, "metrics.csv"))
    engine.logger.export_json(os.path.join(args.output_dir, "events.json"))
    engine.logger.close()
    print(engine.metrics.summary_report())

    from biosim.viz.dashboard import Dashboard
    Dashboard.comprehensive_report(engine.metrics, args.output_dir, engine.island)

    if not args.no_dashboard:
        _show_summary(engine, args.output_dir)
    return 0


def _show_summary(engine, output_dir: str) -> None:
    """One 2x3 figure: four time series and the final density maps."""
    import matplotlib
    matplotlib.use("TkAgg")
    import matplotlib.pyplot as plt

    snapshots = engine.metrics.snapshots
    years = [s.year for s in snapshots]

    fig, axes = plt.subplots(2, 3, figsize=(18, 10))
    fig.suptitle("Island Simulation Results", fontsize=16, fontweight="bold")

    for row, col, title, lines in _PANELS:
        ax = axes[row, col]
        for attribute, style, label in lines:
            ax.plot(years, engine.metrics.series(attribute), style, linewidth=1.5, label=label)
        ax.set_title(title)
        ax.set_xlabel("Year")
        ax.legend(fontsize=7)
        ax.grid(True, alpha=0.3)
    axes[0, 2].set_ylim(0, 1)

    for ax, species, cmap in ((axes[1, 1], "Herbivore", "Greens"), (axes[1, 2], "Carnivore", "Reds")):
        image = ax.imshow(engine.island.density_grid(species), cmap=cmap, interpolation="nearest")
        ax.set_title(f"{species} Density (Year {engine.year})")
        fig.colorbar(image, ax=ax, shrink=0.8)

    plt.tight_layout(rect=[0, 0, 1, 0.95])
    path = os.path.join(output_dir, "summary_dashboard.png")
    fig.savefig(path, dpi=150, bbox_inches="tight")
    print(f"  Dashboard saved to {path}")
    print("  Close the graph window to exit.")
    plt.show()


if __name__ == "__main__":
    sys.exit(run())
