"""Monte Carlo analysis: repeat the island simulation over many seeds."""

from __future__ import annotations

import csv
import os
import statistics
import time
from dataclasses import astuple, dataclass, fields
from typing import Optional

import numpy as np

from biosim.core.config import (
    CARNIVORE,
    DEFAULT_CARNIVORE_POPULATION,
    DEFAULT_CARNIVORE_YEAR,
    DEFAULT_ISLAND_MAP,
    DEFAULT_POPULATION,
    HERBIVORE,
)


@dataclass
class RunResult:
    """Outcome of one seeded run."""
    seed: int
    final_herbivores: int
    final_carnivores: int
    peak_herbivores: int
    peak_carnivores: int
    min_herbivores: int
    min_carnivores: int
    herbivore_extinction_year: int  # -1 if never
    carnivore_extinction_year: int
    total_births: int
    total_deaths: int
    total_kills: int
    elapsed_seconds: float

    @property
    def outcome(self) -> str:
        if self.final_herbivores == 0:
            return "EXTINCT"
        if self.final_carnivores == 0 and self.peak_carnivores > 0:
            return "NO PREDATORS"
        return "COEXIST"


def run_single(
    seed: int,
    years: int,
    island_map: str = DEFAULT_ISLAND_MAP,
    ini_pop: Optional[list] = None,
    carnivore_year: Optional[int] = DEFAULT_CARNIVORE_YEAR,
    carnivore_pop: Optional[list] = None,
) -> RunResult:
    """Run one silent simulation. Carnivores join when the clock reaches *carnivore_year*."""
    from biosim.simulation.engine import SimulationEngine
    from biosim.viz.logger import SimLogger

    engine = SimulationEngine(island_map=island_map, ini_pop=ini_pop, seed=seed)
    engine.logger = SimLogger(verbosity=-1, stdout=False)
    engine.initialize()
    carnivore_pop = DEFAULT_CARNIVORE_POPULATION if carnivore_pop is None else carnivore_pop

    t0 = time.time()
    for _ in range(years):
        if engine.year == carnivore_year:
            engine.add_population(carnivore_pop)
        engine.tick()
    elapsed = time.time() - t0

    metrics = engine.metrics
    herbs = metrics.series("herbivores")
    carns = metrics.series("carnivores")
    births = [a + b for a, b in zip(metrics.series("herbivore_births"), metrics.series("carnivore_births"))]
    deaths = [a + b for a, b in zip(metrics.series("herbivore_deaths"), metrics.series("carnivore_deaths"))]

    return RunResult(
        seed=seed,
        final_herbivores=herbs[-1],
        final_carnivores=carns[-1],
        peak_herbivores=max(herbs),
        peak_carnivores=max(carns),
        min_herbivores=min(herbs),
        min_carnivores=min(carns),
        herbivore_extinction_year=metrics.extinction_year(HERBIVORE),
        carnivore_extinction_year=metrics.extinction_year(CARNIVORE),
        total_births=sum(births),
        total_deaths=sum(deaths),
        total_kills=sum(metrics.series("kills")),
        elapsed_seconds=elapsed,
    )


def monte_carlo(
    n_runs: int = 20,
    years: int = 100,
    island_map: str = DEFAULT_ISLAND_MAP,
    ini_pop: Optional[list] = None,
    carnivore_year: Optional[int] = DEFAULT_CARNIVORE_YEAR,
    output_dir: str = "results/monte_carlo",
) -> list[RunResult]:
    """Run *n_runs* simulations, print aggregate statistics and write a CSV."""
    os.makedirs(output_dir, exist_ok=True)
    seeds = [int(s) for s in np.random.default_rng(0).integers(0, 100_000, size=n_runs)]
    ini_pop = DEFAULT_POPULATION if ini_pop is None else ini_pop

    print("=== Monte Carlo Simulation ===")
    print(f"Runs: {n_runs} | Years/run: {years} | Carnivores from year: {carnivore_year}")
    print(f"Seeds: {seeds[:5]}{'...' if n_runs > 5 else ''}")
    print()

    total_t0 = time.time()
    results: list[RunResult] = []
    for i, seed in enumerate(seeds, start=1):
        r = run_single(seed, years, island_map, ini_pop, carnivore_year)
        results.append(r)
        print(
            f"  Run {i:>3}/{n_runs} | seed={seed:>5} | herb={r.final_herbivores:>5} | "
            f"carn={r.final_carnivores:>5} | kills={r.total_kills:>6} | {r.outcome} | "
            f"{r.elapsed_seconds:.1f}s"
        )
    total_elapsed = time.time() - total_t0
    print(f"\nAll {n_runs} runs completed in {total_elapsed:.1f}s "
          f"({total_elapsed / max(1, n_runs):.1f}s avg)")

    _print_aggregate(results)

    csv_path = os.path.join(output_dir, "monte_carlo_results.csv")
    _write_results(results, csv_path)
    print(f"\nResults exported to {csv_path}")
    return results


def _print_aggregate(results: list[RunResult]) -> None:
    n = len(results)
    print("\n" + "=" * 70)
    print("AGGREGATE RESULTS")
    print("=" * 70)

    for species, final, peak, extinct in (
        ("HERBIVORES", "final_herbivores", "peak_herbivores", "herbivore_extinction_year"),
        ("CARNIVORES", "final_carnivores", "peak_carnivores", "carnivore_extinction_year"),
    ):
        print(f"\n{species}")
        print(stat_line("Final population", [getattr(r, final) for r in results]))
        print(stat_line("Peak population", [getattr(r, peak) for r in results]))
        gone = sum(1 for r in results if getattr(r, extinct) >= 0)
        print(f"  Extinction rate: {gone}/{n} ({gone / max(1, n) * 100:.0f}%)")

    print("\nTURNOVER")
    print(stat_line("Total births", [r.total_births for r in results]))
    print(stat_line("Total deaths", [r.total_deaths for r in results]))
    print(stat_line("Total kills", [r.total_kills for r in results]))


def _write_results(results: list[RunResult], path: str) -> None:
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([fld.name for fld in fields(RunResult)])
        for r in results:
            row = list(astuple(r))
            row[-1] = f"{r.elapsed_seconds:.1f}"
            writer.writerow(row)


def stat_line(label: str, values: list[float], fmt: str = ".1f") -> str:
    if not values:
        return f"  {label}: no data"
    std = statistics.stdev(values) if len(values) > 1 else 0
    return (
        f"  {label:<30s}  mean={statistics.mean(values):{fmt}}  "
        f"median={statistics.median(values):{fmt}}  std={std:{fmt}}  "
        f"min={min(values):{fmt}}  max={max(values):{fmt}}"
    )


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Monte Carlo island simulation")
    parser.add_argument("--runs", type=int, default=20, help="Number of runs")
    parser.add_argument("--years", type=int, default=100, help="Years per run")
    parser.add_argument("--carnivore-year", type=int, default=DEFAULT_CARNIVORE_YEAR,
                        help="Year carnivores are introduced (negative: never)")
    parser.add_argument("--output-dir", type=str, default="results/monte_carlo")
    args = parser.parse_args()

    monte_carlo(
        n_runs=args.runs,
        years=args.years,
        carnivore_year=args.carnivore_year if args.carnivore_year >= 0 else None,
        output_dir=args.output_dir,
    )
