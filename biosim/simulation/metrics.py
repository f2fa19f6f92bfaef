"""Data collection, population statistics, and export."""

from __future__ import annotations

import csv
import os
from dataclasses import dataclass
from typing import Optional

from biosim.core.config import CARNIVORE, HERBIVORE


@dataclass
class YearlySnapshot:
    """A snapshot of the island at the end of one year."""

    year: int = 0
    herbivores: int = 0
    carnivores: int = 0
    herbivore_births: int = 0
    carnivore_births: int = 0
    herbivore_deaths: int = 0
    carnivore_deaths: int = 0
    kills: int = 0
    herbivore_migrations: int = 0
    carnivore_migrations: int = 0
    avg_herbivore_fitness: float = 0.0
    avg_carnivore_fitness: float = 0.0
    avg_herbivore_weight: float = 0.0
    avg_carnivore_weight: float = 0.0
    total_fodder: float = 0.0

    @property
    def total(self) -> int:
        return self.herbivores + self.carnivores


_CSV_COLUMNS: list[str] = [
    "year", "herbivores", "carnivores", "herbivore_births", "carnivore_births",
    "herbivore_deaths", "carnivore_deaths", "kills", "herbivore_migrations",
    "carnivore_migrations", "avg_herbivore_fitness", "avg_carnivore_fitness",
    "avg_herbivore_weight", "avg_carnivore_weight", "total_fodder",
]


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class MetricsCollector:
    """Collects time-series data every year."""

    def __init__(self) -> None:
        self.snapshots: list[YearlySnapshot] = []

    @property
    def latest(self) -> Optional[YearlySnapshot]:
        return self.snapshots[-1] if self.snapshots else None

    def collect_yearly(
        self,
        year: int,
        island: "Island",  # noqa: F821
        stats: Optional["CycleStats"] = None,  # noqa: F821
    ) -> YearlySnapshot:
        """Collect all metrics for this year. *stats* is None for the initial state."""
        herbivores = list(island.animals(HERBIVORE))
        carnivores = list(island.animals(CARNIVORE))

        snapshot = YearlySnapshot(
            year=year,
            herbivores=len(herbivores),
            carnivores=len(carnivores),
            avg_herbivore_fitness=_mean([h.fitness for h in herbivores]),
            avg_carnivore_fitness=_mean([c.fitness for c in carnivores]),
            avg_herbivore_weight=_mean([h.weight for h in herbivores]),
            avg_carnivore_weight=_mean([c.weight for c in carnivores]),
            total_fodder=island.total_fodder(),
        )
        if stats is not None:
            snapshot.herbivore_births = stats.births[HERBIVORE]
            snapshot.carnivore_births = stats.births[CARNIVORE]
            snapshot.herbivore_deaths = stats.deaths[HERBIVORE]
            snapshot.carnivore_deaths = stats.deaths[CARNIVORE]
            snapshot.kills = stats.kills
            snapshot.herbivore_migrations = stats.migrations[HERBIVORE]
            snapshot.carnivore_migrations = stats.migrations[CARNIVORE]

        self.snapshots.append(snapshot)
        return snapshot

    def series(self, attribute: str) -> list:
        """One column of the time series, e.g. series("herbivores")."""
        return [getattr(s, attribute) for s in self.snapshots]

    def export_csv(self, filepath: str) -> None:
        """Export all snapshots to CSV."""
        os.makedirs(os.path.dirname(filepath) if os.path.dirname(filepath) else ".", exist_ok=True)
        with open(filepath, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(_CSV_COLUMNS)
            for s in self.snapshots:
                writer.writerow([
                    s.year, s.herbivores, s.carnivores,
                    s.herbivore_births, s.carnivore_births,
                    s.herbivore_deaths, s.carnivore_deaths, s.kills,
                    s.herbivore_migrations, s.carnivore_migrations,
                    f"{s.avg_herbivore_fitness:.4f}", f"{s.avg_carnivore_fitness:.4f}",
                    f"{s.avg_herbivore_weight:.2f}", f"{s.avg_carnivore_weight:.2f}",
                    f"{s.total_fodder:.1f}",
                ])

    def extinction_year(self, species: str) -> int:
        """First year a species present earlier had died out, or -1."""
        attribute = "herbivores" if species == HERBIVORE else "carnivores"
        seen = False
        for s in self.snapshots:
            count = getattr(s, attribute)
            if count > 0:
                seen = True
            elif seen:
                return s.year
        return -1

    def summary_report(self, start_year: int = 0, end_year: Optional[int] = None) -> str:
        """Generate a human-readable summary of the simulation period."""
        relevant = [
            s for s in self.snapshots
            if s.year >= start_year and (end_year is None or s.year <= end_year)
        ]
        if not relevant:
            return "No data available for the specified period."

        first = relevant[0]
        last = relevant[-1]
        peak_herb = max(relevant, key=lambda s: s.herbivores)
        peak_carn = max(relevant, key=lambda s: s.carnivores)

        lines = [
            f"=== Simulation Summary: Year {first.year} to Year {last.year} ===",
            f"",
            f"Herbivores: {first.herbivores} -> {last.herbivores}"
            f" (peak {peak_herb.herbivores} in year {peak_herb.year})",
            f"  Total births: {sum(s.herbivore_births for s in relevant)}",
            f"  Total deaths: {sum(s.herbivore_deaths for s in relevant)}",
            f"  Killed by carnivores: {sum(s.kills for s in relevant)}",
            f"  Migrations: {sum(s.herbivore_migrations for s in relevant)}",
            f"",
            f"Carnivores: {first.carnivores} -> {last.carnivores}"
            f" (peak {peak_carn.carnivores} in year {peak_carn.year})",
            f"  Total births: {sum(s.carnivore_births for s in relevant)}",
            f"  Total deaths: {sum(s.carnivore_deaths for s in relevant)}",
            f"  Migrations: {sum(s.carnivore_migrations for s in relevant)}",
            f"",
            f"Final Metrics:",
            f"  Avg herbivore fitness: {last.avg_herbivore_fitness:.3f}",
            f"  Avg carnivore fitness: {last.avg_carnivore_fitness:.3f}",
            f"  Avg herbivore weight: {last.avg_herbivore_weight:.1f}",
            f"  Avg carnivore weight: {last.avg_carnivore_weight:.1f}",
        ]

        for species in (HERBIVORE, CARNIVORE):
            year = self.extinction_year(species)
            if year >= 0:
                lines.append(f"  {species}s went extinct in year {year}")

        return "\n".join(lines)
