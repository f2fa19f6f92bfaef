"""Main simulation loop: one island-wide cycle per year."""

from __future__ import annotations

from typing import Callable, Iterable, Optional

import numpy as np
from numpy.random import Generator

from biosim.core.clock import SimClock
from biosim.core.config import (
    DEFAULT_ISLAND_MAP,
    DEFAULT_POPULATION,
    DEFAULT_SEED,
    HERBIVORE_FEEDING_ORDER,
    SPECIES_NAMES,
)
from biosim.simulation.metrics import MetricsCollector, YearlySnapshot
from biosim.viz.logger import SimLogger
from biosim.world.island import Island, PopulationEntry


class SimulationEngine:
    """Orchestrates the island simulation."""

    def __init__(
        self,
        island_map: str = DEFAULT_ISLAND_MAP,
        ini_pop: Optional[Iterable[PopulationEntry]] = None,
        seed: int = DEFAULT_SEED,
        feeding_order: str = HERBIVORE_FEEDING_ORDER,
    ) -> None:
        self.rng: Generator = np.random.default_rng(seed)
        self.seed = seed
        self._ini_pop = list(DEFAULT_POPULATION if ini_pop is None else ini_pop)

        # Map errors surface here, before any simulation state exists
        self.island = Island(island_map, feeding_order=feeding_order)
        self.clock = SimClock()
        self.metrics = MetricsCollector()
        self.logger = SimLogger()

        self._initialized = False
        self._year_callback: Optional[Callable[[int, MetricsCollector], None]] = None

    @property
    def year(self) -> int:
        return self.clock.year

    def initialize(self) -> None:
        """Stock the initial population and record year 0."""
        if self._initialized:
            return
        added = self.island.add_population(self._ini_pop)
        self.logger.log(
            SimLogger.LIFECYCLE,
            f"Island of {self.island.width}x{self.island.height} cells stocked with {added} animals",
            year=self.clock.year,
            population=self.island.population(),
        )
        self.metrics.collect_yearly(self.clock.year, self.island)
        self.logger.flush_year(self.clock.year)
        self._initialized = True

    def add_population(self, entries: Iterable[PopulationEntry]) -> int:
        """Stock more animals between years (e.g. introduce carnivores)."""
        entries = list(entries)
        added = self.island.add_population(entries)
        for entry in entries:
            self.logger.log(
                SimLogger.LIFECYCLE,
                f"Added {entry[2]} {entry[1]} at {tuple(entry[0])}",
                year=self.clock.year,
            )
        self.logger.flush_year(self.clock.year)
        return added

    def set_year_callback(self, callback: Callable[[int, MetricsCollector], None]) -> None:
        """Set a function called after every simulated year (e.g. dashboard update)."""
        self._year_callback = callback

    def run(self, years: int) -> None:
        """Run the simulation for a number of years."""
        for _ in range(years):
            self.tick()
            if self._year_callback:
                self._year_callback(self.clock.year, self.metrics)

    def tick(self) -> YearlySnapshot:
        """One year of simulation."""
        if not self._initialized:
            self.initialize()

        before = self.island.population()

        self.clock.advance()
        year = self.clock.year
        stats = self.island.yearly_cycle(self.rng)
        snapshot = self.metrics.collect_yearly(year, self.island, stats)

        for species in SPECIES_NAMES:
            if stats.births[species] or stats.deaths[species]:
                self.logger.log(
                    SimLogger.LIFECYCLE,
                    f"{stats.births[species]} {species}s born, {stats.deaths[species]} died",
                    year=year,
                )
            if stats.migrations[species]:
                self.logger.log(
                    SimLogger.MIGRATION,
                    f"{stats.migrations[species]} {species}s migrated",
                    year=year,
                )
        if stats.kills:
            self.logger.log(SimLogger.PREDATION, f"Carnivores killed {stats.kills} herbivores", year=year)

        after = self.island.population()
        for species in SPECIES_NAMES:
            if before[species] > 0 and after[species] == 0:
                self.logger.log(SimLogger.ISLAND, f"{species}s died out", year=year)

        self.logger.flush_year(year)
        return snapshot
