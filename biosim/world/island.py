"""The island: all cells, the yearly cycle and migration between cells."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Union

import numpy as np
from numpy.random import Generator

from biosim.agents.animal import Animal, Carnivore, Herbivore
from biosim.agents.species import canonical_species
from biosim.core.config import (
    CARNIVORE,
    DEFAULT_AGE,
    DEFAULT_WEIGHT,
    HERBIVORE,
    HERBIVORE_FEEDING_ORDER,
    SPECIES_NAMES,
)
from biosim.core.errors import StockingError
from biosim.world.cell import Cell, CycleStats
from biosim.world.map import IslandMap

_ANIMAL_CLASSES: dict[str, type[Animal]] = {
    HERBIVORE: Herbivore,
    CARNIVORE: Carnivore,
}

# (coordinate, species, count) or (coordinate, species, count, age, weight)
PopulationEntry = tuple


class Island:
    """Owns every cell, keyed by (x, y). Topology never changes after construction."""

    def __init__(
        self,
        island_map: Union[str, IslandMap],
        feeding_order: str = HERBIVORE_FEEDING_ORDER,
    ) -> None:
        if not isinstance(island_map, IslandMap):
            island_map = IslandMap.from_string(island_map)
        self.map = island_map
        self.cells: dict[tuple[int, int], Cell] = {
            (x, y): Cell(
                island_map.terrain(x, y),
                (x, y),
                neighbors=island_map.neighbors(x, y),
                feeding_order=feeding_order,
            )
            for x, y in island_map.coordinates()
        }

    @property
    def width(self) -> int:
        return self.map.width

    @property
    def height(self) -> int:
        return self.map.height

    def get_cell(self, x: int, y: int) -> Cell:
        return self.cells[(x, y)]

    # ------------------------------------------------------------------
    # Stocking
    # ------------------------------------------------------------------

    def add_population(self, entries: Iterable[PopulationEntry]) -> int:
        """Stock animals. Every entry is checked before any cell is touched.

        Returns the number of animals added.
        """
        parsed = [self._parse_entry(entry) for entry in entries]

        added = 0
        for coordinate, species, count, age, weight in parsed:
            animal_class = _ANIMAL_CLASSES[species]
            self.cells[coordinate].add_animals(
                animal_class(age=age, weight=weight) for _ in range(count)
            )
            added += count
        return added

    def _parse_entry(self, entry: PopulationEntry) -> tuple[tuple[int, int], str, int, int, float]:
        if len(entry) == 3:
            coordinate, species, count = entry
            age, weight = DEFAULT_AGE, DEFAULT_WEIGHT
        elif len(entry) == 5:
            coordinate, species, count, age, weight = entry
        else:
            raise StockingError(
                f"Population entry {entry!r} must be (coordinate, species, count[, age, weight])"
            )

        try:
            count, age, weight = int(count), int(age), float(weight)
        except (TypeError, ValueError):
            raise StockingError(
                f"Count, age and weight of {entry!r} must be numbers"
            ) from None

        species = canonical_species(species)
        coordinate = tuple(coordinate)
        cell = self.cells.get(coordinate)
        if cell is None:
            raise StockingError(f"Coordinate {coordinate} is outside the island")
        if not cell.habitable:
            raise StockingError(f"Cannot place {species} on {cell.terrain} at {coordinate}")
        if count < 0:
            raise StockingError(f"Negative count {count} for {species} at {coordinate}")
        if age < 0:
            raise StockingError(f"Negative age {age} for {species} at {coordinate}")
        return coordinate, species, count, age, weight

    # ------------------------------------------------------------------
    # Yearly cycle
    # ------------------------------------------------------------------

    def yearly_cycle(self, rng: Generator) -> CycleStats:
        """Advance the whole island by one year."""
        stats = CycleStats()
        for coordinate in list(self.cells):
            stats.merge(self.cells[coordinate].annual_cycle(rng))

        # Nobody moves until every cell has finished its year
        stats.migrations = self.migrate_animals()
        return stats

    def migrate_animals(self) -> dict[str, int]:
        """Move every animal with a pending destination. Returns moves per species."""
        moves: list[tuple[Cell, Animal]] = []
        for cell in self.cells.values():
            for animal in cell.take_migrants():
                moves.append((cell, animal))

        moved = {name: 0 for name in SPECIES_NAMES}
        for source, animal in moves:
            target = self.cells.get(animal.move_to)
            animal.move_to = None
            if target is None or not target.habitable:
                source.add_animal(animal)
                continue
            target.add_animal(animal)
            moved[animal.species] += 1
        return moved

    # ------------------------------------------------------------------
    # Queries (read-only)
    # ------------------------------------------------------------------

    def animals(self, species: Optional[str] = None) -> Iterator[Animal]:
        """Iterate over all animals, optionally of a single species."""
        if species is not None:
            species = canonical_species(species)
        for cell in self.cells.values():
            if species != CARNIVORE:
                yield from cell.herbivores
            if species != HERBIVORE:
                yield from cell.carnivores

    def population(self) -> dict[str, int]:
        """Total number of animals per species."""
        totals = {name: 0 for name in SPECIES_NAMES}
        for cell in self.cells.values():
            for name, count in cell.population().items():
                totals[name] += count
        return totals

    def population_by_cell(self) -> dict[tuple[int, int], dict[str, int]]:
        """Per-cell counts for every habitable cell."""
        return {
            coordinate: cell.population()
            for coordinate, cell in self.cells.items()
            if cell.habitable
        }

    def density_grid(self, species: str) -> np.ndarray:
        """Animal counts laid out as a (height, width) array."""
        species = canonical_species(species)
        grid = np.zeros((self.height, self.width), dtype=int)
        for (x, y), cell in self.cells.items():
            grid[y, x] = cell.population()[species]
        return grid

    def total_fodder(self) -> float:
        return sum(cell.fodder for cell in self.cells.values())
