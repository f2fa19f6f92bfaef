"""A terrain cell: renewable fodder and the animals living on it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from numpy.random import Generator

from biosim.agents.animal import Animal, Carnivore, Herbivore
from biosim.core.config import (
    CARNIVORE,
    FEEDING_ORDERS,
    HABITABLE_TERRAIN,
    HERBIVORE,
    HERBIVORE_FEEDING_ORDER,
    MIGRATION_DIRECTIONS,
    SPECIES_NAMES,
    TERRAIN_FODDER,
)
from biosim.core.errors import StockingError


def _per_species() -> dict[str, int]:
    return {name: 0 for name in SPECIES_NAMES}


@dataclass
class CycleStats:
    """Counts of what happened during one year, per species."""

    births: dict[str, int] = field(default_factory=_per_species)
    deaths: dict[str, int] = field(default_factory=_per_species)
    migrations: dict[str, int] = field(default_factory=_per_species)
    kills: int = 0

    def merge(self, other: "CycleStats") -> None:
        """Add another set of counts into this one."""
        for name in SPECIES_NAMES:
            self.births[name] += other.births[name]
            self.deaths[name] += other.deaths[name]
            self.migrations[name] += other.migrations[name]
        self.kills += other.kills


class Cell:
    """One square of the island."""

    def __init__(
        self,
        terrain: str,
        coordinate: tuple[int, int],
        neighbors: Optional[list[Optional[tuple[int, int]]]] = None,
        feeding_order: str = HERBIVORE_FEEDING_ORDER,
    ) -> None:
        if feeding_order not in FEEDING_ORDERS:
            raise ValueError(f"Unknown feeding order {feeding_order!r}, expected one of {FEEDING_ORDERS}")
        self.terrain = terrain
        self.coordinate = coordinate
        self.f_max: float = TERRAIN_FODDER[terrain]
        self.fodder: float = self.f_max
        self.feeding_order = feeding_order
        self.neighbors: list[Optional[tuple[int, int]]] = (
            list(neighbors) if neighbors is not None else [None] * len(MIGRATION_DIRECTIONS)
        )
        self.herbivores: list[Herbivore] = []
        self.carnivores: list[Carnivore] = []

    def __repr__(self) -> str:
        return (
            f"Cell({self.terrain}, {self.coordinate}, fodder={self.fodder:.1f}, "
            f"herbivores={len(self.herbivores)}, carnivores={len(self.carnivores)})"
        )

    # ------------------------------------------------------------------
    # Population access
    # ------------------------------------------------------------------

    @property
    def habitable(self) -> bool:
        return self.terrain in HABITABLE_TERRAIN

    @property
    def animals(self) -> list[Animal]:
        return [*self.herbivores, *self.carnivores]

    def population(self) -> dict[str, int]:
        return {HERBIVORE: len(self.herbivores), CARNIVORE: len(self.carnivores)}

    def _collection(self, species: str) -> list:
        return self.herbivores if species == HERBIVORE else self.carnivores

    def add_animal(self, animal: Animal) -> None:
        """Place an animal on this cell."""
        if not self.habitable:
            raise StockingError(f"{self.terrain.capitalize()} cell {self.coordinate} cannot hold animals")
        self._collection(animal.species).append(animal)

    def add_animals(self, animals: Iterable[Animal]) -> None:
        for animal in animals:
            self.add_animal(animal)

    # ------------------------------------------------------------------
    # Yearly steps
    # ------------------------------------------------------------------

    def annual_cycle(self, rng: Generator) -> CycleStats:
        """Run all intra-cell steps for one year, in order."""
        stats = CycleStats()
        if not self.habitable:
            return stats

        stats.births = self.add_newborns(rng)
        stats.kills = self.feed_animals(rng)
        # Migrations are counted by the island when the moves are applied
        self.set_migration_intents(rng)
        self.age_animals()
        self.loss_of_weight()
        stats.deaths = self.animal_death(rng)
        self.reset_fodder()
        return stats

    def add_newborns(self, rng: Generator) -> dict[str, int]:
        """Let every animal try to procreate. Newborns join after the pass."""
        births = _per_species()
        for species in SPECIES_NAMES:
            parents = list(self._collection(species))
            count = len(parents)
            newborns = []
            for parent in parents:
                newborn = parent.procreate(count, rng)
                if newborn is not None:
                    newborns.append(newborn)
            self._collection(species).extend(newborns)
            births[species] = len(newborns)
        return births

    def feed_animals(self, rng: Generator) -> int:
        """Herbivores graze, then carnivores hunt. Returns the number of kills."""
        self.feed_herbivores()
        return self.feed_carnivores(rng)

    def feed_herbivores(self) -> None:
        grazing_order = sorted(
            self.herbivores,
            key=lambda h: h.fitness,
            reverse=(self.feeding_order == "fittest_first"),
        )
        for herbivore in grazing_order:
            if self.fodder <= 0:
                break
            self.fodder -= herbivore.feeding(self.fodder)

    def feed_carnivores(self, rng: Generator) -> int:
        prey = sorted(self.herbivores, key=lambda h: h.fitness)

        order = list(range(len(self.carnivores)))
        rng.shuffle(order)

        kills = 0
        for idx in order:
            alive_prey = [h for h in prey if h.alive]
            if not alive_prey:
                break
            kills += len(self.carnivores[idx].feeding(alive_prey, rng))
        return kills

    def set_migration_intents(self, rng: Generator) -> dict[str, int]:
        """Pick a destination for every living animal that wants to move."""
        movers = _per_species()
        for animal in self.animals:
            if not animal.alive or not animal.wants_to_migrate(rng):
                continue
            destination = self.neighbors[int(rng.integers(len(self.neighbors)))]
            if destination is None:
                continue
            animal.move_to = destination
            movers[animal.species] += 1
        return movers

    def age_animals(self) -> None:
        for animal in self.animals:
            animal.aging()

    def loss_of_weight(self) -> None:
        for animal in self.animals:
            animal.loss_of_weight()

    def animal_death(self, rng: Generator) -> dict[str, int]:
        """Run the death check for everyone, then remove the dead."""
        for animal in self.animals:
            animal.death_check(rng)

        removed = _per_species()
        removed[HERBIVORE] = len(self.herbivores)
        removed[CARNIVORE] = len(self.carnivores)
        self.herbivores = [h for h in self.herbivores if h.alive]
        self.carnivores = [c for c in self.carnivores if c.alive]
        removed[HERBIVORE] -= len(self.herbivores)
        removed[CARNIVORE] -= len(self.carnivores)
        return removed

    def reset_fodder(self) -> None:
        self.fodder = self.f_max

    # ------------------------------------------------------------------
    # Migration
    # ------------------------------------------------------------------

    def take_migrants(self) -> list[Animal]:
        """Remove and return every animal with a pending destination."""
        migrants: list[Animal] = []
        for collection in (self.herbivores, self.carnivores):
            move_index = [i for i, animal in enumerate(collection) if animal.move_to is not None]
            for i in reversed(move_index):
                migrants.append(collection.pop(i))
        return migrants
