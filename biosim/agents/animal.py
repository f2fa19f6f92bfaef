"""Core agent classes: fitness, aging, procreation, feeding, death."""

from __future__ import annotations

import math
from typing import Iterable, Optional

from numpy.random import Generator

from biosim.agents.species import CARNIVORE_SPECIES, HERBIVORE_SPECIES, SpeciesParams
from biosim.core.config import DEFAULT_AGE, DEFAULT_WEIGHT


def _logistic_decay(x: float) -> float:
    """1 / (1 + e^x), computed without overflow for large |x|."""
    if x > 0:
        e = math.exp(-x)
        return e / (1.0 + e)
    return 1.0 / (1.0 + math.exp(x))


def fitness_of(age: int, weight: float, params: SpeciesParams) -> float:
    """Fitness in [0, 1] for an animal of the given age and weight."""
    if weight <= 0:
        return 0.0
    age_term = _logistic_decay(params.phi_age * (age - params.a_half))
    weight_term = _logistic_decay(-params.phi_weight * (weight - params.w_half))
    return age_term * weight_term


class Animal:
    """A single animal. Subclasses supply the species parameters and feeding."""

    params: SpeciesParams

    def __init__(
        self,
        age: int = DEFAULT_AGE,
        weight: float = DEFAULT_WEIGHT,
        params: Optional[SpeciesParams] = None,
    ) -> None:
        if params is not None:
            self.params = params
        self.age = age
        self.weight = weight
        self.alive: bool = True
        self.move_to: Optional[tuple[int, int]] = None
        self.fitness: float = 0.0
        self.update_fitness()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(age={self.age}, weight={self.weight:.2f}, "
            f"fitness={self.fitness:.3f}, alive={self.alive})"
        )

    @property
    def species(self) -> str:
        return self.params.name

    # ------------------------------------------------------------------
    # State changes
    # ------------------------------------------------------------------

    def update_fitness(self) -> None:
        self.fitness = fitness_of(self.age, self.weight, self.params)

    def aging(self) -> None:
        """Grow one year older."""
        self.age += 1
        self.update_fitness()

    def loss_of_weight(self) -> None:
        """Yearly metabolic loss, proportional to current weight."""
        self.weight -= self.params.eta * self.weight
        self.update_fitness()

    def gain_weight(self, food: float) -> None:
        self.weight += food * self.params.beta
        self.update_fitness()

    def die(self) -> None:
        """Mark as dead. The animal is removed by its cell in the death phase."""
        self.alive = False

    # ------------------------------------------------------------------
    # Stochastic decisions
    # ------------------------------------------------------------------

    def death_check(self, rng: Generator) -> bool:
        """Decide whether the animal dies this year. Returns True if it is dead."""
        if not self.alive:
            return True
        if self.weight <= 0:
            self.die()
            return True
        probability = self.params.omega * (1.0 - self.fitness)
        if rng.random() < probability:
            self.die()
        return not self.alive

    def wants_to_migrate(self, rng: Generator) -> bool:
        """Migration intent for this year; the move itself is done by the island."""
        return rng.random() < self.params.mu * self.fitness

    def birth_weight(self, count_in_cell: int, rng: Generator) -> Optional[float]:
        """Try to give birth. Returns the newborn's weight, or None.

        The parent only loses weight when a birth actually happens.
        """
        p = self.params
        if self.weight <= p.birth_weight_floor:
            return None

        probability = min(1.0, p.gamma * self.fitness * count_in_cell)
        if rng.random() > probability:
            return None

        mean, sigma = p.birth_lognormal
        newborn_weight = float(rng.lognormal(mean, sigma))

        parent_loss = p.xi * newborn_weight
        if self.weight < parent_loss:
            return None

        self.weight -= parent_loss
        self.update_fitness()
        return newborn_weight

    def procreate(self, count_in_cell: int, rng: Generator) -> Optional["Animal"]:
        """Return a newborn of the same species, or None."""
        newborn_weight = self.birth_weight(count_in_cell, rng)
        if newborn_weight is None:
            return None
        return type(self)(age=0, weight=newborn_weight, params=self.params)


class Herbivore(Animal):
    """Grazes on the fodder of its cell."""

    params = HERBIVORE_SPECIES

    def feeding(self, fodder: float) -> float:
        """Eat from the available fodder. Returns the amount eaten."""
        amount = max(0.0, min(fodder, self.params.f))
        self.gain_weight(amount)
        return amount


class Carnivore(Animal):
    """Hunts herbivores in its cell."""

    params = CARNIVORE_SPECIES

    def kill_probability(self, prey: Animal) -> float:
        gap = self.fitness - prey.fitness
        if gap <= 0:
            return 0.0
        if gap >= self.params.delta_phi_max:
            return 1.0
        return gap / self.params.delta_phi_max

    def feeding(self, prey: Iterable[Herbivore], rng: Generator) -> list[Herbivore]:
        """Hunt through *prey* in the given order until sated.

        Killed prey are marked dead but left in their collection.
        Returns the list of prey killed.
        """
        appetite = self.params.f
        eaten = 0.0
        killed: list[Herbivore] = []

        for herbivore in prey:
            if eaten >= appetite:
                break
            if not herbivore.alive:
                continue
            if self.fitness <= herbivore.fitness:
                continue
            if rng.random() > self.kill_probability(herbivore):
                continue

            meal = min(appetite - eaten, herbivore.weight)
            herbivore.die()
            self.gain_weight(meal)
            eaten += meal
            killed.append(herbivore)

        return killed
