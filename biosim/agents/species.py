"""Immutable biological parameters for each species."""

from __future__ import annotations

import math
from dataclasses import dataclass

from biosim.core.config import (
    CARNIVORE,
    CARNIVORE_PARAMS,
    HERBIVORE,
    HERBIVORE_PARAMS,
)
from biosim.core.errors import UnknownSpeciesError


@dataclass(frozen=True)
class SpeciesParams:
    """Biological constants shared by every animal of one species."""

    name: str

    # Birth weight distribution
    w_birth: float
    sigma_birth: float

    # Feeding and metabolism
    beta: float         # share of intake turned into weight
    eta: float          # yearly weight loss rate
    f: float            # maximum intake per year

    # Fitness curve
    a_half: float
    phi_age: float
    w_half: float
    phi_weight: float

    # Migration, procreation, death
    mu: float
    gamma: float
    zeta: float
    xi: float
    omega: float

    # Fitness gap at which a kill is certain (carnivores only)
    delta_phi_max: float = 0.0

    @property
    def birth_weight_floor(self) -> float:
        """Weight a parent must exceed before procreation is considered."""
        return self.zeta * self.w_birth * self.sigma_birth

    @property
    def birth_lognormal(self) -> tuple[float, float]:
        """(mean, sigma) of the underlying normal of the birth weight distribution."""
        w2 = self.w_birth ** 2
        s2 = self.sigma_birth ** 2
        mean = math.log(w2 / math.sqrt(w2 + s2))
        sigma = math.sqrt(math.log(1.0 + s2 / w2))
        return mean, sigma


HERBIVORE_SPECIES = SpeciesParams(name=HERBIVORE, **HERBIVORE_PARAMS)
CARNIVORE_SPECIES = SpeciesParams(name=CARNIVORE, **CARNIVORE_PARAMS)

_BY_NAME: dict[str, SpeciesParams] = {
    HERBIVORE.lower(): HERBIVORE_SPECIES,
    CARNIVORE.lower(): CARNIVORE_SPECIES,
}


def canonical_species(name: str) -> str:
    """Normalize a species name ("herbivore" -> "Herbivore").

    Raises UnknownSpeciesError for anything else.
    """
    params = _BY_NAME.get(str(name).strip().lower())
    if params is None:
        raise UnknownSpeciesError(f"Unknown species: {name!r}")
    return params.name


def get_species(name: str) -> SpeciesParams:
    """Look up the parameter record for a species name."""
    return _BY_NAME[canonical_species(name).lower()]
