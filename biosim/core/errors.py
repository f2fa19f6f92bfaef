"""Errors raised while building an island or stocking it.

Yearly updates never raise; only construction-time input is validated.
"""


class IslandMapError(ValueError):
    """The island map text is not a rectangular grid of legal terrain symbols."""


class UnknownSpeciesError(ValueError):
    """A species name that matches neither herbivores nor carnivores."""


class StockingError(ValueError):
    """Animals requested for a coordinate that cannot hold them."""
