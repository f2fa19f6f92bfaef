"""Island geography: parse and validate the text map."""

from __future__ import annotations

from typing import Optional

from biosim.core.config import (
    HABITABLE_TERRAIN,
    MIGRATION_DIRECTIONS,
    TERRAIN_SYMBOLS,
)
from biosim.core.errors import IslandMapError


class IslandMap:
    """Rectangular grid of terrain kinds, addressed by (x, y)."""

    def __init__(self, rows: list[str]) -> None:
        _validate_rows(rows)
        self.rows = rows
        self.height = len(rows)
        self.width = len(rows[0])

    @classmethod
    def from_string(cls, text: str) -> "IslandMap":
        """Build a map from text. Blank lines and surrounding spaces are ignored."""
        rows = [line.strip() for line in text.splitlines() if line.strip()]
        return cls(rows)

    def terrain(self, x: int, y: int) -> str:
        """Terrain kind at (x, y)."""
        return TERRAIN_SYMBOLS[self.rows[y][x]]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_habitable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self.terrain(x, y) in HABITABLE_TERRAIN

    def coordinates(self) -> list[tuple[int, int]]:
        """All (x, y) positions, row by row."""
        return [(x, y) for y in range(self.height) for x in range(self.width)]

    def neighbors(self, x: int, y: int) -> list[Optional[tuple[int, int]]]:
        """Orthogonal neighbours in MIGRATION_DIRECTIONS order.

        A neighbour outside the grid or on uninhabitable terrain is None.
        """
        result: list[Optional[tuple[int, int]]] = []
        for dx, dy in MIGRATION_DIRECTIONS:
            nx, ny = x + dx, y + dy
            result.append((nx, ny) if self.is_habitable(nx, ny) else None)
        return result

    def __str__(self) -> str:
        return "\n".join(self.rows)


def _validate_rows(rows: list[str]) -> None:
    if not rows:
        raise IslandMapError("Island map is empty")

    width = len(rows[0])
    for y, row in enumerate(rows):
        if len(row) != width:
            raise IslandMapError(
                f"Row {y} has length {len(row)}, expected {width}: lines are not the same length"
            )
        illegal = sorted(set(row) - set(TERRAIN_SYMBOLS))
        if illegal:
            raise IslandMapError(
                f"Row {y} contains invalid terrain symbol(s) {''.join(illegal)!r}; "
                f"allowed: {''.join(TERRAIN_SYMBOLS)}"
            )
