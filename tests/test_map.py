"""Tests for island map parsing and topology."""

from __future__ import annotations

import pytest

from biosim.core.config import DEFAULT_ISLAND_MAP
from biosim.core.errors import IslandMapError
from biosim.world.map import IslandMap


def test_parse_default_map():
    m = IslandMap.from_string(DEFAULT_ISLAND_MAP)
    assert (m.width, m.height) == (7, 6)
    assert m.terrain(0, 0) == "water"
    assert m.terrain(1, 1) == "highland"
    assert m.terrain(3, 1) == "lowland"
    assert m.terrain(5, 2) == "desert"


def test_blank_lines_and_indentation_ignored():
    m = IslandMap.from_string("\n   WWW\n   WLW\n\n   WWW\n")
    assert m.rows == ["WWW", "WLW", "WWW"]
    assert str(m) == "WWW\nWLW\nWWW"


def test_coordinates_row_by_row():
    m = IslandMap(["WH", "LD"])
    assert m.coordinates() == [(0, 0), (1, 0), (0, 1), (1, 1)]


def test_ragged_rows_rejected():
    with pytest.raises(IslandMapError, match="not the same length"):
        IslandMap.from_string("WWW\nWL\nWWW")


@pytest.mark.parametrize("text", ["WXW", "WLW\nW W", "wlw"])
def test_invalid_symbols_rejected(text):
    with pytest.raises(IslandMapError):
        IslandMap.from_string(text)


@pytest.mark.parametrize("text", ["", "\n\n  \n"])
def test_empty_map_rejected(text):
    with pytest.raises(IslandMapError, match="empty"):
        IslandMap.from_string(text)


def test_map_errors_are_value_errors():
    with pytest.raises(ValueError):
        IslandMap(["WQ"])


def test_neighbours_in_fixed_order():
    m = IslandMap(["WLW", "LHD", "WLW"])
    # up, right, down, left
    assert m.neighbors(1, 1) == [(1, 0), (2, 1), (1, 2), (0, 1)]


def test_neighbours_off_grid_and_water_are_none():
    m = IslandMap.from_string("WHW")
    assert m.neighbors(1, 0) == [None, None, None, None]

    m = IslandMap(["LW", "DW"])
    assert m.neighbors(0, 0) == [None, None, (0, 1), None]


def test_habitable():
    m = IslandMap(["WLHD"])
    assert [m.is_habitable(x, 0) for x in range(4)] == [False, True, True, True]
    assert not m.is_habitable(-1, 0)
    assert not m.is_habitable(4, 0)
