"""Tests for the simulation engine and clock."""

from __future__ import annotations

import json

import pytest

from biosim.core.clock import SimClock
from biosim.core.errors import IslandMapError, UnknownSpeciesError
from biosim.simulation.engine import SimulationEngine
from biosim.viz.logger import SimLogger

SMALL_MAP = """\
WWWW
WLHW
WLDW
WWWW"""


def _quiet(engine):
    engine.logger = SimLogger(verbosity=2, stdout=False)
    return engine


@pytest.fixture
def engine():
    return _quiet(SimulationEngine(island_map=SMALL_MAP, ini_pop=[((1, 1), "Herbivore", 40)], seed=3))


def test_clock():
    clock = SimClock()
    clock.advance()
    clock.advance()
    assert clock.year == 2
    clock.reset()
    assert clock.year == 0


def test_initialize_records_year_zero(engine):
    engine.initialize()
    engine.initialize()

    assert engine.year == 0
    assert len(engine.metrics.snapshots) == 1
    assert engine.metrics.latest.herbivores == 40
    assert engine.island.population()["Herbivore"] == 40


def test_tick_advances_one_year(engine):
    snapshot = engine.tick()
    assert engine.year == 1
    assert snapshot.year == 1
    assert [s.year for s in engine.metrics.snapshots] == [0, 1]
    assert snapshot.herbivores == engine.island.population()["Herbivore"]


def test_run_calls_back_every_year(engine):
    seen = []
    engine.set_year_callback(lambda year, metrics: seen.append((year, len(metrics.snapshots))))
    engine.run(3)
    assert seen == [(1, 2), (2, 3), (3, 4)]


def test_same_seed_same_history():
    pop = [((1, 1), "Herbivore", 40), ((1, 1), "Carnivore", 5)]
    a = _quiet(SimulationEngine(island_map=SMALL_MAP, ini_pop=pop, seed=11))
    b = _quiet(SimulationEngine(island_map=SMALL_MAP, ini_pop=pop, seed=11))
    a.run(15)
    b.run(15)
    assert a.metrics.snapshots == b.metrics.snapshots


def test_bad_map_fails_at_construction():
    with pytest.raises(IslandMapError):
        SimulationEngine(island_map="WWW\nWXW\nWWW")


def test_bad_species_fails_at_initialize():
    engine = _quiet(SimulationEngine(island_map=SMALL_MAP, ini_pop=[((1, 1), "Dragon", 1)]))
    with pytest.raises(UnknownSpeciesError):
        engine.initialize()
    assert engine.island.population() == {"Herbivore": 0, "Carnivore": 0}


def test_add_population_between_years(engine):
    engine.run(2)
    added = engine.add_population([((2, 1), "Carnivore", 4)])
    assert added == 4
    assert engine.island.population()["Carnivore"] == 4
    messages = [e.message for e in engine.logger.entries]
    assert "Added 4 Carnivore at (2, 1)" in messages


def test_stocking_after_last_year_is_exported(engine, tmp_path):
    engine.run(1)
    engine.add_population([((1, 2), "Herbivore", 2)])

    path = tmp_path / "events.json"
    engine.logger.export_json(str(path))
    events = json.loads(path.read_text(encoding="utf-8"))
    assert events[-1]["message"] == "Added 2 Herbivore at (1, 2)"
    assert events[-1]["year"] == 1


def test_extinction_is_logged():
    # Weightless herbivores on a desert cell cannot survive the year
    engine = _quiet(SimulationEngine(island_map="WDW", ini_pop=[((1, 0), "Herbivore", 3, 5, 0.0)]))
    snapshot = engine.tick()

    assert snapshot.herbivores == 0
    assert snapshot.herbivore_deaths == 3
    island_events = [e for e in engine.logger.entries if e.category == SimLogger.ISLAND]
    assert [e.message for e in island_events] == ["Herbivores died out"]
    assert island_events[0].year == 1
    assert engine.metrics.extinction_year("Herbivore") == 1


def test_empty_island_keeps_cycling():
    engine = _quiet(SimulationEngine(island_map=SMALL_MAP, ini_pop=[]))
    engine.run(3)
    assert engine.year == 3
    assert all(s.total == 0 for s in engine.metrics.snapshots)
