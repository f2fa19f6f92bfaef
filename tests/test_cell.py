"""Tests for the per-cell yearly steps."""

from __future__ import annotations

import pytest

from biosim.agents.animal import Carnivore, Herbivore
from biosim.core.errors import StockingError
from biosim.world.cell import Cell, CycleStats


@pytest.fixture
def highland():
    return Cell("highland", (1, 1))


def _weak(n):
    return [Herbivore(age=60, weight=20.0) for _ in range(n)]


def test_fodder_by_terrain():
    assert Cell("lowland", (0, 0)).fodder == 800.0
    assert Cell("highland", (0, 0)).fodder == 300.0
    assert Cell("desert", (0, 0)).fodder == 0.0
    assert Cell("water", (0, 0)).fodder == 0.0


def test_unknown_feeding_order_rejected():
    with pytest.raises(ValueError):
        Cell("lowland", (0, 0), feeding_order="random")


def test_water_cannot_hold_animals():
    water = Cell("water", (0, 0))
    with pytest.raises(StockingError):
        water.add_animal(Herbivore())
    assert water.population() == {"Herbivore": 0, "Carnivore": 0}


def test_water_cell_cycle_is_empty(rng):
    stats = Cell("water", (0, 0)).annual_cycle(rng)
    assert stats == CycleStats()


def test_animals_sorted_into_species(highland):
    highland.add_animals([Herbivore(), Carnivore(), Herbivore()])
    assert highland.population() == {"Herbivore": 2, "Carnivore": 1}
    assert len(highland.animals) == 3


# ---------------------------------------------------------------------------
# Procreation
# ---------------------------------------------------------------------------

def test_newborns_do_not_breed_in_birth_year(highland, scripted):
    highland.add_animals([Herbivore(weight=50.0) for _ in range(3)])
    births = highland.add_newborns(scripted(random=0.0, lognormal=8.0))

    assert births == {"Herbivore": 3, "Carnivore": 0}
    assert len(highland.herbivores) == 6
    assert sorted(h.age for h in highland.herbivores) == [0, 0, 0, 5, 5, 5]


def test_light_animals_do_not_breed(highland, rng):
    highland.add_animals([Herbivore(weight=20.0) for _ in range(50)])
    assert highland.add_newborns(rng)["Herbivore"] == 0
    assert len(highland.herbivores) == 50


# ---------------------------------------------------------------------------
# Feeding
# ---------------------------------------------------------------------------

def test_weakest_grazes_first(highland):
    strong, weak = Herbivore(age=5, weight=40.0), Herbivore(age=5, weight=5.0)
    highland.add_animals([strong, weak])
    highland.fodder = 15.0
    highland.feed_herbivores()

    assert weak.weight == pytest.approx(5.0 + 0.9 * 10.0)
    assert strong.weight == pytest.approx(40.0 + 0.9 * 5.0)
    assert highland.fodder == 0.0


def test_fittest_first_policy():
    cell = Cell("highland", (1, 1), feeding_order="fittest_first")
    strong, weak = Herbivore(age=5, weight=40.0), Herbivore(age=5, weight=5.0)
    cell.add_animals([weak, strong])
    cell.fodder = 15.0
    cell.feed_herbivores()

    assert strong.weight == pytest.approx(40.0 + 0.9 * 10.0)
    assert weak.weight == pytest.approx(5.0 + 0.9 * 5.0)


def test_fodder_stays_within_bounds(highland, rng):
    highland.add_animals([Herbivore() for _ in range(100)])
    highland.feed_animals(rng)
    assert 0.0 <= highland.fodder <= highland.f_max
    assert highland.fodder == 0.0


def test_no_grazing_in_desert(rng):
    desert = Cell("desert", (0, 0))
    h = Herbivore(weight=20.0)
    desert.add_animal(h)
    desert.feed_animals(rng)
    assert h.weight == 20.0


def test_prey_killed_once(highland, scripted):
    prey = Herbivore(age=60, weight=5.0)
    highland.add_animals([prey, Carnivore(age=1, weight=40.0), Carnivore(age=1, weight=40.0)])
    highland.fodder = 0.0

    kills = highland.feed_carnivores(scripted(random=0.0))

    assert kills == 1
    assert not prey.alive
    # The carcass stays until the death phase
    assert prey in highland.herbivores


def test_feed_animals_counts_kills(highland, scripted):
    highland.add_animals(_weak(4) + [Carnivore(age=1, weight=40.0)])
    highland.fodder = 0.0
    assert highland.feed_animals(scripted(random=0.0)) == 3


# ---------------------------------------------------------------------------
# Migration intents
# ---------------------------------------------------------------------------

def test_no_intent_without_habitable_neighbours(highland, scripted):
    highland.add_animals([Herbivore() for _ in range(5)])
    movers = highland.set_migration_intents(scripted(random=0.0))
    assert movers == {"Herbivore": 0, "Carnivore": 0}
    assert all(h.move_to is None for h in highland.herbivores)


def test_intent_points_at_chosen_neighbour(scripted):
    cell = Cell("lowland", (1, 1), neighbors=[None, (2, 1), None, (0, 1)])
    animals = [Herbivore(), Carnivore()]
    cell.add_animals(animals)

    movers = cell.set_migration_intents(scripted(random=0.0, integers=1))
    assert movers == {"Herbivore": 1, "Carnivore": 1}
    assert all(a.move_to == (2, 1) for a in animals)


def test_dead_animals_do_not_migrate(scripted):
    cell = Cell("lowland", (1, 1), neighbors=[(1, 0)] * 4)
    dead = Herbivore()
    dead.die()
    cell.add_animal(dead)
    cell.set_migration_intents(scripted(random=0.0))
    assert dead.move_to is None


def test_take_migrants(highland):
    stay, go = Herbivore(), Herbivore()
    hunter = Carnivore()
    go.move_to = (2, 1)
    hunter.move_to = (1, 2)
    highland.add_animals([stay, go, hunter])

    migrants = highland.take_migrants()
    assert set(map(id, migrants)) == {id(go), id(hunter)}
    assert highland.herbivores == [stay]
    assert highland.carnivores == []


# ---------------------------------------------------------------------------
# Aging, weight loss, death
# ---------------------------------------------------------------------------

def test_age_and_weight_loss(highland):
    h, c = Herbivore(age=5, weight=20.0), Carnivore(age=2, weight=16.0)
    highland.add_animals([h, c])
    highland.age_animals()
    highland.loss_of_weight()
    assert (h.age, c.age) == (6, 3)
    assert h.weight == pytest.approx(19.0)
    assert c.weight == pytest.approx(14.0)


def test_death_phase_removes_dead(highland, scripted):
    highland.add_animals([Herbivore(), Herbivore(weight=0.0), Carnivore()])
    removed = highland.animal_death(scripted(random=0.99))

    assert removed == {"Herbivore": 1, "Carnivore": 0}
    assert all(a.alive for a in highland.animals)
    assert len(highland.herbivores) == 1


def test_reset_fodder_idempotent(highland):
    highland.fodder = 12.5
    highland.reset_fodder()
    highland.reset_fodder()
    assert highland.fodder == 300.0


def test_annual_cycle_leaves_only_living(highland, rng):
    highland.add_animals([Herbivore() for _ in range(60)] + [Carnivore() for _ in range(5)])
    stats = highland.annual_cycle(rng)

    assert all(a.alive for a in highland.animals)
    assert highland.fodder == highland.f_max
    assert stats.deaths["Herbivore"] >= stats.kills
    assert len(highland.herbivores) == 60 + stats.births["Herbivore"] - stats.deaths["Herbivore"]


def test_cycle_stats_merge():
    a = CycleStats(kills=2)
    a.births["Herbivore"] = 3
    b = CycleStats(kills=1)
    b.births["Herbivore"] = 4
    b.deaths["Carnivore"] = 1
    a.merge(b)
    assert a.kills == 3
    assert a.births["Herbivore"] == 7
    assert a.deaths["Carnivore"] == 1
