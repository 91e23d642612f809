"""Tests for the GameState world model."""

import json

import pytest

from harvest_farm.state import GameState, GameTime, Helper, Stock


# --- Stock ---

def test_stock_clamps_on_construction():
    assert Stock(150, 100).current == 100
    assert Stock(-5, 100).current == 0


def test_stock_add_and_drain_stay_in_bounds():
    stock = Stock(90, 100)
    assert stock.add(25) == 10
    assert stock.current == 100
    assert stock.drain(130) == 100
    assert stock.current == 0


def test_stock_spend_is_all_or_nothing():
    stock = Stock(5, 10)
    assert not stock.spend(6)
    assert stock.current == 5
    assert stock.spend(5)
    assert stock.current == 0


def test_stock_fraction_and_room():
    stock = Stock(25, 100)
    assert stock.fraction == pytest.approx(0.25)
    assert stock.room == 75
    stock.raise_max(50)
    assert stock.room == 125


def test_negative_maximum_rejected():
    with pytest.raises(ValueError):
        Stock(0, -1)


# --- Time ---

def test_time_splits_total_into_calendar():
    t = GameTime()
    t.set_total(1440 + 90)
    assert (t.day, t.hour, t.minute) == (2, 1, 30)


def test_time_never_moves_backwards():
    t = GameTime()
    t.set_total(10)
    with pytest.raises(ValueError):
        t.set_total(9)


def test_weekend_is_days_six_and_seven():
    t = GameTime()
    flags = []
    for day in range(1, 9):
        t.set_total((day - 1) * 1440)
        flags.append(t.is_weekend)
    assert flags == [False, False, False, False, False, True, True, False]


# --- GameState ---

def test_plots_follow_plot_count():
    state = GameState()
    assert len(state.processes.plots) == 3
    state.progression.farm_plots = 7
    state.ensure_plots()
    assert len(state.processes.plots) == 7


def test_helper_lookup_and_housing():
    state = GameState(helpers=[Helper("pip", housed=True), Helper("fern")])
    assert state.helper("pip").housed
    assert state.helper("nobody") is None
    assert state.housed_count() == 1


def test_helper_roles():
    helper = Helper("pip", housed=True, role="waterer", secondary="sower")
    assert helper.working
    assert helper.roles() == ("waterer", "sower")
    assert Helper("x").roles() == ()


def test_serialization_is_json_and_sorted():
    state = GameState()
    state.progression.unlocked.update({"zeta", "alpha"})
    data = state.to_dict()
    assert data["progression"]["unlocked"] == ["alpha", "zeta"]
    assert json.loads(json.dumps(data)) == data


def test_from_dict_reproduces_identical_bytes():
    state = GameState()
    state.resources.seeds["turnip"] = 4
    state.progression.cleanups.add("clear_weeds")
    state.helpers.append(Helper("pip", level=2, housed=True, role="waterer"))
    state.processes.plots[0].crop = "turnip"
    first = json.dumps(state.to_dict(), sort_keys=True)
    again = json.dumps(GameState.from_dict(json.loads(first)).to_dict(), sort_keys=True)
    assert again == first
