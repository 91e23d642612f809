"""Tests for the minute-step engine, clock, and event log."""

from dataclasses import dataclass, field

import pytest

from harvest.clock import MINUTES_PER_DAY, Clock, calendar
from harvest.engine import Engine
from harvest.events import EventLog
from harvest.types import SubsystemError


@dataclass
class Counter:
    value: int = 0
    draws: list = field(default_factory=list)


def _run(engine, n):
    return [engine.step() for _ in range(n)]


# --- Clock ---

def test_clock_rejects_non_positive_dt():
    with pytest.raises(ValueError):
        Clock(0)


def test_clock_elapsed_counts_minutes():
    clock = Clock()
    clock.advance()
    clock.advance()
    assert clock.tick_number == 2
    assert clock.elapsed == 2


def test_calendar_day_one_starts_at_zero():
    assert calendar(0) == (1, 0, 0)
    assert calendar(61) == (1, 1, 1)
    assert calendar(MINUTES_PER_DAY) == (2, 0, 0)
    assert calendar(MINUTES_PER_DAY * 3 + 125) == (4, 2, 5)


# --- Systems ---

def test_systems_run_in_order_each_tick():
    engine = Engine(Counter(), seed=1)
    order = []
    engine.add_system(lambda s, ctx: order.append(("a", ctx.tick_number)))
    engine.add_system(lambda s, ctx: order.append(("b", ctx.tick_number)))
    engine.step()
    engine.step()
    assert order == [("a", 1), ("b", 1), ("a", 2), ("b", 2)]


def test_context_reports_elapsed_minutes():
    engine = Engine(Counter(), seed=1, dt=2)
    seen = []
    engine.add_system(lambda s, ctx: seen.append((ctx.tick_number, ctx.dt, ctx.elapsed)))
    _run(engine, 3)
    assert seen == [(1, 2, 2), (2, 2, 4), (3, 2, 6)]


def test_step_returns_events_of_that_tick():
    engine = Engine(Counter(), seed=1)

    def system(state, ctx):
        state.value += 1
        ctx.emit("counted", value=state.value)

    engine.add_system(system)
    engine.step()
    events = engine.step()
    assert [(e.tick, e.type, e.data) for e in events] == [(2, "counted", {"value": 2})]


def test_quiet_tick_returns_no_events():
    engine = Engine(Counter(), seed=1)
    engine.add_system(lambda s, ctx: ctx.emit("odd") if ctx.tick_number % 2 else None)
    assert [len(events) for events in _run(engine, 4)] == [1, 0, 1, 0]


# --- Randomness ---

def _draw(state, ctx):
    state.draws.append(ctx.random.random())


def test_same_seed_same_draws():
    a = Engine(Counter(), seed=42)
    b = Engine(Counter(), seed=42)
    for engine in (a, b):
        engine.add_system(_draw)
        _run(engine, 20)
    assert a.state.draws == b.state.draws


def test_different_seed_different_draws():
    a = Engine(Counter(), seed=1)
    b = Engine(Counter(), seed=2)
    for engine in (a, b):
        engine.add_system(_draw)
        _run(engine, 5)
    assert a.state.draws != b.state.draws


def test_seed_is_generated_when_missing():
    assert isinstance(Engine(Counter()).seed, int)


# --- Event log ---

def test_event_log_trims_to_newest():
    log = EventLog(max_entries=3)
    for tick in range(1, 6):
        log.emit(tick, "tick", n=tick)
    assert len(log) == 3
    assert [e.data["n"] for e in log.at(5)] == [5]
    assert log.at(1) == []


def test_event_log_at_keeps_emit_order():
    log = EventLog()
    log.emit(1, "a")
    log.emit(2, "b", x=1)
    log.emit(2, "c")
    assert [e.to_dict() for e in log.at(2)] == [
        {"tick": 2, "type": "b", "data": {"x": 1}},
        {"tick": 2, "type": "c", "data": {}},
    ]


# --- Errors ---

def test_subsystem_error_carries_name_and_partial_flag():
    err = SubsystemError("growth", "boom", partial=True)
    assert err.subsystem == "growth"
    assert err.partial is True
    assert str(err) == "growth: boom"
