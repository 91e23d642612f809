"""Tests for phase tracking, stagnation detection, and victory."""

from harvest_farm.params import MonitorParams
from harvest_farm.state import GameState, Helper
from harvest_sim.monitor import ProgressMonitor, is_victory, phase_index, stuck_cause


def test_stuck_flag_appears_exactly_after_stuck_days(emit):
    monitor = ProgressMonitor(MonitorParams(stuck_days=1, stop_on_stuck=False))
    state = GameState()
    first_stuck = None
    for tick in range(1, 1441):
        report = monitor.update(state, tick, emit)
        if report.stuck and first_stuck is None:
            first_stuck = tick
    assert first_stuck == 1440
    assert emit.types().count("stuck") == 1


def test_progress_clears_stuck_and_closes_bottleneck(emit):
    monitor = ProgressMonitor(MonitorParams(stuck_days=1))
    state = GameState()
    for tick in range(1, 1500):
        monitor.update(state, tick, emit)
    assert monitor.stuck

    state.resources.gold += 1
    report = monitor.update(state, 1500, emit)
    assert not report.stuck
    assert monitor.last_progress == 1500
    assert monitor.bottlenecks[0].to_dict() == {
        "start": 1440, "end": 1500, "cause": monitor.bottlenecks[0].cause,
    }
    assert emit.types()[-1] == "unstuck"


def test_spending_is_not_progress(emit):
    monitor = ProgressMonitor(MonitorParams(stuck_days=1))
    state = GameState()
    monitor.update(state, 1, emit)
    state.resources.gold -= 50
    monitor.update(state, 2, emit)
    assert monitor.last_progress == 0


def test_phase_follows_plots_or_level(emit):
    params = MonitorParams()
    state = GameState()
    assert phase_index(state, params) == 0
    state.progression.level = 6
    assert phase_index(state, params) == 2
    state.progression.farm_plots = 65
    assert phase_index(state, params) == 3


def test_phase_change_emitted_once(emit):
    monitor = ProgressMonitor(MonitorParams())
    state = GameState()
    state.progression.farm_plots = 20
    monitor.update(state, 1, emit)
    monitor.update(state, 2, emit)
    assert state.progression.phase == "early"
    assert state.progression.phase_index == 1
    assert emit.types().count("phase_changed") == 1
    assert monitor.transitions == [(1, "tutorial", "early")]


def test_victory_by_plots_or_level():
    params = MonitorParams()
    state = GameState()
    assert not is_victory(state, params)
    state.progression.farm_plots = 90
    assert is_victory(state, params)


def test_stuck_cause_names_scarcest_resource():
    params = MonitorParams()
    state = GameState()
    state.resources.seeds["turnip"] = 10
    state.resources.energy.current = 2
    assert stuck_cause(state, params) == "energy"

    state.resources.energy.current = 100
    assert stuck_cause(state, params) == "progression"

    state.progression.farm_plots = 40
    assert stuck_cause(state, params) == "helpers"
    state.helpers.append(Helper("pip"))
    assert stuck_cause(state, params) == "progression"
