"""Tests for the action executor."""

from harvest_ai.actions import (
    Cleanup,
    Craft,
    Harvest,
    Plant,
    Purchase,
    RescueHelper,
    StartEncounter,
    StartExtraction,
    StopExtraction,
    action_from_dict,
    action_to_dict,
)
from harvest_ai.executor import execute
from harvest_combat.types import Weapon
from harvest_farm.growth import advance_growth


def _run(action, state, data, params, rng, emit, tick=0):
    return execute(action, state, data, params, rng, emit, tick)


def test_plant_grow_harvest_energy_balance(state, data, params, rng, emit):
    state.resources.energy.current = 50
    state.resources.seeds["sprout"] = 1
    assert _run(Plant(0, "sprout"), state, data, params, rng, emit).success
    assert state.resources.energy.current == 49
    assert state.resources.seeds["sprout"] == 0

    for _ in range(6):
        advance_growth(state, 1, data, params.growth, emit)
    assert state.processes.plots[0].ready

    assert _run(Harvest((0,)), state, data, params, rng, emit).success
    assert state.resources.energy.current == 52
    assert state.processes.plots[0].empty


def test_rejected_action_leaves_state_untouched(state, data, params, rng, emit):
    state.resources.gold = 10
    before = state.to_dict()
    outcome = _run(Purchase("watering_can"), state, data, params, rng, emit)
    assert not outcome.success
    assert outcome.reason == "cannot afford"
    assert state.to_dict() == before
    assert emit.types() == ["action_rejected"]


def test_unknown_definition_rejected(state, data, params, rng, emit):
    outcome = _run(Purchase("golden_hoe"), state, data, params, rng, emit)
    assert outcome.reason == "unknown definition"


def test_prerequisites_gate_execution(state, data, params, rng, emit):
    outcome = _run(Cleanup("clear_rocks"), state, data, params, rng, emit)
    assert outcome.reason == "missing prerequisite clear_weeds"
    assert _run(Cleanup("clear_weeds"), state, data, params, rng, emit).success
    assert _run(Cleanup("clear_rocks"), state, data, params, rng, emit).success
    assert state.progression.farm_plots == 10
    assert len(state.processes.plots) == 10
    assert state.resources.energy.current == 85


def test_cleanup_is_one_time(state, data, params, rng, emit):
    _run(Cleanup("clear_weeds"), state, data, params, rng, emit)
    outcome = _run(Cleanup("clear_weeds"), state, data, params, rng, emit)
    assert outcome.reason == "already cleared"
    assert state.progression.farm_plots == 5


def test_seed_packs_repeat_upgrades_do_not(state, data, params, rng, emit):
    state.resources.gold = 200
    for _ in range(2):
        assert _run(Purchase("seed_pack"), state, data, params, rng, emit).success
    assert state.resources.seeds["turnip"] == 10
    assert _run(Purchase("watering_can"), state, data, params, rng, emit).success
    assert "watering_can" in state.progression.unlocked
    assert not _run(Purchase("watering_can"), state, data, params, rng, emit).success
    assert state.resources.gold == 120


def test_craft_spends_materials_and_warms_forge(state, data, params, rng, emit):
    state.resources.materials["stone"] = 3
    state.processes.heat = 0
    assert _run(Craft("pickaxe_1"), state, data, params, rng, emit).success
    assert state.resources.materials["stone"] == 1
    assert [j.recipe for j in state.processes.crafting] == ["pickaxe_1"]
    assert state.processes.heat == params.crafting.optimal_mid
    assert _run(Craft("pickaxe_1"), state, data, params, rng, emit).reason == "already crafted"


def test_rescue_needs_housing(state, data, params, rng, emit):
    assert _run(RescueHelper("pip"), state, data, params, rng, emit).reason == "no free housing"
    state.progression.housing = 1
    assert _run(RescueHelper("pip"), state, data, params, rng, emit).success
    assert state.helper("pip").housed
    assert state.resources.gold == 0


def test_encounter_keeps_hero_busy(state, data, params, rng, emit):
    state.inventory.weapons["sword"] = Weapon("sword", 50)
    assert _run(StartEncounter("meadow"), state, data, params, rng, emit).success
    session = state.processes.encounter
    assert session.remaining == 20
    assert session.result is not None
    assert _run(StartExtraction(), state, data, params, rng, emit).reason == "cannot start extraction"


def test_extraction_start_and_stop(state, data, params, rng, emit):
    assert _run(StartExtraction(), state, data, params, rng, emit).success
    assert state.processes.extraction is not None
    assert _run(StopExtraction(), state, data, params, rng, emit).success
    assert state.processes.extraction is None
    assert emit.types() == ["extraction_started", "extraction_ended"]


def test_action_dict_form():
    action = Harvest((0, 2))
    assert action_to_dict(action) == {"kind": "harvest", "plots": [0, 2]}
    assert action_from_dict(action_to_dict(action)) == action
