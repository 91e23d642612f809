"""Tests for prerequisites, parameters, definitions, and the registry."""

import logging

import pytest

from harvest.types import ConfigError, DefinitionError
from harvest_combat.tables import DEFAULT_BOSSES
from harvest_combat.types import EncounterDef
from harvest_farm.defs import CropDef, RecipeDef, VendorItem
from harvest_farm.params import Parameters
from harvest_farm.prerequisites import (
    all_satisfied,
    farm_stage,
    is_recognized,
    is_satisfied,
    unmet,
)
from harvest_farm.registry import GameData
from harvest_farm.state import GameState, Helper
from harvest_combat.types import Weapon


# --- Prerequisites ---

def test_membership_in_unlocked_and_cleanups():
    state = GameState()
    assert not is_satisfied("watering_can", state)
    state.progression.unlock("watering_can")
    state.progression.cleanups.add("clear_weeds")
    assert is_satisfied("watering_can", state)
    assert is_satisfied("clear_weeds", state)


def test_numeric_thresholds():
    state = GameState()
    state.progression.farm_plots = 20
    state.progression.level = 4
    assert is_satisfied("farm_plots_20", state)
    assert not is_satisfied("farm_plots_21", state)
    assert is_satisfied("hero_level_4", state)
    assert not is_satisfied("hero_level_5", state)
    assert is_satisfied("farm_stage_2", state)
    assert is_satisfied("small_hold", state)
    assert not is_satisfied("homestead", state)
    assert not is_satisfied("helpers_1", state)
    state.helpers.append(Helper("pip"))
    assert is_satisfied("helpers_1", state)


def test_farm_stage_from_plots():
    assert [farm_stage(p) for p in (3, 20, 40, 65, 90)] == [1, 2, 3, 4, 5]


def test_phase_by_index_or_name():
    state = GameState()
    state.progression.phase_index = 2
    assert is_satisfied("phase_2", state)
    assert is_satisfied("phase_mid", state)
    assert not is_satisfied("phase_late", state)
    assert not is_satisfied("phase_nonsense", state)


def test_ownership_shapes():
    state = GameState()
    state.inventory.tools["pickaxe_1"] = False
    state.inventory.weapons["bow"] = Weapon("bow", 7)
    state.inventory.blueprints.add("blueprint_crossbow")
    assert is_satisfied("tool_pickaxe_1", state)
    assert is_satisfied("craft_pickaxe_1", state)
    assert is_satisfied("weapon_bow", state)
    assert not is_satisfied("weapon_sword", state)
    assert is_satisfied("blueprint_crossbow", state)


def test_requirements_combine_with_and():
    state = GameState()
    state.progression.unlock("a")
    assert all_satisfied([], state)
    assert all_satisfied(["a"], state)
    assert not all_satisfied(["a", "b"], state)
    assert unmet(["a", "b", "hero_level_1"], state) == ["b"]


def test_unrecognized_ids_are_false_not_errors():
    state = GameState()
    assert is_satisfied("¿what?", state) is False
    assert not is_recognized("¿what?")
    assert is_recognized("hero_level_3")
    assert is_recognized("phase_mid")
    assert not is_recognized("phase_sideways")
    assert is_recognized("route_meadow", ["meadow"])
    assert not is_recognized("route_meadow")
    assert is_recognized("watering_can", ["watering_can"])


def test_checking_never_mutates_state():
    state = GameState()
    before = state.to_dict()
    for requirement in ("farm_plots_9", "weapon_bow", "phase_3", "junk"):
        is_satisfied(requirement, state)
    assert state.to_dict() == before


# --- Parameters ---

def test_defaults_need_no_input():
    params = Parameters.from_dict(None)
    assert params.growth.drought_minutes == 120
    assert params.scoring.weights["thrash"] < 0
    assert params.monitor.victory_plots == 90


def test_partial_sections_merge_over_defaults():
    params = Parameters.from_dict({
        "growth": {"drought_minutes": 60},
        "scoring": {"weights": {"value": 2}},
    })
    assert params.growth.drought_minutes == 60
    assert params.growth.dry_threshold == 0.3
    assert params.scoring.weights["value"] == 2
    assert params.scoring.weights["priority"] == 1.0


def test_int_promoted_for_float_fields():
    params = Parameters.from_dict({"farm": {"pump_rate": 3}})
    assert params.farm.pump_rate == 3.0
    assert isinstance(params.farm.pump_rate, float)


def test_unknown_keys_warn_and_are_ignored(caplog):
    with caplog.at_level(logging.WARNING):
        params = Parameters.from_dict({"nope": {}, "growth": {"bogus": 1}})
    assert params == Parameters()
    messages = " ".join(r.getMessage() for r in caplog.records)
    assert "nope" in messages and "growth.bogus" in messages


@pytest.mark.parametrize("raw", [
    {"growth": {"drought_minutes": "soon"}},
    {"monitor": {"stop_on_stuck": 1}},
    {"scoring": {"weights": [1, 2]}},
    {"growth": 5},
])
def test_wrong_types_raise_config_error(raw):
    with pytest.raises(ConfigError):
        Parameters.from_dict(raw)


def test_combat_enemy_override_merges_fields():
    params = Parameters.from_dict({"combat": {"enemies": {"slimes": {"hp": 99}}}})
    assert params.combat.enemies["slimes"].hp == 99
    assert params.combat.enemies["slimes"].damage == 3


# --- Definitions ---

def test_definition_validation():
    with pytest.raises(DefinitionError):
        CropDef(id="x", growth_minutes=0)
    with pytest.raises(DefinitionError):
        VendorItem(id="x", category="lottery")
    with pytest.raises(DefinitionError):
        RecipeDef(id="x", duration=5, output="weapon")
    with pytest.raises(DefinitionError):
        RecipeDef(id="x", duration=5, output="weapon", family="sword")
    with pytest.raises(DefinitionError):
        RecipeDef(id="x", duration=5, output="weapon", family="bow", damage=4, attack_speed=0)
    with pytest.raises(DefinitionError):
        CropDef(id="", growth_minutes=5)


def test_only_seed_packs_and_weapons_repeat():
    assert VendorItem(id="pack", category="seeds").repeatable
    assert not VendorItem(id="can", category="upgrade").repeatable
    assert RecipeDef(id="s", duration=1, output="weapon", family="spear", damage=3).repeatable
    assert not RecipeDef(id="p", duration=1).repeatable


# --- Registry ---

def test_registry_keeps_insertion_order(data):
    assert [c.id for c in data.crops] == ["sprout", "turnip", "slowbean"]
    assert data.find("turnip", CropDef).energy_yield == 2
    assert data.find("turnip", RecipeDef) is None
    with pytest.raises(KeyError):
        data.get("nothing")


def test_from_dict_skips_malformed_records(caplog):
    raw = {
        "crops": [
            {"id": "carrot", "growth_minutes": 30},
            {"id": "broken", "growth_minutes": -1},
            {"id": "typo", "growth_minuets": 5},
        ],
        "vendor": {"can": {"category": "upgrade", "gold_cost": 5}},
        "encounters": [
            {"id": "den", "waves": 2, "composition": {"slimes": 1}, "boss": "giant_slime"},
            {"id": "bad_boss", "waves": 1, "composition": {"slimes": 1}, "boss": "nobody"},
        ],
        "spells": [],
    }
    with caplog.at_level(logging.WARNING):
        data = GameData.from_dict(raw)
    assert data.ids() == ["carrot", "can", "den"]
    assert data.find("den", EncounterDef).boss == DEFAULT_BOSSES["giant_slime"]
    assert len(caplog.records) == 4
