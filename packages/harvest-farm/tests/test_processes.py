"""Tests for the crafting, extraction, and adventure processes."""

import random

import pytest

from harvest_combat.types import EncounterResult
from harvest_farm.adventure import advance_adventure, armor_for_drop
from harvest_farm.crafting import advance_crafting, craft_speed, stoke, success_chance
from harvest_farm.mining import (
    advance_extraction,
    can_start_extraction,
    depth_tier,
    drain_reduction,
    energy_drain,
)
from harvest_farm.params import CraftingParams, FarmParams, HelperParams, MiningParams
from harvest_farm.state import CraftJob, EncounterSession, ExtractionSession, GameState, Helper


# --- Crafting ---

def test_success_full_inside_band_and_linear_outside():
    params = CraftingParams()
    assert success_chance(2500, params) == 1.0
    assert success_chance(3500, params) == 1.0
    assert success_chance(1500, params) == pytest.approx(0.5)
    assert success_chance(4500, params) == pytest.approx(0.5)
    assert success_chance(0, params) == 0.0


def test_stoke_caps_at_max_heat():
    state = GameState()
    state.processes.heat = 4800
    assert stoke(state, 500, CraftingParams()) == pytest.approx(200)
    assert state.processes.heat == 5000


def test_heat_decays_every_minute(data, emit, rng):
    state = GameState()
    state.processes.heat = 3000
    advance_crafting(state, 4, data, CraftingParams(), rng, emit)
    assert state.processes.heat == pytest.approx(2800)


def test_queue_head_completes_inside_band(data, emit, rng):
    state = GameState()
    state.processes.crafting = [CraftJob("pickaxe_1", 10), CraftJob("spear", 5)]
    for _ in range(10):
        advance_crafting(state, 1, data, CraftingParams(), rng, emit)
    assert "pickaxe_1" in state.inventory.tools
    assert "pickaxe_1" in state.progression.unlocked
    assert [j.recipe for j in state.processes.crafting] == ["spear"]
    assert emit.of("craft_completed") == [{"recipe": "pickaxe_1", "output": "tool"}]


def test_cold_forge_always_fails(data, emit, rng):
    state = GameState()
    state.processes.heat = 0
    state.processes.crafting = [CraftJob("smelt_iron", 1)]
    advance_crafting(state, 1, data, CraftingParams(), rng, emit)
    assert state.resources.materials.get("iron", 0) == 0
    assert emit.types() == ["craft_failed"]


def test_double_output_needs_unlock(data, emit):
    params = CraftingParams(double_chance=1.0)
    state = GameState()
    state.processes.crafting = [CraftJob("smelt_iron", 1)]
    advance_crafting(state, 1, data, params, random.Random(1), emit)
    assert state.resources.materials["iron"] == 2

    state.progression.unlock(params.double_unlock)
    state.processes.crafting = [CraftJob("smelt_iron", 1)]
    advance_crafting(state, 1, data, params, random.Random(1), emit)
    assert state.resources.materials["iron"] == 6
    assert "craft_doubled" in emit.types()


def test_reforged_weapon_levels_up(data, emit, rng):
    state = GameState()
    state.processes.crafting = [CraftJob("spear", 1), CraftJob("spear", 1)]
    advance_crafting(state, 1, data, CraftingParams(), rng, emit)
    advance_crafting(state, 1, data, CraftingParams(), rng, emit)
    spear = state.inventory.weapons["spear"]
    assert spear.level == 2
    assert spear.damage == pytest.approx(8 * 1.1)


def test_furnace_speeds_crafting():
    state = GameState()
    state.progression.unlocked.update({"furnace_1", "furnace_2"})
    assert craft_speed(state, CraftingParams()) == pytest.approx(1.4)


def test_unknown_recipe_dropped(data, emit, rng):
    state = GameState()
    state.processes.crafting = [CraftJob("mystery", 3)]
    advance_crafting(state, 1, data, CraftingParams(), rng, emit)
    assert state.processes.crafting == []
    assert emit.types() == ["craft_dropped"]


# --- Extraction ---

def test_drain_doubles_per_tier():
    assert depth_tier(0, 500) == 1
    assert depth_tier(499, 500) == 1
    assert depth_tier(500, 500) == 2
    assert energy_drain(0, 500) * 2 == energy_drain(500, 500)
    assert energy_drain(1000, 500) == 4.0
    assert energy_drain(500, 500, reduction=0.5) == pytest.approx(1.0)


def test_drain_reduction_combines_pickaxe_and_helper():
    state = GameState()
    state.inventory.tools["pickaxe_3"] = False
    assert drain_reduction(state, MiningParams(), HelperParams()) == pytest.approx(0.30)
    state.helpers.append(Helper("pip", level=0, housed=True, role="miners_friend"))
    # 1 - 0.7 * 0.85
    assert drain_reduction(state, MiningParams(), HelperParams()) == pytest.approx(0.405)


def test_start_needs_minimum_energy():
    state = GameState()
    state.resources.energy.current = 9
    assert not can_start_extraction(state, MiningParams())
    state.resources.energy.current = 10
    assert can_start_extraction(state, MiningParams())


def test_two_drop_rolls_per_minute(emit, rng):
    state = GameState()
    state.resources.materials.clear()
    state.processes.extraction = ExtractionSession()
    advance_extraction(state, 1, MiningParams(), HelperParams(), rng, emit)
    session = state.processes.extraction
    assert session.depth == 10
    assert state.resources.energy.current == 99
    # Tier 1 drops are stone only, 1-3 per roll.
    assert 2 <= state.resources.materials["stone"] <= 6


def test_extraction_ends_at_zero_energy(emit, rng):
    state = GameState()
    state.resources.energy.current = 3
    state.processes.extraction = ExtractionSession()
    for _ in range(5):
        advance_extraction(state, 1, MiningParams(), HelperParams(), rng, emit)
    assert state.processes.extraction is None
    assert state.resources.energy.current == 0
    assert emit.types().count("extraction_ended") == 1


# --- Adventure ---

def _session(success):
    result = EncounterResult(
        "meadow", success=success, hp_remaining=10 if success else 0, max_hp=120,
        gold=30 if success else 0, xp=150 if success else 0,
        loot={"wood": 2} if success else {}, armor_drop="leather_vest" if success else None,
        failure_reason=None if success else "hero defeated",
    )
    return EncounterSession("meadow", remaining=3, result=result)


def test_rewards_paid_when_hero_returns(data, emit):
    state = GameState()
    state.processes.encounter = _session(True)
    advance_adventure(state, 2, data, FarmParams(), emit)
    assert state.resources.gold == 100
    advance_adventure(state, 1, data, FarmParams(), emit)
    assert state.processes.encounter is None
    assert state.resources.gold == 130
    assert state.resources.materials["wood"] == 2
    assert "route_meadow" in state.progression.unlocked
    assert state.progression.level == 2
    assert state.inventory.equipped_armor == "leather_vest"


def test_failed_encounter_grants_nothing(data, emit):
    state = GameState()
    state.processes.encounter = _session(False)
    advance_adventure(state, 3, data, FarmParams(), emit)
    assert state.resources.gold == 100
    assert "route_meadow" not in state.progression.unlocked
    completed = emit.of("encounter_completed")
    assert completed[0]["success"] is False
    assert completed[0]["reason"] == "hero defeated"


def test_unknown_armor_drop_gets_default_defense(data):
    armor = armor_for_drop("odd_helm", data)
    assert armor.id == "odd_helm"
    assert armor.defense == 10.0
