"""Tests for statistical encounter resolution."""

import logging
import random

import pytest

from harvest.types import DefinitionError
from harvest_combat.resolver import (
    advantage_multiplier,
    armor_reduction,
    estimate_encounter,
    pick_weapon,
    resolve_encounter,
    time_to_kill,
)
from harvest_combat.tables import DEFAULT_BOSSES, CombatTables
from harvest_combat.types import Armor, EncounterDef, Quirk, Weapon


def _route(waves=2, composition=None, boss=None, **kw):
    return EncounterDef(
        id="meadow", waves=waves, composition=composition or {"slimes": 1.0},
        boss=boss, **kw,
    )


class TestTables:
    """Advantage relation, weapon choice, and armor."""

    def test_advantage_relation(self):
        tables = CombatTables()
        assert advantage_multiplier("spear", "armored_insects", tables) == 1.5
        assert advantage_multiplier("spear", "living_plants", tables) == 0.5
        assert advantage_multiplier("spear", "slimes", tables) == 1.0

    def test_best_weapon_accounts_for_advantage(self):
        sword = Weapon("sword", damage=10)
        bow = Weapon("bow", damage=7)
        assert pick_weapon([sword, bow], "flying_predators", CombatTables()) is bow
        assert pick_weapon([sword, bow], "slimes", CombatTables()) is sword
        assert pick_weapon([], "slimes", CombatTables()) is None

    def test_armor_reduction_is_capped(self):
        tables = CombatTables()
        assert armor_reduction(None, tables) == 0.0
        assert armor_reduction(Armor("vest", 25), tables) == pytest.approx(0.25)
        assert armor_reduction(Armor("plate", 300), tables) == pytest.approx(0.8)

    def test_time_to_kill_without_damage_is_infinite(self):
        assert time_to_kill(10, Weapon("wand", damage=0), 1.0) == float("inf")

    def test_quirk_validation(self):
        with pytest.raises(DefinitionError):
            Quirk("odd", "teleport", 1.0)
        with pytest.raises(DefinitionError):
            EncounterDef(id="x", waves=1, composition={})


class TestResolution:
    """Wave and boss resolution."""

    def test_no_weapon_fails_first_wave_without_rewards(self):
        result = resolve_encounter(_route(), [], None, 1, random.Random(1))
        assert not result.success
        assert result.waves_cleared == 0
        assert result.gold == 0 and result.xp == 0 and result.loot == {}
        assert result.failure_reason

    def test_strong_hero_clears_waves_and_is_paid(self):
        route = _route(waves=3, gold=10, xp=5, loot={"wood": 2})
        result = resolve_encounter(
            route, [Weapon("sword", damage=500)], None, 5, random.Random(7),
        )
        assert result.success
        assert result.waves_cleared == 3
        assert result.gold >= 10 + 2 * 3
        assert result.xp >= 5 + 2 * 3
        assert 0 < result.hp_remaining <= result.max_hp

    def test_weak_hero_is_defeated_with_nothing(self):
        result = resolve_encounter(
            _route(), [Weapon("spear", damage=0.1)], None, 0, random.Random(3),
        )
        assert not result.success
        assert result.hp_remaining == 0
        assert result.gold == 0
        assert "wave 1" in result.failure_reason

    def test_same_seed_same_outcome(self):
        route = _route(waves=4, composition={"slimes": 1, "predatory_beasts": 2})
        weapons = [Weapon("sword", damage=12), Weapon("bow", damage=9)]
        first = resolve_encounter(route, weapons, Armor("vest", 10), 3, random.Random(42))
        second = resolve_encounter(route, weapons, Armor("vest", 10), 3, random.Random(42))
        assert first.to_dict() == second.to_dict()

    def test_boss_quirk_countered_by_weapon_family(self):
        boss = DEFAULT_BOSSES["beetle_lord"]
        route = _route(waves=0, boss=boss)
        with_spear = resolve_encounter(
            route, [Weapon("spear", damage=40)], None, 10, random.Random(1),
        )
        assert with_spear.boss_defeated
        assert not any("hardened_shell" in line for line in with_spear.log)

        with_sword = resolve_encounter(
            route, [Weapon("sword", damage=40)], None, 10, random.Random(1),
        )
        assert any("hardened_shell" in line for line in with_sword.log)
        assert with_sword.hp_remaining < with_spear.hp_remaining

    def test_weapon_that_cannot_hurt_loses_cleanly(self):
        result = resolve_encounter(
            _route(waves=1), [Weapon("sword", 0.0)], None, 1, random.Random(1),
        )
        assert not result.success
        assert result.gold == 0 and result.xp == 0
        assert "cannot damage slimes" in result.failure_reason

    def test_boss_that_cannot_be_hurt_is_a_defeat(self):
        boss = DEFAULT_BOSSES["giant_slime"]
        result = resolve_encounter(
            _route(waves=0, boss=boss), [Weapon("bow", 5, attack_speed=0)], None, 3,
            random.Random(1),
        )
        assert not result.success
        assert not result.boss_defeated
        assert result.failure_reason == f"cannot damage {boss.name}"

    def test_unknown_enemy_type_skipped(self, caplog):
        route = _route(waves=1, composition={"ghosts": 1.0}, wave_size=(1, 1))
        with caplog.at_level(logging.WARNING):
            result = resolve_encounter(route, [Weapon("wand", 5)], None, 1, random.Random(1))
        assert result.success
        assert "ghosts" in caplog.text


class TestEstimation:
    """Deterministic outcome estimates."""

    def test_estimate_without_weapons(self):
        assert estimate_encounter(_route(), [], None, 1) == -1.0

    def test_estimate_with_harmless_weapon_predicts_defeat(self):
        assert estimate_encounter(_route(), [Weapon("sword", 0.0)], None, 1) == -1.0

    def test_estimate_separates_strong_from_weak(self):
        route = _route(waves=3, boss=DEFAULT_BOSSES["giant_slime"])
        strong = estimate_encounter(route, [Weapon("sword", damage=200)], None, 10)
        weak = estimate_encounter(route, [Weapon("sword", damage=1)], None, 0)
        assert 0 < strong <= 1.0
        assert weak <= 0

    def test_estimate_draws_no_randomness(self):
        route = _route(waves=2)
        state = random.getstate()
        estimate_encounter(route, [Weapon("spear", 8)], Armor("vest", 5), 2)
        assert random.getstate() == state
