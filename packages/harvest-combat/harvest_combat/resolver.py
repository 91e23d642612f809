"""Statistical encounter resolution.

Each enemy is resolved in one step: time-to-kill from the best owned weapon,
then incoming damage accumulated over that time and reduced by armor. The
boss is a single longer exchange shaped by its quirk. All randomness comes
from the ``rng`` argument.
"""
from __future__ import annotations

import logging
import math
import random
from typing import Iterable

from harvest_combat.tables import CombatTables
from harvest_combat.types import Armor, Boss, EncounterDef, EncounterResult, Weapon

logger = logging.getLogger(__name__)

_HIT_EFFECTS = ("evasion", "critical_shield", "reflection", "type_resist")


def advantage_multiplier(family: str, enemy: str, tables: CombatTables) -> float:
    if tables.advantages.get(family) == enemy:
        return tables.advantage_multiplier
    if tables.resistances.get(family) == enemy:
        return tables.resistance_multiplier
    return 1.0


def pick_weapon(
    weapons: list[Weapon],
    enemy: str,
    tables: CombatTables,
    bonus_damage: float = 0.0,
) -> Weapon | None:
    """Best weapon against ``enemy`` by effective damage rate; first wins ties."""
    best: Weapon | None = None
    best_rate = -1.0
    for weapon in weapons:
        rate = (
            (weapon.damage + bonus_damage)
            * advantage_multiplier(weapon.family, enemy, tables)
            * weapon.attack_speed
        )
        if rate > best_rate:
            best = weapon
            best_rate = rate
    return best


def armor_reduction(armor: Armor | None, tables: CombatTables) -> float:
    if armor is None:
        return 0.0
    return min(tables.max_defense_reduction, max(0.0, armor.defense) / 100.0)


def time_to_kill(hp: float, weapon: Weapon, multiplier: float, bonus_damage: float = 0.0) -> float:
    rate = (weapon.damage + bonus_damage) * multiplier * weapon.attack_speed
    if rate <= 0:
        return math.inf
    return hp / rate


def wave_size_bounds(encounter: EncounterDef, wave: int, tables: CombatTables) -> tuple[int, int]:
    low, high = encounter.wave_size
    if encounter.wave_growth > 0:
        high += (wave - 1) // encounter.wave_growth
    high = min(tables.max_wave_size, high)
    return low, max(low, high)


def _pick_enemy(composition: dict[str, float], rng: random.Random) -> str:
    names = list(composition)
    weights = [max(0.0, composition[n]) for n in names]
    if sum(weights) <= 0:
        return names[0]
    return rng.choices(names, weights=weights)[0]


def _apply_hit_effect(
    effect: str | None,
    tables: CombatTables,
    incoming: float,
    rng: random.Random,
) -> tuple[float, str | None]:
    if effect not in _HIT_EFFECTS:
        return incoming, None
    chance, magnitude = tables.armor_effects[effect]
    if rng.random() >= chance:
        return incoming, None
    if effect in ("evasion", "critical_shield"):
        return 0.0, effect
    return incoming * (1.0 - magnitude), effect


def _can_hurt(weapon: Weapon, bonus_damage: float) -> bool:
    return weapon.damage + bonus_damage > 0 and weapon.attack_speed > 0


def _defeat(result: EncounterResult, reason: str) -> EncounterResult:
    """Mark ``result`` lost; nothing earned so far is kept."""
    result.hp_remaining = 0.0
    result.failure_reason = reason
    result.log.append(reason)
    return result


def _quirk_active(boss: Boss, owned: set[str]) -> bool:
    quirk = boss.quirk
    if quirk is None:
        return False
    return quirk.counter is None or quirk.counter not in owned


def resolve_encounter(
    encounter: EncounterDef,
    weapons: Iterable[Weapon],
    armor: Armor | None,
    hero_level: int,
    rng: random.Random,
    tables: CombatTables | None = None,
    bonus_damage: float = 0.0,
) -> EncounterResult:
    """Resolve every wave and the boss; reward only a fully successful run."""
    tables = tables or CombatTables()
    weapons = list(weapons)
    max_hp = tables.hero_hp(hero_level)
    result = EncounterResult(
        encounter=encounter.id, success=False, hp_remaining=max_hp, max_hp=max_hp,
    )
    if not weapons:
        result.failure_reason = "no weapon available"
        result.log.append("wave 1: no weapon to fight with")
        return result

    effect = armor.effect if armor is not None else None
    if effect is not None and effect not in tables.armor_effects:
        logger.warning("Unknown armor effect %r on %s ignored", effect, armor.id)
        effect = None
    reduction = armor_reduction(armor, tables)
    hp = max_hp
    gold = 0
    xp = 0

    for wave in range(1, encounter.waves + 1):
        low, high = wave_size_bounds(encounter, wave, tables)
        size = rng.randint(low, high)
        healed = 0.0
        for _ in range(size):
            name = _pick_enemy(encounter.composition, rng)
            enemy = tables.enemies.get(name)
            if enemy is None:
                logger.warning("Encounter %s: unknown enemy type %r skipped", encounter.id, name)
                continue
            weapon = pick_weapon(weapons, name, tables, bonus_damage)
            mult = advantage_multiplier(weapon.family, name, tables)
            ttk = time_to_kill(enemy.hp, weapon, mult, bonus_damage)
            if math.isinf(ttk):
                return _defeat(result, f"cannot damage {name} in wave {wave}")
            incoming = enemy.damage * enemy.attack_speed * ttk * (1.0 - reduction)
            incoming, proc = _apply_hit_effect(effect, tables, incoming, rng)
            hp -= math.ceil(incoming)
            if proc is not None:
                result.log.append(f"wave {wave}: {proc} against {name}")
            if hp <= 0:
                return _defeat(result, f"defeated in wave {wave} by {name}")
            gold += rng.randint(*tables.enemy_gold)
            xp += tables.enemy_xp
            if effect == "vampiric":
                cap = tables.vampiric_cap - healed
                heal = min(tables.armor_effects["vampiric"][1], cap, max_hp - hp)
                if heal > 0:
                    hp += heal
                    healed += heal
        result.waves_cleared = wave
        result.log.append(f"wave {wave}: cleared {size} enemies, hp {hp:g}/{max_hp:g}")
        if effect == "regeneration" and wave < encounter.waves:
            hp = min(max_hp, hp + tables.armor_effects["regeneration"][1])

    boss = encounter.boss
    if boss is not None:
        owned = {w.family for w in weapons}
        if effect is not None:
            owned.add(effect)
        weapon = next(
            (w for w in weapons if w.family == boss.weakness and _can_hurt(w, bonus_damage)), None,
        )
        if weapon is None:
            weapon = pick_weapon(weapons, "", tables, bonus_damage)
        mult = tables.weakness_multiplier if weapon.family == boss.weakness else 1.0
        duration = time_to_kill(boss.hp, weapon, mult, bonus_damage)
        penalty = 0.0
        if _quirk_active(boss, owned):
            if boss.quirk.kind == "duration_multiplier":
                duration *= boss.quirk.value
            else:
                penalty = boss.quirk.value * max_hp
            result.log.append(f"boss: {boss.quirk.name} in effect")
        if math.isinf(duration):
            return _defeat(result, f"cannot damage {boss.name}")
        incoming = boss.damage * boss.attack_speed * duration * (1.0 - reduction)
        incoming, proc = _apply_hit_effect(effect, tables, incoming, rng)
        if proc is not None:
            result.log.append(f"boss: {proc}")
        hp -= math.ceil(incoming + penalty)
        if hp <= 0:
            return _defeat(result, f"defeated by {boss.name}")
        result.boss_defeated = True
        gold += boss.gold
        xp += boss.xp
        result.log.append(f"boss: {boss.name} defeated, hp {hp:g}/{max_hp:g}")

    gold += encounter.gold
    xp += encounter.xp
    for item, qty in encounter.loot.items():
        if rng.random() < tables.loot_chance:
            result.loot[item] = qty
    if encounter.armor_drops and rng.random() < tables.armor_drop_chance:
        result.armor_drop = rng.choice(encounter.armor_drops)
    if effect == "gold_magnet":
        gold = int(round(gold * tables.armor_effects["gold_magnet"][1]))

    result.success = True
    result.hp_remaining = hp
    result.gold = gold
    result.xp = xp
    return result


def estimate_encounter(
    encounter: EncounterDef,
    weapons: Iterable[Weapon],
    armor: Armor | None,
    hero_level: int,
    tables: CombatTables | None = None,
    bonus_damage: float = 0.0,
) -> float:
    """Expected HP fraction left after the encounter, without drawing randomness.

    Uses mean wave sizes and composition weights. Returns -1.0 when the hero
    has no weapon; values <= 0 predict defeat.
    """
    tables = tables or CombatTables()
    weapons = list(weapons)
    if not weapons:
        return -1.0
    max_hp = tables.hero_hp(hero_level)
    reduction = armor_reduction(armor, tables)
    total_weight = sum(max(0.0, w) for w in encounter.composition.values())

    per_enemy = 0.0
    if total_weight > 0:
        for name, weight in encounter.composition.items():
            enemy = tables.enemies.get(name)
            if enemy is None or weight <= 0:
                continue
            weapon = pick_weapon(weapons, name, tables, bonus_damage)
            mult = advantage_multiplier(weapon.family, name, tables)
            ttk = time_to_kill(enemy.hp, weapon, mult, bonus_damage)
            if math.isinf(ttk):
                return -1.0
            per_enemy += (weight / total_weight) * enemy.damage * enemy.attack_speed * ttk

    damage = 0.0
    penalty = 0.0
    for wave in range(1, encounter.waves + 1):
        low, high = wave_size_bounds(encounter, wave, tables)
        damage += per_enemy * (low + high) / 2.0

    boss = encounter.boss
    if boss is not None:
        owned = {w.family for w in weapons}
        if armor is not None and armor.effect:
            owned.add(armor.effect)
        weapon = next(
            (w for w in weapons if w.family == boss.weakness and _can_hurt(w, bonus_damage)), None,
        )
        if weapon is None:
            weapon = pick_weapon(weapons, "", tables, bonus_damage)
        mult = tables.weakness_multiplier if weapon.family == boss.weakness else 1.0
        duration = time_to_kill(boss.hp, weapon, mult, bonus_damage)
        if math.isinf(duration):
            return -1.0
        if _quirk_active(boss, owned):
            if boss.quirk.kind == "duration_multiplier":
                duration *= boss.quirk.value
            else:
                penalty = boss.quirk.value * max_hp
        damage += boss.damage * boss.attack_speed * duration

    return (max_hp - damage * (1.0 - reduction) - penalty) / max_hp
