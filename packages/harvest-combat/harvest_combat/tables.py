"""Combat tuning tables: enemy stats, the advantage relation, armor effects."""
from __future__ import annotations

from dataclasses import dataclass, field

from harvest_combat.types import Boss, EnemyType, Quirk


def _default_enemies() -> dict[str, EnemyType]:
    return {
        "slimes": EnemyType("slimes", hp=20, damage=3, attack_speed=1.0),
        "armored_insects": EnemyType("armored_insects", hp=30, damage=4, attack_speed=0.8),
        "predatory_beasts": EnemyType("predatory_beasts", hp=25, damage=6, attack_speed=1.2),
        "flying_predators": EnemyType("flying_predators", hp=20, damage=5, attack_speed=1.5),
        "venomous_crawlers": EnemyType("venomous_crawlers", hp=35, damage=4, attack_speed=1.0),
        "living_plants": EnemyType("living_plants", hp=40, damage=3, attack_speed=0.7),
    }


def _default_advantages() -> dict[str, str]:
    return {
        "spear": "armored_insects",
        "sword": "predatory_beasts",
        "bow": "flying_predators",
        "crossbow": "venomous_crawlers",
        "wand": "living_plants",
    }


def _default_resistances() -> dict[str, str]:
    return {
        "spear": "living_plants",
        "sword": "flying_predators",
        "bow": "predatory_beasts",
        "crossbow": "armored_insects",
        "wand": "venomous_crawlers",
    }


def _default_effects() -> dict[str, tuple[float, float]]:
    # effect -> (proc chance, magnitude)
    return {
        "evasion": (0.10, 1.0),
        "critical_shield": (0.20, 1.0),
        "reflection": (0.15, 0.30),
        "type_resist": (0.25, 0.40),
        "regeneration": (1.0, 3.0),
        "vampiric": (1.0, 1.0),
        "gold_magnet": (1.0, 1.25),
    }


@dataclass(frozen=True)
class CombatTables:
    """Immutable combat tuning.

    Attributes:
        enemies: Enemy type name -> stats.
        advantages: Weapon family -> enemy type it is strong against.
        resistances: Weapon family -> enemy type that resists it.
        advantage_multiplier: Damage multiplier on advantage.
        resistance_multiplier: Damage multiplier against a resisting type.
        weakness_multiplier: Damage multiplier when hitting a boss weakness.
        armor_effects: Effect name -> (proc chance, magnitude).
        vampiric_cap: Max HP healed per wave by the vampiric effect.
        max_defense_reduction: Cap on the armor defense damage fraction.
        hero_base_hp: Hero HP at level 0.
        hero_hp_per_level: Extra HP per hero level.
        enemy_gold: Inclusive gold range dropped per defeated enemy.
        enemy_xp: XP per defeated enemy.
        max_wave_size: Hard cap on enemies per wave.
        loot_chance: Chance each route loot entry drops.
        armor_drop_chance: Chance one route armor piece drops.
    """

    enemies: dict[str, EnemyType] = field(default_factory=_default_enemies)
    advantages: dict[str, str] = field(default_factory=_default_advantages)
    resistances: dict[str, str] = field(default_factory=_default_resistances)
    advantage_multiplier: float = 1.5
    resistance_multiplier: float = 0.5
    weakness_multiplier: float = 1.5
    armor_effects: dict[str, tuple[float, float]] = field(default_factory=_default_effects)
    vampiric_cap: float = 5.0
    max_defense_reduction: float = 0.8
    hero_base_hp: float = 100.0
    hero_hp_per_level: float = 20.0
    enemy_gold: tuple[int, int] = (2, 6)
    enemy_xp: int = 2
    max_wave_size: int = 5
    loot_chance: float = 0.7
    armor_drop_chance: float = 0.3

    def hero_hp(self, level: int) -> float:
        return self.hero_base_hp + self.hero_hp_per_level * level


DEFAULT_BOSSES: dict[str, Boss] = {
    "giant_slime": Boss(
        "Giant Slime", hp=150, damage=8, attack_speed=0.5,
        quirk=Quirk("splitting", "damage_penalty", 0.5),
    ),
    "beetle_lord": Boss(
        "Beetle Lord", hp=200, damage=10, attack_speed=0.4, weakness="spear",
        quirk=Quirk("hardened_shell", "duration_multiplier", 2.0, counter="spear"),
    ),
    "alpha_wolf": Boss(
        "Alpha Wolf", hp=250, damage=12, attack_speed=0.8, weakness="sword",
        quirk=Quirk("pack_howl", "damage_penalty", 0.3),
    ),
    "sky_serpent": Boss(
        "Sky Serpent", hp=300, damage=10, attack_speed=1.0, weakness="bow",
        quirk=Quirk("dive_bomb", "damage_penalty", 0.2, counter="bow"),
    ),
    "crystal_spider": Boss(
        "Crystal Spider", hp=400, damage=12, attack_speed=0.6, weakness="crossbow",
        quirk=Quirk("web_trap", "duration_multiplier", 1.15),
    ),
    "frost_wyrm": Boss(
        "Frost Wyrm", hp=500, damage=15, attack_speed=0.7, weakness="wand",
        quirk=Quirk("frost_armor", "duration_multiplier", 1.5, counter="wand"),
    ),
    "lava_titan": Boss(
        "Lava Titan", hp=600, damage=18, attack_speed=0.5, weakness="wand",
        quirk=Quirk("burning_ground", "damage_penalty", 0.1, counter="regeneration"),
    ),
}
