"""Built-in rule set, so a run can start without external definitions.

``DEFAULT_DEFINITIONS`` is plain data in the same shape ``GameData.from_dict``
accepts (and the ``game_data`` key of a run config carries).
"""
from __future__ import annotations

import copy
from typing import Any

from harvest_farm.registry import GameData

DEFAULT_DEFINITIONS: dict[str, Any] = {
    "crops": [
        {"id": "carrot", "growth_minutes": 30, "energy_yield": 1, "xp": 1, "catch_weight": 3.0},
        {"id": "radish", "growth_minutes": 45, "energy_yield": 1, "xp": 1, "catch_weight": 3.0},
        {"id": "turnip", "growth_minutes": 60, "energy_yield": 2, "xp": 1, "catch_weight": 2.0},
        {"id": "potato", "growth_minutes": 90, "energy_yield": 2, "xp": 2, "catch_weight": 2.0},
        {"id": "beet", "growth_minutes": 120, "energy_yield": 3, "xp": 2, "catch_weight": 1.5},
        {
            "id": "cabbage", "growth_minutes": 150, "energy_yield": 3, "xp": 2,
            "catch_weight": 1.0, "prerequisites": ["farm_plots_10"],
        },
        {
            "id": "corn", "growth_minutes": 240, "stages": 4, "energy_yield": 5, "xp": 3,
            "catch_weight": 0.5, "prerequisites": ["small_hold"],
        },
        {
            "id": "tomato", "growth_minutes": 200, "stages": 4, "energy_yield": 4, "xp": 3,
            "catch_weight": 0.5, "prerequisites": ["small_hold"],
        },
        {
            "id": "strawberry", "growth_minutes": 360, "stages": 5, "energy_yield": 8,
            "energy_cost": 2, "xp": 5, "catch_weight": 0.2, "prerequisites": ["homestead"],
        },
    ],
    "cleanups": [
        {"id": "clear_weeds", "plots_added": 2, "energy_cost": 5},
        {"id": "clear_brush", "plots_added": 3, "energy_cost": 10, "prerequisites": ["clear_weeds"]},
        {"id": "clear_rocks", "plots_added": 5, "energy_cost": 15, "prerequisites": ["clear_brush"]},
        {
            "id": "clear_stumps", "plots_added": 5, "energy_cost": 20, "tool": "stump_axe",
            "prerequisites": ["clear_rocks"],
        },
        {
            "id": "drain_marsh", "plots_added": 8, "energy_cost": 30,
            "prerequisites": ["clear_stumps", "farm_plots_15"],
        },
        {
            "id": "clear_thicket", "plots_added": 6, "energy_cost": 30, "materials": {"wood": 5},
            "prerequisites": ["drain_marsh"],
        },
        {
            "id": "terrace_hill", "plots_added": 15, "energy_cost": 50, "materials": {"stone": 20},
            "prerequisites": ["small_hold"],
        },
        {
            "id": "fell_grove", "plots_added": 20, "energy_cost": 60, "tool": "pickaxe_2",
            "prerequisites": ["homestead"],
        },
        {
            "id": "reclaim_quarry", "plots_added": 25, "energy_cost": 80,
            "materials": {"iron": 15}, "prerequisites": ["manor_grounds"],
        },
    ],
    "vendor": [
        {"id": "carrot_pack", "category": "seeds", "gold_cost": 10, "seeds": {"carrot": 5}},
        {"id": "turnip_pack", "category": "seeds", "gold_cost": 15, "seeds": {"turnip": 5}},
        {"id": "potato_pack", "category": "seeds", "gold_cost": 20, "seeds": {"potato": 5}},
        {"id": "beet_pack", "category": "seeds", "gold_cost": 30, "seeds": {"beet": 5}},
        {
            "id": "corn_pack", "category": "seeds", "gold_cost": 60, "seeds": {"corn": 5},
            "prerequisites": ["small_hold"],
        },
        {
            "id": "strawberry_pack", "category": "seeds", "gold_cost": 120,
            "seeds": {"strawberry": 3}, "prerequisites": ["homestead"],
        },
        {"id": "watering_can", "category": "upgrade", "gold_cost": 60},
        {"id": "seed_net", "category": "upgrade", "gold_cost": 40},
        {"id": "well_pump_i", "category": "upgrade", "gold_cost": 80},
        {
            "id": "well_pump_ii", "category": "upgrade", "gold_cost": 250,
            "prerequisites": ["well_pump_i"],
        },
        {
            "id": "mulch_beds", "category": "upgrade", "gold_cost": 150,
            "prerequisites": ["farm_plots_10"],
        },
        {
            "id": "furnace_1", "category": "upgrade", "gold_cost": 200,
            "materials": {"stone": 10},
        },
        {
            "id": "master_craft", "category": "upgrade", "gold_cost": 500,
            "prerequisites": ["phase_mid"],
        },
        {
            "id": "master_academy", "category": "upgrade", "gold_cost": 400,
            "prerequisites": ["helpers_2"],
        },
        {"id": "helper_hut", "category": "housing", "gold_cost": 150, "amount": 1},
        {
            "id": "bunkhouse", "category": "housing", "gold_cost": 400, "amount": 2,
            "prerequisites": ["helper_hut", "small_hold"],
        },
        {"id": "water_barrel", "category": "storage", "gold_cost": 100, "amount": 100, "stock": "water"},
        {
            "id": "pantry", "category": "storage", "gold_cost": 200, "amount": 50, "stock": "energy",
            "prerequisites": ["farm_plots_10"],
        },
        {"id": "blueprint_pickaxe_1", "category": "blueprint", "gold_cost": 30},
        {"id": "blueprint_stump_axe", "category": "blueprint", "gold_cost": 50},
        {
            "id": "blueprint_pickaxe_2", "category": "blueprint", "gold_cost": 150,
            "prerequisites": ["tool_pickaxe_1"],
        },
        {
            "id": "blueprint_crossbow", "category": "blueprint", "gold_cost": 200,
            "prerequisites": ["hero_level_3"],
        },
        {
            "id": "blueprint_iron_plate", "category": "blueprint", "gold_cost": 250,
            "prerequisites": ["route_beetle_burrow"],
        },
    ],
    "recipes": [
        {
            "id": "pickaxe_1", "output": "tool", "duration": 20,
            "materials": {"stone": 5, "wood": 3}, "prerequisites": ["blueprint_pickaxe_1"],
        },
        {
            "id": "stump_axe", "output": "tool", "duration": 25,
            "materials": {"stone": 3, "wood": 5}, "prerequisites": ["blueprint_stump_axe"],
        },
        {
            "id": "pickaxe_2", "output": "tool", "duration": 45,
            "materials": {"iron": 5, "wood": 2}, "prerequisites": ["blueprint_pickaxe_2"],
        },
        {
            "id": "spear", "output": "weapon", "family": "spear", "duration": 20,
            "damage": 8, "attack_speed": 1.0, "materials": {"wood": 4, "stone": 2},
        },
        {
            "id": "sword", "output": "weapon", "family": "sword", "duration": 30,
            "damage": 10, "attack_speed": 1.0, "materials": {"iron": 3, "wood": 1},
        },
        {
            "id": "bow", "output": "weapon", "family": "bow", "duration": 25,
            "damage": 7, "attack_speed": 1.3, "materials": {"wood": 6},
        },
        {
            "id": "crossbow", "output": "weapon", "family": "crossbow", "duration": 40,
            "damage": 12, "attack_speed": 0.8, "materials": {"iron": 4, "wood": 4},
            "prerequisites": ["blueprint_crossbow"],
        },
        {
            "id": "wand", "output": "weapon", "family": "wand", "duration": 50,
            "damage": 9, "attack_speed": 1.2, "materials": {"silver": 2, "crystal": 1},
            "prerequisites": ["hero_level_4"],
        },
        {
            "id": "leather_vest", "output": "armor", "duration": 20, "defense": 10,
            "materials": {"wood": 2, "stone": 2},
        },
        {
            "id": "bark_armor", "output": "armor", "duration": 30, "defense": 15,
            "effect": "regeneration", "materials": {"wood": 8},
            "prerequisites": ["route_meadow_path"],
        },
        {
            "id": "slime_shield", "output": "armor", "duration": 30, "defense": 20,
            "effect": "evasion", "materials": {"stone": 6, "copper": 3},
        },
        {
            "id": "iron_plate", "output": "armor", "duration": 60, "defense": 30,
            "effect": "reflection", "materials": {"iron": 10},
            "prerequisites": ["blueprint_iron_plate"],
        },
        {
            "id": "smelt_iron", "output": "material", "duration": 15,
            "materials": {"stone": 4, "copper": 2}, "outputs": {"iron": 2},
        },
    ],
    "encounters": [
        {
            "id": "meadow_path", "waves": 3, "composition": {"slimes": 1.0},
            "boss": "giant_slime", "gold": 20, "xp": 20, "energy_cost": 10,
            "duration_minutes": 30, "loot": {"wood": 4, "stone": 2},
            "armor_drops": ["leather_vest"],
        },
        {
            "id": "beetle_burrow", "waves": 4,
            "composition": {"armored_insects": 0.7, "slimes": 0.3},
            "boss": "beetle_lord", "gold": 40, "xp": 35, "energy_cost": 15,
            "duration_minutes": 45, "loot": {"stone": 6, "copper": 3},
            "armor_drops": ["slime_shield"], "prerequisites": ["route_meadow_path"],
        },
        {
            "id": "wolf_woods", "waves": 5,
            "composition": {"predatory_beasts": 0.6, "living_plants": 0.4},
            "boss": "alpha_wolf", "gold": 70, "xp": 50, "energy_cost": 20,
            "duration_minutes": 60, "loot": {"wood": 10, "iron": 4},
            "armor_drops": ["bark_armor"],
            "prerequisites": ["route_beetle_burrow", "hero_level_3"],
        },
        {
            "id": "sky_cliffs", "waves": 5,
            "composition": {"flying_predators": 0.7, "venomous_crawlers": 0.3},
            "boss": "sky_serpent", "gold": 120, "xp": 80, "energy_cost": 25,
            "duration_minutes": 75, "loot": {"iron": 6, "silver": 2},
            "prerequisites": ["route_wolf_woods", "hero_level_5"],
        },
        {
            "id": "crystal_caves", "waves": 6,
            "composition": {"venomous_crawlers": 0.6, "armored_insects": 0.4},
            "boss": "crystal_spider", "gold": 180, "xp": 120, "energy_cost": 30,
            "duration_minutes": 90, "loot": {"silver": 4, "crystal": 2},
            "armor_drops": ["iron_plate"],
            "prerequisites": ["route_sky_cliffs", "hero_level_7"],
        },
    ],
    "helpers": [
        {"id": "pip", "gold_cost": 100},
        {"id": "bramble", "gold_cost": 150, "prerequisites": ["route_meadow_path"]},
        {"id": "fern", "gold_cost": 200, "prerequisites": ["small_hold"]},
        {"id": "cobble", "gold_cost": 300, "level": 2, "prerequisites": ["homestead"]},
    ],
}


def default_game_data() -> GameData:
    """A fresh registry of the built-in definitions."""
    return GameData.from_dict(copy.deepcopy(DEFAULT_DEFINITIONS))
