"""harvest-farm - World model, definitions, prerequisites, and process systems."""

from harvest_farm.adventure import advance_adventure, apply_encounter_result, make_adventure_system
from harvest_farm.crafting import advance_crafting, make_crafting_system, success_chance
from harvest_farm.defs import CleanupDef, CropDef, Definition, HelperDef, RecipeDef, VendorItem
from harvest_farm.diagnostics import WarnOnce
from harvest_farm.growth import advance_growth, make_growth_system
from harvest_farm.helpers import ROLES, advance_helpers, make_helper_system, role_total
from harvest_farm.mining import (
    advance_extraction,
    depth_tier,
    energy_drain,
    make_extraction_system,
)
from harvest_farm.params import (
    CraftingParams,
    FarmParams,
    GrowthParams,
    HelperParams,
    MiningParams,
    MonitorParams,
    Parameters,
    ScoringParams,
)
from harvest_farm.prerequisites import all_satisfied, is_recognized, is_satisfied, unmet
from harvest_farm.registry import GameData
from harvest_farm.state import CONTEXTS, GameState, Helper, Plot, Stock

__all__ = [
    "CONTEXTS",
    "CleanupDef",
    "CraftingParams",
    "CropDef",
    "Definition",
    "FarmParams",
    "GameData",
    "GameState",
    "GrowthParams",
    "Helper",
    "HelperDef",
    "HelperParams",
    "MiningParams",
    "MonitorParams",
    "Parameters",
    "Plot",
    "ROLES",
    "RecipeDef",
    "ScoringParams",
    "Stock",
    "VendorItem",
    "WarnOnce",
    "advance_adventure",
    "advance_crafting",
    "advance_extraction",
    "advance_growth",
    "advance_helpers",
    "all_satisfied",
    "apply_encounter_result",
    "depth_tier",
    "energy_drain",
    "is_recognized",
    "is_satisfied",
    "make_adventure_system",
    "make_crafting_system",
    "make_extraction_system",
    "make_growth_system",
    "make_helper_system",
    "role_total",
    "success_chance",
    "unmet",
]
