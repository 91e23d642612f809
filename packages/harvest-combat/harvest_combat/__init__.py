"""harvest-combat - Statistical wave and boss combat resolution."""

from harvest_combat.resolver import (
    advantage_multiplier,
    armor_reduction,
    estimate_encounter,
    pick_weapon,
    resolve_encounter,
    time_to_kill,
)
from harvest_combat.tables import DEFAULT_BOSSES, CombatTables
from harvest_combat.types import (
    WEAPON_FAMILIES,
    Armor,
    Boss,
    EncounterDef,
    EncounterResult,
    EnemyType,
    Quirk,
    Weapon,
)

__all__ = [
    "Armor",
    "Boss",
    "CombatTables",
    "DEFAULT_BOSSES",
    "EncounterDef",
    "EncounterResult",
    "EnemyType",
    "Quirk",
    "WEAPON_FAMILIES",
    "Weapon",
    "advantage_multiplier",
    "armor_reduction",
    "estimate_encounter",
    "pick_weapon",
    "resolve_encounter",
    "time_to_kill",
]
