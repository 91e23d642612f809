"""Combat data types: enemies, bosses, quirks, loadout, and results."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from harvest.types import DefinitionError

WEAPON_FAMILIES = ("spear", "sword", "bow", "crossbow", "wand")


@dataclass(frozen=True)
class EnemyType:
    """Statistical profile of one enemy type."""

    name: str
    hp: float
    damage: float
    attack_speed: float


@dataclass(frozen=True)
class Quirk:
    """Boss-specific modifier applied during boss resolution.

    kind is ``"damage_penalty"`` (``value`` is a fraction of max HP dealt as
    extra damage) or ``"duration_multiplier"`` (fight lasts ``value`` times
    longer). ``counter`` names a weapon family or armor effect that cancels
    the quirk when owned; None means the quirk always applies.
    """

    name: str
    kind: str
    value: float
    counter: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in ("damage_penalty", "duration_multiplier"):
            raise DefinitionError(f"unknown quirk kind {self.kind!r}")
        if self.value < 0:
            raise DefinitionError("quirk value must be >= 0")


@dataclass(frozen=True)
class Boss:
    name: str
    hp: float
    damage: float
    attack_speed: float
    weakness: str | None = None
    quirk: Quirk | None = None
    gold: int = 50
    xp: int = 20


@dataclass(frozen=True)
class EncounterDef:
    """An adventure route: waves of enemies and an optional boss."""

    id: str
    waves: int
    composition: dict[str, float]
    wave_size: tuple[int, int] = (1, 3)
    wave_growth: int = 3
    boss: Boss | None = None
    gold: int = 0
    xp: int = 0
    loot: dict[str, int] = field(default_factory=dict)
    armor_drops: tuple[str, ...] = ()
    energy_cost: int = 0
    duration_minutes: int = 30
    prerequisites: tuple[str, ...] = ()
    name: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise DefinitionError("encounter id must be non-empty")
        if self.waves < 0:
            raise DefinitionError(f"{self.id}: waves must be >= 0")
        if self.waves > 0 and not self.composition:
            raise DefinitionError(f"{self.id}: composition must be non-empty")
        low, high = self.wave_size
        if low < 1 or high < low:
            raise DefinitionError(f"{self.id}: invalid wave_size {self.wave_size!r}")
        if self.duration_minutes < 1:
            raise DefinitionError(f"{self.id}: duration_minutes must be >= 1")


@dataclass(frozen=True)
class Weapon:
    family: str
    damage: float
    attack_speed: float = 1.0
    level: int = 1


@dataclass(frozen=True)
class Armor:
    id: str
    defense: float
    effect: str | None = None


@dataclass
class EncounterResult:
    """Outcome of one statistical encounter resolution.

    Rewards are zero unless ``success`` is True.
    """

    encounter: str
    success: bool
    hp_remaining: float
    max_hp: float
    waves_cleared: int = 0
    boss_defeated: bool = False
    gold: int = 0
    xp: int = 0
    loot: dict[str, int] = field(default_factory=dict)
    armor_drop: str | None = None
    failure_reason: str | None = None
    log: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "encounter": self.encounter,
            "success": self.success,
            "hp_remaining": self.hp_remaining,
            "max_hp": self.max_hp,
            "waves_cleared": self.waves_cleared,
            "boss_defeated": self.boss_defeated,
            "gold": self.gold,
            "xp": self.xp,
            "loot": dict(self.loot),
            "armor_drop": self.armor_drop,
            "failure_reason": self.failure_reason,
            "log": list(self.log),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EncounterResult:
        return cls(
            encounter=data["encounter"],
            success=data["success"],
            hp_remaining=data["hp_remaining"],
            max_hp=data["max_hp"],
            waves_cleared=data.get("waves_cleared", 0),
            boss_defeated=data.get("boss_defeated", False),
            gold=data.get("gold", 0),
            xp=data.get("xp", 0),
            loot=dict(data.get("loot", {})),
            armor_drop=data.get("armor_drop"),
            failure_reason=data.get("failure_reason"),
            log=list(data.get("log", [])),
        )
