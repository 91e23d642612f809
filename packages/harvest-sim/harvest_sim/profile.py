"""Behavior profiles (personas) - when and how the simulated player acts."""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any

from harvest.types import ConfigError
from harvest_ai.traits import AgentTraits

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BehaviorProfile:
    """Read-only description of a simulated player.

    Attributes:
        id: Stable identifier.
        name: Display name.
        weekday_checkins: Check-ins per weekday.
        weekend_checkins: Check-ins per weekend day.
        session_minutes: Consecutive minutes the player stays per check-in.
        variance: 0-1 jitter of check-in times, as a fraction of a window.
        efficiency: Chance the player acts on a given present minute.
        risk_tolerance: 0-1, how much predicted combat risk is accepted.
        optimization: 0-1, how strongly value and progress are weighed.
        weights: Action kind -> decision-weight multiplier.
        active_hours: (start, end) hours of the day check-ins fall in.
        target_days: Days the player is willing to play.
        frustration_limit: Consecutive check-ins with nothing done before
            the player gives up; 0 disables.
    """

    id: str = "balanced"
    name: str = "Balanced Player"
    weekday_checkins: int = 3
    weekend_checkins: int = 5
    session_minutes: int = 20
    variance: float = 0.2
    efficiency: float = 0.75
    risk_tolerance: float = 0.5
    optimization: float = 0.7
    weights: dict[str, float] = field(default_factory=dict)
    active_hours: tuple[int, int] = (7, 23)
    target_days: int = 35
    frustration_limit: int = 0

    def __post_init__(self) -> None:
        if self.weekday_checkins < 0 or self.weekend_checkins < 0:
            raise ConfigError(f"{self.id}: check-in counts must be >= 0")
        if self.session_minutes < 1:
            raise ConfigError(f"{self.id}: session_minutes must be >= 1")
        for name in ("variance", "efficiency", "risk_tolerance", "optimization"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{self.id}: {name} must be within 0-1, got {value!r}")
        start, end = self.active_hours
        if not 0 <= start < end <= 24:
            raise ConfigError(f"{self.id}: invalid active_hours {self.active_hours!r}")

    def checkins(self, weekend: bool) -> int:
        return self.weekend_checkins if weekend else self.weekday_checkins

    def traits(self) -> AgentTraits:
        return AgentTraits(
            multipliers=dict(self.weights),
            risk_tolerance=self.risk_tolerance,
            optimization=self.optimization,
        )

    def to_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        data["active_hours"] = list(self.active_hours)
        return data

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> BehaviorProfile:
        """Build a profile, defaulting every missing field.

        A ``preset`` key starts from that preset instead of the defaults.
        """
        raw = dict(raw or {})
        base = cls()
        if "preset" in raw:
            name = raw.pop("preset")
            if not isinstance(name, str) or name not in PRESETS:
                raise ConfigError(f"unknown preset {name!r}")
            base = PRESETS[name]
        known = {f.name for f in dataclasses.fields(cls)}
        changes: dict[str, Any] = {}
        for name, value in raw.items():
            if name not in known:
                logger.warning("Unknown profile field %r ignored", name)
                continue
            if name == "active_hours":
                value = tuple(value)
            elif name == "weights":
                if not isinstance(value, dict):
                    raise ConfigError("profile weights must be a mapping")
                value = {**base.weights, **value}
            changes[name] = value
        try:
            return dataclasses.replace(base, **changes)
        except TypeError as exc:
            raise ConfigError(f"invalid profile: {exc}") from exc


PRESETS: dict[str, BehaviorProfile] = {
    "speedrunner": BehaviorProfile(
        id="speedrunner", name="Speedrunner Sam",
        weekday_checkins=10, weekend_checkins=10, session_minutes=30,
        variance=0.1, efficiency=0.95, risk_tolerance=0.8, optimization=1.0,
        target_days=20,
    ),
    "casual": BehaviorProfile(
        id="casual", name="Casual Casey",
        weekday_checkins=2, weekend_checkins=2, session_minutes=15,
        variance=0.4, efficiency=0.7, risk_tolerance=0.3, optimization=0.6,
        target_days=35,
    ),
    "weekend-warrior": BehaviorProfile(
        id="weekend-warrior", name="Weekend Warrior Wade",
        weekday_checkins=1, weekend_checkins=8, session_minutes=45,
        variance=0.3, efficiency=0.8, risk_tolerance=0.4, optimization=0.8,
        target_days=35,
    ),
    "balanced": BehaviorProfile(),
    "completionist": BehaviorProfile(
        id="completionist", name="Completionist",
        weekday_checkins=5, weekend_checkins=8, session_minutes=25,
        efficiency=0.85, risk_tolerance=0.2, optimization=0.9,
        weights={"cleanup": 1.2, "purchase": 1.2},
        target_days=45,
    ),
    "risk-taker": BehaviorProfile(
        id="risk-taker", name="Risk Taker",
        weekday_checkins=4, weekend_checkins=6,
        efficiency=0.65, risk_tolerance=0.9, optimization=0.5,
        weights={"start_encounter": 1.5, "start_extraction": 1.3},
    ),
}
