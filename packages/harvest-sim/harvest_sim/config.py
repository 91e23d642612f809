"""Run configuration - everything a simulation is built from.

``SimulationConfig.from_dict`` is the single entry point: the Execution Host
receives the plain-dict form in its ``start`` message and builds the config
inside the worker.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any

from harvest.clock import MINUTES_PER_DAY
from harvest.types import ConfigError
from harvest_farm.params import Parameters
from harvest_farm.registry import GameData
from harvest_farm.state import (
    CONTEXTS,
    GameState,
    Location,
    Processes,
    Progression,
    Resources,
    Stock,
)

from harvest_sim.defaults import default_game_data
from harvest_sim.profile import BehaviorProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InitialState:
    """Starting resources, plots, and context.

    Attributes:
        energy: (current, max) energy.
        water: (current, max) tank water.
        gold: Starting gold.
        seeds: Seed id -> count.
        materials: Material id -> count.
        farm_plots: Starting plot count.
        context: Starting screen.
        level: Starting hero level.
    """

    energy: tuple[float, float] = (100.0, 100.0)
    water: tuple[float, float] = (100.0, 200.0)
    gold: int = 100
    seeds: dict[str, int] = field(default_factory=lambda: {
        "turnip": 12, "beet": 8, "carrot": 5, "potato": 15,
    })
    materials: dict[str, int] = field(default_factory=lambda: {
        "wood": 25, "stone": 18, "iron": 7, "silver": 2,
    })
    farm_plots: int = 3
    context: str = "farm"
    level: int = 1

    def __post_init__(self) -> None:
        if self.context not in CONTEXTS:
            raise ConfigError(f"unknown starting context {self.context!r}")
        if self.farm_plots < 0 or self.gold < 0:
            raise ConfigError("farm_plots and gold must be >= 0")
        for name in ("energy", "water"):
            current, maximum = getattr(self, name)
            if not 0 <= current <= maximum:
                raise ConfigError(f"initial {name} must satisfy 0 <= current <= max")

    def build(self, heat: float) -> GameState:
        """A fresh GameState at day 1, 00:00."""
        return GameState(
            resources=Resources(
                energy=Stock(*self.energy),
                water=Stock(*self.water),
                gold=self.gold,
                seeds=dict(self.seeds),
                materials=dict(self.materials),
            ),
            progression=Progression(level=self.level, farm_plots=self.farm_plots),
            processes=Processes(heat=heat),
            location=Location(context=self.context),
        )

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> InitialState:
        raw = dict(raw or {})
        known = {f.name for f in dataclasses.fields(cls)}
        changes: dict[str, Any] = {}
        for name, value in raw.items():
            if name not in known:
                logger.warning("Unknown initial state field %r ignored", name)
                continue
            if name in ("energy", "water"):
                if not isinstance(value, (list, tuple)) or len(value) != 2:
                    raise ConfigError(f"initial {name} must be [current, max]")
                value = (float(value[0]), float(value[1]))
            changes[name] = value
        try:
            return cls(**changes)
        except TypeError as exc:
            raise ConfigError(f"invalid initial state: {exc}") from exc


@dataclass(frozen=True)
class SimulationConfig:
    """One run's inputs.

    Attributes:
        data: Item/rule definitions.
        profile: The simulated player.
        params: Tunables, defaults merged in.
        initial: Starting state.
        max_days: Run budget in simulated days; 0 uses the profile's target days.
        seed: Default seed when the caller supplies none.
        alternatives: Scored alternatives attached to each executed action.
        include_state: Whether tick results carry the full state snapshot.
    """

    data: GameData = field(default_factory=default_game_data)
    profile: BehaviorProfile = field(default_factory=BehaviorProfile)
    params: Parameters = field(default_factory=Parameters)
    initial: InitialState = field(default_factory=InitialState)
    max_days: int = 0
    seed: int | None = None
    alternatives: int = 3
    include_state: bool = True

    @property
    def days(self) -> int:
        return self.max_days or self.profile.target_days

    @property
    def max_ticks(self) -> int:
        return self.days * MINUTES_PER_DAY

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> SimulationConfig:
        """Build a config from plain data.

        Keys: ``game_data`` (definition sections; the built-in set when
        absent), ``profile``, ``parameters``, ``initial``, ``max_days``,
        ``seed``, ``alternatives``, ``include_state``.
        """
        raw = dict(raw or {})
        for key in raw:
            if key not in _CONFIG_KEYS:
                logger.warning("Unknown config key %r ignored", key)
        game_data = raw.get("game_data")
        if game_data is not None and not isinstance(game_data, dict):
            raise ConfigError("game_data must be a mapping of definition sections")
        max_days = raw.get("max_days", 0)
        if isinstance(max_days, bool) or not isinstance(max_days, int) or max_days < 0:
            raise ConfigError(f"max_days must be a non-negative int, got {max_days!r}")
        seed = raw.get("seed")
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            raise ConfigError(f"seed must be an int, got {seed!r}")
        return cls(
            data=GameData.from_dict(game_data) if game_data is not None else default_game_data(),
            profile=BehaviorProfile.from_dict(raw.get("profile")),
            params=Parameters.from_dict(raw.get("parameters")),
            initial=InitialState.from_dict(raw.get("initial")),
            max_days=max_days,
            seed=seed,
            alternatives=int(raw.get("alternatives", 3)),
            include_state=bool(raw.get("include_state", True)),
        )


_CONFIG_KEYS = frozenset({
    "game_data", "profile", "parameters", "initial", "max_days", "seed",
    "alternatives", "include_state",
})
