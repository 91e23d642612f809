"""Parameter Set - one defaults table for every tunable the engine reads.

Each subsystem owns a frozen dataclass with documented defaults. A partial
mapping is merged over the defaults exactly once by ``Parameters.from_dict``;
nothing downstream ever needs a fallback value.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any

from harvest.types import ConfigError
from harvest_combat.tables import CombatTables

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GrowthParams:
    """Crop growth and plot watering.

    Attributes:
        water_decay_per_minute: Plot water lost per minute (plot water is 0-1).
        dry_threshold: Below this plot water level growth runs at ``dry_growth_rate``.
        dry_growth_rate: Growth rate multiplier for thirsty plots.
        drought_minutes: A plot dry for longer than this dies.
        retention: Upgrade id -> divisor applied to water decay (best one wins).
    """

    water_decay_per_minute: float = 1.0 / 30.0
    dry_threshold: float = 0.3
    dry_growth_rate: float = 0.5
    drought_minutes: int = 120
    retention: dict[str, float] = field(default_factory=lambda: {
        "mulch_beds": 1.25,
        "irrigation_channels": 1.5,
        "crystal_irrigation": 1.75,
    })


@dataclass(frozen=True)
class FarmParams:
    """Farm actions: watering, pumping, seed catching, leveling.

    Attributes:
        water_per_plot: Tank water spent to refill one plot.
        refill_below: Plots under this water level are watering targets.
        watering_capacity: Plots watered per action without a watering tool.
        watering_tools: Tool id -> plots watered per action.
        pump_rate: Tank water gained per pump action without upgrades.
        pump_upgrades: Upgrade id -> pump rate (best owned wins).
        catch_energy: Energy cost of one seed-catching attempt.
        catch_quantity: Inclusive range of seeds caught per attempt.
        net_upgrades: Upgrade id -> extra seeds per catch (best owned wins).
        xp_per_level: XP needed per level is ``xp_per_level * level``.
        harvest_xp: XP per harvested plot when the crop defines none.
    """

    water_per_plot: float = 2.0
    refill_below: float = 0.5
    watering_capacity: int = 5
    watering_tools: dict[str, int] = field(default_factory=lambda: {
        "watering_can": 8,
        "sprinkler_can": 15,
    })
    pump_rate: float = 2.0
    pump_upgrades: dict[str, float] = field(default_factory=lambda: {
        "well_pump_i": 4.0,
        "well_pump_ii": 8.0,
        "well_pump_iii": 15.0,
        "steam_pump": 30.0,
        "crystal_pump": 60.0,
    })
    catch_energy: int = 2
    catch_quantity: tuple[int, int] = (1, 3)
    net_upgrades: dict[str, int] = field(default_factory=lambda: {
        "seed_net": 1,
        "wide_net": 2,
    })
    xp_per_level: int = 100
    harvest_xp: int = 1


@dataclass(frozen=True)
class CraftingParams:
    """Forge heat model and crafting speed.

    Attributes:
        start_heat: Forge heat at run start.
        optimal_low: Lower bound of the full-success heat band.
        optimal_high: Upper bound of the full-success heat band.
        falloff: Distance from the band at which success reaches zero.
        heat_decay_per_minute: Heat lost per minute.
        max_heat: Heat cap.
        stoke_heat: Heat added by one stoke.
        stoke_wood: Wood spent by one stoke.
        furnace_speed: Upgrade id -> crafting speed multiplier (best wins).
        double_unlock: Unlock id that enables the double-output roll.
        double_chance: Probability of a double output.
        max_queue: Maximum queued crafting jobs.
    """

    start_heat: float = 3000.0
    optimal_low: float = 2500.0
    optimal_high: float = 3500.0
    falloff: float = 2000.0
    heat_decay_per_minute: float = 50.0
    max_heat: float = 5000.0
    stoke_heat: float = 500.0
    stoke_wood: int = 2
    furnace_speed: dict[str, float] = field(default_factory=lambda: {
        "furnace_1": 1.2,
        "furnace_2": 1.4,
        "crystal_furnace": 1.6,
    })
    double_unlock: str = "master_craft"
    double_chance: float = 0.1
    max_queue: int = 3

    @property
    def optimal_mid(self) -> float:
        return (self.optimal_low + self.optimal_high) / 2.0


def _default_tier_tables() -> tuple[dict[str, float], ...]:
    return (
        {"stone": 1.0},
        {"copper": 0.6, "stone": 0.4},
        {"iron": 0.6, "copper": 0.4},
        {"iron": 1.0},
        {"silver": 0.6, "iron": 0.4},
        {"silver": 1.0},
        {"crystal": 0.6, "silver": 0.4},
        {"crystal": 1.0},
        {"mythril": 0.6, "crystal": 0.4},
        {"obsidian": 0.6, "mythril": 0.4},
    )


@dataclass(frozen=True)
class MiningParams:
    """Extraction sessions.

    Attributes:
        tier_size: Depth per tier; tier = floor(depth / tier_size) + 1.
        depth_per_minute: Depth gained per minute.
        drop_interval: Minutes between material drop rolls.
        min_energy: Energy needed to start a session.
        pickaxes: Tool id -> drain reduction fraction (best owned wins).
        tier_tables: Per-tier material weights; deeper tiers reuse the last.
        drop_quantity: Inclusive base range per drop, plus ``tier // 2``.
        max_reduction: Cap on the combined drain reduction.
    """

    tier_size: float = 500.0
    depth_per_minute: float = 10.0
    drop_interval: float = 0.5
    min_energy: float = 10.0
    pickaxes: dict[str, float] = field(default_factory=lambda: {
        "pickaxe_1": 0.0,
        "pickaxe_2": 0.15,
        "pickaxe_3": 0.30,
        "crystal_pick": 0.45,
        "abyss_seeker": 0.60,
    })
    tier_tables: tuple[dict[str, float], ...] = field(default_factory=_default_tier_tables)
    drop_quantity: tuple[int, int] = (1, 3)
    max_reduction: float = 0.9


def _default_roles() -> dict[str, tuple[float, float]]:
    # role -> (base, per level)
    return {
        "waterer": (5.0, 1.0),
        "pump_operator": (20.0, 5.0),
        "sower": (3.0, 1.0),
        "harvester": (4.0, 1.0),
        "miners_friend": (0.15, 0.03),
        "fighter": (5.0, 2.0),
        "seed_catcher": (0.10, 0.02),
        "forager": (5.0, 2.0),
        "refiner": (0.05, 0.01),
    }


@dataclass(frozen=True)
class HelperParams:
    """Automated helpers.

    Attributes:
        roles: Role -> (base, per-level bonus). Labor roles are per hour.
        secondary_unlock: Unlock id gating a second role.
        secondary_efficiency: Efficiency of each role on a two-role helper.
        max_level: Training cap.
        train_gold_per_level: Training cost is this times the current level.
        forager_requires: Cleanup id the forager needs, if any.
        refiner_heat: Forge heat per minute a refiner adds while the
            forge is below the optimal band midpoint.
        rescue_gold: Gold cost of rescuing a helper with no definition cost.
    """

    roles: dict[str, tuple[float, float]] = field(default_factory=_default_roles)
    secondary_unlock: str = "master_academy"
    secondary_efficiency: float = 0.75
    max_level: int = 10
    train_gold_per_level: int = 50
    forager_requires: str | None = "clear_stumps"
    refiner_heat: float = 25.0
    rescue_gold: int = 100

    def strength(self, role: str, level: int) -> float:
        """``base + level * per_level`` for ``role``; 0 for an unknown role."""
        base, per_level = self.roles.get(role, (0.0, 0.0))
        return base + level * per_level


def _default_weights() -> dict[str, float]:
    return {
        "priority": 1.0,
        "value": 1.0,
        "progress": 1.0,
        "risk": 1.0,
        "cost": -0.2,
        "time": -0.1,
        "opportunity": 0.5,
        "thrash": -50.0,
    }


def _default_priorities() -> dict[str, float]:
    return {
        "stop_extraction": 120.0,
        "harvest": 100.0,
        "cleanup": 70.0,
        "water": 60.0,
        "assign_helper": 55.0,
        "pump": 50.0,
        "purchase": 50.0,
        "rescue_helper": 45.0,
        "plant": 40.0,
        "craft": 40.0,
        "stoke": 35.0,
        "start_extraction": 35.0,
        "start_encounter": 30.0,
        "catch_seeds": 30.0,
        "train_helper": 25.0,
        "change_context": 0.0,
    }


@dataclass(frozen=True)
class ScoringParams:
    """Decision Engine weights and thresholds.

    Attributes:
        weights: Feature name -> weight in ``score = sum(weight * feature)``.
        priorities: Action kind -> base ``priority`` feature.
        urgency_multiplier: Applied to replenishing actions for a low stock.
        energy_low: Energy fraction under which energy is urgent.
        water_low: Tank water fraction under which water is urgent.
        seeds_low: Total seeds under which seeds are urgent.
        gold_low: Gold under which gold is urgent.
        materials_low: Total materials under which materials are urgent.
        plant_energy_reserve: Planting is skipped below this energy.
        context_cooldown: Minutes after a context change that count as thrashing.
        value_gold: Future value per gold.
        value_energy: Future value per energy.
        value_xp: Future value per XP.
        value_plot: Future value per farm plot.
        value_seed: Future value per seed.
        value_material: Future value per material unit.
        value_water: Future value per tank water unit.
        value_unlock: Future value of a new tool, upgrade, or blueprint.
        value_helper: Future value of one more helper or helper level.
        mine_stop_below: Energy fraction at which the hero leaves the mine.
    """

    weights: dict[str, float] = field(default_factory=_default_weights)
    priorities: dict[str, float] = field(default_factory=_default_priorities)
    urgency_multiplier: float = 2.0
    energy_low: float = 0.2
    water_low: float = 0.3
    seeds_low: int = 5
    gold_low: int = 50
    materials_low: int = 10
    plant_energy_reserve: float = 0.0
    context_cooldown: int = 10
    value_gold: float = 0.1
    value_energy: float = 0.5
    value_xp: float = 0.2
    value_plot: float = 15.0
    value_seed: float = 0.5
    value_material: float = 0.5
    value_water: float = 0.2
    value_unlock: float = 10.0
    value_helper: float = 12.0
    mine_stop_below: float = 0.15


def _default_phases() -> tuple[tuple[str, int, int], ...]:
    # (name, min plots, min level)
    return (
        ("tutorial", 0, 0),
        ("early", 20, 3),
        ("mid", 40, 6),
        ("late", 65, 9),
        ("end", 90, 12),
    )


@dataclass(frozen=True)
class MonitorParams:
    """Phase thresholds, victory, and stagnation detection.

    Attributes:
        phases: Ordered (name, min plots, min level); either threshold reaches a phase.
        victory_plots: Victory when plots reach this.
        victory_level: Victory when hero level reaches this.
        stuck_days: Days without progress before the run is flagged stuck.
        stop_on_stuck: Whether a stuck flag terminates the run.
        minimums: Resource -> minimum viable amount used to name a stuck cause.
        helpers_needed_plots: Plot count at which owning no helpers is a cause.
    """

    phases: tuple[tuple[str, int, int], ...] = field(default_factory=_default_phases)
    victory_plots: int = 90
    victory_level: int = 15
    stuck_days: float = 3.0
    stop_on_stuck: bool = True
    minimums: dict[str, float] = field(default_factory=lambda: {
        "energy": 10.0,
        "gold": 50.0,
        "seeds": 5.0,
        "water": 20.0,
    })
    helpers_needed_plots: int = 40


@dataclass(frozen=True)
class Parameters:
    growth: GrowthParams = field(default_factory=GrowthParams)
    farm: FarmParams = field(default_factory=FarmParams)
    crafting: CraftingParams = field(default_factory=CraftingParams)
    mining: MiningParams = field(default_factory=MiningParams)
    helpers: HelperParams = field(default_factory=HelperParams)
    combat: CombatTables = field(default_factory=CombatTables)
    scoring: ScoringParams = field(default_factory=ScoringParams)
    monitor: MonitorParams = field(default_factory=MonitorParams)

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> Parameters:
        """Merge ``raw`` (section -> field -> value) over the defaults.

        Mapping-valued fields are merged key by key; unknown sections and
        fields are logged and ignored; a value of the wrong type raises
        ``ConfigError``.
        """
        params = cls()
        if not raw:
            return params
        updates: dict[str, Any] = {}
        for section_name, values in raw.items():
            if section_name not in _SECTION_NAMES:
                logger.warning("Unknown parameter section %r ignored", section_name)
                continue
            if not isinstance(values, dict):
                raise ConfigError(f"parameter section {section_name!r} must be a mapping")
            updates[section_name] = merge_dataclass(
                getattr(params, section_name), values, section_name,
            )
        return dataclasses.replace(params, **updates)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


_SECTION_NAMES = tuple(f.name for f in dataclasses.fields(Parameters))


def merge_dataclass(base: Any, values: dict[str, Any], label: str) -> Any:
    """Return a copy of frozen dataclass ``base`` with ``values`` merged in."""
    known = {f.name for f in dataclasses.fields(base)}
    changes: dict[str, Any] = {}
    for name, value in values.items():
        if name not in known:
            logger.warning("Unknown parameter %s.%s ignored", label, name)
            continue
        changes[name] = _coerce(getattr(base, name), value, f"{label}.{name}")
    return dataclasses.replace(base, **changes)


def _coerce(default: Any, value: Any, label: str) -> Any:
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ConfigError(f"{label} must be a bool, got {value!r}")
        return value
    if isinstance(default, (int, float)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{label} must be a number, got {value!r}")
        return type(default)(value) if isinstance(default, float) else value
    if isinstance(default, dict):
        if not isinstance(value, dict):
            raise ConfigError(f"{label} must be a mapping, got {value!r}")
        merged = dict(default)
        sample = next(iter(default.values()), None)
        for key, item in value.items():
            if isinstance(item, dict) and dataclasses.is_dataclass(sample):
                base = merged.get(key)
                try:
                    if base is not None:
                        item = dataclasses.replace(base, **item)
                    else:
                        item = type(sample)(**item)
                except TypeError as exc:
                    raise ConfigError(f"{label}.{key}: {exc}") from exc
            elif isinstance(item, list):
                item = tuple(item)
            merged[key] = item
        return merged
    if isinstance(default, tuple):
        if not isinstance(value, (list, tuple)):
            raise ConfigError(f"{label} must be a sequence, got {value!r}")
        return tuple(tuple(v) if isinstance(v, list) else v for v in value)
    return value
