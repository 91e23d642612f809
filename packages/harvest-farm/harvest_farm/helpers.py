"""Automation process: housed helpers doing role labor every tick.

Labor roles (waterer, pump_operator, sower, harvester, forager) have
per-hour rates; the fractional remainder is carried per helper and role so
slow helpers still make progress. Passive roles (miners_friend, fighter,
seed_catcher) are read by the systems they affect through ``role_total``.
"""
from __future__ import annotations

import logging
import math
import random
from typing import TYPE_CHECKING, Callable

from harvest_farm.defs import CropDef
from harvest_farm.diagnostics import WarnOnce
from harvest_farm.effects import harvest_plot, plant_plot, thirsty_plots, water_plots
from harvest_farm.params import CraftingParams, FarmParams, HelperParams
from harvest_farm.prerequisites import all_satisfied
from harvest_farm.registry import GameData
from harvest_farm.state import GameState, Helper

if TYPE_CHECKING:
    from harvest import TickContext

logger = logging.getLogger(__name__)

ROLES = (
    "waterer",
    "pump_operator",
    "sower",
    "harvester",
    "miners_friend",
    "fighter",
    "seed_catcher",
    "forager",
    "refiner",
)


def efficiency(helper: Helper, params: HelperParams) -> float:
    """Per-role efficiency: 1.0, or reduced for a two-role helper."""
    return params.secondary_efficiency if helper.secondary is not None else 1.0


def role_total(state: GameState, role: str, params: HelperParams) -> float:
    """Summed effective strength of every working helper covering ``role``."""
    total = 0.0
    for helper in state.helpers:
        if helper.working and role in helper.roles():
            total += params.strength(role, helper.level) * efficiency(helper, params)
    return total


def can_take_secondary(state: GameState, params: HelperParams) -> bool:
    return params.secondary_unlock in state.progression.unlocked


def _units(helper: Helper, role: str, per_hour: float, delta: int) -> int:
    """Whole units of labor this tick, carrying the fraction over."""
    carry = helper.carry.get(role, 0.0) + per_hour * delta / 60.0
    whole = math.floor(carry)
    helper.carry[role] = carry - whole
    return whole


def _best_seed(state: GameState, data: GameData) -> CropDef | None:
    best: CropDef | None = None
    for crop in data.crops:
        if state.resources.seeds.get(crop.id, 0) <= 0:
            continue
        if not all_satisfied(crop.prerequisites, state):
            continue
        if best is None or crop.energy_yield > best.energy_yield:
            best = crop
    return best


def _water(state: GameState, units: int, farm: FarmParams) -> int:
    return len(water_plots(state, thirsty_plots(state, farm)[:units], farm))


def _pump(state: GameState, units: int) -> int:
    return int(state.resources.water.add(units))


def _sow(state: GameState, units: int, data: GameData) -> int:
    planted = 0
    for index, plot in enumerate(state.processes.plots):
        if planted >= units:
            break
        if not plot.empty:
            continue
        crop = _best_seed(state, data)
        if crop is None:
            break
        state.resources.seeds[crop.id] -= 1
        plant_plot(state, index, crop)
        planted += 1
    return planted


def _harvest(
    state: GameState,
    units: int,
    data: GameData,
    farm: FarmParams,
    emit: Callable[..., None],
) -> int:
    done = 0
    for index, plot in enumerate(state.processes.plots):
        if done >= units:
            break
        if plot.ready and plot.crop is not None:
            harvest_plot(state, index, data.find(plot.crop, CropDef), farm, emit)
            done += 1
    return done


def _forage(state: GameState, units: int, params: HelperParams) -> int:
    if params.forager_requires and params.forager_requires not in state.progression.cleanups:
        return 0
    state.resources.add_materials({"wood": units})
    return units


def _refine(
    state: GameState,
    strength: float,
    delta: int,
    params: HelperParams,
    crafting: CraftingParams,
) -> None:
    procs = state.processes
    if procs.crafting:
        procs.crafting[0].progress += strength * delta
    if procs.heat < crafting.optimal_mid:
        procs.heat = min(crafting.optimal_mid, procs.heat + params.refiner_heat * delta)


def _catch(state: GameState, chance: float, rng: random.Random) -> str | None:
    if rng.random() >= chance:
        return None
    owned = sorted(state.resources.seeds)
    if not owned:
        return None
    seed = rng.choice(owned)
    state.resources.seeds[seed] += 1
    return seed


def advance_helpers(
    state: GameState,
    delta: int,
    data: GameData,
    params: HelperParams,
    farm: FarmParams,
    crafting: CraftingParams,
    rng: random.Random,
    emit: Callable[..., None],
    warn: WarnOnce | None = None,
) -> None:
    """Run every working helper's roles for ``delta`` minutes, in helper order."""
    warn = warn or WarnOnce(logger)
    for helper in state.helpers:
        if not helper.working:
            continue
        eff = efficiency(helper, params)
        for role in helper.roles():
            if role not in params.roles:
                warn(f"role:{role}", "Helper %s has unknown role %r; skipped", helper.id, role)
                continue
            strength = params.strength(role, helper.level) * eff
            if role == "waterer":
                done = _water(state, _units(helper, role, strength, delta), farm)
            elif role == "pump_operator":
                done = _pump(state, _units(helper, role, strength, delta))
            elif role == "sower":
                done = _sow(state, _units(helper, role, strength, delta), data)
            elif role == "harvester":
                done = _harvest(state, _units(helper, role, strength, delta), data, farm, emit)
            elif role == "forager":
                done = _forage(state, _units(helper, role, strength, delta), params)
            elif role == "refiner":
                _refine(state, strength, delta, params, crafting)
                continue
            elif role == "seed_catcher":
                seed = _catch(state, strength * delta / 60.0, rng)
                if seed is not None:
                    emit("helper_work", helper=helper.id, role=role, amount=1, seed=seed)
                continue
            else:
                # miners_friend and fighter act through role_total.
                continue
            if done:
                emit("helper_work", helper=helper.id, role=role, amount=done)


def make_helper_system(
    data: GameData,
    params: HelperParams,
    farm: FarmParams,
    crafting: CraftingParams,
) -> Callable[[GameState, TickContext], None]:
    """Return a system that runs helper automation each tick."""
    warn = WarnOnce(logger)

    def helper_system(state: GameState, ctx: TickContext) -> None:
        advance_helpers(state, ctx.dt, data, params, farm, crafting, ctx.random, ctx.emit, warn)

    return helper_system
