"""Crafting process: FIFO forge queue driven by a decaying heat scalar."""
from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Callable

from harvest_farm.defs import RecipeDef
from harvest_farm.diagnostics import WarnOnce
from harvest_farm.effects import grant_recipe_output
from harvest_farm.params import CraftingParams
from harvest_farm.registry import GameData
from harvest_farm.state import GameState

if TYPE_CHECKING:
    from harvest import TickContext

logger = logging.getLogger(__name__)


def success_chance(heat: float, params: CraftingParams) -> float:
    """1.0 inside the optimal band, falling linearly to 0 at ``falloff`` away."""
    if params.optimal_low <= heat <= params.optimal_high:
        return 1.0
    if heat < params.optimal_low:
        distance = params.optimal_low - heat
    else:
        distance = heat - params.optimal_high
    return max(0.0, 1.0 - distance / params.falloff)


def craft_speed(state: GameState, params: CraftingParams) -> float:
    """Best owned furnace speed multiplier."""
    speed = 1.0
    for upgrade, value in params.furnace_speed.items():
        if upgrade in state.progression.unlocked:
            speed = max(speed, value)
    return speed


def stoke(state: GameState, amount: float, params: CraftingParams) -> float:
    """Raise forge heat up to the cap; return the heat added."""
    procs = state.processes
    before = procs.heat
    procs.heat = min(params.max_heat, procs.heat + amount)
    return procs.heat - before


def advance_crafting(
    state: GameState,
    delta: int,
    data: GameData,
    params: CraftingParams,
    rng: random.Random,
    emit: Callable[..., None],
    warn: WarnOnce | None = None,
) -> None:
    """Decay heat and progress the head of the queue by ``delta`` minutes."""
    warn = warn or WarnOnce(logger)
    procs = state.processes
    procs.heat = max(0.0, procs.heat - params.heat_decay_per_minute * delta)
    if not procs.crafting:
        return

    job = procs.crafting[0]
    recipe = data.find(job.recipe, RecipeDef)
    if recipe is None:
        warn(f"recipe:{job.recipe}", "Dropping crafting job for unknown recipe %r", job.recipe)
        procs.crafting.pop(0)
        emit("craft_dropped", recipe=job.recipe)
        return

    job.progress += delta * craft_speed(state, params)
    if job.progress < job.duration:
        return

    procs.crafting.pop(0)
    chance = success_chance(procs.heat, params)
    if rng.random() >= chance:
        emit("craft_failed", recipe=recipe.id, heat=procs.heat, chance=chance)
        return
    grant_recipe_output(state, recipe, emit)
    emit("craft_completed", recipe=recipe.id, output=recipe.output)
    if params.double_unlock in state.progression.unlocked and rng.random() < params.double_chance:
        grant_recipe_output(state, recipe, emit)
        emit("craft_doubled", recipe=recipe.id)


def make_crafting_system(
    data: GameData,
    params: CraftingParams,
) -> Callable[[GameState, TickContext], None]:
    """Return a system that runs the forge each tick."""
    warn = WarnOnce(logger)

    def crafting_system(state: GameState, ctx: TickContext) -> None:
        advance_crafting(state, ctx.dt, data, params, ctx.random, ctx.emit, warn)

    return crafting_system
