"""Adventure process: counts down an away encounter and pays out on return."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from harvest_combat.types import Armor, EncounterResult

from harvest_farm.defs import RecipeDef
from harvest_farm.effects import add_armor, gain_xp
from harvest_farm.params import FarmParams
from harvest_farm.registry import GameData
from harvest_farm.state import GameState

if TYPE_CHECKING:
    from harvest import TickContext

logger = logging.getLogger(__name__)

DROPPED_ARMOR_DEFENSE = 10.0


def armor_for_drop(drop: str, data: GameData) -> Armor:
    """Armor piece for a route drop id, from its recipe when one exists."""
    recipe = data.find(drop, RecipeDef)
    if recipe is not None and recipe.output == "armor":
        return Armor(recipe.id, recipe.defense, recipe.effect)
    return Armor(drop, DROPPED_ARMOR_DEFENSE)


def apply_encounter_result(
    state: GameState,
    result: EncounterResult,
    data: GameData,
    params: FarmParams,
    emit: Callable[..., None],
) -> None:
    """Grant the rewards of a finished encounter; failures grant nothing."""
    if result.success:
        state.resources.gold += result.gold
        state.resources.add_materials(result.loot)
        if result.armor_drop is not None:
            add_armor(state, armor_for_drop(result.armor_drop, data), emit)
        state.progression.unlock(f"route_{result.encounter}")
        gain_xp(state, result.xp, params, emit)
    emit(
        "encounter_completed",
        encounter=result.encounter,
        success=result.success,
        gold=result.gold,
        xp=result.xp,
        loot=dict(result.loot),
        reason=result.failure_reason,
    )


def advance_adventure(
    state: GameState,
    delta: int,
    data: GameData,
    params: FarmParams,
    emit: Callable[..., None],
) -> None:
    session = state.processes.encounter
    if session is None:
        return
    session.remaining -= delta
    if session.remaining > 0:
        return
    state.processes.encounter = None
    apply_encounter_result(state, session.result, data, params, emit)


def make_adventure_system(
    data: GameData,
    params: FarmParams,
) -> Callable[[GameState, TickContext], None]:
    """Return a system that brings the hero home when an encounter ends."""

    def adventure_system(state: GameState, ctx: TickContext) -> None:
        advance_adventure(state, ctx.dt, data, params, ctx.emit)

    return adventure_system
