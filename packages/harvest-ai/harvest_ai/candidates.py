"""Candidate generation - every structurally legal action in a context.

Order matters: it is the tie-break order for selection, so generation walks
definitions in registry order and plots in index order.
"""
from __future__ import annotations

from harvest_farm.effects import thirsty_plots
from harvest_farm.helpers import ROLES, can_take_secondary
from harvest_farm.params import Parameters
from harvest_farm.registry import GameData
from harvest_farm.state import CONTEXTS, GameState

from harvest_ai.actions import (
    Action,
    AssignHelper,
    CatchSeeds,
    ChangeContext,
    Cleanup,
    Craft,
    Harvest,
    Plant,
    Pump,
    Purchase,
    RescueHelper,
    StartEncounter,
    StartExtraction,
    Stoke,
    StopExtraction,
    TrainHelper,
    Water,
)


def watering_capacity(state: GameState, params: Parameters) -> int:
    capacity = params.farm.watering_capacity
    for tool, plots in params.farm.watering_tools.items():
        if tool in state.inventory.tools or tool in state.progression.unlocked:
            capacity = max(capacity, plots)
    return capacity


def _farm(state: GameState, data: GameData, params: Parameters) -> list[Action]:
    plots = state.processes.plots
    actions: list[Action] = []
    ready = tuple(i for i, p in enumerate(plots) if p.ready and p.crop is not None)
    if ready:
        actions.append(Harvest(ready))
    empty = next((i for i, p in enumerate(plots) if p.empty), None)
    if empty is not None:
        for crop in data.crops:
            if state.resources.seeds.get(crop.id, 0) > 0:
                actions.append(Plant(empty, crop.id))
    thirsty = thirsty_plots(state, params.farm)
    if thirsty:
        actions.append(Water(tuple(thirsty[:watering_capacity(state, params)])))
    actions.append(Pump())
    for cleanup in data.cleanups:
        if cleanup.id not in state.progression.cleanups:
            actions.append(Cleanup(cleanup.id))
    return actions


def _town(state: GameState, data: GameData, params: Parameters) -> list[Action]:
    prog = state.progression
    actions: list[Action] = []
    for item in data.vendor:
        if item.repeatable or item.id not in prog.unlocked:
            actions.append(Purchase(item.id))
    owned = {h.id for h in state.helpers}
    for helper in data.helpers:
        if helper.id not in owned:
            actions.append(RescueHelper(helper.id))
    secondary_ok = can_take_secondary(state, params.helpers)
    for helper in state.helpers:
        if not helper.housed:
            continue
        if helper.role is None:
            actions.extend(AssignHelper(helper.id, role) for role in ROLES)
        elif helper.secondary is None and secondary_ok:
            actions.extend(
                AssignHelper(helper.id, role, secondary=True)
                for role in ROLES if role != helper.role
            )
        if helper.level < params.helpers.max_level:
            actions.append(TrainHelper(helper.id))
    return actions


def _forge(state: GameState, data: GameData, params: Parameters) -> list[Action]:
    actions: list[Action] = []
    if len(state.processes.crafting) < params.crafting.max_queue:
        queued = {job.recipe for job in state.processes.crafting}
        for recipe in data.recipes:
            if recipe.repeatable or (
                recipe.id not in state.progression.unlocked and recipe.id not in queued
            ):
                actions.append(Craft(recipe.id))
    actions.append(Stoke())
    return actions


def _mine(state: GameState, data: GameData, params: Parameters) -> list[Action]:
    return [StartExtraction()]


def _tower(state: GameState, data: GameData, params: Parameters) -> list[Action]:
    return [CatchSeeds()]


def _adventure(state: GameState, data: GameData, params: Parameters) -> list[Action]:
    return [StartEncounter(e.id) for e in data.encounters]


_GENERATORS = {
    "farm": _farm,
    "tower": _tower,
    "town": _town,
    "forge": _forge,
    "mine": _mine,
    "adventure": _adventure,
}


def generate_candidates(
    state: GameState,
    data: GameData,
    params: Parameters,
    context: str | None = None,
    include_moves: bool = True,
) -> list[Action]:
    """All structurally legal actions in ``context`` (default: the current one).

    An away hero has nothing to do; a hero mid-extraction can only stop.
    """
    procs = state.processes
    if procs.encounter is not None:
        return []
    if procs.extraction is not None:
        return [StopExtraction()]
    here = context or state.location.context
    generator = _GENERATORS.get(here)
    actions = generator(state, data, params) if generator is not None else []
    if include_moves:
        actions.extend(ChangeContext(target) for target in CONTEXTS if target != here)
    return actions
