"""Action Executor - one transition per action kind.

Every transition re-validates with ``legality_problem`` before touching the
state, so a rejected action leaves the state exactly as it was and emits an
``action_rejected`` event instead.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Callable

from harvest_combat.resolver import resolve_encounter
from harvest_combat.types import EncounterDef
from harvest_farm.crafting import stoke
from harvest_farm.defs import CleanupDef, CropDef, HelperDef, RecipeDef, VendorItem
from harvest_farm.diagnostics import WarnOnce
from harvest_farm.effects import best_of, harvest_plot, plant_plot, water_plots
from harvest_farm.helpers import role_total
from harvest_farm.params import Parameters
from harvest_farm.prerequisites import all_satisfied
from harvest_farm.registry import GameData
from harvest_farm.state import (
    CraftJob,
    EncounterSession,
    ExtractionSession,
    GameState,
    Helper,
)

from harvest_ai.actions import Action, action_to_dict
from harvest_ai.eligibility import legality_problem, rescue_cost, train_cost

logger = logging.getLogger(__name__)

Emit = Callable[..., None]


@dataclass
class ActionOutcome:
    action: Action
    success: bool
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": action_to_dict(self.action),
            "success": self.success,
            "reason": self.reason,
        }


@dataclass
class _Run:
    """Arguments every transition receives."""

    state: GameState
    data: GameData
    params: Parameters
    rng: random.Random
    emit: Emit
    tick: int


def _plant(r: _Run, action) -> None:
    crop = r.data.find(action.crop, CropDef)
    r.state.resources.energy.spend(crop.energy_cost)
    r.state.resources.seeds[crop.id] -= 1
    plant_plot(r.state, action.plot, crop)
    r.emit("planted", plot=action.plot, crop=crop.id, energy=crop.energy_cost)


def _harvest(r: _Run, action) -> None:
    plots = r.state.processes.plots
    for index in action.plots:
        harvest_plot(r.state, index, r.data.find(plots[index].crop, CropDef), r.params.farm, r.emit)


def _water(r: _Run, action) -> None:
    watered = water_plots(r.state, list(action.plots), r.params.farm)
    r.emit("watered", plots=watered, water=len(watered) * r.params.farm.water_per_plot)


def _pump(r: _Run, action) -> None:
    farm = r.params.farm
    rate = best_of(r.state.progression.unlocked, farm.pump_upgrades, farm.pump_rate)
    gained = r.state.resources.water.add(rate)
    r.emit("pumped", water=gained)


def _spend(state: GameState, energy: float = 0, gold: int = 0, materials: dict[str, int] | None = None) -> None:
    state.resources.energy.spend(energy)
    state.resources.gold -= gold
    state.resources.spend_materials(materials or {})


def _cleanup(r: _Run, action) -> None:
    cleanup = r.data.find(action.cleanup, CleanupDef)
    _spend(r.state, cleanup.energy_cost, cleanup.gold_cost, cleanup.materials)
    prog = r.state.progression
    prog.cleanups.add(cleanup.id)
    prog.farm_plots += cleanup.plots_added
    r.state.ensure_plots()
    r.emit("cleanup_completed", cleanup=cleanup.id, plots=prog.farm_plots)


def _catch_seeds(r: _Run, action) -> None:
    farm = r.params.farm
    crops = [
        c for c in r.data.crops
        if c.catch_weight > 0 and all_satisfied(c.prerequisites, r.state)
    ]
    r.state.resources.energy.spend(farm.catch_energy)
    if not crops:
        r.emit("seeds_caught", seed=None, amount=0)
        return
    crop = r.rng.choices(crops, weights=[c.catch_weight for c in crops])[0]
    amount = r.rng.randint(*farm.catch_quantity)
    amount += best_of(r.state.progression.unlocked, farm.net_upgrades, 0)
    if r.rng.random() < role_total(r.state, "seed_catcher", r.params.helpers):
        amount += 1
    seeds = r.state.resources.seeds
    seeds[crop.id] = seeds.get(crop.id, 0) + amount
    r.emit("seeds_caught", seed=crop.id, amount=amount)


def _purchase(r: _Run, action) -> None:
    item = r.data.find(action.item, VendorItem)
    state = r.state
    _spend(state, item.energy_cost, item.gold_cost, item.materials)
    if item.category == "seeds":
        for seed, qty in item.seeds.items():
            state.resources.seeds[seed] = state.resources.seeds.get(seed, 0) + qty
    else:
        state.progression.unlock(item.id)
    if item.category == "blueprint":
        state.inventory.blueprints.add(item.id)
    elif item.category == "housing":
        state.progression.housing += item.amount
    elif item.category == "storage":
        stock = state.resources.energy if item.stock == "energy" else state.resources.water
        stock.raise_max(item.amount)
    r.emit("purchased", item=item.id, category=item.category, gold=item.gold_cost)


def _craft(r: _Run, action) -> None:
    recipe = r.data.find(action.recipe, RecipeDef)
    _spend(r.state, recipe.energy_cost, recipe.gold_cost, recipe.materials)
    procs = r.state.processes
    procs.crafting.append(CraftJob(recipe.id, recipe.duration))
    crafting = r.params.crafting
    if procs.heat < crafting.optimal_mid:
        procs.heat = crafting.optimal_mid
    r.emit("craft_queued", recipe=recipe.id, queue=len(procs.crafting))


def _stoke(r: _Run, action) -> None:
    crafting = r.params.crafting
    r.state.resources.spend_materials({"wood": crafting.stoke_wood})
    added = stoke(r.state, crafting.stoke_heat, crafting)
    r.emit("stoked", heat=r.state.processes.heat, added=added)


def _start_extraction(r: _Run, action) -> None:
    r.state.processes.extraction = ExtractionSession()
    r.emit("extraction_started", energy=r.state.resources.energy.current)


def _stop_extraction(r: _Run, action) -> None:
    session = r.state.processes.extraction
    r.state.processes.extraction = None
    r.emit(
        "extraction_ended",
        depth=session.depth,
        minutes=session.minutes,
        drops=dict(session.drops),
    )


def _start_encounter(r: _Run, action) -> None:
    encounter = r.data.find(action.encounter, EncounterDef)
    state = r.state
    state.resources.energy.spend(encounter.energy_cost)
    result = resolve_encounter(
        encounter,
        state.inventory.weapons.values(),
        state.inventory.equipped(),
        state.progression.level,
        r.rng,
        r.params.combat,
        role_total(state, "fighter", r.params.helpers),
    )
    state.processes.encounter = EncounterSession(
        encounter=encounter.id,
        remaining=encounter.duration_minutes,
        result=result,
    )
    r.emit(
        "encounter_started",
        encounter=encounter.id,
        duration=encounter.duration_minutes,
        success=result.success,
    )


def _change_context(r: _Run, action) -> None:
    location = r.state.location
    previous = location.context
    location.context = action.target
    location.minutes_here = 0
    location.last_change = r.tick
    r.emit("context_changed", previous=previous, context=action.target)


def _rescue_helper(r: _Run, action) -> None:
    helper = r.data.find(action.helper, HelperDef)
    cost = rescue_cost(helper, r.params)
    r.state.resources.gold -= cost
    r.state.helpers.append(Helper(id=helper.id, level=helper.level, housed=True))
    r.emit("helper_rescued", helper=helper.id, gold=cost)


def _assign_helper(r: _Run, action) -> None:
    helper = r.state.helper(action.helper)
    if action.secondary:
        helper.secondary = action.role
    else:
        helper.role = action.role
    r.emit("helper_assigned", helper=helper.id, role=action.role, secondary=action.secondary)


def _train_helper(r: _Run, action) -> None:
    helper = r.state.helper(action.helper)
    cost = train_cost(helper.level, r.params)
    r.state.resources.gold -= cost
    helper.level += 1
    r.emit("helper_trained", helper=helper.id, level=helper.level, gold=cost)


_TRANSITIONS: dict[str, Callable[[_Run, Any], None]] = {
    "plant": _plant,
    "harvest": _harvest,
    "water": _water,
    "pump": _pump,
    "cleanup": _cleanup,
    "catch_seeds": _catch_seeds,
    "purchase": _purchase,
    "craft": _craft,
    "stoke": _stoke,
    "start_extraction": _start_extraction,
    "stop_extraction": _stop_extraction,
    "start_encounter": _start_encounter,
    "change_context": _change_context,
    "rescue_helper": _rescue_helper,
    "assign_helper": _assign_helper,
    "train_helper": _train_helper,
}


def execute(
    action: Action,
    state: GameState,
    data: GameData,
    params: Parameters,
    rng: random.Random,
    emit: Emit,
    tick: int,
    warn: WarnOnce | None = None,
) -> ActionOutcome:
    """Apply ``action`` to ``state`` if it can legally complete."""
    problem = legality_problem(action, state, data, params, warn or WarnOnce(logger))
    if problem is not None:
        emit("action_rejected", action=action_to_dict(action), reason=problem)
        return ActionOutcome(action, False, problem)
    _TRANSITIONS[action.kind](_Run(state, data, params, rng, emit, tick), action)
    return ActionOutcome(action, True)
