"""Eligibility filtering.

``legality_problem`` answers "can this action complete right now": the
definition exists, prerequisites hold, and the state can pay for it. The
executor re-checks it before mutating anything. ``ineligible_reason`` adds
the Decision Engine's own filters on top (no pointless moves, no predicted
defeats). Both return a short reason string, or None when the action passes.
"""
from __future__ import annotations

import logging
from typing import Callable

from harvest_combat.resolver import estimate_encounter
from harvest_combat.types import EncounterDef
from harvest_farm.defs import CleanupDef, CropDef, Definition, HelperDef, RecipeDef, VendorItem
from harvest_farm.diagnostics import WarnOnce
from harvest_farm.helpers import can_take_secondary, role_total
from harvest_farm.mining import can_start_extraction
from harvest_farm.params import Parameters
from harvest_farm.prerequisites import is_recognized, unmet
from harvest_farm.registry import GameData
from harvest_farm.state import CONTEXTS, GameState

from harvest_ai.actions import Action
from harvest_ai.candidates import generate_candidates
from harvest_ai.traits import AgentTraits

logger = logging.getLogger(__name__)

_DEF_KINDS: dict[str, tuple[str, type]] = {
    "plant": ("crop", CropDef),
    "cleanup": ("cleanup", CleanupDef),
    "purchase": ("item", VendorItem),
    "craft": ("recipe", RecipeDef),
    "start_encounter": ("encounter", EncounterDef),
    "rescue_helper": ("helper", HelperDef),
}


def definition_for(action: Action, data: GameData) -> Definition | EncounterDef | None:
    """The definition an action refers to, or None when it refers to none."""
    entry = _DEF_KINDS.get(action.kind)
    if entry is None:
        return None
    attr, kind = entry
    return data.find(getattr(action, attr), kind)


def can_afford(
    state: GameState,
    energy: float = 0,
    gold: int = 0,
    materials: dict[str, int] | None = None,
) -> bool:
    res = state.resources
    return (
        res.energy.current >= energy
        and res.gold >= gold
        and res.has_materials(materials or {})
    )


def rescue_cost(helper: HelperDef, params: Parameters) -> int:
    return helper.gold_cost or params.helpers.rescue_gold


def train_cost(level: int, params: Parameters) -> int:
    return params.helpers.train_gold_per_level * level


def _check_prerequisites(
    requirements: tuple[str, ...],
    state: GameState,
    data: GameData,
    warn: WarnOnce,
) -> str | None:
    missing = unmet(requirements, state)
    if not missing:
        return None
    for requirement in missing:
        if not is_recognized(requirement, data.ids()):
            warn(
                f"prereq:{requirement}",
                "Unrecognized prerequisite id %r is never satisfied", requirement,
            )
    return f"missing prerequisite {missing[0]}"


def _plant(action, state, data, params) -> str | None:
    crop: CropDef = definition_for(action, data)
    if not 0 <= action.plot < len(state.processes.plots):
        return "no such plot"
    if not state.processes.plots[action.plot].empty:
        return "plot occupied"
    if state.resources.seeds.get(crop.id, 0) <= 0:
        return "no seeds"
    if not can_afford(state, energy=crop.energy_cost):
        return "not enough energy"
    return None


def _harvest(action, state, data, params) -> str | None:
    plots = state.processes.plots
    if not action.plots:
        return "nothing to harvest"
    for index in action.plots:
        if not 0 <= index < len(plots) or not plots[index].ready:
            return f"plot {index} not ready"
    return None


def _water(action, state, data, params) -> str | None:
    plots = state.processes.plots
    if not action.plots:
        return "nothing to water"
    for index in action.plots:
        if not 0 <= index < len(plots) or plots[index].crop is None:
            return f"plot {index} has no crop"
    if state.resources.water.current < params.farm.water_per_plot:
        return "tank empty"
    return None


def _pump(action, state, data, params) -> str | None:
    if state.resources.water.room <= 0:
        return "tank full"
    return None


def _cleanup(action, state, data, params) -> str | None:
    cleanup: CleanupDef = definition_for(action, data)
    if cleanup.id in state.progression.cleanups:
        return "already cleared"
    if cleanup.tool and cleanup.tool not in state.inventory.tools:
        return f"needs tool {cleanup.tool}"
    if not can_afford(state, cleanup.energy_cost, cleanup.gold_cost, cleanup.materials):
        return "cannot afford"
    return None


def _catch_seeds(action, state, data, params) -> str | None:
    if not can_afford(state, energy=params.farm.catch_energy):
        return "not enough energy"
    return None


def _purchase(action, state, data, params) -> str | None:
    item: VendorItem = definition_for(action, data)
    if not item.repeatable and item.id in state.progression.unlocked:
        return "already owned"
    if not can_afford(state, item.energy_cost, item.gold_cost, item.materials):
        return "cannot afford"
    return None


def _craft(action, state, data, params) -> str | None:
    recipe: RecipeDef = definition_for(action, data)
    if len(state.processes.crafting) >= params.crafting.max_queue:
        return "queue full"
    if not recipe.repeatable and (
        recipe.id in state.progression.unlocked
        or any(job.recipe == recipe.id for job in state.processes.crafting)
    ):
        return "already crafted"
    if not can_afford(state, recipe.energy_cost, recipe.gold_cost, recipe.materials):
        return "cannot afford"
    return None


def _stoke(action, state, data, params) -> str | None:
    if state.processes.heat >= params.crafting.max_heat:
        return "forge at max heat"
    if not can_afford(state, materials={"wood": params.crafting.stoke_wood}):
        return "no wood"
    return None


def _start_extraction(action, state, data, params) -> str | None:
    if not can_start_extraction(state, params.mining):
        return "cannot start extraction"
    return None


def _stop_extraction(action, state, data, params) -> str | None:
    if state.processes.extraction is None:
        return "not mining"
    return None


def _start_encounter(action, state, data, params) -> str | None:
    encounter: EncounterDef = definition_for(action, data)
    if state.processes.hero_busy:
        return "hero busy"
    if not can_afford(state, energy=encounter.energy_cost):
        return "not enough energy"
    return None


def _change_context(action, state, data, params) -> str | None:
    if action.target not in CONTEXTS:
        return f"unknown context {action.target}"
    if action.target == state.location.context:
        return "already there"
    if state.processes.hero_busy:
        return "hero busy"
    return None


def _rescue_helper(action, state, data, params) -> str | None:
    helper: HelperDef = definition_for(action, data)
    if state.helper(helper.id) is not None:
        return "already rescued"
    if state.housed_count() >= state.progression.housing:
        return "no free housing"
    if not can_afford(state, gold=rescue_cost(helper, params)):
        return "cannot afford"
    return None


def _assign_helper(action, state, data, params) -> str | None:
    helper = state.helper(action.helper)
    if helper is None or not helper.housed:
        return "no such housed helper"
    if action.role not in params.helpers.roles:
        return f"unknown role {action.role}"
    if not action.secondary:
        return None if helper.role is None else "already assigned"
    if not can_take_secondary(state, params.helpers):
        return f"needs {params.helpers.secondary_unlock}"
    if helper.role is None or helper.secondary is not None or helper.role == action.role:
        return "secondary role unavailable"
    return None


def _train_helper(action, state, data, params) -> str | None:
    helper = state.helper(action.helper)
    if helper is None:
        return "no such helper"
    if helper.level >= params.helpers.max_level:
        return "max level"
    if not can_afford(state, gold=train_cost(helper.level, params)):
        return "cannot afford"
    return None


_CHECKS: dict[str, Callable[..., str | None]] = {
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


def legality_problem(
    action: Action,
    state: GameState,
    data: GameData,
    params: Parameters,
    warn: WarnOnce | None = None,
) -> str | None:
    """Why ``action`` cannot complete now, or None when it can."""
    warn = warn or WarnOnce(logger)
    check = _CHECKS.get(getattr(action, "kind", None))
    if check is None:
        warn(f"kind:{getattr(action, 'kind', action)!r}", "Unknown action %r skipped", action)
        return "unknown action"
    if action.kind in _DEF_KINDS:
        defn = definition_for(action, data)
        if defn is None:
            attr = _DEF_KINDS[action.kind][0]
            warn(
                f"def:{action.kind}:{getattr(action, attr)}",
                "Action %s refers to unknown definition %r; skipped",
                action.kind, getattr(action, attr),
            )
            return "unknown definition"
        problem = _check_prerequisites(defn.prerequisites, state, data, warn)
        if problem is not None:
            return problem
    return check(action, state, data, params)


def ineligible_reason(
    action: Action,
    state: GameState,
    data: GameData,
    params: Parameters,
    traits: AgentTraits,
    warn: WarnOnce | None = None,
) -> str | None:
    """Why the Decision Engine should not consider ``action``, or None."""
    problem = legality_problem(action, state, data, params, warn)
    if problem is not None:
        return problem
    kind = action.kind
    if kind == "plant":
        crop = data.find(action.crop, CropDef)
        if state.resources.energy.current - crop.energy_cost < params.scoring.plant_energy_reserve:
            return "energy reserve"
    elif kind == "stop_extraction":
        if state.resources.energy.fraction > params.scoring.mine_stop_below:
            return "energy left to mine"
    elif kind == "start_encounter":
        encounter = data.find(action.encounter, EncounterDef)
        estimate = estimate_encounter(
            encounter,
            state.inventory.weapons.values(),
            state.inventory.equipped(),
            state.progression.level,
            params.combat,
            role_total(state, "fighter", params.helpers),
        )
        if estimate <= -traits.risk_tolerance:
            return "predicted defeat"
    elif kind == "change_context":
        if not has_work(action.target, state, data, params, traits, warn):
            return "nothing to do there"
    return None


def has_work(
    context: str,
    state: GameState,
    data: GameData,
    params: Parameters,
    traits: AgentTraits,
    warn: WarnOnce | None = None,
) -> bool:
    """Whether ``context`` offers any eligible non-move action."""
    for action in generate_candidates(state, data, params, context, include_moves=False):
        if ineligible_reason(action, state, data, params, traits, warn) is None:
            return True
    return False
