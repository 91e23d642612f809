"""Prerequisite Checker - pure predicates over GameState.

A requirement id is satisfied by membership in the unlocked or completed
cleanup sets, or by its shape:

    tool_<id>, craft_<id>   the tool (or weapon family) is owned
    weapon_<family>         a weapon of that family is owned
    blueprint_<id>          the blueprint is owned
    farm_plots_<n>          at least n plots
    farm_stage_<n>          farm stage (from plot count) at least n
    hero_level_<n>          hero level at least n
    phase_<n|name>          phase index at least n, or at/after the named phase
    route_<encounter>       the encounter has been won once (unlocked set)
    helpers_<n>             at least n helpers
    small_hold, homestead, manor_grounds, great_estate
                            named farm stages (plot thresholds)

Multiple requirements combine with AND. Unrecognized ids are simply false.
"""
from __future__ import annotations

import re
from typing import Iterable

from harvest_farm.state import GameState

FARM_STAGES: dict[str, int] = {
    "small_hold": 20,
    "homestead": 40,
    "manor_grounds": 65,
    "great_estate": 90,
}

PHASE_NAMES = ("tutorial", "early", "mid", "late", "end")

_NUMERIC = re.compile(r"^(farm_plots|farm_stage|hero_level|helpers)_(\d+)$")
_PHASE = re.compile(r"^phase_(\w+)$")
_PREFIXED = re.compile(r"^(tool|craft|weapon|blueprint)_(.+)$")


def farm_stage(plots: int) -> int:
    """Farm stage 1-5 from the plot count."""
    stage = 1
    for threshold in FARM_STAGES.values():
        if plots >= threshold:
            stage += 1
    return stage


def _numeric(kind: str, amount: int, state: GameState) -> bool:
    prog = state.progression
    if kind == "farm_plots":
        return prog.farm_plots >= amount
    if kind == "farm_stage":
        return farm_stage(prog.farm_plots) >= amount
    if kind == "hero_level":
        return prog.level >= amount
    return len(state.helpers) >= amount


def _phase(token: str, state: GameState) -> bool:
    if token.isdigit():
        return state.progression.phase_index >= int(token)
    if token in PHASE_NAMES:
        return state.progression.phase_index >= PHASE_NAMES.index(token)
    return False


def _owned(kind: str, name: str, state: GameState) -> bool:
    inv = state.inventory
    if kind == "weapon":
        return name in inv.weapons
    if kind == "blueprint":
        return f"blueprint_{name}" in inv.blueprints or name in inv.blueprints
    return name in inv.tools or name in inv.weapons


def is_satisfied(requirement: str, state: GameState) -> bool:
    """True when ``requirement`` holds for ``state``. Never raises."""
    prog = state.progression
    if requirement in prog.unlocked or requirement in prog.cleanups:
        return True
    if requirement in FARM_STAGES:
        return prog.farm_plots >= FARM_STAGES[requirement]
    m = _NUMERIC.match(requirement)
    if m:
        return _numeric(m.group(1), int(m.group(2)), state)
    m = _PHASE.match(requirement)
    if m:
        return _phase(m.group(1), state)
    m = _PREFIXED.match(requirement)
    if m:
        return _owned(m.group(1), m.group(2), state)
    return False


def all_satisfied(requirements: Iterable[str], state: GameState) -> bool:
    return all(is_satisfied(r, state) for r in requirements)


def unmet(requirements: Iterable[str], state: GameState) -> list[str]:
    return [r for r in requirements if not is_satisfied(r, state)]


def is_recognized(requirement: str, known_ids: Iterable[str] = ()) -> bool:
    """Whether ``requirement`` has a known shape or names a known definition.

    ``route_<encounter>`` is recorded in the unlocked set when the encounter
    is first won, so it is recognized whenever the encounter is known.
    """
    known = set(known_ids)
    if requirement in FARM_STAGES:
        return True
    if _NUMERIC.match(requirement) or _PREFIXED.match(requirement):
        return True
    m = _PHASE.match(requirement)
    if m:
        token = m.group(1)
        return token.isdigit() or token in PHASE_NAMES
    if requirement.startswith("route_") and requirement[len("route_"):] in known:
        return True
    return requirement in known
