"""State effects shared by process systems and the action executor."""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, TypeVar

from harvest_combat.types import Armor, Weapon

from harvest_farm.defs import CropDef, RecipeDef
from harvest_farm.params import FarmParams
from harvest_farm.state import GameState

Emit = Callable[..., None]
T = TypeVar("T", int, float)


def gain_xp(state: GameState, xp: int, params: FarmParams, emit: Emit) -> int:
    """Add XP and apply level-ups; return levels gained."""
    prog = state.progression
    prog.xp += max(0, xp)
    gained = 0
    while prog.xp >= params.xp_per_level * prog.level:
        prog.xp -= params.xp_per_level * prog.level
        prog.level += 1
        gained += 1
        emit("level_up", level=prog.level)
    return gained


def add_armor(state: GameState, armor: Armor, emit: Emit) -> None:
    """Store an armor piece and equip it if it beats the equipped one."""
    inv = state.inventory
    existing = {a.id for a in inv.armor}
    piece = armor
    n = 2
    while piece.id in existing:
        piece = dataclasses.replace(armor, id=f"{armor.id}_{n}")
        n += 1
    inv.armor.append(piece)
    current = inv.equipped()
    if current is None or piece.defense > current.defense:
        inv.equipped_armor = piece.id
        emit("armor_equipped", armor=piece.id, defense=piece.defense, effect=piece.effect)


def grant_recipe_output(state: GameState, recipe: RecipeDef, emit: Emit) -> None:
    """Apply one unit of a finished recipe's output."""
    inv = state.inventory
    if recipe.output == "tool":
        inv.tools[recipe.id] = recipe.id in inv.tools
    elif recipe.output == "weapon":
        current = inv.weapons.get(recipe.family)
        if current is None:
            inv.weapons[recipe.family] = Weapon(
                recipe.family, recipe.damage, recipe.attack_speed, 1,
            )
        else:
            # Re-forging a family levels it up by 10% damage.
            inv.weapons[recipe.family] = Weapon(
                recipe.family,
                max(current.damage, recipe.damage) * 1.1,
                max(current.attack_speed, recipe.attack_speed),
                current.level + 1,
            )
    elif recipe.output == "armor":
        add_armor(state, Armor(recipe.id, recipe.defense, recipe.effect), emit)
    else:
        state.resources.add_materials(recipe.outputs)
    state.progression.unlock(recipe.id)


def plant_plot(state: GameState, index: int, crop: CropDef) -> None:
    """Put ``crop`` in empty plot ``index``; the caller pays for the seed."""
    plot = state.processes.plots[index]
    plot.clear()
    plot.dead = False
    plot.crop = crop.id
    plot.growth_time = crop.growth_minutes
    plot.stages = crop.stages


def harvest_plot(
    state: GameState,
    index: int,
    crop: CropDef | None,
    params: FarmParams,
    emit: Emit,
) -> float:
    """Collect a ready plot and clear it; return the energy gained."""
    plot = state.processes.plots[index]
    crop_id = plot.crop
    energy = crop.energy_yield if crop is not None else 0
    gained = state.resources.energy.add(energy)
    plot.clear()
    emit("harvested", plot=index, crop=crop_id, energy=gained)
    gain_xp(state, crop.xp if crop is not None and crop.xp else params.harvest_xp, params, emit)
    return gained


def water_plots(state: GameState, indices: list[int], params: FarmParams) -> list[int]:
    """Refill plots from the tank in order until the tank runs short."""
    tank = state.resources.water
    watered: list[int] = []
    for index in indices:
        if not tank.spend(params.water_per_plot):
            break
        state.processes.plots[index].water = 1.0
        state.processes.plots[index].dry_minutes = 0
        watered.append(index)
    return watered


def thirsty_plots(state: GameState, params: FarmParams) -> list[int]:
    """Planted plots under ``refill_below``, driest first, index breaking ties."""
    plots = state.processes.plots
    found = [
        i for i, p in enumerate(plots)
        if p.crop is not None and not p.ready and p.water < params.refill_below
    ]
    return sorted(found, key=lambda i: (plots[i].water, i))


def best_of(owned: set[str] | dict[str, Any], table: dict[str, T], default: T) -> T:
    """Best value in ``table`` among owned keys, else ``default``."""
    best = default
    for key, value in table.items():
        if key in owned and value > best:
            best = value
    return best
