"""Extraction process: depth-tiered energy drain and material drops."""
from __future__ import annotations

import random
from typing import TYPE_CHECKING, Callable

from harvest_farm.helpers import role_total
from harvest_farm.params import HelperParams, MiningParams
from harvest_farm.state import GameState

if TYPE_CHECKING:
    from harvest import TickContext


def depth_tier(depth: float, tier_size: float) -> int:
    return int(depth // tier_size) + 1


def energy_drain(depth: float, tier_size: float, reduction: float = 0.0) -> float:
    """Energy per minute at ``depth``: 2^(tier-1), scaled by (1 - reduction)."""
    tier = depth_tier(depth, tier_size)
    return 2.0 ** (tier - 1) * (1.0 - reduction)


def pickaxe_efficiency(state: GameState, params: MiningParams) -> float:
    best = 0.0
    for tool, value in params.pickaxes.items():
        if tool in state.inventory.tools:
            best = max(best, value)
    return best


def drain_reduction(state: GameState, params: MiningParams, helpers: HelperParams) -> float:
    """Combined pickaxe and miner's-friend reduction, capped."""
    tool = pickaxe_efficiency(state, params)
    friend = min(1.0, role_total(state, "miners_friend", helpers))
    combined = 1.0 - (1.0 - tool) * (1.0 - friend)
    return min(params.max_reduction, combined)


def roll_drop(tier: int, params: MiningParams, rng: random.Random) -> tuple[str, int]:
    table = params.tier_tables[min(tier, len(params.tier_tables)) - 1]
    names = list(table)
    material = rng.choices(names, weights=[table[n] for n in names])[0]
    low, high = params.drop_quantity
    return material, rng.randint(low, high) + tier // 2


def can_start_extraction(state: GameState, params: MiningParams) -> bool:
    return (
        not state.processes.hero_busy
        and state.resources.energy.current >= params.min_energy
    )


def advance_extraction(
    state: GameState,
    delta: int,
    params: MiningParams,
    helpers: HelperParams,
    rng: random.Random,
    emit: Callable[..., None],
) -> None:
    """Drain energy, deepen, and roll drops; end the session at zero energy."""
    session = state.processes.extraction
    if session is None:
        return
    energy = state.resources.energy
    reduction = drain_reduction(state, params, helpers)

    energy.drain(energy_drain(session.depth, params.tier_size, reduction) * delta)
    session.depth += params.depth_per_minute * delta
    session.minutes += delta
    session.drop_clock += delta
    tier = depth_tier(session.depth, params.tier_size)
    while session.drop_clock >= params.drop_interval:
        session.drop_clock -= params.drop_interval
        material, qty = roll_drop(tier, params, rng)
        session.drops[material] = session.drops.get(material, 0) + qty
        state.resources.add_materials({material: qty})

    if energy.current <= 0:
        state.processes.extraction = None
        emit(
            "extraction_ended",
            depth=session.depth,
            minutes=session.minutes,
            drops=dict(session.drops),
        )


def make_extraction_system(
    params: MiningParams,
    helpers: HelperParams,
) -> Callable[[GameState, TickContext], None]:
    """Return a system that advances the active mining session."""

    def extraction_system(state: GameState, ctx: TickContext) -> None:
        advance_extraction(state, ctx.dt, params, helpers, ctx.random, ctx.emit)

    return extraction_system
