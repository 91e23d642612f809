"""Growth process: crop progress, plot water decay, and drought death."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from harvest_farm.defs import CropDef
from harvest_farm.diagnostics import WarnOnce
from harvest_farm.params import GrowthParams
from harvest_farm.registry import GameData
from harvest_farm.state import GameState

if TYPE_CHECKING:
    from harvest import TickContext

logger = logging.getLogger(__name__)


def water_decay_rate(state: GameState, params: GrowthParams) -> float:
    """Plot water lost per minute after the best owned retention upgrade."""
    divisor = 1.0
    for upgrade, value in params.retention.items():
        if upgrade in state.progression.unlocked:
            divisor = max(divisor, value)
    return params.water_decay_per_minute / divisor


def advance_growth(
    state: GameState,
    delta: int,
    data: GameData,
    params: GrowthParams,
    emit: Callable[..., None],
    warn: WarnOnce | None = None,
) -> None:
    """Advance every planted plot by ``delta`` minutes.

    Growth uses the water level at the start of the tick; water then decays.
    A plot dry for longer than ``drought_minutes`` dies once and is cleared.
    """
    warn = warn or WarnOnce(logger)
    decay = water_decay_rate(state, params) * delta
    for index, plot in enumerate(state.processes.plots):
        if plot.crop is None or plot.ready:
            continue
        if data.find(plot.crop, CropDef) is None or plot.growth_time <= 0:
            warn(f"crop:{plot.crop}", "Plot %d holds unknown crop %r; skipped", index, plot.crop)
            continue

        rate = 1.0 if plot.water >= params.dry_threshold else params.dry_growth_rate
        plot.growth_elapsed = min(plot.growth_time, plot.growth_elapsed + delta * rate)
        if plot.growth_elapsed >= plot.growth_time:
            plot.ready = True
            emit("crop_ready", plot=index, crop=plot.crop)

        plot.water = max(0.0, plot.water - decay)
        if plot.water > 0:
            plot.dry_minutes = 0
            continue
        plot.dry_minutes += delta
        if plot.dry_minutes > params.drought_minutes and not plot.ready:
            crop = plot.crop
            plot.clear()
            plot.dead = True
            emit("crop_died", plot=index, crop=crop)


def make_growth_system(
    data: GameData,
    params: GrowthParams,
) -> Callable[[GameState, TickContext], None]:
    """Return a system that advances crop growth each tick."""
    warn = WarnOnce(logger)

    def growth_system(state: GameState, ctx: TickContext) -> None:
        advance_growth(state, ctx.dt, data, params, ctx.emit, warn)

    return growth_system
