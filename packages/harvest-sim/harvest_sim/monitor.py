"""Progress/Phase Monitor - phases, stagnation, and victory."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from harvest.clock import MINUTES_PER_DAY
from harvest_farm.params import MonitorParams
from harvest_farm.state import GameState


@dataclass
class Bottleneck:
    start: int
    cause: str
    end: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start, "end": self.end, "cause": self.cause}


@dataclass
class MonitorReport:
    phase: str
    stuck: bool
    cause: str | None
    victory: bool


def phase_index(state: GameState, params: MonitorParams) -> int:
    """Most advanced phase reached by plot count or hero level."""
    prog = state.progression
    reached = 0
    for i, (_, min_plots, min_level) in enumerate(params.phases):
        if prog.farm_plots >= min_plots or prog.level >= min_level:
            reached = i
    return reached


def is_victory(state: GameState, params: MonitorParams) -> bool:
    prog = state.progression
    return prog.farm_plots >= params.victory_plots or prog.level >= params.victory_level


def stuck_cause(state: GameState, params: MonitorParams) -> str:
    """Resource furthest under its minimum viable amount, best effort."""
    res = state.resources
    amounts = {
        "energy": res.energy.current,
        "gold": float(res.gold),
        "seeds": float(sum(res.seeds.values())),
        "water": res.water.current,
    }
    worst: str | None = None
    worst_ratio = 1.0
    for name, minimum in params.minimums.items():
        if minimum <= 0 or name not in amounts:
            continue
        ratio = amounts[name] / minimum
        if ratio < worst_ratio:
            worst, worst_ratio = name, ratio
    if worst is not None:
        return worst
    if state.progression.farm_plots >= params.helpers_needed_plots and not state.helpers:
        return "helpers"
    return "progression"


@dataclass
class ProgressMonitor:
    """Tracks one run's phase changes and stretches without progress."""

    params: MonitorParams
    last_progress: int = 0
    stuck: bool = False
    cause: str | None = None
    bottlenecks: list[Bottleneck] = field(default_factory=list)
    transitions: list[tuple[int, str, str]] = field(default_factory=list)
    _last: tuple[int, int, int] | None = None

    @property
    def stuck_minutes(self) -> int:
        return int(self.params.stuck_days * MINUTES_PER_DAY)

    def update(self, state: GameState, tick: int, emit: Callable[..., None]) -> MonitorReport:
        prog = state.progression
        index = phase_index(state, self.params)
        if index != prog.phase_index:
            name = self.params.phases[index][0]
            self.transitions.append((tick, prog.phase, name))
            emit("phase_changed", previous=prog.phase, phase=name)
            prog.phase_index = index
            prog.phase = name

        current = (prog.farm_plots, prog.level, state.resources.gold)
        if self._last is not None and any(c > p for c, p in zip(current, self._last)):
            self.last_progress = tick
            if self.stuck:
                self.stuck = False
                self.cause = None
                self.bottlenecks[-1].end = tick
                emit("unstuck")
        self._last = current

        if not self.stuck and tick - self.last_progress >= self.stuck_minutes:
            self.stuck = True
            self.cause = stuck_cause(state, self.params)
            self.bottlenecks.append(Bottleneck(start=tick, cause=self.cause))
            emit("stuck", cause=self.cause, since=self.last_progress)

        return MonitorReport(
            phase=prog.phase,
            stuck=self.stuck,
            cause=self.cause,
            victory=is_victory(state, self.params),
        )
