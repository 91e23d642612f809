"""Simulation - one run of the tick pipeline.

Each tick runs, in order: the time system, the process systems (growth,
crafting, extraction, helpers, adventure) each inside its own isolation
boundary, the agent (presence check, Decision Engine, Action Executor, both
guarded), location time accounting, and the Progress/Phase Monitor.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable

from harvest.clock import MINUTES_PER_DAY
from harvest.engine import Engine
from harvest.types import SubsystemError, TickContext
from harvest_ai.actions import action_to_dict
from harvest_ai.decision import Decision, DecisionEngine
from harvest_ai.executor import ActionOutcome, execute
from harvest_farm.adventure import make_adventure_system
from harvest_farm.crafting import make_crafting_system
from harvest_farm.growth import make_growth_system
from harvest_farm.helpers import make_helper_system
from harvest_farm.mining import make_extraction_system
from harvest_farm.state import GameState

from harvest_sim.config import SimulationConfig
from harvest_sim.guard import guard_call, guarded
from harvest_sim.monitor import MonitorReport, ProgressMonitor
from harvest_sim.schedule import PresenceSchedule

logger = logging.getLogger(__name__)

REASONS = ("victory", "stuck", "stopped", "max_ticks", "error")


@dataclass
class TickResult:
    """Everything one tick produced.

    Attributes:
        tick_index: The tick number (1-based; tick n ends at minute n).
        state: Serialized GameState after the tick, or None when disabled.
        executed_action: The action applied this tick with its score
            breakdown and top alternatives, or None.
        events: Events emitted during the tick, oldest first.
        completed: True on the run's final tick.
        stuck: Whether the run is currently flagged stuck.
    """

    tick_index: int
    state: dict[str, Any] | None
    executed_action: dict[str, Any] | None
    events: list[dict[str, Any]]
    completed: bool
    stuck: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick_index": self.tick_index,
            "state": self.state,
            "executed_action": self.executed_action,
            "events": self.events,
            "completed": self.completed,
            "stuck": self.stuck,
        }


@dataclass
class RunSummary:
    reason: str
    final_phase: str
    total_ticks: int
    seed: int
    profile: str
    stuck_cause: str | None = None
    metrics: dict[str, Any] = field(default_factory=dict)
    error: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "reason": self.reason,
            "final_phase": self.final_phase,
            "total_ticks": self.total_ticks,
            "days": self.total_ticks / MINUTES_PER_DAY,
            "seed": self.seed,
            "profile": self.profile,
            "stuck_cause": self.stuck_cause,
            "metrics": self.metrics,
            "error": self.error,
        }


class Simulation:
    """Owns one GameState, one engine (clock + seeded RNG), and its monitor."""

    def __init__(self, config: SimulationConfig, seed: int | None = None) -> None:
        self._config = config
        params = config.params
        self._profile = config.profile
        state = config.initial.build(params.crafting.start_heat)
        self._engine = Engine(state, seed if seed is not None else config.seed, max_events=50_000)
        self._schedule = PresenceSchedule(config.profile)
        self._monitor = ProgressMonitor(params.monitor)
        self._decisions = DecisionEngine(
            config.data, params, config.profile.traits(), config.alternatives,
        )

        self._stage = "time"
        self._executed: dict[str, Any] | None = None
        self._report: MonitorReport | None = None
        self._reason: str | None = None
        self._error: dict[str, Any] | None = None
        self._last_good: dict[str, Any] = state.to_dict()
        self._actions: Counter[str] = Counter()
        self._checkins = 0
        self._session_acted = False
        self._empty_sessions = 0
        self._frustrated = False

        data = config.data
        self._add("time", self._advance_time)
        self._add("growth", guarded("growth", make_growth_system(data, params.growth)))
        self._add("crafting", guarded("crafting", make_crafting_system(data, params.crafting)))
        self._add("extraction", guarded(
            "extraction", make_extraction_system(params.mining, params.helpers),
        ))
        self._add("helpers", guarded("helpers", make_helper_system(
            data, params.helpers, params.farm, params.crafting,
        )))
        self._add("adventure", guarded("adventure", make_adventure_system(data, params.farm)))
        self._add("agent", self._agent)
        self._add("location", self._account_location)
        self._add("monitor", self._observe)

    # --- Properties ---

    @property
    def state(self) -> GameState:
        return self._engine.state

    @property
    def monitor(self) -> ProgressMonitor:
        return self._monitor

    @property
    def tick(self) -> int:
        return self._engine.clock.tick_number

    @property
    def seed(self) -> int:
        return self._engine.seed

    @property
    def done(self) -> bool:
        return self._reason is not None

    @property
    def reason(self) -> str | None:
        return self._reason

    @property
    def max_ticks(self) -> int:
        return self._config.max_ticks

    # --- Systems ---

    def _add(self, name: str, system: Callable[[GameState, TickContext], None]) -> None:
        def staged(state: GameState, ctx: TickContext) -> None:
            self._stage = name
            system(state, ctx)

        self._engine.add_system(staged)

    def _advance_time(self, state: GameState, ctx: TickContext) -> None:
        state.time.set_total(ctx.elapsed)

    def _agent(self, state: GameState, ctx: TickContext) -> None:
        time = state.time
        minute = time.hour * 60 + time.minute
        weekend = time.is_weekend
        if self._schedule.is_checkin(time.day, minute, weekend, ctx.random):
            self._begin_session()
        if not self._schedule.is_present(time.day, minute, weekend, ctx.random):
            return
        if ctx.random.random() >= self._profile.efficiency:
            return

        decision: Decision | None = guard_call(
            "decision", self._decisions.decide, state, ctx.emit, ctx.tick_number,
        )
        if decision is None or decision.chosen is None:
            return
        action = decision.chosen.action

        def apply(s: GameState) -> ActionOutcome:
            return execute(
                action, s, self._config.data, self._config.params,
                ctx.random, ctx.emit, ctx.tick_number, self._decisions.warn,
            )

        outcome = guard_call("executor", apply, state, ctx.emit)
        if outcome is None or not outcome.success:
            return
        self._session_acted = True
        self._actions[action.kind] += 1
        self._executed = {
            "action": action_to_dict(action),
            "score": decision.chosen.score,
            "breakdown": decision.chosen.to_dict(),
            "alternatives": [a.to_dict() for a in decision.alternatives],
            "considered": decision.considered,
            "filtered": dict(decision.filtered),
        }

    def _begin_session(self) -> None:
        if self._checkins and not self._session_acted:
            self._empty_sessions += 1
        elif self._checkins:
            self._empty_sessions = 0
        self._checkins += 1
        self._session_acted = False
        limit = self._profile.frustration_limit
        if limit > 0 and self._empty_sessions >= limit:
            self._frustrated = True

    def _account_location(self, state: GameState, ctx: TickContext) -> None:
        location = state.location
        location.minutes_here += ctx.dt
        spent = location.time_in_context
        spent[location.context] = spent.get(location.context, 0) + ctx.dt

    def _observe(self, state: GameState, ctx: TickContext) -> None:
        self._report = self._monitor.update(state, ctx.tick_number, ctx.emit)

    # --- Running ---

    def step(self) -> TickResult | None:
        """Run one tick; None when the run is over or just aborted."""
        if self.done:
            return None
        self._executed = None
        try:
            events = self._engine.step()
        except SubsystemError as exc:
            self._abort(exc.subsystem, str(exc))
            return None
        except Exception as exc:
            self._abort(self._stage, f"{type(exc).__name__}: {exc}")
            return None

        report = self._report
        snapshot = self.state.to_dict()
        self._last_good = snapshot
        if report is not None and report.victory:
            self._reason = "victory"
        elif report is not None and report.stuck and self._config.params.monitor.stop_on_stuck:
            self._reason = "stuck"
        elif self._frustrated:
            self._reason = "stuck"
        elif self.tick >= self.max_ticks:
            self._reason = "max_ticks"

        return TickResult(
            tick_index=self.tick,
            state=snapshot if self._config.include_state else None,
            executed_action=self._executed,
            events=[e.to_dict() for e in events],
            completed=self.done,
            stuck=report.stuck if report is not None else False,
        )

    def stop(self) -> None:
        if not self.done:
            self._reason = "stopped"

    def run(self, on_tick: Callable[[TickResult], None] | None = None) -> RunSummary:
        """Step until the run ends and return its summary."""
        while not self.done:
            result = self.step()
            if result is not None and on_tick is not None:
                on_tick(result)
        return self.summary()

    def _abort(self, subsystem: str, message: str) -> None:
        logger.error("Run aborted in %s at tick %d: %s", subsystem, self.tick, message)
        self._reason = "error"
        self._error = {
            "subsystem": subsystem,
            "message": message,
            "tick": self.tick,
            "last_good_state": self._last_good,
        }

    # --- Summary ---

    def summary(self) -> RunSummary:
        state = self.state if self._error is None else None
        final = self._last_good if state is None else state.to_dict()
        res = final["resources"]
        prog = final["progression"]
        monitor = self._monitor
        cause = monitor.cause
        if self._frustrated and cause is None:
            cause = "frustration"
        return RunSummary(
            reason=self._reason or "stopped",
            final_phase=prog["phase"],
            total_ticks=self.tick,
            seed=self.seed,
            profile=self._profile.id,
            stuck_cause=cause,
            metrics={
                "time_in_context": dict(final["location"]["time_in_context"]),
                "actions_by_kind": dict(sorted(self._actions.items())),
                "actions_total": sum(self._actions.values()),
                "bottlenecks": [b.to_dict() for b in monitor.bottlenecks],
                "phase_transitions": [
                    {"tick": tick, "from": before, "to": after}
                    for tick, before, after in monitor.transitions
                ],
                "final_resources": {
                    "energy": res["energy"]["current"],
                    "water": res["water"]["current"],
                    "gold": res["gold"],
                    "seeds": dict(res["seeds"]),
                    "materials": dict(res["materials"]),
                    "farm_plots": prog["farm_plots"],
                    "level": prog["level"],
                },
                "checkins": self._checkins,
            },
            error=self._error,
        )


def run_simulation(
    config: SimulationConfig | dict[str, Any],
    seed: int | None = None,
    on_tick: Callable[[TickResult], None] | None = None,
) -> RunSummary:
    """Build and run one simulation to completion."""
    if not isinstance(config, SimulationConfig):
        config = SimulationConfig.from_dict(config)
    return Simulation(config, seed).run(on_tick)
