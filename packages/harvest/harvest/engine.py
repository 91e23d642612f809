"""Engine - minute-step loop and seeded randomness."""

import os
import random
from typing import Any

from harvest.clock import Clock
from harvest.events import Event, EventLog
from harvest.types import System, TickContext


class Engine:
    """Runs registered systems against one mutable state object.

    Every random draw in a run must come from ``ctx.random``, the single
    ``random.Random`` owned by the engine, so a (state, seed) pair fully
    determines the run.
    """

    def __init__(
        self,
        state: Any,
        seed: int | None = None,
        dt: int = 1,
        max_events: int = 0,
    ) -> None:
        self._clock = Clock(dt)
        self._state = state
        self._events = EventLog(max_events)
        self._systems: list[System] = []

        if seed is None:
            seed = int.from_bytes(os.urandom(8))
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def state(self) -> Any:
        return self._state

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def seed(self) -> int:
        return self._seed

    def add_system(self, system: System) -> None:
        self._systems.append(system)

    def _emit(self, type: str, **data: Any) -> None:
        self._events.emit(self._clock.tick_number, type, **data)

    def context(self) -> TickContext:
        return self._clock.context(self._rng, self._emit)

    def step(self) -> list[Event]:
        """Run one tick and return the events it emitted."""
        self._clock.advance()
        ctx = self.context()
        for system in self._systems:
            system(self._state, ctx)
        return self._events.at(self._clock.tick_number)
