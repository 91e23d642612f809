"""Clock and TickContext for the minute-step engine."""

import random
from typing import Callable

from harvest.types import TickContext

MINUTES_PER_DAY = 1440


class Clock:
    """Counts ticks; one tick advances simulated time by ``dt`` minutes."""

    def __init__(self, dt: int = 1) -> None:
        if dt <= 0:
            raise ValueError("dt must be positive")
        self._dt = dt
        self._tick_number = 0

    @property
    def dt(self) -> int:
        return self._dt

    @property
    def tick_number(self) -> int:
        return self._tick_number

    @property
    def elapsed(self) -> int:
        return self._tick_number * self._dt

    def advance(self) -> int:
        self._tick_number += 1
        return self._tick_number

    def context(
        self,
        rng: random.Random,
        emit: Callable[..., None],
    ) -> TickContext:
        return TickContext(
            tick_number=self._tick_number,
            dt=self._dt,
            elapsed=self.elapsed,
            random=rng,
            emit=emit,
        )


def calendar(total_minutes: int) -> tuple[int, int, int]:
    """Split elapsed minutes into (day, hour, minute); day 1 starts at minute 0."""
    day, rest = divmod(total_minutes, MINUTES_PER_DAY)
    hour, minute = divmod(rest, 60)
    return day + 1, hour, minute
