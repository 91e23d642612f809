"""Presence schedule - maps a profile's check-in pattern onto minutes."""
from __future__ import annotations

import random

from harvest.clock import MINUTES_PER_DAY

from harvest_sim.profile import BehaviorProfile


def plan_checkins(
    profile: BehaviorProfile,
    weekend: bool,
    rng: random.Random,
) -> list[int]:
    """Check-in start minutes for one day, sorted.

    The active hours are split into as many equal windows as the day has
    check-ins; each check-in fires at its window boundary, shifted by up to
    half a window times ``variance`` in either direction.
    """
    count = profile.checkins(weekend)
    if count <= 0:
        return []
    start, end = profile.active_hours
    first = start * 60
    span = (end - start) * 60
    window = span / count
    starts: list[int] = []
    for i in range(count):
        minute = first + i * window
        if profile.variance > 0:
            minute += rng.uniform(-0.5, 0.5) * profile.variance * window
        starts.append(min(MINUTES_PER_DAY - 1, max(0, int(round(minute)))))
    return sorted(starts)


class PresenceSchedule:
    """Answers "is the player here this minute", planning one day at a time.

    A day is planned the first time one of its minutes is asked about, so
    the random draws happen in tick order and a run stays reproducible.
    """

    def __init__(self, profile: BehaviorProfile) -> None:
        self._profile = profile
        self._day: int | None = None
        self._starts: list[int] = []

    @property
    def starts(self) -> list[int]:
        return list(self._starts)

    def _ensure_day(self, day: int, weekend: bool, rng: random.Random) -> None:
        if day != self._day:
            self._day = day
            self._starts = plan_checkins(self._profile, weekend, rng)
            if day == 1:
                # Tick 1 is the first minute of the run; minute 0 of day 1 never happens.
                self._starts = sorted({max(1, s) for s in self._starts})

    def is_checkin(self, day: int, minute: int, weekend: bool, rng: random.Random) -> bool:
        """True on the first minute of a check-in session."""
        self._ensure_day(day, weekend, rng)
        return minute in self._starts

    def is_present(self, day: int, minute: int, weekend: bool, rng: random.Random) -> bool:
        self._ensure_day(day, weekend, rng)
        session = self._profile.session_minutes
        return any(s <= minute < s + session for s in self._starts)
