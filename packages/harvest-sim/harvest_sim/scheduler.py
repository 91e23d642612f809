"""Scheduler - pause/resume/speed control over a Simulation.

Speed is the number of ticks run per ``advance`` call (one host callback);
it never changes what a tick does. Control changes only take effect between
ticks.
"""
from __future__ import annotations

from harvest.types import ConfigError

from harvest_sim.simulation import Simulation, TickResult


class Scheduler:
    """Drives a Simulation in batches of ``speed`` ticks.

    Starts at tick 0, not running. Ends on an explicit stop, or when the
    simulation reaches victory, gets stuck, exhausts its ticks, or aborts.
    """

    def __init__(self, simulation: Simulation, speed: int = 1) -> None:
        self._sim = simulation
        self._running = False
        self._paused = False
        self._speed = 1
        self.set_speed(speed)

    @property
    def simulation(self) -> Simulation:
        return self._sim

    @property
    def running(self) -> bool:
        return self._running and not self.done

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def speed(self) -> int:
        return self._speed

    @property
    def done(self) -> bool:
        return self._sim.done

    def start(self) -> None:
        self._running = True
        self._paused = False

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def set_speed(self, speed: int) -> None:
        if isinstance(speed, bool) or not isinstance(speed, int) or speed < 1:
            raise ConfigError(f"speed must be a positive int, got {speed!r}")
        self._speed = speed

    def stop(self) -> None:
        self._running = False
        self._sim.stop()

    def step(self) -> TickResult | None:
        """Advance exactly one tick, whether or not the scheduler is paused."""
        return self._sim.step()

    def advance(self) -> list[TickResult]:
        """Run one batch; nothing while paused or not started."""
        if not self.running or self._paused:
            return []
        results: list[TickResult] = []
        for _ in range(self._speed):
            result = self._sim.step()
            if result is not None:
                results.append(result)
            if self._sim.done:
                break
        return results
