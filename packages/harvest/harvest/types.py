"""Shared types and errors for the harvest engine."""

from __future__ import annotations

import random as _random
from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True, slots=True)
class TickContext:
    """Per-tick view handed to every system.

    ``dt`` and ``elapsed`` are in simulated minutes. ``emit`` records a typed
    event stamped with the current tick.
    """

    tick_number: int
    dt: int
    elapsed: int
    random: _random.Random
    emit: Callable[..., None]


class HarvestError(Exception):
    """Base class for engine errors."""


class ConfigError(HarvestError, ValueError):
    """Raised when a configuration value has the wrong shape or type."""


class DefinitionError(HarvestError, ValueError):
    """Raised when an item/rule definition is malformed."""


class SubsystemError(HarvestError):
    """Raised when a subsystem fails.

    ``partial`` is True when the failing subsystem had already mutated the
    state before raising, which makes the state unsafe to keep simulating.
    """

    def __init__(self, subsystem: str, message: str, partial: bool = False) -> None:
        self.subsystem = subsystem
        self.partial = partial
        super().__init__(f"{subsystem}: {message}")


System = Callable[[Any, TickContext], None]
