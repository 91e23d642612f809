"""Subsystem isolation boundaries.

A guarded subsystem that raises is skipped for the tick when it left the
state untouched, and aborts the run (``SubsystemError(partial=True)``) when
it did not. "Untouched" is decided by comparing pickled fingerprints of the
state sections the subsystem may write, taken before and after.
"""
from __future__ import annotations

import logging
import pickle
from typing import Any, Callable, TypeVar

from harvest.types import SubsystemError, TickContext
from harvest_farm.state import GameState

logger = logging.getLogger(__name__)

T = TypeVar("T")

SECTIONS = ("time", "resources", "progression", "inventory", "processes", "helpers", "location")


def fingerprint(state: GameState, sections: tuple[str, ...] = SECTIONS) -> bytes:
    return pickle.dumps(
        [getattr(state, name) for name in sections],
        protocol=pickle.HIGHEST_PROTOCOL,
    )


def guard_call(
    name: str,
    fn: Callable[..., T],
    state: GameState,
    emit: Callable[..., None],
    *args: Any,
    sections: tuple[str, ...] = SECTIONS,
) -> T | None:
    """Call ``fn(state, *args)`` inside an isolation boundary.

    Returns the call's result, or None when the subsystem failed cleanly.
    """
    before = fingerprint(state, sections)
    try:
        return fn(state, *args)
    except Exception as exc:
        if fingerprint(state, sections) != before:
            raise SubsystemError(name, f"{type(exc).__name__}: {exc}", partial=True) from exc
        logger.exception("Subsystem %s failed; skipped this tick", name)
        emit("subsystem_error", subsystem=name, message=f"{type(exc).__name__}: {exc}")
        return None


def guarded(
    name: str,
    system: Callable[[GameState, TickContext], None],
    sections: tuple[str, ...] = SECTIONS,
) -> Callable[[GameState, TickContext], None]:
    """Wrap an engine system in ``guard_call``."""

    def guarded_system(state: GameState, ctx: TickContext) -> None:
        guard_call(name, system, state, ctx.emit, ctx, sections=sections)

    guarded_system.__name__ = f"guarded_{name}"
    return guarded_system
