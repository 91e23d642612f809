"""Typed event log shared by every subsystem of a run."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any


@dataclass
class Event:
    tick: int
    type: str
    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"tick": self.tick, "type": self.type, "data": dict(self.data)}


class EventLog:
    """Recent events, oldest first; ``max_entries`` > 0 keeps only the newest."""

    def __init__(self, max_entries: int = 0) -> None:
        maxlen = max_entries if max_entries > 0 else None
        self._events: deque[Event] = deque(maxlen=maxlen)

    def emit(self, tick: int, type: str, **data: Any) -> None:
        self._events.append(Event(tick=tick, type=type, data=data))

    def at(self, tick: int) -> list[Event]:
        """Events stamped with exactly ``tick``, oldest first."""
        found: list[Event] = []
        for e in reversed(self._events):
            if e.tick < tick:
                break
            if e.tick == tick:
                found.append(e)
        found.reverse()
        return found

    def __len__(self) -> int:
        return len(self._events)
