"""harvest - A minute-step simulation engine for idle-progression games."""

from harvest.clock import MINUTES_PER_DAY, Clock, calendar
from harvest.engine import Engine
from harvest.events import Event, EventLog
from harvest.types import (
    ConfigError,
    DefinitionError,
    HarvestError,
    SubsystemError,
    System,
    TickContext,
)

__all__ = [
    "Engine",
    "Clock",
    "calendar",
    "MINUTES_PER_DAY",
    "TickContext",
    "System",
    "Event",
    "EventLog",
    "HarvestError",
    "ConfigError",
    "DefinitionError",
    "SubsystemError",
]
