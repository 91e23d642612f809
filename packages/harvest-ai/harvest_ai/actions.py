"""Action variants - one frozen dataclass per action kind.

``Action`` is the closed union of every variant; candidate generation,
eligibility, scoring, and the executor all dispatch on ``kind``.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, ClassVar, Union


@dataclass(frozen=True)
class Plant:
    kind: ClassVar[str] = "plant"
    plot: int
    crop: str


@dataclass(frozen=True)
class Harvest:
    kind: ClassVar[str] = "harvest"
    plots: tuple[int, ...]


@dataclass(frozen=True)
class Water:
    kind: ClassVar[str] = "water"
    plots: tuple[int, ...]


@dataclass(frozen=True)
class Pump:
    kind: ClassVar[str] = "pump"


@dataclass(frozen=True)
class Cleanup:
    kind: ClassVar[str] = "cleanup"
    cleanup: str


@dataclass(frozen=True)
class CatchSeeds:
    kind: ClassVar[str] = "catch_seeds"


@dataclass(frozen=True)
class Purchase:
    kind: ClassVar[str] = "purchase"
    item: str


@dataclass(frozen=True)
class Craft:
    kind: ClassVar[str] = "craft"
    recipe: str


@dataclass(frozen=True)
class Stoke:
    kind: ClassVar[str] = "stoke"


@dataclass(frozen=True)
class StartExtraction:
    kind: ClassVar[str] = "start_extraction"


@dataclass(frozen=True)
class StopExtraction:
    kind: ClassVar[str] = "stop_extraction"


@dataclass(frozen=True)
class StartEncounter:
    kind: ClassVar[str] = "start_encounter"
    encounter: str


@dataclass(frozen=True)
class ChangeContext:
    kind: ClassVar[str] = "change_context"
    target: str


@dataclass(frozen=True)
class RescueHelper:
    kind: ClassVar[str] = "rescue_helper"
    helper: str


@dataclass(frozen=True)
class AssignHelper:
    kind: ClassVar[str] = "assign_helper"
    helper: str
    role: str
    secondary: bool = False


@dataclass(frozen=True)
class TrainHelper:
    kind: ClassVar[str] = "train_helper"
    helper: str


Action = Union[
    Plant,
    Harvest,
    Water,
    Pump,
    Cleanup,
    CatchSeeds,
    Purchase,
    Craft,
    Stoke,
    StartExtraction,
    StopExtraction,
    StartEncounter,
    ChangeContext,
    RescueHelper,
    AssignHelper,
    TrainHelper,
]

ACTION_TYPES: dict[str, type] = {
    cls.kind: cls
    for cls in (
        Plant, Harvest, Water, Pump, Cleanup, CatchSeeds, Purchase, Craft, Stoke,
        StartExtraction, StopExtraction, StartEncounter, ChangeContext,
        RescueHelper, AssignHelper, TrainHelper,
    )
}

ACTION_KINDS = tuple(ACTION_TYPES)


def action_to_dict(action: Action) -> dict[str, Any]:
    data: dict[str, Any] = {"kind": getattr(action, "kind", type(action).__name__)}
    if not dataclasses.is_dataclass(action):
        return data
    for f in dataclasses.fields(action):
        value = getattr(action, f.name)
        data[f.name] = list(value) if isinstance(value, tuple) else value
    return data


def action_from_dict(data: dict[str, Any]) -> Action:
    """Rebuild an action; raises KeyError for an unknown ``kind``."""
    fields = dict(data)
    cls = ACTION_TYPES[fields.pop("kind")]
    for f in dataclasses.fields(cls):
        if isinstance(fields.get(f.name), list):
            fields[f.name] = tuple(fields[f.name])
    return cls(**fields)
