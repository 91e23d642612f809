"""GameState - the single mutable world model of a run.

The state is a tree of plain dataclasses grouped into sections (time,
resources, progression, inventory, processes, helpers, location). Only
process systems and the action executor mutate it, and only inside a tick.
``to_dict``/``from_dict`` give a JSON-compatible form with sets sorted, so two
identical states always serialize to identical bytes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from harvest.clock import calendar
from harvest_combat.types import Armor, EncounterResult, Weapon

CONTEXTS = ("farm", "tower", "town", "forge", "mine", "adventure")


@dataclass
class GameTime:
    day: int = 1
    hour: int = 0
    minute: int = 0
    total_minutes: int = 0

    def set_total(self, total_minutes: int) -> None:
        if total_minutes < self.total_minutes:
            raise ValueError("simulated time never moves backwards")
        self.total_minutes = total_minutes
        self.day, self.hour, self.minute = calendar(total_minutes)

    @property
    def is_weekend(self) -> bool:
        return (self.day - 1) % 7 in (5, 6)


@dataclass
class Stock:
    """A bounded numeric stock: 0 <= current <= maximum."""

    current: float
    maximum: float

    def __post_init__(self) -> None:
        if self.maximum < 0:
            raise ValueError("maximum must be >= 0")
        self.current = min(max(0.0, self.current), self.maximum)

    @property
    def fraction(self) -> float:
        return self.current / self.maximum if self.maximum > 0 else 0.0

    @property
    def room(self) -> float:
        return self.maximum - self.current

    def add(self, amount: float) -> float:
        """Add up to the maximum; return the amount actually added."""
        applied = min(max(0.0, amount), self.room)
        self.current += applied
        return applied

    def drain(self, amount: float) -> float:
        """Remove down to zero; return the amount actually removed."""
        applied = min(max(0.0, amount), self.current)
        self.current -= applied
        return applied

    def spend(self, amount: float) -> bool:
        """Remove exactly ``amount`` or nothing."""
        if amount > self.current:
            return False
        self.current -= amount
        return True

    def raise_max(self, amount: float) -> None:
        self.maximum += amount


@dataclass
class Resources:
    energy: Stock = field(default_factory=lambda: Stock(100, 100))
    water: Stock = field(default_factory=lambda: Stock(100, 200))
    gold: int = 100
    seeds: dict[str, int] = field(default_factory=dict)
    materials: dict[str, int] = field(default_factory=dict)

    def has_materials(self, cost: dict[str, int]) -> bool:
        return all(self.materials.get(k, 0) >= v for k, v in cost.items())

    def spend_materials(self, cost: dict[str, int]) -> None:
        if not self.has_materials(cost):
            raise ValueError(f"insufficient materials for {cost!r}")
        for k, v in cost.items():
            self.materials[k] -= v

    def add_materials(self, gained: dict[str, int]) -> None:
        for k, v in gained.items():
            self.materials[k] = self.materials.get(k, 0) + v


@dataclass
class Progression:
    level: int = 1
    xp: int = 0
    unlocked: set[str] = field(default_factory=set)
    cleanups: set[str] = field(default_factory=set)
    farm_plots: int = 3
    phase: str = "tutorial"
    phase_index: int = 0
    housing: int = 0

    def unlock(self, item_id: str) -> None:
        self.unlocked.add(item_id)


@dataclass
class Inventory:
    tools: dict[str, bool] = field(default_factory=dict)
    weapons: dict[str, Weapon] = field(default_factory=dict)
    armor: list[Armor] = field(default_factory=list)
    equipped_armor: str | None = None
    blueprints: set[str] = field(default_factory=set)

    def equipped(self) -> Armor | None:
        for piece in self.armor:
            if piece.id == self.equipped_armor:
                return piece
        return None


@dataclass
class Plot:
    """One farm plot. Growth is tracked in effective minutes for exactness."""

    crop: str | None = None
    growth_time: float = 0.0
    growth_elapsed: float = 0.0
    stages: int = 3
    water: float = 1.0
    dry_minutes: int = 0
    ready: bool = False
    dead: bool = False

    @property
    def empty(self) -> bool:
        return self.crop is None

    @property
    def progress(self) -> float:
        if self.crop is None or self.growth_time <= 0:
            return 0.0
        return min(1.0, self.growth_elapsed / self.growth_time)

    @property
    def stage(self) -> int:
        if self.crop is None or self.growth_time <= 0:
            return 0
        return min(self.stages, int(self.growth_elapsed * self.stages // self.growth_time))

    def clear(self) -> None:
        self.crop = None
        self.growth_time = 0.0
        self.growth_elapsed = 0.0
        self.dry_minutes = 0
        self.ready = False


@dataclass
class CraftJob:
    recipe: str
    duration: float
    progress: float = 0.0


@dataclass
class ExtractionSession:
    depth: float = 0.0
    minutes: int = 0
    drop_clock: float = 0.0
    drops: dict[str, int] = field(default_factory=dict)


@dataclass
class EncounterSession:
    encounter: str
    remaining: int
    result: EncounterResult


@dataclass
class Processes:
    plots: list[Plot] = field(default_factory=list)
    crafting: list[CraftJob] = field(default_factory=list)
    heat: float = 3000.0
    extraction: ExtractionSession | None = None
    encounter: EncounterSession | None = None

    @property
    def hero_busy(self) -> bool:
        return self.extraction is not None or self.encounter is not None


@dataclass
class Helper:
    id: str
    level: int = 1
    housed: bool = False
    role: str | None = None
    secondary: str | None = None
    carry: dict[str, float] = field(default_factory=dict)

    @property
    def working(self) -> bool:
        return self.housed and self.role is not None

    def roles(self) -> tuple[str, ...]:
        if self.role is None:
            return ()
        if self.secondary is None:
            return (self.role,)
        return (self.role, self.secondary)


@dataclass
class Location:
    context: str = "farm"
    minutes_here: int = 0
    last_change: int | None = None
    time_in_context: dict[str, int] = field(default_factory=dict)


@dataclass
class GameState:
    time: GameTime = field(default_factory=GameTime)
    resources: Resources = field(default_factory=Resources)
    progression: Progression = field(default_factory=Progression)
    inventory: Inventory = field(default_factory=Inventory)
    processes: Processes = field(default_factory=Processes)
    helpers: list[Helper] = field(default_factory=list)
    location: Location = field(default_factory=Location)

    def __post_init__(self) -> None:
        self.ensure_plots()

    def ensure_plots(self) -> None:
        """Grow the plot list to match ``progression.farm_plots``."""
        plots = self.processes.plots
        while len(plots) < self.progression.farm_plots:
            plots.append(Plot())

    def helper(self, helper_id: str) -> Helper | None:
        for h in self.helpers:
            if h.id == helper_id:
                return h
        return None

    def housed_count(self) -> int:
        return sum(1 for h in self.helpers if h.housed)

    # --- Serialization ---

    def to_dict(self) -> dict[str, Any]:
        p = self.processes
        inv = self.inventory
        prog = self.progression
        res = self.resources
        return {
            "time": {
                "day": self.time.day,
                "hour": self.time.hour,
                "minute": self.time.minute,
                "total_minutes": self.time.total_minutes,
            },
            "resources": {
                "energy": {"current": res.energy.current, "max": res.energy.maximum},
                "water": {"current": res.water.current, "max": res.water.maximum},
                "gold": res.gold,
                "seeds": dict(res.seeds),
                "materials": dict(res.materials),
            },
            "progression": {
                "level": prog.level,
                "xp": prog.xp,
                "unlocked": sorted(prog.unlocked),
                "cleanups": sorted(prog.cleanups),
                "farm_plots": prog.farm_plots,
                "phase": prog.phase,
                "phase_index": prog.phase_index,
                "housing": prog.housing,
            },
            "inventory": {
                "tools": dict(inv.tools),
                "weapons": {
                    k: {"damage": w.damage, "attack_speed": w.attack_speed, "level": w.level}
                    for k, w in inv.weapons.items()
                },
                "armor": [
                    {"id": a.id, "defense": a.defense, "effect": a.effect} for a in inv.armor
                ],
                "equipped_armor": inv.equipped_armor,
                "blueprints": sorted(inv.blueprints),
            },
            "processes": {
                "plots": [
                    {
                        "crop": pl.crop,
                        "growth_time": pl.growth_time,
                        "growth_elapsed": pl.growth_elapsed,
                        "stages": pl.stages,
                        "water": pl.water,
                        "dry_minutes": pl.dry_minutes,
                        "ready": pl.ready,
                        "dead": pl.dead,
                    }
                    for pl in p.plots
                ],
                "crafting": [
                    {"recipe": j.recipe, "duration": j.duration, "progress": j.progress}
                    for j in p.crafting
                ],
                "heat": p.heat,
                "extraction": None if p.extraction is None else {
                    "depth": p.extraction.depth,
                    "minutes": p.extraction.minutes,
                    "drop_clock": p.extraction.drop_clock,
                    "drops": dict(p.extraction.drops),
                },
                "encounter": None if p.encounter is None else {
                    "encounter": p.encounter.encounter,
                    "remaining": p.encounter.remaining,
                    "result": p.encounter.result.to_dict(),
                },
            },
            "helpers": [
                {
                    "id": h.id,
                    "level": h.level,
                    "housed": h.housed,
                    "role": h.role,
                    "secondary": h.secondary,
                    "carry": dict(h.carry),
                }
                for h in self.helpers
            ],
            "location": {
                "context": self.location.context,
                "minutes_here": self.location.minutes_here,
                "last_change": self.location.last_change,
                "time_in_context": dict(self.location.time_in_context),
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameState:
        t = data["time"]
        r = data["resources"]
        pr = data["progression"]
        inv = data["inventory"]
        p = data["processes"]
        loc = data["location"]
        extraction = p.get("extraction")
        encounter = p.get("encounter")
        return cls(
            time=GameTime(t["day"], t["hour"], t["minute"], t["total_minutes"]),
            resources=Resources(
                energy=Stock(r["energy"]["current"], r["energy"]["max"]),
                water=Stock(r["water"]["current"], r["water"]["max"]),
                gold=r["gold"],
                seeds=dict(r["seeds"]),
                materials=dict(r["materials"]),
            ),
            progression=Progression(
                level=pr["level"],
                xp=pr["xp"],
                unlocked=set(pr["unlocked"]),
                cleanups=set(pr["cleanups"]),
                farm_plots=pr["farm_plots"],
                phase=pr["phase"],
                phase_index=pr.get("phase_index", 0),
                housing=pr.get("housing", 0),
            ),
            inventory=Inventory(
                tools=dict(inv["tools"]),
                weapons={
                    k: Weapon(k, w["damage"], w["attack_speed"], w["level"])
                    for k, w in inv["weapons"].items()
                },
                armor=[Armor(a["id"], a["defense"], a["effect"]) for a in inv["armor"]],
                equipped_armor=inv.get("equipped_armor"),
                blueprints=set(inv["blueprints"]),
            ),
            processes=Processes(
                plots=[Plot(**pl) for pl in p["plots"]],
                crafting=[CraftJob(**j) for j in p["crafting"]],
                heat=p["heat"],
                extraction=None if extraction is None else ExtractionSession(
                    depth=extraction["depth"],
                    minutes=extraction["minutes"],
                    drop_clock=extraction["drop_clock"],
                    drops=dict(extraction["drops"]),
                ),
                encounter=None if encounter is None else EncounterSession(
                    encounter=encounter["encounter"],
                    remaining=encounter["remaining"],
                    result=EncounterResult.from_dict(encounter["result"]),
                ),
            ),
            helpers=[
                Helper(
                    id=h["id"], level=h["level"], housed=h["housed"], role=h["role"],
                    secondary=h["secondary"], carry=dict(h["carry"]),
                )
                for h in data["helpers"]
            ],
            location=Location(
                context=loc["context"],
                minutes_here=loc["minutes_here"],
                last_change=loc["last_change"],
                time_in_context=dict(loc["time_in_context"]),
            ),
        )
