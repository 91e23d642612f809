"""Item/rule definitions consumed by the simulator."""
from __future__ import annotations

from dataclasses import dataclass, field

from harvest.types import DefinitionError

VENDOR_CATEGORIES = ("upgrade", "blueprint", "seeds", "housing", "storage")
RECIPE_OUTPUTS = ("tool", "weapon", "armor", "material")


@dataclass(frozen=True, kw_only=True)
class Definition:
    """Fields shared by every definition: identity, cost, and gating."""

    id: str
    name: str = ""
    prerequisites: tuple[str, ...] = ()
    energy_cost: int = 0
    gold_cost: int = 0
    materials: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise DefinitionError("id must be non-empty")
        if self.energy_cost < 0 or self.gold_cost < 0:
            raise DefinitionError(f"{self.id}: costs must be >= 0")
        for material, qty in self.materials.items():
            if qty < 0:
                raise DefinitionError(f"{self.id}: material {material!r} cost must be >= 0")


@dataclass(frozen=True, kw_only=True)
class CropDef(Definition):
    growth_minutes: float
    stages: int = 3
    energy_yield: int = 1
    energy_cost: int = 1
    xp: int = 0
    catch_weight: float = 1.0

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.growth_minutes <= 0:
            raise DefinitionError(f"{self.id}: growth_minutes must be > 0")
        if self.stages < 1:
            raise DefinitionError(f"{self.id}: stages must be >= 1")


@dataclass(frozen=True, kw_only=True)
class CleanupDef(Definition):
    """An irreversible one-time clearing that adds farm plots."""

    plots_added: int
    tool: str | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.plots_added < 0:
            raise DefinitionError(f"{self.id}: plots_added must be >= 0")


@dataclass(frozen=True, kw_only=True)
class VendorItem(Definition):
    """Something bought in town.

    ``amount`` is the housing capacity (``housing``) or the max-stock raise
    (``storage``, applied to ``stock``). ``seeds`` is the pack contents for
    the ``seeds`` category, which is the only repeatable category.
    """

    category: str = "upgrade"
    amount: int = 0
    stock: str = "water"
    seeds: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.category not in VENDOR_CATEGORIES:
            raise DefinitionError(f"{self.id}: unknown vendor category {self.category!r}")
        if self.category == "storage" and self.stock not in ("water", "energy"):
            raise DefinitionError(f"{self.id}: storage stock must be water or energy")

    @property
    def repeatable(self) -> bool:
        return self.category == "seeds"


@dataclass(frozen=True, kw_only=True)
class RecipeDef(Definition):
    """A forge recipe producing a tool, weapon, armor piece, or materials."""

    duration: float
    output: str = "tool"
    family: str | None = None
    damage: float = 0.0
    attack_speed: float = 1.0
    defense: float = 0.0
    effect: str | None = None
    outputs: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.duration <= 0:
            raise DefinitionError(f"{self.id}: duration must be > 0")
        if self.output not in RECIPE_OUTPUTS:
            raise DefinitionError(f"{self.id}: unknown output {self.output!r}")
        if self.output == "weapon" and not self.family:
            raise DefinitionError(f"{self.id}: weapon recipes need a family")
        if self.output == "weapon" and (self.damage <= 0 or self.attack_speed <= 0):
            raise DefinitionError(f"{self.id}: weapon recipes need positive damage and attack speed")
        if self.output == "material" and not self.outputs:
            raise DefinitionError(f"{self.id}: material recipes need outputs")

    @property
    def repeatable(self) -> bool:
        return self.output in ("weapon", "material")


@dataclass(frozen=True, kw_only=True)
class HelperDef(Definition):
    """A rescuable helper."""

    level: int = 1
