"""Weighted multi-criteria scoring.

``score = sum(weights[f] * features[f])`` over a fixed feature set:

    priority     base priority of the kind x profile multiplier x relevance
    value        expected resources gained, in value units
    progress     lasting progress (plots, unlocks, helpers)
    risk         predicted HP margin of an encounter beyond the risk margin
    cost         resources spent, in value units (negative weight)
    time         hours the action ties something up (negative weight)
    opportunity  best score reachable in a move's target context
    thrash       1.0 for a move inside the context-change cooldown

Replenishing actions with a positive score get ``urgency_multiplier`` when
their stock is low.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from harvest_combat.resolver import estimate_encounter, wave_size_bounds
from harvest_combat.types import EncounterDef
from harvest_farm.crafting import success_chance
from harvest_farm.defs import CleanupDef, CropDef, HelperDef, RecipeDef, VendorItem
from harvest_farm.effects import best_of
from harvest_farm.helpers import role_total
from harvest_farm.mining import depth_tier, drain_reduction, energy_drain
from harvest_farm.params import Parameters
from harvest_farm.registry import GameData
from harvest_farm.state import GameState

from harvest_ai.actions import Action, action_to_dict
from harvest_ai.eligibility import rescue_cost, train_cost
from harvest_ai.traits import AgentTraits

FEATURES = ("priority", "value", "progress", "risk", "cost", "time", "opportunity", "thrash")

# kind -> stock it replenishes; purchase and craft depend on the item.
_REPLENISHES = {
    "harvest": "energy",
    "pump": "water",
    "catch_seeds": "seeds",
    "start_extraction": "materials",
    "start_encounter": "gold",
}


@dataclass
class ScoreBreakdown:
    action: Action
    features: dict[str, float]
    weights: dict[str, float]
    urgency: float = 1.0
    score: float = 0.0
    order: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": action_to_dict(self.action),
            "features": dict(self.features),
            "contributions": {
                name: self.weights.get(name, 0.0) * value
                for name, value in self.features.items()
            },
            "urgency": self.urgency,
            "score": self.score,
            "order": self.order,
        }


@dataclass
class Scorer:
    """Scores the candidates of one decision against a fixed state."""

    state: GameState
    data: GameData
    params: Parameters
    traits: AgentTraits
    tick: int

    # --- Public ---

    def score(self, action: Action, order: int = 0, opportunity: float = 0.0) -> ScoreBreakdown:
        sp = self.params.scoring
        features = dict.fromkeys(FEATURES, 0.0)
        relevance, extra = _FEATURES[action.kind](self, action)
        features.update(extra)
        scale = self.traits.value_scale
        features["value"] *= scale
        features["progress"] *= scale
        features["priority"] = (
            sp.priorities.get(action.kind, 0.0) * self.traits.multiplier(action.kind) * relevance
        )
        if action.kind == "change_context":
            features["opportunity"] = opportunity
            features["thrash"] = 1.0 if self._in_cooldown() else 0.0
        total = sum(sp.weights.get(name, 0.0) * value for name, value in features.items())
        # A low stock only ever makes its refill more attractive.
        urgency = sp.urgency_multiplier if total > 0 and self._urgent(action) else 1.0
        return ScoreBreakdown(
            action=action,
            features=features,
            weights=dict(sp.weights),
            urgency=urgency,
            score=total * urgency,
            order=order,
        )

    # --- Helpers ---

    def _in_cooldown(self) -> bool:
        last = self.state.location.last_change
        return last is not None and self.tick - last < self.params.scoring.context_cooldown

    def stock_low(self, stock: str) -> bool:
        sp = self.params.scoring
        res = self.state.resources
        if stock == "energy":
            return res.energy.fraction < sp.energy_low
        if stock == "water":
            return res.water.fraction < sp.water_low
        if stock == "seeds":
            return sum(res.seeds.values()) < sp.seeds_low
        if stock == "gold":
            return res.gold < sp.gold_low
        if stock == "materials":
            return sum(res.materials.values()) < sp.materials_low
        return False

    def _urgent(self, action: Action) -> bool:
        stock = _REPLENISHES.get(action.kind)
        if action.kind == "purchase":
            item = self.data.find(action.item, VendorItem)
            stock = "seeds" if item is not None and item.category == "seeds" else None
        elif action.kind == "craft":
            recipe = self.data.find(action.recipe, RecipeDef)
            stock = "materials" if recipe is not None and recipe.output == "material" else None
        return stock is not None and self.stock_low(stock)

    def materials_value(self, materials: dict[str, int]) -> float:
        return sum(materials.values()) * self.params.scoring.value_material

    def cost_value(self, energy: float = 0, gold: int = 0, materials: dict[str, int] | None = None) -> float:
        sp = self.params.scoring
        return (
            energy * sp.value_energy
            + gold * sp.value_gold
            + self.materials_value(materials or {})
        )


Features = tuple[float, dict[str, float]]


def _plant(s: Scorer, action) -> Features:
    crop = s.data.find(action.crop, CropDef)
    sp = s.params.scoring
    return 1.0, {
        "value": crop.energy_yield * sp.value_energy + (crop.xp or s.params.farm.harvest_xp) * sp.value_xp,
        "cost": s.cost_value(energy=crop.energy_cost) + sp.value_seed,
        "time": crop.growth_minutes / 60.0,
    }


def _harvest(s: Scorer, action) -> Features:
    sp = s.params.scoring
    energy = 0.0
    xp = 0.0
    for index in action.plots:
        crop = s.data.find(s.state.processes.plots[index].crop, CropDef)
        if crop is not None:
            energy += crop.energy_yield
            xp += crop.xp or s.params.farm.harvest_xp
    energy = min(energy, s.state.resources.energy.room)
    return 1.0, {"value": energy * sp.value_energy + xp * sp.value_xp}


def _water(s: Scorer, action) -> Features:
    sp = s.params.scoring
    plots = s.state.processes.plots
    saved = 0.0
    for index in action.plots:
        crop = s.data.find(plots[index].crop, CropDef)
        if crop is not None:
            saved += (1.0 - plots[index].water) * crop.energy_yield
    spent = len(action.plots) * s.params.farm.water_per_plot
    return 1.0, {"value": saved * sp.value_energy, "cost": spent * sp.value_water}


def _pump(s: Scorer, action) -> Features:
    water = s.state.resources.water
    rate = best_of(s.state.progression.unlocked, s.params.farm.pump_upgrades, s.params.farm.pump_rate)
    gained = min(rate, water.room)
    return 1.0 - water.fraction, {"value": gained * s.params.scoring.value_water}


def _cleanup(s: Scorer, action) -> Features:
    cleanup = s.data.find(action.cleanup, CleanupDef)
    return 1.0, {
        "progress": cleanup.plots_added * s.params.scoring.value_plot,
        "cost": s.cost_value(cleanup.energy_cost, cleanup.gold_cost, cleanup.materials),
    }


def _catch_seeds(s: Scorer, action) -> Features:
    farm = s.params.farm
    low, high = farm.catch_quantity
    bonus = best_of(s.state.progression.unlocked, farm.net_upgrades, 0)
    expected = (low + high) / 2.0 + bonus
    return 1.0, {
        "value": expected * s.params.scoring.value_seed,
        "cost": s.cost_value(energy=farm.catch_energy),
    }


def _purchase(s: Scorer, action) -> Features:
    item = s.data.find(action.item, VendorItem)
    sp = s.params.scoring
    features = {"cost": s.cost_value(item.energy_cost, item.gold_cost, item.materials)}
    relevance = 1.0
    if item.category == "seeds":
        features["value"] = sum(item.seeds.values()) * sp.value_seed
        relevance = 1.0 if s.stock_low("seeds") else 0.2
    elif item.category == "housing":
        features["progress"] = item.amount * sp.value_helper
    elif item.category == "storage":
        features["value"] = item.amount * (sp.value_energy if item.stock == "energy" else sp.value_water)
    else:
        features["progress"] = sp.value_unlock
    return relevance, features


def _craft(s: Scorer, action) -> Features:
    recipe = s.data.find(action.recipe, RecipeDef)
    sp = s.params.scoring
    chance = success_chance(s.state.processes.heat, s.params.crafting)
    features = {
        "cost": s.cost_value(recipe.energy_cost, recipe.gold_cost, recipe.materials),
        "time": recipe.duration / 60.0,
    }
    if recipe.output == "material":
        features["value"] = s.materials_value(recipe.outputs) * chance
    elif recipe.output == "weapon" and recipe.family in s.state.inventory.weapons:
        features["progress"] = sp.value_unlock * 0.5 * chance
    else:
        features["progress"] = sp.value_unlock * chance
    return 1.0, features


def _stoke(s: Scorer, action) -> Features:
    crafting = s.params.crafting
    heat = s.state.processes.heat
    queued = bool(s.state.processes.crafting)
    gain = success_chance(min(crafting.max_heat, heat + crafting.stoke_heat), crafting) - success_chance(heat, crafting)
    relevance = 1.0 if queued and gain > 0 else 0.0
    return relevance, {
        "value": max(0.0, gain) * s.params.scoring.value_unlock,
        "cost": s.materials_value({"wood": crafting.stoke_wood}),
    }


def _start_extraction(s: Scorer, action) -> Features:
    mining = s.params.mining
    energy = s.state.resources.energy
    reduction = drain_reduction(s.state, mining, s.params.helpers)
    # Minutes until the stop threshold, walking down the tiers.
    budget = energy.current - energy.maximum * s.params.scoring.mine_stop_below
    depth = 0.0
    minutes = 0
    while budget > 0 and minutes < 24 * 60:
        budget -= energy_drain(depth, mining.tier_size, reduction)
        depth += mining.depth_per_minute
        minutes += 1
    low, high = mining.drop_quantity
    per_drop = (low + high) / 2.0 + depth_tier(depth, mining.tier_size) // 2
    drops = minutes / mining.drop_interval
    return energy.fraction, {
        "value": drops * per_drop * s.params.scoring.value_material,
        "cost": s.cost_value(energy=energy.current - max(0.0, budget)),
        "time": minutes / 60.0,
    }


def _stop_extraction(s: Scorer, action) -> Features:
    return 1.0, {}


def _start_encounter(s: Scorer, action) -> Features:
    encounter = s.data.find(action.encounter, EncounterDef)
    sp = s.params.scoring
    tables = s.params.combat
    estimate = estimate_encounter(
        encounter,
        s.state.inventory.weapons.values(),
        s.state.inventory.equipped(),
        s.state.progression.level,
        tables,
        role_total(s.state, "fighter", s.params.helpers),
    )
    enemies = 0.0
    for wave in range(1, encounter.waves + 1):
        low, high = wave_size_bounds(encounter, wave, tables)
        enemies += (low + high) / 2.0
    gold = enemies * sum(tables.enemy_gold) / 2.0 + encounter.gold
    xp = enemies * tables.enemy_xp + encounter.xp
    if encounter.boss is not None:
        gold += encounter.boss.gold
        xp += encounter.boss.xp
    margin = 0.5 * (1.0 - s.traits.risk_tolerance)
    return 1.0, {
        "value": gold * sp.value_gold + xp * sp.value_xp + s.materials_value(encounter.loot) * tables.loot_chance,
        "risk": 100.0 * (estimate - margin),
        "cost": s.cost_value(energy=encounter.energy_cost),
        "time": encounter.duration_minutes / 60.0,
    }


def _change_context(s: Scorer, action) -> Features:
    return 1.0, {}


def _rescue_helper(s: Scorer, action) -> Features:
    helper = s.data.find(action.helper, HelperDef)
    return 1.0, {
        "progress": s.params.scoring.value_helper,
        "cost": s.cost_value(gold=rescue_cost(helper, s.params)),
    }


def _role_need(s: Scorer, role: str) -> float:
    """0-1 estimate of how much a role would help right now."""
    state = s.state
    plots = state.processes.plots
    if role in ("waterer", "sower", "harvester"):
        return min(1.0, len(plots) / 20.0)
    if role == "pump_operator":
        return 1.0 - state.resources.water.fraction * 0.5
    if role == "miners_friend":
        return 0.6
    if role == "fighter":
        return 0.5 if state.inventory.weapons else 0.0
    if role == "seed_catcher":
        return 0.3
    if role == "forager":
        required = s.params.helpers.forager_requires
        return 0.7 if not required or required in state.progression.cleanups else 0.0
    if role == "refiner":
        return 0.4 if s.data.recipes else 0.0
    return 0.0


def _assign_helper(s: Scorer, action) -> Features:
    helper = s.state.helper(action.helper)
    eff = s.params.helpers.secondary_efficiency if action.secondary else 1.0
    need = _role_need(s, action.role)
    return need, {"progress": s.params.scoring.value_helper * need * eff * (1 + helper.level * 0.1)}


def _train_helper(s: Scorer, action) -> Features:
    helper = s.state.helper(action.helper)
    relevance = 1.0 if helper.role is not None else 0.0
    return relevance, {
        "progress": s.params.scoring.value_helper * 0.5 * relevance,
        "cost": s.cost_value(gold=train_cost(helper.level, s.params)),
    }


_FEATURES: dict[str, Callable[[Scorer, Any], Features]] = {
    "plant": _plant,
    "harvest": _harvest,
    "water": _water,
    "pump": _pump,
    "cleanup": _cleanup,
    "catch_seeds": _catch_seeds,
    "purchase": _purchase,
    "craft": _craft,
    "stoke": _stoke,
    "start_extraction": _start_extraction,
    "stop_extraction": _stop_extraction,
    "start_encounter": _start_encounter,
    "change_context": _change_context,
    "rescue_helper": _rescue_helper,
    "assign_helper": _assign_helper,
    "train_helper": _train_helper,
}
