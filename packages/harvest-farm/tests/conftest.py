import random

import pytest

from harvest_farm.defs import CleanupDef, CropDef, HelperDef, RecipeDef, VendorItem
from harvest_farm.registry import GameData


class Recorder:
    """Collects emitted events as (type, data) pairs."""

    def __init__(self):
        self.events = []

    def __call__(self, type, **data):
        self.events.append((type, data))

    def types(self):
        return [t for t, _ in self.events]

    def of(self, type):
        return [d for t, d in self.events if t == type]


@pytest.fixture
def emit():
    return Recorder()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def data():
    gd = GameData()
    gd.define(CropDef(id="sprout", growth_minutes=6, stages=3, energy_yield=3, energy_cost=1))
    gd.define(CropDef(id="turnip", growth_minutes=60, energy_yield=2, xp=1))
    gd.define(CropDef(id="slowbean", growth_minutes=1000, energy_yield=5))
    gd.define(CleanupDef(id="clear_weeds", plots_added=2, energy_cost=5))
    gd.define(VendorItem(id="watering_can", category="upgrade", gold_cost=60))
    gd.define(RecipeDef(id="pickaxe_1", output="tool", duration=10, materials={"stone": 2}))
    gd.define(RecipeDef(
        id="spear", output="weapon", family="spear", duration=5, damage=8,
        materials={"wood": 1},
    ))
    gd.define(RecipeDef(
        id="smelt_iron", output="material", duration=5, outputs={"iron": 2},
        materials={"stone": 4},
    ))
    gd.define(HelperDef(id="pip", gold_cost=100))
    return gd
