import random

import pytest

from harvest_combat.types import EncounterDef
from harvest_farm.defs import CleanupDef, CropDef, HelperDef, RecipeDef, VendorItem
from harvest_farm.params import Parameters
from harvest_farm.registry import GameData
from harvest_farm.state import GameState


class Recorder:
    """Collects emitted events as (type, data) pairs."""

    def __init__(self):
        self.events = []

    def __call__(self, type, **data):
        self.events.append((type, data))

    def types(self):
        return [t for t, _ in self.events]


@pytest.fixture
def emit():
    return Recorder()


@pytest.fixture
def rng():
    return random.Random(99)


@pytest.fixture
def params():
    return Parameters()


@pytest.fixture
def state():
    return GameState()


@pytest.fixture
def data():
    gd = GameData()
    gd.define(CropDef(id="sprout", growth_minutes=6, stages=3, energy_yield=3, energy_cost=1))
    gd.define(CropDef(id="turnip", growth_minutes=60, energy_yield=2))
    gd.define(CleanupDef(id="clear_weeds", plots_added=2, energy_cost=5))
    gd.define(CleanupDef(
        id="clear_rocks", plots_added=5, energy_cost=10, prerequisites=("clear_weeds",),
    ))
    gd.define(VendorItem(id="watering_can", category="upgrade", gold_cost=60))
    gd.define(VendorItem(id="seed_pack", category="seeds", gold_cost=10, seeds={"turnip": 5}))
    gd.define(RecipeDef(id="pickaxe_1", output="tool", duration=10, materials={"stone": 2}))
    gd.define(EncounterDef(id="meadow", waves=2, composition={"slimes": 1.0}, duration_minutes=20))
    gd.define(HelperDef(id="pip", gold_cost=100))
    return gd
