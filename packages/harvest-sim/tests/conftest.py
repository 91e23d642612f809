import pytest

from harvest_sim.config import SimulationConfig


class Recorder:
    """Collects emitted events as (type, data) pairs."""

    def __init__(self):
        self.events = []

    def __call__(self, type, **data):
        self.events.append((type, data))

    def types(self):
        return [t for t, _ in self.events]


# Present all day from minute 0, acting every minute.
ALWAYS_HERE = {
    "id": "always",
    "weekday_checkins": 1,
    "weekend_checkins": 1,
    "session_minutes": 1440,
    "variance": 0.0,
    "efficiency": 1.0,
    "active_hours": [0, 24],
}


@pytest.fixture
def emit():
    return Recorder()


@pytest.fixture
def make_config():
    """Build a one-day SimulationConfig from overrides."""

    def build(**overrides):
        raw = {"max_days": 1, "profile": dict(ALWAYS_HERE)}
        raw.update(overrides)
        return SimulationConfig.from_dict(raw)

    return build
