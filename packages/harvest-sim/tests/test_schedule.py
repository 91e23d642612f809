"""Tests for behavior profiles and the presence schedule."""

import logging
import random

import pytest

from harvest.types import ConfigError
from harvest_sim.profile import PRESETS, BehaviorProfile
from harvest_sim.schedule import PresenceSchedule, plan_checkins


def test_checkins_spread_over_active_hours():
    profile = BehaviorProfile(weekday_checkins=3, variance=0.0, active_hours=(7, 23))
    assert plan_checkins(profile, False, random.Random(1)) == [420, 740, 1060]


def test_weekend_uses_weekend_count():
    profile = BehaviorProfile(weekday_checkins=1, weekend_checkins=4, variance=0.0)
    assert len(plan_checkins(profile, True, random.Random(1))) == 4
    assert len(plan_checkins(profile, False, random.Random(1))) == 1


def test_variance_stays_inside_half_a_window():
    profile = BehaviorProfile(weekday_checkins=4, variance=1.0, active_hours=(8, 16))
    window = 8 * 60 / 4
    for seed in range(20):
        starts = plan_checkins(profile, False, random.Random(seed))
        for i, start in enumerate(starts):
            assert abs(start - (480 + i * window)) <= window / 2 + 1


def test_no_checkins_means_never_present():
    profile = BehaviorProfile(weekday_checkins=0, weekend_checkins=0)
    schedule = PresenceSchedule(profile)
    assert not any(schedule.is_present(1, m, False, random.Random(1)) for m in range(1440))


def test_present_for_session_after_each_checkin():
    profile = BehaviorProfile(weekday_checkins=2, variance=0.0, session_minutes=10,
                              active_hours=(0, 24))
    schedule = PresenceSchedule(profile)
    rng = random.Random(1)
    assert schedule.is_checkin(2, 720, False, rng)
    assert schedule.is_present(2, 729, False, rng)
    assert not schedule.is_present(2, 730, False, rng)
    assert not schedule.is_checkin(2, 721, False, rng)
    assert schedule.starts == [0, 720]


def test_first_day_midnight_checkin_moves_to_first_tick():
    profile = BehaviorProfile(weekday_checkins=2, variance=0.0, active_hours=(0, 24))
    schedule = PresenceSchedule(profile)
    rng = random.Random(1)
    assert not schedule.is_checkin(1, 0, False, rng)
    assert schedule.is_checkin(1, 1, False, rng)
    assert schedule.starts == [1, 720]
    assert schedule.is_checkin(2, 0, False, rng)


def test_profile_validation():
    with pytest.raises(ConfigError):
        BehaviorProfile(efficiency=1.5)
    with pytest.raises(ConfigError):
        BehaviorProfile(active_hours=(20, 8))
    with pytest.raises(ConfigError):
        BehaviorProfile(session_minutes=0)


def test_from_dict_starts_from_preset(caplog):
    with caplog.at_level(logging.WARNING):
        profile = BehaviorProfile.from_dict({
            "preset": "completionist",
            "efficiency": 0.5,
            "weights": {"craft": 2.0},
            "mood": "grumpy",
        })
    assert profile.id == "completionist"
    assert profile.efficiency == 0.5
    assert profile.weights == {"cleanup": 1.2, "purchase": 1.2, "craft": 2.0}
    assert "mood" in caplog.text


def test_unknown_preset_is_a_config_error():
    with pytest.raises(ConfigError, match="nope"):
        BehaviorProfile.from_dict({"preset": "nope"})
    with pytest.raises(ConfigError):
        BehaviorProfile.from_dict({"preset": ["casual"]})


def test_traits_carry_decision_settings():
    traits = PRESETS["risk-taker"].traits()
    assert traits.risk_tolerance == 0.9
    assert traits.multiplier("start_encounter") == 1.5
    assert traits.multiplier("plant") == 1.0
