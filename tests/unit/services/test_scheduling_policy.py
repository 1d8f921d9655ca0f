"""
Unit tests for SchedulingPolicy.
"""

from datetime import timezone

import pytest

from marketplace.application.services.scheduling_policy import SchedulingPolicy
from marketplace.domain.value_objects.priority import Priority


class TestSchedulingPolicy:
    """Test cases for SchedulingPolicy."""

    @pytest.mark.parametrize(
        "priority,days",
        [
            ("EMERGENCY", 1),
            ("URGENT", 2),
            ("NORMAL", 7),
            ("LOW", 14),
            ("low", 14),
            (None, 7),
            ("ASAP", 7),
        ],
    )
    def test_horizon_for(self, policy, priority, days):
        assert policy.horizon_for(priority) == days

    def test_resolve_priority(self, policy):
        assert policy.resolve_priority("urgent") == Priority.URGENT
        assert policy.resolve_priority(None) == Priority.NORMAL
        assert policy.resolve_priority(Priority.LOW) == Priority.LOW

    @pytest.mark.parametrize(
        "hours,minutes",
        [
            (1.5, 90),
            (2, 120),
            (0.25, 60),
            (10, 480),
            (None, 120),
            (0, 120),
        ],
    )
    def test_appointment_duration(self, policy, hours, minutes):
        assert policy.appointment_duration(hours) == minutes

    def test_utc_timezone(self, policy):
        assert policy.tz == timezone.utc

    def test_named_timezone(self):
        policy = SchedulingPolicy(timezone_name="Europe/Lisbon")
        assert str(policy.tz) == "Europe/Lisbon"

    def test_from_settings(self, test_settings):
        test_settings.HORIZON_DAYS_NORMAL = 5
        test_settings.MAX_OFFER_CALLS = 3

        policy = SchedulingPolicy.from_settings(test_settings)

        assert policy.horizon_for("NORMAL") == 5
        assert policy.max_offer_calls == 3
        assert policy.horizon_for("EMERGENCY") == test_settings.HORIZON_DAYS_EMERGENCY
