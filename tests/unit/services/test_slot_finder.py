"""
Unit tests for SlotFinder.
"""

from datetime import datetime, time, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from marketplace.application.services.scheduling_policy import SchedulingPolicy
from marketplace.application.services.slot_finder import SlotFinder
from marketplace.domain.entities.appointment import Appointment
from marketplace.domain.entities.availability_slot import AvailabilitySlot
from marketplace.domain.value_objects.appointment_status import AppointmentStatus
from marketplace.domain.value_objects.day_of_week import DayOfWeek


def utc(year, month, day, hour, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


# 2024-01-01 is a Monday
MONDAY_8AM = utc(2024, 1, 1, 8)


class TestSlotFinder:
    """Test cases for SlotFinder."""

    @pytest.fixture
    def contractor_id(self):
        return uuid4()

    @pytest.fixture
    def availability_repo(self):
        repo = AsyncMock()
        repo.list_for_contractor = AsyncMock(return_value=[])
        return repo

    @pytest.fixture
    def appointment_repo(self):
        repo = AsyncMock()
        repo.find_blocking_for_contractor = AsyncMock(return_value=[])
        return repo

    @pytest.fixture
    def finder(self, availability_repo, appointment_repo):
        return SlotFinder(
            availability_repo, appointment_repo, clock=lambda: MONDAY_8AM
        )

    def make_slot(self, contractor_id, day, start, end, is_available=True):
        return AvailabilitySlot(
            contractor_id=contractor_id,
            day_of_week=day,
            start_time=start,
            end_time=end,
            is_available=is_available,
        )

    def make_appointment(
        self, contractor_id, when, minutes=120, status=AppointmentStatus.CONFIRMED
    ):
        return Appointment(
            issue_id=uuid4(),
            contractor_id=contractor_id,
            customer_id=uuid4(),
            scheduled_date=when,
            estimated_duration=minutes,
            status=status,
        )

    @pytest.mark.asyncio
    async def test_no_availability_returns_none(
        self, finder, contractor_id, appointment_repo
    ):
        result = await finder.find_next_slot(contractor_id, "NORMAL")

        assert result is None
        appointment_repo.find_blocking_for_contractor.assert_not_called()

    @pytest.mark.asyncio
    async def test_first_window_start_today(
        self, finder, contractor_id, availability_repo
    ):
        # Arrange
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(contractor_id, DayOfWeek.MONDAY, time(9), time(17))
        ]

        # Act
        result = await finder.find_next_slot(contractor_id, "NORMAL")

        # Assert
        assert result is not None
        assert result.start == utc(2024, 1, 1, 9)
        assert result.end == utc(2024, 1, 1, 11)
        assert result.day_of_week == DayOfWeek.MONDAY
        availability_repo.list_for_contractor.assert_called_once_with(
            contractor_id, only_available=True
        )

    @pytest.mark.asyncio
    async def test_booked_day_moves_to_next_week(
        self, finder, contractor_id, availability_repo, appointment_repo
    ):
        # Arrange
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(contractor_id, DayOfWeek.MONDAY, time(9), time(17))
        ]
        appointment_repo.find_blocking_for_contractor.return_value = [
            self.make_appointment(contractor_id, utc(2024, 1, 1, 9))
        ]

        # Act
        result = await finder.find_next_slot(contractor_id, "NORMAL")

        # Assert
        assert result.start == utc(2024, 1, 8, 9)

    @pytest.mark.asyncio
    async def test_booked_monday_moves_to_tuesday(
        self, finder, contractor_id, availability_repo, appointment_repo
    ):
        # Arrange
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(contractor_id, DayOfWeek.MONDAY, time(9), time(17)),
            self.make_slot(contractor_id, DayOfWeek.TUESDAY, time(9), time(17)),
        ]
        appointment_repo.find_blocking_for_contractor.return_value = [
            self.make_appointment(contractor_id, utc(2024, 1, 1, 9), minutes=120)
        ]

        # Act
        result = await finder.find_next_slot(contractor_id, "NORMAL")

        # Assert
        assert result.start == utc(2024, 1, 2, 9)
        assert result.day_of_week == DayOfWeek.TUESDAY

    @pytest.mark.asyncio
    async def test_cancelled_appointment_does_not_block(
        self, finder, contractor_id, availability_repo, appointment_repo
    ):
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(contractor_id, DayOfWeek.MONDAY, time(9), time(17))
        ]
        appointment_repo.find_blocking_for_contractor.return_value = [
            self.make_appointment(
                contractor_id, utc(2024, 1, 1, 9), status=AppointmentStatus.CANCELLED
            )
        ]

        result = await finder.find_next_slot(contractor_id, "NORMAL")

        assert result.start == utc(2024, 1, 1, 9)

    @pytest.mark.asyncio
    async def test_window_already_started_is_skipped(
        self, availability_repo, appointment_repo, contractor_id
    ):
        finder = SlotFinder(
            availability_repo,
            appointment_repo,
            clock=lambda: utc(2024, 1, 1, 9, 30),
        )
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(contractor_id, DayOfWeek.MONDAY, time(9), time(17))
        ]

        result = await finder.find_next_slot(contractor_id, "NORMAL")

        assert result.start == utc(2024, 1, 8, 9)

    @pytest.mark.asyncio
    async def test_earliest_window_of_the_day_wins(
        self, finder, contractor_id, availability_repo
    ):
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(contractor_id, DayOfWeek.MONDAY, time(13), time(17)),
            self.make_slot(contractor_id, DayOfWeek.MONDAY, time(9), time(12)),
        ]

        result = await finder.find_next_slot(contractor_id, "NORMAL")

        assert result.start == utc(2024, 1, 1, 9)

    @pytest.mark.asyncio
    async def test_later_window_used_when_earlier_is_booked(
        self, finder, contractor_id, availability_repo, appointment_repo
    ):
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(contractor_id, DayOfWeek.MONDAY, time(9), time(12)),
            self.make_slot(contractor_id, DayOfWeek.MONDAY, time(13), time(17)),
        ]
        appointment_repo.find_blocking_for_contractor.return_value = [
            self.make_appointment(contractor_id, utc(2024, 1, 1, 10))
        ]

        result = await finder.find_next_slot(contractor_id, "NORMAL")

        assert result.start == utc(2024, 1, 1, 13)

    @pytest.mark.asyncio
    async def test_disabled_window_is_ignored(
        self, finder, contractor_id, availability_repo
    ):
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(
                contractor_id, DayOfWeek.MONDAY, time(9), time(17), is_available=False
            ),
            self.make_slot(contractor_id, DayOfWeek.TUESDAY, time(10), time(17)),
        ]

        result = await finder.find_next_slot(contractor_id, "NORMAL")

        assert result.start == utc(2024, 1, 2, 10)

    @pytest.mark.parametrize(
        "priority,expected",
        [
            ("EMERGENCY", None),
            ("URGENT", utc(2024, 1, 3, 9)),
            ("NORMAL", utc(2024, 1, 3, 9)),
        ],
    )
    @pytest.mark.asyncio
    async def test_horizon_depends_on_priority(
        self, finder, contractor_id, availability_repo, priority, expected
    ):
        # Wednesday is two days after the Monday clock
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(contractor_id, DayOfWeek.WEDNESDAY, time(9), time(17))
        ]

        result = await finder.find_next_slot(contractor_id, priority)

        if expected is None:
            assert result is None
        else:
            assert result.start == expected

    @pytest.mark.asyncio
    async def test_low_priority_looks_two_weeks_ahead(
        self, finder, contractor_id, availability_repo, appointment_repo
    ):
        # Arrange
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(contractor_id, DayOfWeek.MONDAY, time(9), time(17))
        ]
        appointment_repo.find_blocking_for_contractor.return_value = [
            self.make_appointment(contractor_id, utc(2024, 1, 1, 9)),
            self.make_appointment(contractor_id, utc(2024, 1, 8, 9)),
        ]

        # Act
        normal = await finder.find_next_slot(contractor_id, "NORMAL")
        low = await finder.find_next_slot(contractor_id, "LOW")

        # Assert
        assert normal is None
        assert low.start == utc(2024, 1, 15, 9)

    @pytest.mark.asyncio
    async def test_unknown_priority_uses_default_horizon(
        self, finder, contractor_id, availability_repo, appointment_repo
    ):
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(contractor_id, DayOfWeek.MONDAY, time(9), time(17))
        ]
        appointment_repo.find_blocking_for_contractor.return_value = [
            self.make_appointment(contractor_id, utc(2024, 1, 1, 9))
        ]

        result = await finder.find_next_slot(contractor_id, "SOMEDAY")

        assert result.start == utc(2024, 1, 8, 9)

    @pytest.mark.asyncio
    async def test_same_inputs_give_same_slot(
        self, finder, contractor_id, availability_repo, appointment_repo
    ):
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(contractor_id, DayOfWeek.FRIDAY, time(8), time(12))
        ]
        appointment_repo.find_blocking_for_contractor.return_value = [
            self.make_appointment(contractor_id, utc(2024, 1, 2, 9))
        ]

        first = await finder.find_next_slot(contractor_id, "NORMAL")
        second = await finder.find_next_slot(contractor_id, "NORMAL")

        assert first == second
        assert first.start == utc(2024, 1, 5, 8)

    @pytest.mark.asyncio
    async def test_candidate_length_is_fixed(
        self, finder, contractor_id, availability_repo, appointment_repo
    ):
        # A booking starting two hours after the window is not a conflict,
        # whatever the length of the job being placed.
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(contractor_id, DayOfWeek.MONDAY, time(9), time(17))
        ]
        appointment_repo.find_blocking_for_contractor.return_value = [
            self.make_appointment(contractor_id, utc(2024, 1, 1, 11), minutes=60)
        ]

        result = await finder.find_next_slot(contractor_id, "NORMAL")

        assert result.start == utc(2024, 1, 1, 9)
        assert result.end - result.start == timedelta(minutes=120)

    @pytest.mark.asyncio
    async def test_partial_overlap_is_a_conflict(
        self, finder, contractor_id, availability_repo, appointment_repo
    ):
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(contractor_id, DayOfWeek.MONDAY, time(9), time(17))
        ]
        appointment_repo.find_blocking_for_contractor.return_value = [
            self.make_appointment(contractor_id, utc(2024, 1, 1, 10, 30), minutes=30)
        ]

        result = await finder.find_next_slot(contractor_id, "NORMAL")

        assert result.start == utc(2024, 1, 8, 9)

    @pytest.mark.asyncio
    async def test_windows_are_local_to_scheduling_timezone(
        self, availability_repo, appointment_repo, contractor_id
    ):
        # Arrange
        finder = SlotFinder(
            availability_repo,
            appointment_repo,
            policy=SchedulingPolicy(timezone_name="America/New_York"),
            clock=lambda: MONDAY_8AM,
        )
        availability_repo.list_for_contractor.return_value = [
            self.make_slot(contractor_id, DayOfWeek.MONDAY, time(9), time(17))
        ]

        # Act
        result = await finder.find_next_slot(contractor_id, "NORMAL")

        # Assert
        assert result.start == utc(2024, 1, 1, 14)
        assert result.start.tzinfo == timezone.utc

    def test_has_conflict(self, finder, contractor_id):
        booked = [self.make_appointment(contractor_id, utc(2024, 1, 1, 9))]

        assert finder.has_conflict(utc(2024, 1, 1, 10), booked) is True
        assert finder.has_conflict(utc(2024, 1, 1, 11), booked) is False
        assert finder.has_conflict(utc(2024, 1, 1, 7), booked) is False
        assert (
            finder.has_conflict(utc(2024, 1, 1, 7), booked, timedelta(minutes=121))
            is True
        )
