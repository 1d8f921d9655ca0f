"""
Slot Finder: earliest conflict-free start time on a contractor's calendar.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Sequence
from uuid import UUID

from marketplace.application.interfaces.repositories import (
    AppointmentRepositoryInterface,
    AvailabilityRepositoryInterface,
)
from marketplace.application.services.scheduling_policy import SchedulingPolicy
from marketplace.config.logging import get_logger
from marketplace.domain.entities.appointment import Appointment
from marketplace.domain.entities.availability_slot import AvailabilitySlot
from marketplace.domain.value_objects.day_of_week import DayOfWeek

logger = get_logger(__name__)


def utc_clock() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ScheduledSlot:
    """A bookable start time."""

    start: datetime
    end: datetime
    day_of_week: DayOfWeek


class SlotFinder:
    """Finds the earliest availability-window start free of booked work."""

    def __init__(
        self,
        availability_repo: AvailabilityRepositoryInterface,
        appointment_repo: AppointmentRepositoryInterface,
        policy: Optional[SchedulingPolicy] = None,
        clock: Callable[[], datetime] = utc_clock,
    ):
        self.availability_repo = availability_repo
        self.appointment_repo = appointment_repo
        self.policy = policy or SchedulingPolicy()
        self.clock = clock
        self.logger = logger

    async def find_next_slot(
        self, contractor_id: UUID, priority: Optional[str] = None
    ) -> Optional[ScheduledSlot]:
        """
        Find the next bookable start for a contractor.

        Args:
            contractor_id: Contractor whose calendar is searched
            priority: Issue priority; selects the look-ahead horizon

        Returns:
            The earliest free slot, or None if nothing fits in the horizon
        """
        slots = await self.availability_repo.list_for_contractor(
            contractor_id, only_available=True
        )
        if not slots:
            self.logger.info(
                "Contractor has no availability", contractor_id=str(contractor_id)
            )
            return None

        appointments = await self.appointment_repo.find_blocking_for_contractor(
            contractor_id
        )

        found = self.earliest_fit(slots, appointments, priority, self.clock())

        self.logger.info(
            "Slot search finished",
            contractor_id=str(contractor_id),
            priority=str(self.policy.resolve_priority(priority).value),
            slot_count=len(slots),
            booked_count=len(appointments),
            scheduled_date=found.start.isoformat() if found else None,
        )
        return found

    def earliest_fit(
        self,
        slots: Sequence[AvailabilitySlot],
        appointments: Sequence[Appointment],
        priority: Optional[str],
        now: datetime,
    ) -> Optional[ScheduledSlot]:
        """Walk days from today through the horizon and return the first fit."""
        tz = self.policy.tz
        local_now = now.astimezone(tz)
        horizon = self.policy.horizon_for(priority)
        duration = timedelta(minutes=self.policy.candidate_duration_minutes)

        enabled = sorted(
            (slot for slot in slots if slot.is_available),
            key=lambda slot: slot.start_time,
        )
        blocking = [appt for appt in appointments if appt.is_blocking()]

        for offset in range(horizon + 1):
            day = (local_now + timedelta(days=offset)).date()
            day_of_week = DayOfWeek.from_date(day)

            for slot in enabled:
                if slot.day_of_week != day_of_week:
                    continue

                start = datetime.combine(day, slot.start_time, tzinfo=tz)
                if start <= local_now:
                    continue

                if self.has_conflict(start, blocking, duration):
                    continue

                start_utc = start.astimezone(timezone.utc)
                return ScheduledSlot(
                    start=start_utc, end=start_utc + duration, day_of_week=day_of_week
                )

        return None

    def has_conflict(
        self,
        start: datetime,
        appointments: Sequence[Appointment],
        duration: Optional[timedelta] = None,
    ) -> bool:
        """Check a candidate of the given length against booked appointments."""
        length = duration or timedelta(minutes=self.policy.candidate_duration_minutes)
        end = start + length
        return any(
            appt.is_blocking() and appt.overlaps(start, end) for appt in appointments
        )

