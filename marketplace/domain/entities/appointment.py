"""Appointment domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from marketplace.domain.exceptions.validation_error import (
    InvalidStatusTransitionError,
)
from marketplace.domain.value_objects.appointment_status import AppointmentStatus


@dataclass
class Appointment:
    """Booked interval on a contractor's calendar."""

    issue_id: UUID
    contractor_id: UUID
    customer_id: UUID
    scheduled_date: datetime
    estimated_duration: int
    id: UUID = field(default_factory=uuid4)
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    quoted_price: Optional[Decimal] = None
    final_price: Optional[Decimal] = None
    contractor_notes: Optional[str] = None
    customer_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate appointment data."""
        if self.estimated_duration <= 0:
            raise ValueError("Appointment duration must be positive")
        if self.scheduled_date.tzinfo is None:
            raise ValueError("Appointment time must be timezone-aware")

        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)
        if not self.updated_at:
            self.updated_at = datetime.now(timezone.utc)

    @property
    def ends_at(self) -> datetime:
        """End of the booked interval."""
        return self.scheduled_date + timedelta(minutes=self.estimated_duration)

    def is_blocking(self) -> bool:
        """Check if the appointment occupies the calendar."""
        return self.status.is_blocking()

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Check if [start, end) intersects this appointment."""
        return start < self.ends_at and end > self.scheduled_date

    def change_status(self, new_status: AppointmentStatus) -> None:
        """Move the appointment to a new status."""
        if not self.status.can_transition_to(new_status):
            raise InvalidStatusTransitionError(self.status.value, new_status.value)

        self.status = new_status
        self.updated_at = datetime.now(timezone.utc)

    def is_participant(self, user_id: UUID) -> bool:
        """Check if the user is the contractor or the customer."""
        return user_id in (self.contractor_id, self.customer_id)
