"""
Appointment status value object.
"""

from enum import Enum


class AppointmentStatus(str, Enum):
    """Appointment lifecycle status."""

    SCHEDULED = "SCHEDULED"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    RESCHEDULED = "RESCHEDULED"

    @classmethod
    def blocking(cls) -> list["AppointmentStatus"]:
        """Statuses that occupy the contractor's calendar."""
        return [cls.SCHEDULED, cls.CONFIRMED, cls.IN_PROGRESS]

    def is_blocking(self) -> bool:
        """Check if status occupies the contractor's calendar."""
        return self in self.blocking()

    def is_final(self) -> bool:
        """Check if status is final (no more transitions)."""
        return self in [self.COMPLETED, self.CANCELLED]

    def can_transition_to(self, target: "AppointmentStatus") -> bool:
        """Check if a status change is allowed."""
        if target == self:
            return True
        return target in _TRANSITIONS.get(self, set())


_TRANSITIONS = {
    AppointmentStatus.SCHEDULED: {
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.IN_PROGRESS,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.RESCHEDULED,
    },
    AppointmentStatus.CONFIRMED: {
        AppointmentStatus.IN_PROGRESS,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.RESCHEDULED,
    },
    AppointmentStatus.IN_PROGRESS: {
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
    },
    AppointmentStatus.RESCHEDULED: {
        AppointmentStatus.SCHEDULED,
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.CANCELLED,
    },
}
