"""
Scheduling policy: the tunable defaults of slot search, claims and offers.
"""

from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from typing import Dict, Optional
from zoneinfo import ZoneInfo

from marketplace.domain.value_objects.priority import Priority


def _default_horizons() -> Dict[Priority, int]:
    return {
        Priority.EMERGENCY: 1,
        Priority.URGENT: 2,
        Priority.NORMAL: 7,
        Priority.LOW: 14,
    }


@dataclass(frozen=True)
class SchedulingPolicy:
    """Named scheduling defaults, built once from settings and passed around."""

    horizon_days: Dict[Priority, int] = field(default_factory=_default_horizons)
    default_priority: Priority = Priority.NORMAL
    candidate_duration_minutes: int = 120
    default_appointment_minutes: int = 120
    min_appointment_minutes: int = 60
    max_appointment_minutes: int = 480
    max_claim_attempts: int = 3
    max_offer_calls: int = 5
    offer_stagger_seconds: int = 30
    timezone_name: str = "UTC"

    @classmethod
    def from_settings(cls, settings) -> "SchedulingPolicy":
        """Build the policy from application settings."""
        return cls(
            horizon_days={
                Priority.EMERGENCY: settings.HORIZON_DAYS_EMERGENCY,
                Priority.URGENT: settings.HORIZON_DAYS_URGENT,
                Priority.NORMAL: settings.HORIZON_DAYS_NORMAL,
                Priority.LOW: settings.HORIZON_DAYS_LOW,
            },
            default_priority=Priority(settings.DEFAULT_PRIORITY),
            candidate_duration_minutes=settings.CANDIDATE_DURATION_MINUTES,
            default_appointment_minutes=settings.DEFAULT_APPOINTMENT_MINUTES,
            min_appointment_minutes=settings.MIN_APPOINTMENT_MINUTES,
            max_appointment_minutes=settings.MAX_APPOINTMENT_MINUTES,
            max_claim_attempts=settings.MAX_CLAIM_ATTEMPTS,
            max_offer_calls=settings.MAX_OFFER_CALLS,
            offer_stagger_seconds=settings.OFFER_CALL_STAGGER_SECONDS,
            timezone_name=settings.SCHEDULING_TIMEZONE,
        )

    @property
    def tz(self) -> tzinfo:
        """Time zone in which availability windows are interpreted."""
        if self.timezone_name.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.timezone_name)

    def resolve_priority(self, priority: Optional[str]) -> Priority:
        """Map a raw priority to a known one, using the default otherwise."""
        return Priority.parse(priority, default=self.default_priority)

    def horizon_for(self, priority: Optional[str]) -> int:
        """Number of days ahead the slot search may look."""
        resolved = self.resolve_priority(priority)
        return self.horizon_days.get(
            resolved, self.horizon_days[self.default_priority]
        )

    def appointment_duration(self, estimated_hours: Optional[float]) -> int:
        """Appointment length in minutes from the job's estimated hours."""
        if not estimated_hours:
            return self.default_appointment_minutes
        minutes = int(round(float(estimated_hours) * 60))
        return max(
            self.min_appointment_minutes, min(self.max_appointment_minutes, minutes)
        )
