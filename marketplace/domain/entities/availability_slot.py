"""Availability slot domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, time, timezone
from typing import Optional
from uuid import UUID, uuid4

from marketplace.domain.value_objects.day_of_week import DayOfWeek


@dataclass
class AvailabilitySlot:
    """Weekly recurring window during which a contractor takes work."""

    contractor_id: UUID
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    is_available: bool = True
    id: UUID = field(default_factory=uuid4)
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate slot data."""
        if self.start_time >= self.end_time:
            raise ValueError("Availability start time must be before end time")

        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)

    @property
    def duration_minutes(self) -> int:
        """Length of the window in minutes."""
        start = self.start_time.hour * 60 + self.start_time.minute
        end = self.end_time.hour * 60 + self.end_time.minute
        return end - start

    def sort_key(self) -> tuple[int, time]:
        """Key ordering slots by day of week, then start time."""
        return self.day_of_week.weekday, self.start_time
