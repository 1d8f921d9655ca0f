"""
Day of week value object.
"""

from datetime import date
from enum import Enum
from typing import Optional


class DayOfWeek(str, Enum):
    """Day of week for recurring availability windows."""

    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @property
    def weekday(self) -> int:
        """Monday-based index, matching date.weekday()."""
        return list(DayOfWeek).index(self)

    @classmethod
    def from_date(cls, value: date) -> "DayOfWeek":
        """Get the day of week of a calendar date."""
        return list(cls)[value.weekday()]

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["DayOfWeek"]:
        """Parse a day name case-insensitively, returning None when unknown."""
        if not value:
            return None
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None
