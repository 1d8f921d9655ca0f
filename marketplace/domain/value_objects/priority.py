"""
Issue priority value object.
"""

from enum import Enum
from typing import Optional


class Priority(str, Enum):
    """Urgency of a customer issue."""

    EMERGENCY = "EMERGENCY"
    URGENT = "URGENT"
    NORMAL = "NORMAL"
    LOW = "LOW"

    @classmethod
    def parse(
        cls, value: Optional[str], default: "Priority" = None
    ) -> Optional["Priority"]:
        """Parse a priority, falling back to default for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return default

    def appointment_window(self) -> str:
        """Human phrase used in offer calls to describe when work is expected."""
        return {
            Priority.EMERGENCY: "within the next 2-4 hours",
            Priority.URGENT: "within the next 24 hours",
            Priority.NORMAL: "within the next 2-3 days",
            Priority.LOW: "within the next week",
        }.get(self, "within the next few days")
