"""
Domain value objects package.
"""

from .appointment_status import AppointmentStatus
from .day_of_week import DayOfWeek
from .difficulty import DifficultyLevel
from .issue_status import IssueStatus
from .offer_state import OfferOutcome, OfferState
from .phone_number import normalize_phone_number, phone_variants
from .priority import Priority
from .user_role import UserRole

__all__ = [
    "AppointmentStatus",
    "DayOfWeek",
    "DifficultyLevel",
    "IssueStatus",
    "OfferOutcome",
    "OfferState",
    "Priority",
    "UserRole",
    "normalize_phone_number",
    "phone_variants",
]
