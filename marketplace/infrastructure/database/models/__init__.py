"""
Database models package.
"""

from .appointment import AppointmentModel
from .availability_slot import AvailabilitySlotModel
from .base import Base, BaseModel
from .contractor_profile import ContractorProfileModel
from .enriched_issue import EnrichedIssueModel
from .issue import IssueModel
from .offer_call import OfferCallModel
from .outbox_event import OutboxEventModel
from .user import UserModel

__all__ = [
    "Base",
    "BaseModel",
    "AppointmentModel",
    "AvailabilitySlotModel",
    "ContractorProfileModel",
    "EnrichedIssueModel",
    "IssueModel",
    "OfferCallModel",
    "OutboxEventModel",
    "UserModel",
]
