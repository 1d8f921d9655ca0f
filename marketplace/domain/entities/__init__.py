"""
Domain entities package.
"""

from .appointment import Appointment
from .availability_slot import AvailabilitySlot
from .contractor_profile import ContractorProfile
from .enriched_issue import EnrichedIssue
from .issue import Issue
from .offer_call import OfferCall
from .user import User

__all__ = [
    "Appointment",
    "AvailabilitySlot",
    "ContractorProfile",
    "EnrichedIssue",
    "Issue",
    "OfferCall",
    "User",
]
