"""
Database repositories package.
"""

from .appointment_repository import AppointmentRepository
from .availability_repository import AvailabilityRepository
from .contractor_profile_repository import ContractorProfileRepository
from .enriched_issue_repository import EnrichedIssueRepository
from .issue_repository import IssueRepository
from .offer_call_repository import OfferCallRepository
from .transaction_repository import TransactionService
from .user_repository import UserRepository

__all__ = [
    "AppointmentRepository",
    "AvailabilityRepository",
    "ContractorProfileRepository",
    "EnrichedIssueRepository",
    "IssueRepository",
    "OfferCallRepository",
    "TransactionService",
    "UserRepository",
]
