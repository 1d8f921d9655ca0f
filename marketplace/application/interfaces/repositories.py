"""
Repository interfaces for dependency inversion.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence
from uuid import UUID

from marketplace.domain.entities.appointment import Appointment
from marketplace.domain.entities.availability_slot import AvailabilitySlot
from marketplace.domain.entities.contractor_profile import ContractorProfile
from marketplace.domain.entities.enriched_issue import EnrichedIssue
from marketplace.domain.entities.issue import Issue
from marketplace.domain.entities.offer_call import OfferCall
from marketplace.domain.entities.user import User
from marketplace.domain.value_objects.issue_status import IssueStatus
from marketplace.domain.value_objects.offer_state import OfferState


class AvailabilityRepositoryInterface(ABC):
    """Availability slot repository interface."""

    @abstractmethod
    async def list_for_contractor(
        self, contractor_id: UUID, only_available: bool = False
    ) -> List[AvailabilitySlot]:
        """List slots ordered by day of week, then start time."""
        pass

    @abstractmethod
    async def replace_for_contractor(
        self, contractor_id: UUID, slots: Sequence[AvailabilitySlot]
    ) -> List[AvailabilitySlot]:
        """Delete every slot of the contractor and insert the given ones."""
        pass


class AppointmentRepositoryInterface(ABC):
    """Appointment repository interface."""

    @abstractmethod
    async def create(self, appointment: Appointment) -> Appointment:
        """Create a new appointment."""
        pass

    @abstractmethod
    async def get_by_id(self, appointment_id: UUID) -> Optional[Appointment]:
        """Get appointment by ID."""
        pass

    @abstractmethod
    async def update(self, appointment: Appointment) -> Appointment:
        """Update an existing appointment."""
        pass

    @abstractmethod
    async def find_blocking_for_contractor(
        self, contractor_id: UUID
    ) -> List[Appointment]:
        """Find appointments occupying the contractor's calendar."""
        pass

    @abstractmethod
    async def list_for_contractor(self, contractor_id: UUID) -> List[Appointment]:
        """List the contractor's appointments ordered by date."""
        pass

    @abstractmethod
    async def list_for_customer(self, customer_id: UUID) -> List[Appointment]:
        """List the customer's appointments ordered by date."""
        pass


class IssueRepositoryInterface(ABC):
    """Issue repository interface."""

    @abstractmethod
    async def create(self, issue: Issue) -> Issue:
        """Create a new issue."""
        pass

    @abstractmethod
    async def get_by_id(self, issue_id: UUID) -> Optional[Issue]:
        """Get issue by ID."""
        pass

    @abstractmethod
    async def update_status(self, issue_id: UUID, status: IssueStatus) -> None:
        """Set the issue status."""
        pass

    @abstractmethod
    async def find_pending_enrichment(self, limit: int = 5) -> List[Issue]:
        """Find submitted issues without enrichment, oldest first."""
        pass


class EnrichedIssueRepositoryInterface(ABC):
    """Enriched issue (job) repository interface."""

    @abstractmethod
    async def create(self, enriched_issue: EnrichedIssue) -> EnrichedIssue:
        """Create a new enriched issue."""
        pass

    @abstractmethod
    async def get_by_id(self, enriched_issue_id: UUID) -> Optional[EnrichedIssue]:
        """Get enriched issue by ID."""
        pass

    @abstractmethod
    async def claim(
        self, enriched_issue_id: UUID, contractor_id: UUID, claimed_at: datetime
    ) -> bool:
        """
        Atomically assign the job when it is still unclaimed.

        Returns:
            True if this call set the claim, False if someone already holds it
        """
        pass

    @abstractmethod
    async def set_offer_state(
        self,
        enriched_issue_id: UUID,
        state: OfferState,
        only_from: Optional[Sequence[OfferState]] = None,
    ) -> bool:
        """Set the offer state, optionally only from the given current states."""
        pass

    @abstractmethod
    async def list_open(self, limit: int = 100) -> List[EnrichedIssue]:
        """List unclaimed jobs, newest first."""
        pass

    @abstractmethod
    async def list_claimed_by(self, contractor_id: UUID) -> List[EnrichedIssue]:
        """List jobs held by the contractor, newest first."""
        pass


class UserRepositoryInterface(ABC):
    """User repository interface."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user."""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    async def get_by_id_for_update(self, user_id: UUID) -> Optional[User]:
        """Get user by ID, locking the row until the transaction ends."""
        pass

    @abstractmethod
    async def find_contractor_by_phone(
        self, phone_numbers: Sequence[str]
    ) -> Optional[User]:
        """Find a contractor whose phone matches any of the given spellings."""
        pass


class ContractorProfileRepositoryInterface(ABC):
    """Contractor profile repository interface."""

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> Optional[ContractorProfile]:
        """Get the profile of a contractor."""
        pass

    @abstractmethod
    async def upsert(self, profile: ContractorProfile) -> ContractorProfile:
        """Create or replace the profile of a contractor."""
        pass

    @abstractmethod
    async def find_auto_assign_candidates(
        self,
    ) -> List[tuple[User, ContractorProfile]]:
        """
        Find contractors eligible for automatic assignment.

        Returns contractors with auto-assignment on, a contractor role and
        a phone number on file, paired with their profiles.
        """
        pass


class OfferCallRepositoryInterface(ABC):
    """Offer call repository interface."""

    @abstractmethod
    async def create_many(self, offer_calls: Sequence[OfferCall]) -> List[OfferCall]:
        """Create offer call records."""
        pass

    @abstractmethod
    async def update(self, offer_call: OfferCall) -> OfferCall:
        """Update an offer call."""
        pass

    @abstractmethod
    async def find_for_contractor(
        self, enriched_issue_id: UUID, contractor_id: UUID
    ) -> Optional[OfferCall]:
        """Find the offer made to a contractor for a job."""
        pass

    @abstractmethod
    async def count_open(self, enriched_issue_id: UUID) -> int:
        """Count offers of a job still waiting for an answer."""
        pass

    @abstractmethod
    async def list_for_job(self, enriched_issue_id: UUID) -> List[OfferCall]:
        """List offers of a job ordered by rank."""
        pass
