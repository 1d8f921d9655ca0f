"""Offer call domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from marketplace.domain.value_objects.offer_state import OfferOutcome


@dataclass
class OfferCall:
    """One outbound job-offer call to a ranked contractor."""

    enriched_issue_id: UUID
    contractor_id: UUID
    phone_number: str
    rank: int
    match_score: int
    id: UUID = field(default_factory=uuid4)
    call_id: Optional[str] = None
    outcome: OfferOutcome = OfferOutcome.PENDING
    decline_reason: Optional[str] = None
    error_message: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)

    def mark_failed(self, error_message: str) -> None:
        """Record that the call could not be placed."""
        self.outcome = OfferOutcome.FAILED
        self.error_message = error_message
        self.responded_at = datetime.now(timezone.utc)

    def mark_responded(
        self, outcome: OfferOutcome, decline_reason: Optional[str] = None
    ) -> None:
        """Record the contractor's answer."""
        self.outcome = outcome
        self.decline_reason = decline_reason
        self.responded_at = datetime.now(timezone.utc)
