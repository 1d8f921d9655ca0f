"""Enriched issue domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID, uuid4

from marketplace.domain.value_objects.difficulty import DifficultyLevel
from marketplace.domain.value_objects.offer_state import OfferState


@dataclass
class EnrichedIssue:
    """AI diagnosis of an issue; the claimable job."""

    issue_id: UUID
    identified_problem: str
    repair_solution: str
    id: UUID = field(default_factory=uuid4)
    difficulty_level: Optional[DifficultyLevel] = None
    estimated_time_hours: Optional[float] = None
    required_items: list[dict[str, Any]] = field(default_factory=list)
    total_estimated_cost: Optional[Decimal] = None
    total_quoted_price: Optional[Decimal] = None
    questions_for_user: list[str] = field(default_factory=list)
    contractor_checklist: list[str] = field(default_factory=list)
    claimed_by_contractor_id: Optional[UUID] = None
    claimed_at: Optional[datetime] = None
    offer_state: OfferState = OfferState.UNCLAIMED
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)

    @property
    def is_claimed(self) -> bool:
        """Check if a contractor holds the job."""
        return self.claimed_by_contractor_id is not None

    def mark_claimed(self, contractor_id: UUID, claimed_at: datetime = None) -> None:
        """Record the winning contractor."""
        if self.is_claimed and self.claimed_by_contractor_id != contractor_id:
            raise ValueError("Job is already claimed")

        self.claimed_by_contractor_id = contractor_id
        self.claimed_at = claimed_at or datetime.now(timezone.utc)
        self.offer_state = OfferState.CLAIMED
