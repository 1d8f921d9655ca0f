"""
Job claimed domain event.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass
class JobClaimed:
    """Event raised when a contractor wins a job."""

    enriched_issue_id: UUID
    issue_id: UUID
    contractor_id: UUID
    customer_id: UUID
    claimed_at: datetime
    appointment_id: Optional[UUID] = None
    scheduled_date: Optional[datetime] = None
    estimated_cost: Optional[str] = None

    def to_payload(self) -> dict:
        """Serialize for the outbox."""
        return {
            "enriched_issue_id": str(self.enriched_issue_id),
            "issue_id": str(self.issue_id),
            "contractor_id": str(self.contractor_id),
            "customer_id": str(self.customer_id),
            "claimed_at": self.claimed_at.isoformat(),
            "appointment_id": str(self.appointment_id) if self.appointment_id else None,
            "scheduled_date": self.scheduled_date.isoformat()
            if self.scheduled_date
            else None,
            "estimated_cost": self.estimated_cost,
        }
