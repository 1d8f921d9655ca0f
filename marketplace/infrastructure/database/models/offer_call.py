"""
Offer call SQLAlchemy model.
"""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)

from marketplace.domain.value_objects.offer_state import OfferOutcome

from .base import BaseModel


class OfferCallModel(BaseModel):
    """Outbound offer call database model."""

    __tablename__ = "offer_calls"

    enriched_issue_id = Column(
        Uuid, ForeignKey("enriched_issues.id", ondelete="CASCADE"), nullable=False
    )
    contractor_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    phone_number = Column(String(30), nullable=False)
    rank = Column(Integer, nullable=False)
    match_score = Column(Integer, nullable=False, default=0)
    call_id = Column(String(255), index=True)
    outcome = Column(String(20), default=OfferOutcome.PENDING.value, nullable=False)
    decline_reason = Column(Text)
    error_message = Column(Text)
    responded_at = Column(DateTime(timezone=True))

    __table_args__ = (
        Index("idx_offer_call_job_outcome", "enriched_issue_id", "outcome"),
        Index(
            "idx_offer_call_unique", "enriched_issue_id", "contractor_id", unique=True
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<OfferCall(id={self.id}, job={self.enriched_issue_id}, "
            f"contractor={self.contractor_id}, outcome={self.outcome})>"
        )
