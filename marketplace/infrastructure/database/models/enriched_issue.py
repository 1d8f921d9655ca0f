"""
Enriched issue SQLAlchemy model.
"""

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from marketplace.domain.value_objects.offer_state import OfferState

from .base import BaseModel


class EnrichedIssueModel(BaseModel):
    """AI-enriched issue (claimable job) database model."""

    __tablename__ = "enriched_issues"

    issue_id = Column(
        Uuid, ForeignKey("issues.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    identified_problem = Column(Text, nullable=False)
    repair_solution = Column(Text, nullable=False)
    difficulty_level = Column(String(20))
    estimated_time_hours = Column(Float)
    required_items = Column(JSON, default=list, nullable=False)
    total_estimated_cost = Column(Numeric(precision=10, scale=2))
    total_quoted_price = Column(Numeric(precision=10, scale=2))
    questions_for_user = Column(JSON, default=list, nullable=False)
    contractor_checklist = Column(JSON, default=list, nullable=False)

    # Claim fields; claimed_by_contractor_id is written once
    claimed_by_contractor_id = Column(
        Uuid, ForeignKey("users.id"), nullable=True, index=True
    )
    claimed_at = Column(DateTime(timezone=True))
    offer_state = Column(
        String(20), default=OfferState.UNCLAIMED.value, nullable=False, index=True
    )

    # Relationships
    issue = relationship("IssueModel", back_populates="enriched_issue")

    def __repr__(self) -> str:
        return (
            f"<EnrichedIssue(id={self.id}, issue_id={self.issue_id}, "
            f"claimed_by={self.claimed_by_contractor_id})>"
        )
