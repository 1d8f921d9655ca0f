"""
Issue SQLAlchemy model.
"""

from sqlalchemy import Column, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import relationship

from marketplace.domain.value_objects.issue_status import IssueStatus
from marketplace.domain.value_objects.priority import Priority

from .base import BaseModel


class IssueModel(BaseModel):
    """Customer issue database model."""

    __tablename__ = "issues"

    customer_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(100))
    priority = Column(String(20), default=Priority.NORMAL.value, nullable=False)
    status = Column(
        String(30), default=IssueStatus.SUBMITTED.value, nullable=False, index=True
    )
    zip_code = Column(String(10))

    # Relationships
    enriched_issue = relationship(
        "EnrichedIssueModel", back_populates="issue", uselist=False
    )
    customer = relationship("UserModel")

    __table_args__ = (Index("idx_issue_status_created", "status", "created_at"),)

    def __repr__(self) -> str:
        return f"<Issue(id={self.id}, status={self.status})>"
