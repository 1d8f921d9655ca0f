"""
Outbox event SQLAlchemy model.
"""

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, Text

from .base import BaseModel


class OutboxEventModel(BaseModel):
    """Transactional outbox event database model."""

    __tablename__ = "outbox_events"

    event_type = Column(String(50), nullable=False)
    aggregate_id = Column(String(255), nullable=False)
    event_data = Column(JSON, nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    retry_count = Column(Integer, nullable=False, default=0)
    max_retries = Column(Integer, nullable=False, default=3)
    processed_at = Column(DateTime(timezone=True))
    error_message = Column(Text)

    __table_args__ = (
        Index("idx_outbox_events_status", "status"),
        Index("idx_outbox_events_type", "event_type"),
        Index("idx_outbox_events_created", "created_at"),
        Index("idx_outbox_events_aggregate", "aggregate_id"),
    )
