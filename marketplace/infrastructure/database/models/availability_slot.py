"""
Availability slot SQLAlchemy model.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Index, String, Time, Uuid
from sqlalchemy.orm import relationship

from .base import BaseModel


class AvailabilitySlotModel(BaseModel):
    """Availability slot database model."""

    __tablename__ = "availability_slots"

    contractor_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day_of_week = Column(String(10), nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)

    # Relationships
    contractor = relationship("UserModel", back_populates="availability_slots")

    __table_args__ = (
        Index("idx_availability_contractor_day", "contractor_id", "day_of_week"),
    )

    def __repr__(self) -> str:
        return (
            f"<AvailabilitySlot(id={self.id}, day={self.day_of_week}, "
            f"start={self.start_time}, end={self.end_time})>"
        )
