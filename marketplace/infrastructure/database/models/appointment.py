"""
Appointment SQLAlchemy model.
"""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)

from marketplace.domain.value_objects.appointment_status import AppointmentStatus

from .base import BaseModel


class AppointmentModel(BaseModel):
    """Appointment database model."""

    __tablename__ = "appointments"

    issue_id = Column(Uuid, ForeignKey("issues.id"), nullable=False, index=True)
    contractor_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    customer_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    scheduled_date = Column(DateTime(timezone=True), nullable=False)
    estimated_duration = Column(Integer, nullable=False, default=120)
    status = Column(
        String(20), default=AppointmentStatus.SCHEDULED.value, nullable=False
    )
    quoted_price = Column(Numeric(precision=10, scale=2))
    final_price = Column(Numeric(precision=10, scale=2))
    contractor_notes = Column(Text)
    customer_notes = Column(Text)

    __table_args__ = (
        Index(
            "idx_appointment_contractor_status_date",
            "contractor_id",
            "status",
            "scheduled_date",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Appointment(id={self.id}, contractor_id={self.contractor_id}, "
            f"scheduled={self.scheduled_date}, status={self.status})>"
        )
