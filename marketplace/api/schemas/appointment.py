"""
Appointment-related API schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from marketplace.domain.entities.appointment import Appointment
from marketplace.domain.value_objects.appointment_status import AppointmentStatus


class AppointmentResponse(BaseModel):
    """Appointment response schema."""

    id: UUID
    issue_id: UUID
    contractor_id: UUID
    customer_id: UUID
    scheduled_date: datetime
    estimated_duration: int = Field(..., description="Booked length in minutes")
    status: AppointmentStatus
    quoted_price: Optional[Decimal] = None
    final_price: Optional[Decimal] = None
    contractor_notes: Optional[str] = None
    customer_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            issue_id=appointment.issue_id,
            contractor_id=appointment.contractor_id,
            customer_id=appointment.customer_id,
            scheduled_date=appointment.scheduled_date,
            estimated_duration=appointment.estimated_duration,
            status=appointment.status,
            quoted_price=appointment.quoted_price,
            final_price=appointment.final_price,
            contractor_notes=appointment.contractor_notes,
            customer_notes=appointment.customer_notes,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )


class AppointmentUpdateRequest(BaseModel):
    """Appointment update request schema."""

    status: Optional[AppointmentStatus] = None
    contractor_notes: Optional[str] = Field(None, max_length=2000)
    customer_notes: Optional[str] = Field(None, max_length=2000)
    quoted_price: Optional[Decimal] = Field(None, ge=0)
    final_price: Optional[Decimal] = Field(None, ge=0)
