"""
Appointment repository implementation.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces.repositories import (
    AppointmentRepositoryInterface,
)
from marketplace.config.logging import get_logger
from marketplace.domain.entities.appointment import Appointment
from marketplace.domain.exceptions.not_found_error import NotFoundError
from marketplace.domain.value_objects.appointment_status import AppointmentStatus
from marketplace.infrastructure.database.models.appointment import AppointmentModel
from marketplace.infrastructure.database.models.base import as_utc, utc_now

logger = get_logger(__name__)


class AppointmentRepository(AppointmentRepositoryInterface):
    """Appointment repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, appointment: Appointment) -> Appointment:
        """Create a new appointment."""
        model = AppointmentModel(
            id=appointment.id,
            issue_id=appointment.issue_id,
            contractor_id=appointment.contractor_id,
            customer_id=appointment.customer_id,
            scheduled_date=appointment.scheduled_date,
            estimated_duration=appointment.estimated_duration,
            status=appointment.status.value,
            quoted_price=appointment.quoted_price,
            final_price=appointment.final_price,
            contractor_notes=appointment.contractor_notes,
            customer_notes=appointment.customer_notes,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )

        self.db.add(model)
        await self.db.flush()

        logger.info(
            "Appointment created",
            appointment_id=str(model.id),
            contractor_id=str(model.contractor_id),
            scheduled_date=appointment.scheduled_date.isoformat(),
        )
        return self._model_to_entity(model)

    async def get_by_id(self, appointment_id: UUID) -> Optional[Appointment]:
        """Get appointment by ID."""
        stmt = select(AppointmentModel).where(AppointmentModel.id == appointment_id)
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def update(self, appointment: Appointment) -> Appointment:
        """Update an existing appointment."""
        stmt = (
            update(AppointmentModel)
            .where(AppointmentModel.id == appointment.id)
            .values(
                status=appointment.status.value,
                quoted_price=appointment.quoted_price,
                final_price=appointment.final_price,
                contractor_notes=appointment.contractor_notes,
                customer_notes=appointment.customer_notes,
                updated_at=utc_now(),
            )
        )
        result = await self.db.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError("Appointment", str(appointment.id))

        return await self.get_by_id(appointment.id)

    async def find_blocking_for_contractor(
        self, contractor_id: UUID
    ) -> List[Appointment]:
        """Find appointments occupying the contractor's calendar."""
        stmt = (
            select(AppointmentModel)
            .where(
                and_(
                    AppointmentModel.contractor_id == contractor_id,
                    AppointmentModel.status.in_(
                        [status.value for status in AppointmentStatus.blocking()]
                    ),
                )
            )
            .order_by(AppointmentModel.scheduled_date.asc())
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def list_for_contractor(self, contractor_id: UUID) -> List[Appointment]:
        """List the contractor's appointments ordered by date."""
        stmt = (
            select(AppointmentModel)
            .where(AppointmentModel.contractor_id == contractor_id)
            .order_by(AppointmentModel.scheduled_date.asc())
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def list_for_customer(self, customer_id: UUID) -> List[Appointment]:
        """List the customer's appointments ordered by date."""
        stmt = (
            select(AppointmentModel)
            .where(AppointmentModel.customer_id == customer_id)
            .order_by(AppointmentModel.scheduled_date.asc())
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    def _model_to_entity(self, model: AppointmentModel) -> Appointment:
        return Appointment(
            id=model.id,
            issue_id=model.issue_id,
            contractor_id=model.contractor_id,
            customer_id=model.customer_id,
            scheduled_date=as_utc(model.scheduled_date),
            estimated_duration=model.estimated_duration,
            status=AppointmentStatus(model.status),
            quoted_price=model.quoted_price,
            final_price=model.final_price,
            contractor_notes=model.contractor_notes,
            customer_notes=model.customer_notes,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
