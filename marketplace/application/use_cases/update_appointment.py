"""Update appointment use case."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import UUID

from marketplace.application.interfaces.repositories import (
    AppointmentRepositoryInterface,
)
from marketplace.config.logging import get_logger
from marketplace.domain.entities.appointment import Appointment
from marketplace.domain.exceptions.authorization_error import AuthorizationError
from marketplace.domain.exceptions.not_found_error import NotFoundError
from marketplace.domain.value_objects.appointment_status import AppointmentStatus
from marketplace.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)

logger = get_logger(__name__)


@dataclass
class UpdateAppointmentRequest:
    """Request for updating an appointment. None leaves a field unchanged."""

    appointment_id: UUID
    user_id: UUID
    status: Optional[AppointmentStatus] = None
    contractor_notes: Optional[str] = None
    customer_notes: Optional[str] = None
    quoted_price: Optional[Decimal] = None
    final_price: Optional[Decimal] = None

    def contractor_fields(self) -> dict:
        return {
            name: value
            for name, value in (
                ("contractor_notes", self.contractor_notes),
                ("quoted_price", self.quoted_price),
                ("final_price", self.final_price),
            )
            if value is not None
        }

    def customer_fields(self) -> dict:
        if self.customer_notes is None:
            return {}
        return {"customer_notes": self.customer_notes}


class UpdateAppointmentUseCase:
    """Let the contractor or the customer of an appointment edit it."""

    def __init__(
        self,
        appointment_repo: AppointmentRepositoryInterface,
        transaction_service: TransactionService,
    ):
        self.appointment_repo = appointment_repo
        self.transaction_service = transaction_service

    async def execute(self, request: UpdateAppointmentRequest) -> Appointment:
        """Apply the permitted changes."""
        appointment = await self.appointment_repo.get_by_id(request.appointment_id)
        if not appointment:
            raise NotFoundError("Appointment", str(request.appointment_id))

        if not appointment.is_participant(request.user_id):
            raise AuthorizationError("Not authorized to update this appointment")

        is_contractor = request.user_id == appointment.contractor_id
        contractor_fields = request.contractor_fields()
        customer_fields = request.customer_fields()

        if contractor_fields and not is_contractor:
            raise AuthorizationError(
                f"Only the contractor may edit {', '.join(sorted(contractor_fields))}"
            )
        if customer_fields and request.user_id != appointment.customer_id:
            raise AuthorizationError("Only the customer may edit customer_notes")

        if request.status is not None and request.status != appointment.status:
            previous = appointment.status
            appointment.change_status(request.status)
            logger.info(
                "Appointment status changed",
                appointment_id=str(appointment.id),
                previous_status=previous.value,
                status=appointment.status.value,
                changed_by=str(request.user_id),
            )

        for name, value in {**contractor_fields, **customer_fields}.items():
            setattr(appointment, name, value)

        updated = await self.transaction_service.execute_in_transaction(
            lambda: self.appointment_repo.update(appointment)
        )

        logger.info(
            "Appointment updated",
            appointment_id=str(appointment.id),
            updated_by=str(request.user_id),
        )
        return updated
