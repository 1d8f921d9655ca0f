"""
Appointment endpoints.
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from marketplace.api.dependencies import (
    AppointmentRepositoryDep,
    CurrentUserDep,
    TransactionServiceDep,
)
from marketplace.api.schemas.appointment import (
    AppointmentResponse,
    AppointmentUpdateRequest,
)
from marketplace.application.use_cases.update_appointment import (
    UpdateAppointmentRequest,
    UpdateAppointmentUseCase,
)
from marketplace.config.logging import get_logger
from marketplace.domain.exceptions.authorization_error import AuthorizationError
from marketplace.domain.exceptions.not_found_error import NotFoundError
from marketplace.domain.exceptions.validation_error import ValidationError

logger = get_logger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("/", response_model=list[AppointmentResponse])
async def list_appointments(
    user: CurrentUserDep,
    appointment_repository: AppointmentRepositoryDep,
):
    """List the caller's appointments, as contractor and as customer."""
    appointments = {}
    if user.is_contractor():
        for appointment in await appointment_repository.list_for_contractor(user.id):
            appointments[appointment.id] = appointment
    for appointment in await appointment_repository.list_for_customer(user.id):
        appointments[appointment.id] = appointment

    ordered = sorted(appointments.values(), key=lambda appt: appt.scheduled_date)
    return [AppointmentResponse.from_entity(appointment) for appointment in ordered]


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: UUID,
    payload: AppointmentUpdateRequest,
    user: CurrentUserDep,
    appointment_repository: AppointmentRepositoryDep,
    transaction_service: TransactionServiceDep,
):
    """Update status, notes or prices of an appointment."""
    use_case = UpdateAppointmentUseCase(
        appointment_repo=appointment_repository,
        transaction_service=transaction_service,
    )

    try:
        appointment = await use_case.execute(
            UpdateAppointmentRequest(
                appointment_id=appointment_id,
                user_id=user.id,
                **payload.model_dump(),
            )
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except AuthorizationError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ValidationError as e:
        logger.warning(
            "Invalid appointment update",
            appointment_id=str(appointment_id),
            error=str(e),
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return AppointmentResponse.from_entity(appointment)
