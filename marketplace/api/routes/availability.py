"""
Contractor availability endpoints.
"""

from fastapi import APIRouter, HTTPException, status

from marketplace.api.dependencies import (
    AvailabilityRepositoryDep,
    CurrentContractorDep,
    CurrentUserIdDep,
    TransactionServiceDep,
    UserRepositoryDep,
)
from marketplace.api.schemas.availability import (
    AvailabilityReplaceRequest,
    AvailabilityResponse,
    AvailabilitySlotResponse,
)
from marketplace.application.use_cases.replace_availability import (
    ReplaceAvailabilityRequest,
    ReplaceAvailabilityUseCase,
)
from marketplace.config.logging import get_logger
from marketplace.domain.exceptions.authorization_error import AuthorizationError

logger = get_logger(__name__)
router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("/", response_model=AvailabilityResponse)
async def get_availability(
    contractor: CurrentContractorDep,
    availability_repository: AvailabilityRepositoryDep,
):
    """List the caller's weekly availability."""
    slots = await availability_repository.list_for_contractor(contractor.id)
    return AvailabilityResponse(
        availability=[AvailabilitySlotResponse.from_entity(slot) for slot in slots]
    )


@router.put("/", response_model=AvailabilityResponse)
async def replace_availability(
    payload: AvailabilityReplaceRequest,
    contractor_id: CurrentUserIdDep,
    availability_repository: AvailabilityRepositoryDep,
    user_repository: UserRepositoryDep,
    transaction_service: TransactionServiceDep,
):
    """Replace the caller's availability with the submitted set."""
    use_case = ReplaceAvailabilityUseCase(
        availability_repo=availability_repository,
        user_repo=user_repository,
        transaction_service=transaction_service,
    )

    try:
        result = await use_case.execute(
            ReplaceAvailabilityRequest(
                contractor_id=contractor_id,
                slots=[item.to_input() for item in payload.availability],
            )
        )
    except AuthorizationError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only contractors can set availability",
        )

    return AvailabilityResponse(
        success=True,
        message="Availability updated successfully",
        availability=[
            AvailabilitySlotResponse.from_entity(slot) for slot in result.slots
        ],
        saved=result.saved,
        dropped=result.dropped,
    )
