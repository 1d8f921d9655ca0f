"""
Contractor profile endpoints.
"""

from fastapi import APIRouter, HTTPException, status

from marketplace.api.dependencies import (
    ContractorProfileRepositoryDep,
    CurrentContractorDep,
    CurrentUserIdDep,
    TransactionServiceDep,
    UserRepositoryDep,
)
from marketplace.api.schemas.contractor import (
    ContractorProfileRequest,
    ContractorProfileResponse,
)
from marketplace.application.use_cases.save_contractor_profile import (
    SaveContractorProfileUseCase,
)
from marketplace.config.logging import get_logger
from marketplace.domain.exceptions.authorization_error import AuthorizationError

logger = get_logger(__name__)
router = APIRouter(prefix="/contractors", tags=["contractors"])


@router.get("/me/profile", response_model=ContractorProfileResponse)
async def get_my_profile(
    contractor: CurrentContractorDep,
    profile_repository: ContractorProfileRepositoryDep,
):
    """Get the caller's contractor profile."""
    profile = await profile_repository.get_by_user_id(contractor.id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found"
        )
    return ContractorProfileResponse.from_entity(profile)


@router.put("/me/profile", response_model=ContractorProfileResponse)
async def save_my_profile(
    payload: ContractorProfileRequest,
    user_id: CurrentUserIdDep,
    profile_repository: ContractorProfileRepositoryDep,
    user_repository: UserRepositoryDep,
    transaction_service: TransactionServiceDep,
):
    """Create or update the caller's contractor profile."""
    use_case = SaveContractorProfileUseCase(
        profile_repo=profile_repository,
        user_repo=user_repository,
        transaction_service=transaction_service,
    )

    try:
        profile = await use_case.execute(payload.to_entity(user_id))
    except AuthorizationError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

    return ContractorProfileResponse.from_entity(profile)
