"""
FastAPI dependency injection container.
"""

from typing import Annotated, Callable, Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.services.contractor_matcher import ContractorMatcher
from marketplace.application.services.scheduling_policy import SchedulingPolicy
from marketplace.application.services.slot_finder import SlotFinder
from marketplace.application.services.transactional_outbox import TransactionalOutbox
from marketplace.application.use_cases.claim_job import (
    ClaimJobResult,
    ClaimJobUseCase,
)
from marketplace.application.use_cases.process_offer_response import (
    ProcessOfferResponseUseCase,
)
from marketplace.background.tasks.notifications import send_customer_notification_task
from marketplace.background.tasks.offers import dispatch_offers_task
from marketplace.config.database import get_db_session
from marketplace.config.logging import get_logger
from marketplace.config.settings import settings
from marketplace.domain.entities.user import User
from marketplace.infrastructure.database.repositories.appointment_repository import (
    AppointmentRepository,
)
from marketplace.infrastructure.database.repositories.availability_repository import (
    AvailabilityRepository,
)
from marketplace.infrastructure.database.repositories.contractor_profile_repository import (
    ContractorProfileRepository,
)
from marketplace.infrastructure.database.repositories.enriched_issue_repository import (
    EnrichedIssueRepository,
)
from marketplace.infrastructure.database.repositories.issue_repository import (
    IssueRepository,
)
from marketplace.infrastructure.database.repositories.offer_call_repository import (
    OfferCallRepository,
)
from marketplace.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)
from marketplace.infrastructure.database.repositories.user_repository import (
    UserRepository,
)

logger = get_logger(__name__)


# Database Dependencies
async def get_user_repository(
    db: AsyncSession = Depends(get_db_session),
) -> UserRepository:
    """Get user repository instance."""
    return UserRepository(db)


async def get_issue_repository(
    db: AsyncSession = Depends(get_db_session),
) -> IssueRepository:
    """Get issue repository instance."""
    return IssueRepository(db)


async def get_enriched_issue_repository(
    db: AsyncSession = Depends(get_db_session),
) -> EnrichedIssueRepository:
    """Get enriched issue repository instance."""
    return EnrichedIssueRepository(db)


async def get_availability_repository(
    db: AsyncSession = Depends(get_db_session),
) -> AvailabilityRepository:
    """Get availability repository instance."""
    return AvailabilityRepository(db)


async def get_appointment_repository(
    db: AsyncSession = Depends(get_db_session),
) -> AppointmentRepository:
    """Get appointment repository instance."""
    return AppointmentRepository(db)


async def get_contractor_profile_repository(
    db: AsyncSession = Depends(get_db_session),
) -> ContractorProfileRepository:
    """Get contractor profile repository instance."""
    return ContractorProfileRepository(db)


async def get_offer_call_repository(
    db: AsyncSession = Depends(get_db_session),
) -> OfferCallRepository:
    """Get offer call repository instance."""
    return OfferCallRepository(db)


async def get_transaction_service(
    db: AsyncSession = Depends(get_db_session),
) -> TransactionService:
    """Get transaction service instance."""
    return TransactionService(db)


async def get_transactional_outbox(
    db: AsyncSession = Depends(get_db_session),
) -> TransactionalOutbox:
    """Get transactional outbox instance."""
    return TransactionalOutbox(db, max_retries=settings.OUTBOX_MAX_RETRIES)


# Service Dependencies
async def get_scheduling_policy() -> SchedulingPolicy:
    """Get scheduling policy built from settings."""
    return SchedulingPolicy.from_settings(settings)


async def get_slot_finder(
    availability_repo: AvailabilityRepository = Depends(get_availability_repository),
    appointment_repo: AppointmentRepository = Depends(get_appointment_repository),
    policy: SchedulingPolicy = Depends(get_scheduling_policy),
) -> SlotFinder:
    """Get slot finder instance."""
    return SlotFinder(availability_repo, appointment_repo, policy=policy)


async def get_contractor_matcher(
    profile_repo: ContractorProfileRepository = Depends(
        get_contractor_profile_repository
    ),
) -> ContractorMatcher:
    """Get contractor matcher instance."""
    return ContractorMatcher(profile_repo)


# Background task hand-off
def enqueue_customer_notification(result: ClaimJobResult) -> None:
    """Queue the customer call recorded in the claim's outbox event."""
    if result.notification_event_id:
        send_customer_notification_task.delay(str(result.notification_event_id))


def enqueue_offer_dispatch(enriched_issue_id: UUID) -> None:
    """Queue an offer dispatch round for a job."""
    dispatch_offers_task.delay(str(enriched_issue_id))


async def get_notification_enqueuer() -> Callable[[ClaimJobResult], None]:
    """Get the post-commit customer notification hook."""
    return enqueue_customer_notification


async def get_offer_dispatch_enqueuer() -> Callable[[UUID], None]:
    """Get the offer dispatch queueing function."""
    return enqueue_offer_dispatch


async def get_claim_job_use_case(
    enriched_issue_repo: EnrichedIssueRepository = Depends(
        get_enriched_issue_repository
    ),
    issue_repo: IssueRepository = Depends(get_issue_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    appointment_repo: AppointmentRepository = Depends(get_appointment_repository),
    slot_finder: SlotFinder = Depends(get_slot_finder),
    outbox: TransactionalOutbox = Depends(get_transactional_outbox),
    transaction_service: TransactionService = Depends(get_transaction_service),
    on_committed: Callable[[ClaimJobResult], None] = Depends(
        get_notification_enqueuer
    ),
) -> ClaimJobUseCase:
    """Get claim job use case instance."""
    return ClaimJobUseCase(
        enriched_issue_repo=enriched_issue_repo,
        issue_repo=issue_repo,
        user_repo=user_repo,
        appointment_repo=appointment_repo,
        slot_finder=slot_finder,
        outbox=outbox,
        transaction_service=transaction_service,
        on_committed=on_committed,
    )


async def get_process_offer_response_use_case(
    enriched_issue_repo: EnrichedIssueRepository = Depends(
        get_enriched_issue_repository
    ),
    user_repo: UserRepository = Depends(get_user_repository),
    offer_call_repo: OfferCallRepository = Depends(get_offer_call_repository),
    claim_job: ClaimJobUseCase = Depends(get_claim_job_use_case),
    transaction_service: TransactionService = Depends(get_transaction_service),
) -> ProcessOfferResponseUseCase:
    """Get offer response use case instance."""
    return ProcessOfferResponseUseCase(
        enriched_issue_repo=enriched_issue_repo,
        user_repo=user_repo,
        offer_call_repo=offer_call_repo,
        claim_job=claim_job,
        transaction_service=transaction_service,
        default_country_code=settings.DEFAULT_COUNTRY_CODE,
    )


# Caller identity
async def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> UUID:
    """Identity of the caller, asserted by the upstream gateway."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    try:
        return UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user id",
        )


async def get_current_user(
    user_id: UUID = Depends(get_current_user_id),
    user_repo: UserRepository = Depends(get_user_repository),
) -> User:
    """Load the calling user."""
    user = await user_repo.get_by_id(user_id)
    if not user:
        logger.warning("Unknown user id in request", user_id=str(user_id))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )
    return user


async def get_current_contractor(
    user: User = Depends(get_current_user),
) -> User:
    """Load the calling user and require a contractor role."""
    if not user.is_contractor():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only contractors can access this resource",
        )
    return user


# Type aliases for dependency injection
UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]
IssueRepositoryDep = Annotated[IssueRepository, Depends(get_issue_repository)]
EnrichedIssueRepositoryDep = Annotated[
    EnrichedIssueRepository, Depends(get_enriched_issue_repository)
]
AvailabilityRepositoryDep = Annotated[
    AvailabilityRepository, Depends(get_availability_repository)
]
AppointmentRepositoryDep = Annotated[
    AppointmentRepository, Depends(get_appointment_repository)
]
ContractorProfileRepositoryDep = Annotated[
    ContractorProfileRepository, Depends(get_contractor_profile_repository)
]
TransactionServiceDep = Annotated[TransactionService, Depends(get_transaction_service)]
ContractorMatcherDep = Annotated[ContractorMatcher, Depends(get_contractor_matcher)]
ClaimJobUseCaseDep = Annotated[ClaimJobUseCase, Depends(get_claim_job_use_case)]
ProcessOfferResponseUseCaseDep = Annotated[
    ProcessOfferResponseUseCase, Depends(get_process_offer_response_use_case)
]
OfferDispatchEnqueuerDep = Annotated[
    Callable[[UUID], None], Depends(get_offer_dispatch_enqueuer)
]
CurrentUserIdDep = Annotated[UUID, Depends(get_current_user_id)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
CurrentContractorDep = Annotated[User, Depends(get_current_contractor)]
