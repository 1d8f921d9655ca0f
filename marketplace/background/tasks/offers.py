"""
Celery task for outbound job offers.
"""

from uuid import UUID

from marketplace.background.celery_app import celery_app
from marketplace.background.tasks.base import run_async_in_new_loop, task_session
from marketplace.config.logging import get_logger
from marketplace.config.settings import settings

logger = get_logger(__name__)


async def _dispatch_offers(enriched_issue_id: UUID):
    from marketplace.application.services.contractor_matcher import ContractorMatcher
    from marketplace.application.services.offer_dispatcher import OfferDispatcher
    from marketplace.application.services.scheduling_policy import SchedulingPolicy
    from marketplace.application.use_cases.dispatch_offers import (
        DispatchOffersUseCase,
    )
    from marketplace.infrastructure.database.repositories import (
        ContractorProfileRepository,
        EnrichedIssueRepository,
        IssueRepository,
        OfferCallRepository,
        TransactionService,
        UserRepository,
    )
    from marketplace.infrastructure.voice.factory import create_voice_client

    async with task_session() as session:
        use_case = DispatchOffersUseCase(
            enriched_issue_repo=EnrichedIssueRepository(session),
            issue_repo=IssueRepository(session),
            user_repo=UserRepository(session),
            offer_call_repo=OfferCallRepository(session),
            matcher=ContractorMatcher(ContractorProfileRepository(session)),
            dispatcher=OfferDispatcher(
                create_voice_client(settings),
                policy=SchedulingPolicy.from_settings(settings),
                max_call_retries=settings.VOICE_MAX_RETRIES,
            ),
            transaction_service=TransactionService(session),
        )
        return await use_case.execute(enriched_issue_id)


@celery_app.task(bind=True, max_retries=0, name="dispatch_offers_task")
def dispatch_offers_task(self, enriched_issue_id: str):
    """
    Offer a job to the top-ranked contractors by phone.

    Not retried: a second run would find the job OFFERING and do nothing,
    and calls already placed must not be repeated.
    """
    logger.info("Starting offer dispatch task", enriched_issue_id=enriched_issue_id)

    result = run_async_in_new_loop(_dispatch_offers(UUID(enriched_issue_id)))

    logger.info(
        "Offer dispatch task finished",
        enriched_issue_id=enriched_issue_id,
        offer_state=result.offer_state.value,
        calls_initiated=result.calls_initiated,
        skipped=result.skipped,
    )
    return {
        "status": "skipped" if result.skipped else "dispatched",
        "enriched_issue_id": enriched_issue_id,
        "offer_state": result.offer_state.value,
        "calls_initiated": result.calls_initiated,
    }
