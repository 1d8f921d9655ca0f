"""
Celery task for the periodic AI enrichment pass.
"""

from marketplace.background.celery_app import celery_app
from marketplace.background.tasks.base import run_async_in_new_loop, task_session
from marketplace.config.logging import get_logger
from marketplace.config.settings import settings

logger = get_logger(__name__)


async def _enrich_issues():
    from marketplace.application.services.transactional_outbox import (
        TransactionalOutbox,
    )
    from marketplace.application.use_cases.enrich_issues import EnrichIssuesUseCase
    from marketplace.infrastructure.ai.factory import create_enrichment_provider
    from marketplace.infrastructure.database.repositories import (
        EnrichedIssueRepository,
        IssueRepository,
        TransactionService,
    )

    async with task_session() as session:
        use_case = EnrichIssuesUseCase(
            issue_repo=IssueRepository(session),
            enriched_issue_repo=EnrichedIssueRepository(session),
            provider=create_enrichment_provider(settings),
            outbox=TransactionalOutbox(session, max_retries=settings.OUTBOX_MAX_RETRIES),
            transaction_service=TransactionService(session),
            batch_size=settings.ENRICHMENT_BATCH_SIZE,
            auto_dispatch_offers=settings.AUTO_DISPATCH_OFFERS,
        )
        return await use_case.execute()


@celery_app.task(bind=True, name="enrich_issues_task")
def enrich_issues_task(self):
    """Diagnose the oldest submitted issues and open them as jobs."""
    result = run_async_in_new_loop(_enrich_issues())

    if result.processed:
        logger.info(
            "Enrichment pass finished",
            enriched=len(result.enriched),
            failed=len(result.failed),
        )

    # offers go out through the outbox events created above
    if result.enriched and settings.AUTO_DISPATCH_OFFERS:
        from marketplace.background.tasks.notifications import (
            process_outbox_events_task,
        )

        process_outbox_events_task.delay()

    return {
        "enriched": [str(job.id) for job in result.enriched],
        "failed": [str(issue_id) for issue_id in result.failed],
    }
