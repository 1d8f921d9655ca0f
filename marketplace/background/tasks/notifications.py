"""
Celery tasks for outbox events: customer notifications and queued offers.
"""

import random
from typing import Optional
from uuid import UUID

from marketplace.background.celery_app import celery_app
from marketplace.background.tasks.base import run_async_in_new_loop, task_session
from marketplace.config.logging import get_logger
from marketplace.config.settings import settings

logger = get_logger(__name__)


def enqueue_offer_dispatch(enriched_issue_id: str) -> None:
    from marketplace.background.tasks.offers import dispatch_offers_task

    dispatch_offers_task.delay(enriched_issue_id)


async def _process_outbox(event_id: Optional[UUID] = None):
    from marketplace.application.services.retry_handler import RetryHandler
    from marketplace.application.services.transactional_outbox import (
        TransactionalOutbox,
    )
    from marketplace.application.use_cases.process_outbox_events import (
        ProcessOutboxEventsUseCase,
    )
    from marketplace.infrastructure.voice.factory import create_voice_client

    async with task_session() as session:
        use_case = ProcessOutboxEventsUseCase(
            outbox=TransactionalOutbox(session, max_retries=settings.OUTBOX_MAX_RETRIES),
            voice_client=create_voice_client(settings),
            enqueue_offer_dispatch=enqueue_offer_dispatch,
            retry_handler=RetryHandler(),
            batch_size=settings.OUTBOX_BATCH_SIZE,
        )
        if event_id is not None:
            return await use_case.execute_one(event_id)
        return await use_case.execute()


@celery_app.task(bind=True, max_retries=3, name="send_customer_notification_task")
def send_customer_notification_task(self, event_id: str):
    """Run one outbox event right after the claim that created it committed."""
    try:
        done = run_async_in_new_loop(_process_outbox(UUID(event_id)))
    except Exception as e:
        logger.error(
            "Customer notification task failed",
            event_id=event_id,
            error=str(e),
            attempt=self.request.retries + 1,
        )
        if self.request.retries < self.max_retries:
            delay = (2**self.request.retries) + random.random()
            raise self.retry(countdown=delay, exc=e)
        raise

    return {"status": "completed" if done else "pending", "event_id": event_id}


@celery_app.task(bind=True, name="process_outbox_events_task")
def process_outbox_events_task(self):
    """Process pending outbox events, including failed ones with retries left."""
    result = run_async_in_new_loop(_process_outbox())
    return {
        "processed": result.processed,
        "failed": result.failed,
        "skipped": result.skipped,
    }


async def _cleanup_outbox(days_old: int) -> int:
    from marketplace.application.services.transactional_outbox import (
        TransactionalOutbox,
    )

    async with task_session() as session:
        return await TransactionalOutbox(session).cleanup_completed_events(days_old)


@celery_app.task(bind=True, name="cleanup_outbox_events_task")
def cleanup_outbox_events_task(self):
    """Delete completed outbox events past retention."""
    deleted = run_async_in_new_loop(_cleanup_outbox(settings.OUTBOX_RETENTION_DAYS))
    return {"deleted": deleted}
