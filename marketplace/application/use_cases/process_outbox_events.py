"""Process outbox events use case."""

from dataclasses import dataclass
from typing import Any, Callable, Optional
from uuid import UUID

from marketplace.application.interfaces.voice import (
    CustomerNotificationCallRequest,
    VoiceClientInterface,
)
from marketplace.application.services.retry_handler import RetryHandler
from marketplace.application.services.transactional_outbox import (
    OutboxEvent,
    OutboxEventType,
    TransactionalOutbox,
)
from marketplace.config.logging import get_logger
from marketplace.domain.exceptions.upstream_error import UpstreamServiceError
from marketplace.infrastructure.monitoring.metrics import (
    record_outbox_event_processing,
)

logger = get_logger(__name__)


@dataclass
class ProcessOutboxResult:
    """Counts of a processing pass."""

    processed: int = 0
    failed: int = 0
    skipped: int = 0


class ProcessOutboxEventsUseCase:
    """
    Run post-commit work recorded in the outbox.

    Customer notifications place a voice call; offer dispatch events hand the
    job to the dispatch task. A failure marks the event FAILED for a later
    retry and never touches the claim that produced it.
    """

    def __init__(
        self,
        outbox: TransactionalOutbox,
        voice_client: VoiceClientInterface,
        enqueue_offer_dispatch: Callable[[str], Any],
        retry_handler: Optional[RetryHandler] = None,
        batch_size: int = 50,
    ):
        self.outbox = outbox
        self.voice_client = voice_client
        self.enqueue_offer_dispatch = enqueue_offer_dispatch
        self.retry_handler = retry_handler or RetryHandler()
        self.batch_size = batch_size

    async def execute(self) -> ProcessOutboxResult:
        """Process pending events, oldest first."""
        result = ProcessOutboxResult()
        events = await self.outbox.get_pending_events(limit=self.batch_size)

        for event in events:
            outcome = await self._process(event)
            setattr(result, outcome, getattr(result, outcome) + 1)

        if events:
            logger.info(
                "Outbox events processed",
                processed=result.processed,
                failed=result.failed,
                skipped=result.skipped,
            )
        return result

    async def execute_one(self, event_id: UUID) -> bool:
        """Process a single event right after its transaction committed."""
        event = await self.outbox.get_event(event_id)
        if not event:
            logger.warning("Outbox event not found", event_id=str(event_id))
            return False
        return await self._process(event) == "processed"

    async def _process(self, event: OutboxEvent) -> str:
        # claim the event; another worker may already hold it
        if not await self.outbox.mark_event_processing(event.id):
            return "skipped"

        try:
            if event.event_type == OutboxEventType.CUSTOMER_NOTIFICATION:
                await self._notify_customer(event)
            elif event.event_type == OutboxEventType.OFFER_DISPATCH:
                self.enqueue_offer_dispatch(event.event_data["enriched_issue_id"])
        except Exception as e:
            await self.outbox.mark_event_failed(event.id, str(e))
            record_outbox_event_processing(event.event_type.value, "failed")
            logger.error(
                "Outbox event failed",
                event_id=str(event.id),
                event_type=event.event_type.value,
                retry_count=event.retry_count + 1,
                max_retries=event.max_retries,
                error=str(e),
            )
            return "failed"

        await self.outbox.mark_event_completed(event.id)
        record_outbox_event_processing(event.event_type.value, "completed")
        return "processed"

    async def _notify_customer(self, event: OutboxEvent) -> None:
        data = event.event_data
        request = CustomerNotificationCallRequest(
            phone_number=data["customer_phone"],
            customer_name=data.get("customer_name") or "there",
            contractor_name=data.get("contractor_name") or "your contractor",
            job_title=data.get("job_title") or "your repair",
            appointment_time=data.get("scheduled_date"),
            estimated_cost=data.get("estimated_cost"),
            metadata={
                "appointment_id": data.get("appointment_id"),
                "enriched_issue_id": data.get("enriched_issue_id"),
            },
        )

        call_id = await self.retry_handler.execute_with_retry(
            lambda: self.voice_client.place_customer_notification_call(request),
            max_retries=2,
            operation_key="voice_customer_notification",
            retry_on=(UpstreamServiceError,),
        )

        logger.info(
            "Customer notified of assignment",
            event_id=str(event.id),
            appointment_id=data.get("appointment_id"),
            call_id=call_id,
        )
