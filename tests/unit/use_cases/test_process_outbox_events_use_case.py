"""
Unit tests for ProcessOutboxEventsUseCase.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from marketplace.application.services.retry_handler import RetryHandler
from marketplace.application.services.transactional_outbox import (
    OutboxEvent,
    OutboxEventType,
)
from marketplace.application.use_cases.process_outbox_events import (
    ProcessOutboxEventsUseCase,
)
from marketplace.infrastructure.voice.mock import MockVoiceClient


def notification_event(phone="+15551230000"):
    return OutboxEvent(
        id=uuid4(),
        event_type=OutboxEventType.CUSTOMER_NOTIFICATION,
        aggregate_id=str(uuid4()),
        event_data={
            "customer_phone": phone,
            "customer_name": "Jane Doe",
            "contractor_name": "Bob",
            "job_title": "Leaky faucet",
            "scheduled_date": "2024-01-01T09:00:00+00:00",
            "estimated_cost": "180.00",
            "appointment_id": str(uuid4()),
            "enriched_issue_id": str(uuid4()),
        },
    )


def dispatch_event(job_id):
    return OutboxEvent(
        id=uuid4(),
        event_type=OutboxEventType.OFFER_DISPATCH,
        aggregate_id=job_id,
        event_data={"enriched_issue_id": job_id},
    )


class TestProcessOutboxEventsUseCase:
    """Test cases for ProcessOutboxEventsUseCase."""

    @pytest.fixture
    def outbox(self):
        outbox = AsyncMock()
        outbox.get_pending_events = AsyncMock(return_value=[])
        outbox.mark_event_processing = AsyncMock(return_value=True)
        return outbox

    @pytest.fixture
    def voice(self):
        return MockVoiceClient()

    @pytest.fixture
    def enqueue(self):
        return MagicMock()

    @pytest.fixture
    def use_case(self, outbox, voice, enqueue):
        return ProcessOutboxEventsUseCase(
            outbox=outbox,
            voice_client=voice,
            enqueue_offer_dispatch=enqueue,
            retry_handler=RetryHandler(sleep=AsyncMock()),
        )

    @pytest.mark.asyncio
    async def test_customer_is_called(self, use_case, outbox, voice):
        # Arrange
        event = notification_event()
        outbox.get_pending_events.return_value = [event]

        # Act
        result = await use_case.execute()

        # Assert
        assert result.processed == 1
        assert result.failed == 0
        call = voice.calls[0]
        assert call.phone_number == "+15551230000"
        assert call.customer_name == "Jane Doe"
        assert call.appointment_time == "2024-01-01T09:00:00+00:00"
        outbox.mark_event_completed.assert_called_once_with(event.id)

    @pytest.mark.asyncio
    async def test_dispatch_event_is_enqueued(self, use_case, outbox, enqueue):
        job_id = str(uuid4())
        outbox.get_pending_events.return_value = [dispatch_event(job_id)]

        result = await use_case.execute()

        assert result.processed == 1
        enqueue.assert_called_once_with(job_id)

    @pytest.mark.asyncio
    async def test_failed_call_marks_event_failed(self, use_case, outbox, voice):
        # Arrange
        event = notification_event(phone="+15550000000")
        voice.fail_numbers = {"+15550000000"}
        outbox.get_pending_events.return_value = [event]

        # Act
        result = await use_case.execute()

        # Assert
        assert result.failed == 1
        outbox.mark_event_failed.assert_called_once()
        assert outbox.mark_event_failed.call_args.args[0] == event.id
        outbox.mark_event_completed.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_event_marks_failed(self, use_case, outbox):
        event = notification_event()
        del event.event_data["customer_phone"]
        outbox.get_pending_events.return_value = [event]

        result = await use_case.execute()

        assert result.failed == 1

    @pytest.mark.asyncio
    async def test_event_held_elsewhere_is_skipped(self, use_case, outbox, voice):
        outbox.get_pending_events.return_value = [notification_event()]
        outbox.mark_event_processing.return_value = False

        result = await use_case.execute()

        assert result.skipped == 1
        assert voice.calls == []

    @pytest.mark.asyncio
    async def test_execute_one(self, use_case, outbox, voice):
        event = notification_event()
        outbox.get_event = AsyncMock(return_value=event)

        assert await use_case.execute_one(event.id) is True
        assert len(voice.calls) == 1

    @pytest.mark.asyncio
    async def test_execute_one_missing_event(self, use_case, outbox):
        outbox.get_event = AsyncMock(return_value=None)

        assert await use_case.execute_one(uuid4()) is False
        outbox.mark_event_processing.assert_not_called()

    @pytest.mark.asyncio
    async def test_unexpected_error_marks_failed(self, use_case, outbox, voice):
        # Arrange
        event = notification_event()
        voice.place_customer_notification_call = AsyncMock(
            side_effect=ValueError("Expecting value: line 1 column 1 (char 0)")
        )
        outbox.get_pending_events.return_value = [event]

        # Act
        result = await use_case.execute()

        # Assert
        assert result.failed == 1
        assert outbox.mark_event_failed.call_args.args[0] == event.id
        outbox.mark_event_completed.assert_not_called()
