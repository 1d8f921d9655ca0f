"""
Transactional Outbox Pattern implementation for post-commit side effects.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.config.logging import get_logger
from marketplace.infrastructure.database.models.base import as_utc
from marketplace.infrastructure.database.models.outbox_event import OutboxEventModel

logger = get_logger(__name__)


class OutboxEventType(str, Enum):
    """Types of outbox events."""

    CUSTOMER_NOTIFICATION = "customer_notification"
    OFFER_DISPATCH = "offer_dispatch"


class OutboxEventStatus(str, Enum):
    """Status of outbox events."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class OutboxEvent:
    """Outbox event for transactional operations."""

    id: UUID
    event_type: OutboxEventType
    aggregate_id: str
    event_data: Dict[str, Any]
    status: OutboxEventStatus = OutboxEventStatus.PENDING
    retry_count: int = 0
    max_retries: int = 3
    created_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    error_message: Optional[str] = None


class TransactionalOutbox:
    """Transactional Outbox service for atomic operations."""

    def __init__(self, db_session: AsyncSession, max_retries: int = 3):
        self.db_session = db_session
        self.max_retries = max_retries
        self.logger = logger

    async def create_event(
        self,
        event_type: OutboxEventType,
        aggregate_id: str,
        event_data: Dict[str, Any],
        max_retries: Optional[int] = None,
    ) -> OutboxEvent:
        """
        Create an outbox event within the current transaction.

        The caller owns the transaction: the event becomes visible only when
        the surrounding unit of work commits.
        """
        event = OutboxEvent(
            id=uuid4(),
            event_type=event_type,
            aggregate_id=aggregate_id,
            event_data=event_data,
            max_retries=max_retries if max_retries is not None else self.max_retries,
            created_at=datetime.now(timezone.utc),
        )

        self.db_session.add(
            OutboxEventModel(
                id=event.id,
                event_type=event.event_type.value,
                aggregate_id=event.aggregate_id,
                event_data=event.event_data,
                status=event.status.value,
                retry_count=event.retry_count,
                max_retries=event.max_retries,
                created_at=event.created_at,
            )
        )
        await self.db_session.flush()

        self.logger.info(
            "Outbox event created",
            event_id=str(event.id),
            event_type=event.event_type.value,
            aggregate_id=event.aggregate_id,
        )

        return event

    async def mark_event_processing(self, event_id: UUID) -> bool:
        """Mark an event as processing to prevent duplicate processing."""
        stmt = (
            update(OutboxEventModel)
            .where(
                and_(
                    OutboxEventModel.id == event_id,
                    OutboxEventModel.status.in_(
                        [
                            OutboxEventStatus.PENDING.value,
                            OutboxEventStatus.FAILED.value,
                        ]
                    ),
                )
            )
            .values(
                status=OutboxEventStatus.PROCESSING.value,
                processed_at=datetime.now(timezone.utc),
            )
        )

        result = await self.db_session.execute(stmt)
        await self.db_session.commit()

        return result.rowcount > 0

    async def mark_event_completed(self, event_id: UUID) -> None:
        """Mark an event as completed."""
        stmt = (
            update(OutboxEventModel)
            .where(OutboxEventModel.id == event_id)
            .values(
                status=OutboxEventStatus.COMPLETED.value,
                processed_at=datetime.now(timezone.utc),
                error_message=None,
            )
        )

        await self.db_session.execute(stmt)
        await self.db_session.commit()

    async def mark_event_failed(self, event_id: UUID, error_message: str) -> None:
        """Mark an event as failed with error message."""
        stmt = (
            update(OutboxEventModel)
            .where(OutboxEventModel.id == event_id)
            .values(
                status=OutboxEventStatus.FAILED.value,
                error_message=error_message,
                retry_count=OutboxEventModel.retry_count + 1,
                processed_at=datetime.now(timezone.utc),
            )
        )

        await self.db_session.execute(stmt)
        await self.db_session.commit()

    async def get_event(self, event_id: UUID) -> Optional[OutboxEvent]:
        """Get an event by ID."""
        stmt = (
            select(OutboxEventModel)
            .where(OutboxEventModel.id == event_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db_session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_event(model) if model else None

    async def get_pending_events(
        self, event_type: Optional[OutboxEventType] = None, limit: int = 100
    ) -> List[OutboxEvent]:
        """Get pending events plus failed events with retries left, oldest first."""
        conditions = [
            or_(
                OutboxEventModel.status == OutboxEventStatus.PENDING.value,
                and_(
                    OutboxEventModel.status == OutboxEventStatus.FAILED.value,
                    OutboxEventModel.retry_count < OutboxEventModel.max_retries,
                ),
            )
        ]
        if event_type:
            conditions.append(OutboxEventModel.event_type == event_type.value)

        stmt = (
            select(OutboxEventModel)
            .where(and_(*conditions))
            .order_by(OutboxEventModel.created_at.asc())
            .limit(limit)
        )

        result = await self.db_session.execute(stmt)
        events = [self._model_to_event(model) for model in result.scalars().all()]

        self.logger.info(
            "Retrieved pending outbox events",
            count=len(events),
            event_type=event_type.value if event_type else None,
            limit=limit,
        )
        return events

    async def cleanup_completed_events(self, days_old: int = 7) -> int:
        """Clean up completed events older than specified days."""
        cutoff = datetime.now(timezone.utc) - timedelta(days=days_old)
        stmt = delete(OutboxEventModel).where(
            and_(
                OutboxEventModel.status == OutboxEventStatus.COMPLETED.value,
                OutboxEventModel.created_at < cutoff,
            )
        )

        result = await self.db_session.execute(stmt)
        await self.db_session.commit()

        self.logger.info(
            "Cleaned up completed outbox events",
            deleted_count=result.rowcount,
            days_old=days_old,
        )
        return result.rowcount

    def _model_to_event(self, model: OutboxEventModel) -> OutboxEvent:
        return OutboxEvent(
            id=model.id,
            event_type=OutboxEventType(model.event_type),
            aggregate_id=model.aggregate_id,
            event_data=model.event_data,
            status=OutboxEventStatus(model.status),
            retry_count=model.retry_count,
            max_retries=model.max_retries,
            created_at=as_utc(model.created_at),
            processed_at=as_utc(model.processed_at),
            error_message=model.error_message,
        )
