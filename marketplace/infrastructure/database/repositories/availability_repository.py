"""
Availability slot repository implementation.
"""

from typing import List, Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces.repositories import (
    AvailabilityRepositoryInterface,
)
from marketplace.config.logging import get_logger
from marketplace.domain.entities.availability_slot import AvailabilitySlot
from marketplace.domain.value_objects.day_of_week import DayOfWeek
from marketplace.infrastructure.database.models.availability_slot import (
    AvailabilitySlotModel,
)
from marketplace.infrastructure.database.models.base import as_utc

logger = get_logger(__name__)


class AvailabilityRepository(AvailabilityRepositoryInterface):
    """Availability slot repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_contractor(
        self, contractor_id: UUID, only_available: bool = False
    ) -> List[AvailabilitySlot]:
        """List slots ordered by day of week, then start time."""
        stmt = select(AvailabilitySlotModel).where(
            AvailabilitySlotModel.contractor_id == contractor_id
        )
        if only_available:
            stmt = stmt.where(AvailabilitySlotModel.is_available.is_(True))

        result = await self.db.execute(stmt)
        slots = [self._model_to_entity(model) for model in result.scalars().all()]

        # Day names do not sort chronologically in SQL
        slots.sort(key=lambda slot: slot.sort_key())
        return slots

    async def replace_for_contractor(
        self, contractor_id: UUID, slots: Sequence[AvailabilitySlot]
    ) -> List[AvailabilitySlot]:
        """Delete every slot of the contractor and insert the given ones."""
        await self.db.execute(
            delete(AvailabilitySlotModel).where(
                AvailabilitySlotModel.contractor_id == contractor_id
            )
        )

        models = [
            AvailabilitySlotModel(
                id=slot.id,
                contractor_id=contractor_id,
                day_of_week=slot.day_of_week.value,
                start_time=slot.start_time,
                end_time=slot.end_time,
                is_available=slot.is_available,
                created_at=slot.created_at,
            )
            for slot in slots
        ]
        self.db.add_all(models)
        await self.db.flush()

        logger.info(
            "Availability replaced",
            contractor_id=str(contractor_id),
            slot_count=len(models),
        )
        return sorted(
            (self._model_to_entity(model) for model in models),
            key=lambda slot: slot.sort_key(),
        )

    def _model_to_entity(self, model: AvailabilitySlotModel) -> AvailabilitySlot:
        return AvailabilitySlot(
            id=model.id,
            contractor_id=model.contractor_id,
            day_of_week=DayOfWeek(model.day_of_week),
            start_time=model.start_time,
            end_time=model.end_time,
            is_available=model.is_available,
            created_at=as_utc(model.created_at),
        )
