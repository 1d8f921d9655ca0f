"""
Offer call repository implementation.
"""

from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces.repositories import (
    OfferCallRepositoryInterface,
)
from marketplace.config.logging import get_logger
from marketplace.domain.entities.offer_call import OfferCall
from marketplace.domain.exceptions.not_found_error import NotFoundError
from marketplace.domain.value_objects.offer_state import OfferOutcome
from marketplace.infrastructure.database.models.base import as_utc, utc_now
from marketplace.infrastructure.database.models.offer_call import OfferCallModel

logger = get_logger(__name__)


class OfferCallRepository(OfferCallRepositoryInterface):
    """Offer call repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_many(self, offer_calls: Sequence[OfferCall]) -> List[OfferCall]:
        """Create offer call records."""
        models = [
            OfferCallModel(
                id=offer.id,
                enriched_issue_id=offer.enriched_issue_id,
                contractor_id=offer.contractor_id,
                phone_number=offer.phone_number,
                rank=offer.rank,
                match_score=offer.match_score,
                call_id=offer.call_id,
                outcome=offer.outcome.value,
                created_at=offer.created_at,
            )
            for offer in offer_calls
        ]
        self.db.add_all(models)
        await self.db.flush()

        logger.info("Offer calls recorded", count=len(models))
        return [self._model_to_entity(model) for model in models]

    async def update(self, offer_call: OfferCall) -> OfferCall:
        """Update an offer call."""
        stmt = (
            update(OfferCallModel)
            .where(OfferCallModel.id == offer_call.id)
            .values(
                call_id=offer_call.call_id,
                outcome=offer_call.outcome.value,
                decline_reason=offer_call.decline_reason,
                error_message=offer_call.error_message,
                responded_at=offer_call.responded_at,
                updated_at=utc_now(),
            )
        )
        result = await self.db.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError("Offer call", str(offer_call.id))

        return offer_call

    async def find_for_contractor(
        self, enriched_issue_id: UUID, contractor_id: UUID
    ) -> Optional[OfferCall]:
        """Find the offer made to a contractor for a job."""
        stmt = select(OfferCallModel).where(
            and_(
                OfferCallModel.enriched_issue_id == enriched_issue_id,
                OfferCallModel.contractor_id == contractor_id,
            )
        )
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def count_open(self, enriched_issue_id: UUID) -> int:
        """Count offers of a job still waiting for an answer."""
        stmt = select(func.count(OfferCallModel.id)).where(
            and_(
                OfferCallModel.enriched_issue_id == enriched_issue_id,
                OfferCallModel.outcome == OfferOutcome.PENDING.value,
            )
        )
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def list_for_job(self, enriched_issue_id: UUID) -> List[OfferCall]:
        """List offers of a job ordered by rank."""
        stmt = (
            select(OfferCallModel)
            .where(OfferCallModel.enriched_issue_id == enriched_issue_id)
            .order_by(OfferCallModel.rank.asc())
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    def _model_to_entity(self, model: OfferCallModel) -> OfferCall:
        return OfferCall(
            id=model.id,
            enriched_issue_id=model.enriched_issue_id,
            contractor_id=model.contractor_id,
            phone_number=model.phone_number,
            rank=model.rank,
            match_score=model.match_score,
            call_id=model.call_id,
            outcome=OfferOutcome(model.outcome),
            decline_reason=model.decline_reason,
            error_message=model.error_message,
            responded_at=as_utc(model.responded_at),
            created_at=as_utc(model.created_at),
        )
