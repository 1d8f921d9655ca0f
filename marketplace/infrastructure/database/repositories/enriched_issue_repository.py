"""
Enriched issue (job) repository implementation.
"""

from datetime import datetime
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces.repositories import (
    EnrichedIssueRepositoryInterface,
)
from marketplace.config.logging import get_logger
from marketplace.domain.entities.enriched_issue import EnrichedIssue
from marketplace.domain.value_objects.difficulty import DifficultyLevel
from marketplace.domain.value_objects.offer_state import OfferState
from marketplace.infrastructure.database.models.base import as_utc, utc_now
from marketplace.infrastructure.database.models.enriched_issue import (
    EnrichedIssueModel,
)

logger = get_logger(__name__)


class EnrichedIssueRepository(EnrichedIssueRepositoryInterface):
    """Enriched issue repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, enriched_issue: EnrichedIssue) -> EnrichedIssue:
        """Create a new enriched issue."""
        model = EnrichedIssueModel(
            id=enriched_issue.id,
            issue_id=enriched_issue.issue_id,
            identified_problem=enriched_issue.identified_problem,
            repair_solution=enriched_issue.repair_solution,
            difficulty_level=enriched_issue.difficulty_level.value
            if enriched_issue.difficulty_level
            else None,
            estimated_time_hours=enriched_issue.estimated_time_hours,
            required_items=enriched_issue.required_items,
            total_estimated_cost=enriched_issue.total_estimated_cost,
            total_quoted_price=enriched_issue.total_quoted_price,
            questions_for_user=enriched_issue.questions_for_user,
            contractor_checklist=enriched_issue.contractor_checklist,
            claimed_by_contractor_id=enriched_issue.claimed_by_contractor_id,
            claimed_at=enriched_issue.claimed_at,
            offer_state=enriched_issue.offer_state.value,
            created_at=enriched_issue.created_at,
        )
        self.db.add(model)
        await self.db.flush()

        logger.info(
            "Enriched issue created",
            enriched_issue_id=str(model.id),
            issue_id=str(model.issue_id),
        )
        return self._model_to_entity(model)

    async def get_by_id(self, enriched_issue_id: UUID) -> Optional[EnrichedIssue]:
        """Get enriched issue by ID."""
        stmt = (
            select(EnrichedIssueModel)
            .where(EnrichedIssueModel.id == enriched_issue_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def claim(
        self, enriched_issue_id: UUID, contractor_id: UUID, claimed_at: datetime
    ) -> bool:
        """Set the claim only while the job is unclaimed."""
        stmt = (
            update(EnrichedIssueModel)
            .where(
                and_(
                    EnrichedIssueModel.id == enriched_issue_id,
                    EnrichedIssueModel.claimed_by_contractor_id.is_(None),
                )
            )
            .values(
                claimed_by_contractor_id=contractor_id,
                claimed_at=claimed_at,
                offer_state=OfferState.CLAIMED.value,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )

        result = await self.db.execute(stmt)
        claimed = result.rowcount == 1

        logger.debug(
            "Conditional claim executed",
            enriched_issue_id=str(enriched_issue_id),
            contractor_id=str(contractor_id),
            claimed=claimed,
        )
        return claimed

    async def set_offer_state(
        self,
        enriched_issue_id: UUID,
        state: OfferState,
        only_from: Optional[Sequence[OfferState]] = None,
    ) -> bool:
        """Set the offer state, optionally only from the given current states."""
        conditions = [EnrichedIssueModel.id == enriched_issue_id]
        if only_from:
            conditions.append(
                EnrichedIssueModel.offer_state.in_([s.value for s in only_from])
            )

        stmt = (
            update(EnrichedIssueModel)
            .where(and_(*conditions))
            .values(offer_state=state.value, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        changed = result.rowcount > 0

        if changed:
            logger.info(
                "Offer state changed",
                enriched_issue_id=str(enriched_issue_id),
                offer_state=state.value,
            )
        return changed

    async def list_open(self, limit: int = 100) -> List[EnrichedIssue]:
        """List unclaimed jobs, newest first."""
        stmt = (
            select(EnrichedIssueModel)
            .where(EnrichedIssueModel.claimed_by_contractor_id.is_(None))
            .order_by(EnrichedIssueModel.created_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def list_claimed_by(self, contractor_id: UUID) -> List[EnrichedIssue]:
        """List jobs held by the contractor, newest first."""
        stmt = (
            select(EnrichedIssueModel)
            .where(EnrichedIssueModel.claimed_by_contractor_id == contractor_id)
            .order_by(EnrichedIssueModel.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    def _model_to_entity(self, model: EnrichedIssueModel) -> EnrichedIssue:
        return EnrichedIssue(
            id=model.id,
            issue_id=model.issue_id,
            identified_problem=model.identified_problem,
            repair_solution=model.repair_solution,
            difficulty_level=DifficultyLevel.parse(model.difficulty_level),
            estimated_time_hours=model.estimated_time_hours,
            required_items=model.required_items or [],
            total_estimated_cost=model.total_estimated_cost,
            total_quoted_price=model.total_quoted_price,
            questions_for_user=model.questions_for_user or [],
            contractor_checklist=model.contractor_checklist or [],
            claimed_by_contractor_id=model.claimed_by_contractor_id,
            claimed_at=as_utc(model.claimed_at),
            offer_state=OfferState(model.offer_state),
            created_at=as_utc(model.created_at),
        )
