"""
Issue repository implementation.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces.repositories import IssueRepositoryInterface
from marketplace.config.logging import get_logger
from marketplace.domain.entities.issue import Issue
from marketplace.domain.exceptions.not_found_error import NotFoundError
from marketplace.domain.value_objects.issue_status import IssueStatus
from marketplace.domain.value_objects.priority import Priority
from marketplace.infrastructure.database.models.base import as_utc, utc_now
from marketplace.infrastructure.database.models.enriched_issue import (
    EnrichedIssueModel,
)
from marketplace.infrastructure.database.models.issue import IssueModel

logger = get_logger(__name__)


class IssueRepository(IssueRepositoryInterface):
    """Issue repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, issue: Issue) -> Issue:
        """Create a new issue."""
        model = IssueModel(
            id=issue.id,
            customer_id=issue.customer_id,
            title=issue.title,
            description=issue.description,
            category=issue.category,
            priority=issue.priority.value,
            status=issue.status.value,
            zip_code=issue.zip_code,
            created_at=issue.created_at,
            updated_at=issue.updated_at,
        )
        self.db.add(model)
        await self.db.flush()

        logger.info("Issue created", issue_id=str(model.id))
        return self._model_to_entity(model)

    async def get_by_id(self, issue_id: UUID) -> Optional[Issue]:
        """Get issue by ID."""
        stmt = select(IssueModel).where(IssueModel.id == issue_id)
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def update_status(self, issue_id: UUID, status: IssueStatus) -> None:
        """Set the issue status."""
        stmt = (
            update(IssueModel)
            .where(IssueModel.id == issue_id)
            .values(status=status.value, updated_at=utc_now())
        )
        result = await self.db.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError("Issue", str(issue_id))

        logger.debug("Issue status updated", issue_id=str(issue_id), status=status.value)

    async def find_pending_enrichment(self, limit: int = 5) -> List[Issue]:
        """Find submitted issues without enrichment, oldest first."""
        stmt = (
            select(IssueModel)
            .outerjoin(EnrichedIssueModel, EnrichedIssueModel.issue_id == IssueModel.id)
            .where(
                and_(
                    IssueModel.status == IssueStatus.SUBMITTED.value,
                    EnrichedIssueModel.id.is_(None),
                )
            )
            .order_by(IssueModel.created_at.asc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    def _model_to_entity(self, model: IssueModel) -> Issue:
        return Issue(
            id=model.id,
            customer_id=model.customer_id,
            title=model.title,
            description=model.description or "",
            category=model.category,
            priority=Priority.parse(model.priority, default=Priority.NORMAL),
            status=IssueStatus(model.status),
            zip_code=model.zip_code,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
