"""Enrich issues use case."""

from dataclasses import dataclass, field
from typing import List
from uuid import UUID

from marketplace.application.interfaces.enrichment import (
    EnrichmentProviderInterface,
    EnrichmentResult,
)
from marketplace.application.interfaces.repositories import (
    EnrichedIssueRepositoryInterface,
    IssueRepositoryInterface,
)
from marketplace.application.services.transactional_outbox import (
    OutboxEventType,
    TransactionalOutbox,
)
from marketplace.config.logging import get_logger
from marketplace.domain.entities.enriched_issue import EnrichedIssue
from marketplace.domain.entities.issue import Issue
from marketplace.domain.exceptions.upstream_error import UpstreamServiceError
from marketplace.domain.value_objects.difficulty import DifficultyLevel
from marketplace.domain.value_objects.issue_status import IssueStatus
from marketplace.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)
from marketplace.infrastructure.monitoring.metrics import record_enrichment

logger = get_logger(__name__)


@dataclass
class EnrichIssuesResult:
    """Result of an enrichment pass."""

    enriched: List[EnrichedIssue] = field(default_factory=list)
    failed: List[UUID] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.enriched) + len(self.failed)


class EnrichIssuesUseCase:
    """Diagnose submitted issues with the AI collaborator and open them as jobs."""

    def __init__(
        self,
        issue_repo: IssueRepositoryInterface,
        enriched_issue_repo: EnrichedIssueRepositoryInterface,
        provider: EnrichmentProviderInterface,
        outbox: TransactionalOutbox,
        transaction_service: TransactionService,
        batch_size: int = 5,
        auto_dispatch_offers: bool = True,
    ):
        self.issue_repo = issue_repo
        self.enriched_issue_repo = enriched_issue_repo
        self.provider = provider
        self.outbox = outbox
        self.transaction_service = transaction_service
        self.batch_size = batch_size
        self.auto_dispatch_offers = auto_dispatch_offers

    async def execute(self) -> EnrichIssuesResult:
        """Enrich the oldest submitted issues, one at a time."""
        issues = await self.issue_repo.find_pending_enrichment(limit=self.batch_size)
        result = EnrichIssuesResult()

        if not issues:
            logger.debug("No issues awaiting enrichment")
            return result

        logger.info("Enriching issues", count=len(issues))

        for issue in issues:
            await self.transaction_service.execute_in_transaction(
                lambda: self.issue_repo.update_status(issue.id, IssueStatus.ANALYZING)
            )

            try:
                analysis = await self.provider.analyze_issue(issue)
            except UpstreamServiceError as e:
                logger.error(
                    "Issue enrichment failed, returning issue to queue",
                    issue_id=str(issue.id),
                    error=str(e),
                )
                await self.transaction_service.execute_in_transaction(
                    lambda: self.issue_repo.update_status(
                        issue.id, IssueStatus.SUBMITTED
                    )
                )
                record_enrichment("failed")
                result.failed.append(issue.id)
                continue

            enriched = await self.transaction_service.execute_in_transaction(
                lambda: self._store(issue, analysis)
            )
            record_enrichment("success")
            result.enriched.append(enriched)

            logger.info(
                "Issue enriched",
                issue_id=str(issue.id),
                enriched_issue_id=str(enriched.id),
                difficulty=enriched.difficulty_level.value
                if enriched.difficulty_level
                else None,
                total_estimated_cost=str(enriched.total_estimated_cost),
            )

        return result

    async def _store(self, issue: Issue, analysis: EnrichmentResult) -> EnrichedIssue:
        enriched = await self.enriched_issue_repo.create(
            EnrichedIssue(
                issue_id=issue.id,
                identified_problem=analysis.identified_problem,
                repair_solution=analysis.repair_solution,
                difficulty_level=DifficultyLevel.parse(analysis.difficulty_level),
                estimated_time_hours=analysis.estimated_time_hours,
                required_items=analysis.required_items,
                total_estimated_cost=analysis.total_estimated_cost,
                total_quoted_price=analysis.total_estimated_cost,
                questions_for_user=analysis.questions_for_user,
                contractor_checklist=analysis.contractor_checklist,
            )
        )
        await self.issue_repo.update_status(issue.id, IssueStatus.PENDING_CONTRACTOR)

        if self.auto_dispatch_offers:
            await self.outbox.create_event(
                event_type=OutboxEventType.OFFER_DISPATCH,
                aggregate_id=str(enriched.id),
                event_data={
                    "enriched_issue_id": str(enriched.id),
                    "issue_id": str(issue.id),
                },
            )

        return enriched
