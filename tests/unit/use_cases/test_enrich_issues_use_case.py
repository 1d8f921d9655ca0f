"""
Unit tests for EnrichIssuesUseCase.
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, call

import pytest

from marketplace.application.services.transactional_outbox import OutboxEventType
from marketplace.application.use_cases.enrich_issues import EnrichIssuesUseCase
from marketplace.domain.exceptions.upstream_error import EnrichmentError
from marketplace.domain.value_objects.difficulty import DifficultyLevel
from marketplace.domain.value_objects.issue_status import IssueStatus
from marketplace.infrastructure.ai.mock import MockEnrichmentProvider


class TestEnrichIssuesUseCase:
    """Test cases for EnrichIssuesUseCase."""

    @pytest.fixture
    def issue_repo(self, issue):
        repo = AsyncMock()
        repo.find_pending_enrichment = AsyncMock(return_value=[issue])
        return repo

    @pytest.fixture
    def enriched_issue_repo(self):
        repo = AsyncMock()
        repo.create = AsyncMock(side_effect=lambda enriched: enriched)
        return repo

    @pytest.fixture
    def outbox(self):
        outbox = AsyncMock()
        outbox.create_event = AsyncMock(return_value=MagicMock())
        return outbox

    def build(self, issue_repo, enriched_issue_repo, provider, outbox, tx, **kwargs):
        return EnrichIssuesUseCase(
            issue_repo=issue_repo,
            enriched_issue_repo=enriched_issue_repo,
            provider=provider,
            outbox=outbox,
            transaction_service=tx,
            **kwargs,
        )

    @pytest.mark.asyncio
    async def test_issue_is_enriched_and_queued_for_offers(
        self, issue, issue_repo, enriched_issue_repo, outbox, mock_transaction_service
    ):
        # Arrange
        use_case = self.build(
            issue_repo,
            enriched_issue_repo,
            MockEnrichmentProvider(),
            outbox,
            mock_transaction_service,
        )

        # Act
        result = await use_case.execute()

        # Assert
        assert result.processed == 1
        enriched = result.enriched[0]
        assert enriched.issue_id == issue.id
        assert enriched.difficulty_level == DifficultyLevel.MEDIUM
        assert enriched.total_quoted_price == Decimal("100.00")
        assert enriched.identified_problem.startswith("Plumbing problem")
        issue_repo.update_status.assert_has_calls(
            [
                call(issue.id, IssueStatus.ANALYZING),
                call(issue.id, IssueStatus.PENDING_CONTRACTOR),
            ]
        )
        kwargs = outbox.create_event.call_args.kwargs
        assert kwargs["event_type"] == OutboxEventType.OFFER_DISPATCH
        assert kwargs["event_data"]["enriched_issue_id"] == str(enriched.id)

    @pytest.mark.asyncio
    async def test_auto_dispatch_can_be_disabled(
        self, issue_repo, enriched_issue_repo, outbox, mock_transaction_service
    ):
        use_case = self.build(
            issue_repo,
            enriched_issue_repo,
            MockEnrichmentProvider(),
            outbox,
            mock_transaction_service,
            auto_dispatch_offers=False,
        )

        await use_case.execute()

        outbox.create_event.assert_not_called()

    @pytest.mark.asyncio
    async def test_provider_failure_returns_issue_to_queue(
        self, issue, issue_repo, enriched_issue_repo, outbox, mock_transaction_service
    ):
        # Arrange
        provider = AsyncMock()
        provider.analyze_issue = AsyncMock(side_effect=EnrichmentError("timeout"))
        use_case = self.build(
            issue_repo, enriched_issue_repo, provider, outbox, mock_transaction_service
        )

        # Act
        result = await use_case.execute()

        # Assert
        assert result.failed == [issue.id]
        assert result.enriched == []
        issue_repo.update_status.assert_called_with(issue.id, IssueStatus.SUBMITTED)
        enriched_issue_repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_nothing_pending(
        self, issue_repo, enriched_issue_repo, outbox, mock_transaction_service
    ):
        issue_repo.find_pending_enrichment.return_value = []
        provider = AsyncMock()
        use_case = self.build(
            issue_repo, enriched_issue_repo, provider, outbox, mock_transaction_service
        )

        result = await use_case.execute()

        assert result.processed == 0
        provider.analyze_issue.assert_not_called()
