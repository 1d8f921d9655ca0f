"""
Unit tests for DispatchOffersUseCase.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from marketplace.application.services.contractor_matcher import (
    ContractorMatch,
    ContractorMatcher,
)
from marketplace.application.services.offer_dispatcher import OfferDispatcher
from marketplace.application.use_cases.dispatch_offers import DispatchOffersUseCase
from marketplace.domain.entities.contractor_profile import ContractorProfile
from marketplace.domain.entities.user import User
from marketplace.domain.exceptions.not_found_error import NotFoundError
from marketplace.domain.value_objects.offer_state import OfferOutcome, OfferState
from marketplace.domain.value_objects.user_role import UserRole
from marketplace.infrastructure.voice.mock import MockVoiceClient


def make_match(name, phone, score):
    user = User(
        username=name,
        email=f"{name}@example.com",
        role=UserRole.CONTRACTOR,
        phone_number=phone,
    )
    return ContractorMatch(
        contractor=user,
        profile=ContractorProfile(user_id=user.id),
        match_score=score,
    )


class TestDispatchOffersUseCase:
    """Test cases for DispatchOffersUseCase."""

    @pytest.fixture
    def matches(self):
        return [
            make_match("ann", "+15550000001", 90),
            make_match("ben", "+15550000002", 70),
        ]

    @pytest.fixture
    def enriched_issue_repo(self, enriched_issue):
        repo = AsyncMock()
        repo.get_by_id = AsyncMock(return_value=enriched_issue)
        repo.set_offer_state = AsyncMock(return_value=True)
        return repo

    @pytest.fixture
    def issue_repo(self, issue):
        repo = AsyncMock()
        repo.get_by_id = AsyncMock(return_value=issue)
        return repo

    @pytest.fixture
    def user_repo(self, customer):
        repo = AsyncMock()
        repo.get_by_id = AsyncMock(return_value=customer)
        return repo

    @pytest.fixture
    def offer_call_repo(self):
        repo = AsyncMock()
        repo.create_many = AsyncMock(side_effect=lambda offers: list(offers))
        repo.find_for_contractor = AsyncMock(return_value=None)
        repo.update = AsyncMock(side_effect=lambda offer: offer)
        repo.count_open = AsyncMock(return_value=2)
        return repo

    @pytest.fixture
    def matcher(self, matches):
        matcher = ContractorMatcher(AsyncMock())
        matcher.find_matching_contractors = AsyncMock(return_value=matches)
        return matcher

    @pytest.fixture
    def voice(self):
        return MockVoiceClient()

    @pytest.fixture
    def dispatcher(self, voice):
        return OfferDispatcher(voice, sleep=AsyncMock(), max_call_retries=0)

    @pytest.fixture
    def use_case(
        self,
        enriched_issue_repo,
        issue_repo,
        user_repo,
        offer_call_repo,
        matcher,
        dispatcher,
        mock_transaction_service,
    ):
        return DispatchOffersUseCase(
            enriched_issue_repo=enriched_issue_repo,
            issue_repo=issue_repo,
            user_repo=user_repo,
            offer_call_repo=offer_call_repo,
            matcher=matcher,
            dispatcher=dispatcher,
            transaction_service=mock_transaction_service,
        )

    @pytest.mark.asyncio
    async def test_offers_are_recorded_then_dialed(
        self,
        use_case,
        enriched_issue,
        enriched_issue_repo,
        offer_call_repo,
        voice,
        matches,
    ):
        # Arrange
        enriched_issue_repo.get_by_id.side_effect = [
            enriched_issue,
            MagicMock(offer_state=OfferState.OFFERING),
        ]

        # Act
        result = await use_case.execute(enriched_issue.id)

        # Assert
        assert result.skipped is False
        assert result.offer_state == OfferState.OFFERING
        assert result.calls_initiated == 2
        enriched_issue_repo.set_offer_state.assert_any_call(
            enriched_issue.id, OfferState.OFFERING, only_from=[OfferState.UNCLAIMED]
        )
        created = offer_call_repo.create_many.call_args.args[0]
        assert [o.rank for o in created] == [1, 2]
        assert [o.match_score for o in created] == [90, 70]
        assert all(o.call_id for o in result.offer_calls)
        assert len(voice.calls) == 2
        assert voice.calls[0].customer_name == "Jane Doe"
        assert voice.calls[0].estimated_price == "180.00"

    @pytest.mark.asyncio
    async def test_failed_calls_are_marked(
        self,
        use_case,
        enriched_issue,
        enriched_issue_repo,
        offer_call_repo,
        voice,
    ):
        # Arrange
        voice.fail_numbers = {"+15550000001"}
        offer_call_repo.count_open.return_value = 1

        # Act
        result = await use_case.execute(enriched_issue.id)

        # Assert
        outcomes = {o.phone_number: o.outcome for o in result.offer_calls}
        assert outcomes["+15550000001"] == OfferOutcome.FAILED
        assert outcomes["+15550000002"] == OfferOutcome.PENDING
        assert result.calls_initiated == 1

    @pytest.mark.asyncio
    async def test_job_expires_when_every_call_fails(
        self, use_case, enriched_issue, enriched_issue_repo, offer_call_repo, voice
    ):
        voice.fail_numbers = {"+15550000001", "+15550000002"}
        offer_call_repo.count_open.return_value = 0

        await use_case.execute(enriched_issue.id)

        enriched_issue_repo.set_offer_state.assert_called_with(
            enriched_issue.id, OfferState.EXPIRED, only_from=[OfferState.OFFERING]
        )

    @pytest.mark.asyncio
    async def test_no_candidates_expires_job(
        self, use_case, enriched_issue, enriched_issue_repo, matcher, voice
    ):
        # Arrange
        matcher.find_matching_contractors.return_value = []

        # Act
        result = await use_case.execute(enriched_issue.id)

        # Assert
        assert result.offer_state == OfferState.EXPIRED
        enriched_issue_repo.set_offer_state.assert_called_once_with(
            enriched_issue.id, OfferState.EXPIRED, only_from=[OfferState.UNCLAIMED]
        )
        assert voice.calls == []

    @pytest.mark.asyncio
    async def test_claimed_job_is_skipped(
        self, use_case, enriched_issue, offer_call_repo, voice
    ):
        enriched_issue.mark_claimed(uuid4())

        result = await use_case.execute(enriched_issue.id)

        assert result.skipped is True
        assert result.offer_state == OfferState.CLAIMED
        offer_call_repo.create_many.assert_not_called()
        assert voice.calls == []

    @pytest.mark.asyncio
    async def test_job_offered_only_once(
        self, use_case, enriched_issue, offer_call_repo
    ):
        enriched_issue.offer_state = OfferState.OFFERING

        result = await use_case.execute(enriched_issue.id)

        assert result.skipped is True
        offer_call_repo.create_many.assert_not_called()

    @pytest.mark.asyncio
    async def test_lost_state_change_is_skipped(
        self, use_case, enriched_issue, enriched_issue_repo, offer_call_repo, voice
    ):
        # Arrange
        enriched_issue_repo.set_offer_state.return_value = False
        enriched_issue_repo.get_by_id.side_effect = [
            enriched_issue,
            MagicMock(offer_state=OfferState.CLAIMED),
        ]

        # Act
        result = await use_case.execute(enriched_issue.id)

        # Assert
        assert result.skipped is True
        assert result.offer_state == OfferState.CLAIMED
        offer_call_repo.create_many.assert_not_called()
        assert voice.calls == []

    @pytest.mark.asyncio
    async def test_unknown_job(self, use_case, enriched_issue_repo):
        enriched_issue_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await use_case.execute(uuid4())
