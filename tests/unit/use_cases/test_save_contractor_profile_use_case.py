"""
Unit tests for SaveContractorProfileUseCase.
"""

from unittest.mock import AsyncMock

import pytest

from marketplace.application.use_cases.save_contractor_profile import (
    SaveContractorProfileUseCase,
)
from marketplace.domain.entities.contractor_profile import ContractorProfile
from marketplace.domain.exceptions.authorization_error import NotAContractorError


class TestSaveContractorProfileUseCase:
    """Test cases for SaveContractorProfileUseCase."""

    @pytest.fixture
    def profile_repo(self):
        repo = AsyncMock()
        repo.upsert = AsyncMock(side_effect=lambda profile: profile)
        return repo

    @pytest.fixture
    def user_repo(self, contractor):
        repo = AsyncMock()
        repo.get_by_id = AsyncMock(return_value=contractor)
        return repo

    @pytest.fixture
    def use_case(self, profile_repo, user_repo, mock_transaction_service):
        return SaveContractorProfileUseCase(
            profile_repo, user_repo, mock_transaction_service
        )

    @pytest.mark.asyncio
    async def test_lists_are_cleaned(self, use_case, contractor, profile_repo):
        profile = ContractorProfile(
            user_id=contractor.id,
            skills=[" plumbing ", "plumbing", "", "hvac"],
            service_zip_codes=["94105", "94105 "],
        )

        saved = await use_case.execute(profile)

        assert saved.skills == ["plumbing", "hvac"]
        assert saved.service_zip_codes == ["94105"]
        profile_repo.upsert.assert_called_once()

    @pytest.mark.asyncio
    async def test_customer_is_rejected(
        self, use_case, user_repo, customer, profile_repo
    ):
        user_repo.get_by_id.return_value = customer

        with pytest.raises(NotAContractorError):
            await use_case.execute(ContractorProfile(user_id=customer.id))

        profile_repo.upsert.assert_not_called()
