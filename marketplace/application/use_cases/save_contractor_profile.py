"""Save contractor profile use case."""

from dataclasses import replace

from marketplace.application.interfaces.repositories import (
    ContractorProfileRepositoryInterface,
    UserRepositoryInterface,
)
from marketplace.config.logging import get_logger
from marketplace.domain.entities.contractor_profile import ContractorProfile
from marketplace.domain.exceptions.authorization_error import NotAContractorError
from marketplace.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)

logger = get_logger(__name__)


class SaveContractorProfileUseCase:
    """Create or replace the matching profile of a contractor."""

    def __init__(
        self,
        profile_repo: ContractorProfileRepositoryInterface,
        user_repo: UserRepositoryInterface,
        transaction_service: TransactionService,
    ):
        self.profile_repo = profile_repo
        self.user_repo = user_repo
        self.transaction_service = transaction_service

    async def execute(self, profile: ContractorProfile) -> ContractorProfile:
        user = await self.user_repo.get_by_id(profile.user_id)
        if not user or not user.is_contractor():
            raise NotAContractorError(str(profile.user_id))

        # skill matching is case-insensitive; keep lists tidy
        cleaned = replace(
            profile,
            skills=_clean(profile.skills),
            specialties=_clean(profile.specialties),
            preferred_job_types=_clean(profile.preferred_job_types),
            service_zip_codes=_clean(profile.service_zip_codes),
        )

        saved = await self.transaction_service.execute_in_transaction(
            lambda: self.profile_repo.upsert(cleaned)
        )

        logger.info(
            "Contractor profile saved",
            user_id=str(saved.user_id),
            skills=saved.skills,
            accept_auto_assignment=saved.accept_auto_assignment,
        )
        return saved


def _clean(values) -> list:
    return list(dict.fromkeys(v.strip() for v in values or [] if v and v.strip()))
