"""Process offer response use case (voice webhook)."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from marketplace.application.interfaces.repositories import (
    EnrichedIssueRepositoryInterface,
    OfferCallRepositoryInterface,
    UserRepositoryInterface,
)
from marketplace.application.use_cases.claim_job import (
    ClaimJobRequest,
    ClaimJobResult,
    ClaimJobUseCase,
)
from marketplace.config.logging import get_logger
from marketplace.domain.entities.user import User
from marketplace.domain.exceptions.claim_error import JobAlreadyClaimedError
from marketplace.domain.exceptions.not_found_error import NotFoundError
from marketplace.domain.value_objects.offer_state import OfferOutcome, OfferState
from marketplace.domain.value_objects.phone_number import phone_variants
from marketplace.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)
from marketplace.infrastructure.monitoring.metrics import record_offer_response

logger = get_logger(__name__)

ALREADY_CLAIMED_MESSAGE = "Job was already claimed by another contractor"


@dataclass
class OfferResponseRequest:
    """A contractor's answer as reported by the voice provider."""

    enriched_issue_id: UUID
    contractor_phone: str
    job_accepted: bool
    contractor_response: Optional[str] = None
    decline_reason: Optional[str] = None

    @property
    def is_acceptance(self) -> bool:
        return bool(self.job_accepted) and (
            self.contractor_response or "accepted"
        ).lower() == "accepted"


@dataclass
class OfferResponseResult:
    """Outcome reported back to the voice provider."""

    success: bool
    message: str
    enriched_issue_id: UUID
    contractor_id: Optional[UUID] = None
    contractor_response: str = "accepted"
    claim: Optional[ClaimJobResult] = None

    @property
    def appointment_id(self) -> Optional[UUID]:
        if self.claim and self.claim.appointment:
            return self.claim.appointment.id
        return None


class ProcessOfferResponseUseCase:
    """Turn an end-of-call report into a claim or a recorded decline."""

    def __init__(
        self,
        enriched_issue_repo: EnrichedIssueRepositoryInterface,
        user_repo: UserRepositoryInterface,
        offer_call_repo: OfferCallRepositoryInterface,
        claim_job: ClaimJobUseCase,
        transaction_service: TransactionService,
        default_country_code: str = "+1",
    ):
        self.enriched_issue_repo = enriched_issue_repo
        self.user_repo = user_repo
        self.offer_call_repo = offer_call_repo
        self.claim_job = claim_job
        self.transaction_service = transaction_service
        self.default_country_code = default_country_code

    async def execute(self, request: OfferResponseRequest) -> OfferResponseResult:
        job = await self.enriched_issue_repo.get_by_id(request.enriched_issue_id)
        if not job:
            raise NotFoundError("Job", str(request.enriched_issue_id))

        contractor = await self._resolve_contractor(request.contractor_phone)

        logger.info(
            "Offer response received",
            enriched_issue_id=str(job.id),
            contractor_id=str(contractor.id),
            accepted=request.is_acceptance,
        )

        if request.is_acceptance:
            return await self._accept(request, contractor)
        return await self._decline(request, contractor)

    async def _resolve_contractor(self, phone: str) -> User:
        variants = phone_variants(phone, self.default_country_code)
        contractor = await self.user_repo.find_contractor_by_phone(variants)
        if not contractor:
            raise NotFoundError("Contractor", phone)
        return contractor

    async def _accept(
        self, request: OfferResponseRequest, contractor: User
    ) -> OfferResponseResult:
        try:
            claim = await self.claim_job.execute(
                ClaimJobRequest(
                    enriched_issue_id=request.enriched_issue_id,
                    contractor_id=contractor.id,
                )
            )
        except JobAlreadyClaimedError:
            logger.info(
                "Accepted offer lost the race",
                enriched_issue_id=str(request.enriched_issue_id),
                contractor_id=str(contractor.id),
            )
            await self._record_outcome(
                request.enriched_issue_id, contractor.id, OfferOutcome.SUPERSEDED
            )
            record_offer_response("superseded")
            return OfferResponseResult(
                success=False,
                message=ALREADY_CLAIMED_MESSAGE,
                enriched_issue_id=request.enriched_issue_id,
                contractor_id=contractor.id,
            )

        await self._record_outcome(
            request.enriched_issue_id, contractor.id, OfferOutcome.ACCEPTED
        )
        record_offer_response("accepted")
        return OfferResponseResult(
            success=True,
            message="Job successfully assigned",
            enriched_issue_id=request.enriched_issue_id,
            contractor_id=contractor.id,
            claim=claim,
        )

    async def _decline(
        self, request: OfferResponseRequest, contractor: User
    ) -> OfferResponseResult:
        logger.info(
            "Contractor declined job",
            enriched_issue_id=str(request.enriched_issue_id),
            contractor_id=str(contractor.id),
            reason=request.decline_reason or "Not specified",
        )
        await self._record_outcome(
            request.enriched_issue_id,
            contractor.id,
            OfferOutcome.DECLINED,
            decline_reason=request.decline_reason,
        )
        record_offer_response("declined")
        return OfferResponseResult(
            success=True,
            message="Contractor response recorded",
            enriched_issue_id=request.enriched_issue_id,
            contractor_id=contractor.id,
            contractor_response="declined",
        )

    async def _record_outcome(
        self,
        enriched_issue_id: UUID,
        contractor_id: UUID,
        outcome: OfferOutcome,
        decline_reason: Optional[str] = None,
    ) -> None:
        async def record():
            offer = await self.offer_call_repo.find_for_contractor(
                enriched_issue_id, contractor_id
            )
            if offer is None:
                # answer to a call placed outside the dispatcher
                return
            offer.mark_responded(outcome, decline_reason)
            await self.offer_call_repo.update(offer)

            if outcome != OfferOutcome.DECLINED:
                return

            # no open offers and nobody claimed: the job expires
            if await self.offer_call_repo.count_open(enriched_issue_id) == 0:
                expired = await self.enriched_issue_repo.set_offer_state(
                    enriched_issue_id,
                    OfferState.EXPIRED,
                    only_from=[OfferState.OFFERING],
                )
                if expired:
                    logger.info(
                        "All offers declined, job expired",
                        enriched_issue_id=str(enriched_issue_id),
                    )

        await self.transaction_service.execute_in_transaction(record)
