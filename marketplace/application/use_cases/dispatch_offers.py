"""Dispatch job offers use case."""

from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from marketplace.application.interfaces.repositories import (
    EnrichedIssueRepositoryInterface,
    IssueRepositoryInterface,
    OfferCallRepositoryInterface,
    UserRepositoryInterface,
)
from marketplace.application.services.contractor_matcher import ContractorMatcher
from marketplace.application.services.offer_dispatcher import (
    DispatchSummary,
    JobOffer,
    OfferDispatcher,
)
from marketplace.config.logging import get_logger
from marketplace.domain.entities.offer_call import OfferCall
from marketplace.domain.exceptions.not_found_error import NotFoundError
from marketplace.domain.value_objects.offer_state import OfferState
from marketplace.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)
from marketplace.infrastructure.monitoring.metrics import (
    record_match_score,
    record_offer_call,
)

logger = get_logger(__name__)


@dataclass
class DispatchOffersResult:
    """Result of an offer round for one job."""

    enriched_issue_id: UUID
    offer_state: OfferState
    offer_calls: List[OfferCall] = field(default_factory=list)
    summary: Optional[DispatchSummary] = None
    skipped: bool = False

    @property
    def calls_initiated(self) -> int:
        return self.summary.calls_initiated if self.summary else 0


class DispatchOffersUseCase:
    """
    Offer a job to the best-ranked contractors by phone.

    Offer rows are written before dialing so a webhook answer always finds
    its record. A job is offered once: only UNCLAIMED jobs are dispatched.
    """

    def __init__(
        self,
        enriched_issue_repo: EnrichedIssueRepositoryInterface,
        issue_repo: IssueRepositoryInterface,
        user_repo: UserRepositoryInterface,
        offer_call_repo: OfferCallRepositoryInterface,
        matcher: ContractorMatcher,
        dispatcher: OfferDispatcher,
        transaction_service: TransactionService,
    ):
        self.enriched_issue_repo = enriched_issue_repo
        self.issue_repo = issue_repo
        self.user_repo = user_repo
        self.offer_call_repo = offer_call_repo
        self.matcher = matcher
        self.dispatcher = dispatcher
        self.transaction_service = transaction_service

    async def execute(self, enriched_issue_id: UUID) -> DispatchOffersResult:
        """Run one offer round for the job."""
        job = await self.enriched_issue_repo.get_by_id(enriched_issue_id)
        if not job:
            raise NotFoundError("Job", str(enriched_issue_id))

        if job.is_claimed or not job.offer_state.can_dispatch():
            logger.info(
                "Job not eligible for offers",
                enriched_issue_id=str(job.id),
                offer_state=job.offer_state.value,
                claimed=job.is_claimed,
            )
            return DispatchOffersResult(
                enriched_issue_id=job.id, offer_state=job.offer_state, skipped=True
            )

        issue = await self.issue_repo.get_by_id(job.issue_id)
        if not issue:
            raise NotFoundError("Issue", str(job.issue_id))

        # 1. Rank contractors and keep the callable ones
        criteria = self.matcher.criteria_for_job(issue, job)
        matches = await self.matcher.find_matching_contractors(criteria)
        candidates = self.dispatcher.select_candidates(matches)
        for match in candidates:
            record_match_score(match.match_score)

        if not candidates:
            await self.transaction_service.execute_in_transaction(
                lambda: self.enriched_issue_repo.set_offer_state(
                    job.id, OfferState.EXPIRED, only_from=[OfferState.UNCLAIMED]
                )
            )
            logger.info(
                "No callable contractors, job expired",
                enriched_issue_id=str(job.id),
                matches=len(matches),
            )
            return DispatchOffersResult(
                enriched_issue_id=job.id, offer_state=OfferState.EXPIRED
            )

        # 2. Move to OFFERING and record the offers before dialing
        offers = [
            OfferCall(
                enriched_issue_id=job.id,
                contractor_id=match.contractor_id,
                phone_number=match.contractor.phone_number,
                rank=rank,
                match_score=match.match_score,
            )
            for rank, match in enumerate(candidates, start=1)
        ]

        async def start_offering():
            moved = await self.enriched_issue_repo.set_offer_state(
                job.id, OfferState.OFFERING, only_from=[OfferState.UNCLAIMED]
            )
            if not moved:
                return None
            return await self.offer_call_repo.create_many(offers)

        created = await self.transaction_service.execute_in_transaction(
            start_offering
        )
        if created is None:
            logger.info(
                "Job left UNCLAIMED concurrently, not offering",
                enriched_issue_id=str(job.id),
            )
            current = await self.enriched_issue_repo.get_by_id(job.id)
            return DispatchOffersResult(
                enriched_issue_id=job.id,
                offer_state=current.offer_state if current else job.offer_state,
                skipped=True,
            )

        # 3. Dial, staggered
        customer = await self.user_repo.get_by_id(issue.customer_id)
        offer = JobOffer(
            job_id=job.id,
            title=issue.title,
            description=job.identified_problem or issue.description,
            priority=issue.priority,
            estimated_price=str(job.total_quoted_price)
            if job.total_quoted_price is not None
            else None,
            customer_name=customer.display_name if customer else None,
            customer_location=(customer.address if customer else None)
            or issue.zip_code,
        )
        summary = await self.dispatcher.dispatch(offer, candidates)

        # 4. Store call ids and failures; expire if nothing is left open
        by_contractor = {o.contractor_id: o for o in created}

        async def record_results():
            for result in summary.results:
                offer_call = await self.offer_call_repo.find_for_contractor(
                    job.id, result.contractor_id
                )
                if offer_call is None:
                    offer_call = by_contractor[result.contractor_id]
                if result.success:
                    offer_call.call_id = result.call_id
                else:
                    offer_call.mark_failed(result.error or "call failed")
                await self.offer_call_repo.update(offer_call)
                by_contractor[result.contractor_id] = offer_call
                record_offer_call("initiated" if result.success else "failed")

            if await self.offer_call_repo.count_open(job.id) == 0:
                if await self.enriched_issue_repo.set_offer_state(
                    job.id, OfferState.EXPIRED, only_from=[OfferState.OFFERING]
                ):
                    logger.info(
                        "No offer left open, job expired",
                        enriched_issue_id=str(job.id),
                    )

        await self.transaction_service.execute_in_transaction(record_results)

        current = await self.enriched_issue_repo.get_by_id(job.id)
        return DispatchOffersResult(
            enriched_issue_id=job.id,
            offer_state=current.offer_state if current else OfferState.OFFERING,
            offer_calls=list(by_contractor.values()),
            summary=summary,
        )
