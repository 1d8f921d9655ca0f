"""
Outbound Offer Dispatcher: staggered job-offer calls to ranked contractors.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Sequence
from uuid import UUID

from marketplace.application.interfaces.voice import (
    JobOfferCallRequest,
    VoiceClientInterface,
)
from marketplace.application.services.contractor_matcher import ContractorMatch
from marketplace.application.services.retry_handler import RetryHandler
from marketplace.application.services.scheduling_policy import SchedulingPolicy
from marketplace.config.logging import get_logger
from marketplace.domain.exceptions.upstream_error import UpstreamServiceError
from marketplace.domain.value_objects.priority import Priority

logger = get_logger(__name__)


@dataclass
class JobOffer:
    """What the contractor hears about the job."""

    job_id: UUID
    title: str
    description: str
    priority: Priority = Priority.NORMAL
    estimated_price: Optional[str] = None
    customer_name: Optional[str] = None
    customer_location: Optional[str] = None


@dataclass
class OfferCallResult:
    """Outcome of placing one call."""

    contractor_id: UUID
    success: bool
    call_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class DispatchSummary:
    """Outcome of a dispatch round."""

    results: List[OfferCallResult] = field(default_factory=list)

    @property
    def calls_initiated(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def success(self) -> bool:
        return self.calls_initiated > 0

    @property
    def errors(self) -> List[str]:
        return [result.error for result in self.results if not result.success]


class OfferDispatcher:
    """Places staggered offer calls; answers arrive later through the webhook."""

    def __init__(
        self,
        voice_client: VoiceClientInterface,
        policy: Optional[SchedulingPolicy] = None,
        retry_handler: Optional[RetryHandler] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        max_call_retries: int = 2,
    ):
        self.voice_client = voice_client
        self.policy = policy or SchedulingPolicy()
        self.retry_handler = retry_handler or RetryHandler(sleep=sleep)
        self.sleep = sleep
        self.max_call_retries = max_call_retries
        self.logger = logger

    def select_candidates(
        self, matches: Sequence[ContractorMatch]
    ) -> List[ContractorMatch]:
        """Top matches that accept calls and have a phone, capped per job."""
        callable_matches = [
            match
            for match in matches
            if match.profile.auto_call_enabled and match.contractor.phone_number
        ]
        return callable_matches[: self.policy.max_offer_calls]

    async def dispatch(
        self, offer: JobOffer, candidates: Sequence[ContractorMatch]
    ) -> DispatchSummary:
        """
        Call every candidate, the i-th one after i stagger intervals.

        A failed call never stops the others.
        """
        self.logger.info(
            "Dispatching job offers",
            job_id=str(offer.job_id),
            candidate_count=len(candidates),
            stagger_seconds=self.policy.offer_stagger_seconds,
        )

        results = await asyncio.gather(
            *[
                self._call_after_delay(index, match, offer)
                for index, match in enumerate(candidates)
            ]
        )
        summary = DispatchSummary(results=list(results))

        self.logger.info(
            "Job offers dispatched",
            job_id=str(offer.job_id),
            calls_initiated=summary.calls_initiated,
            failed=len(summary.errors),
        )
        return summary

    async def _call_after_delay(
        self, index: int, match: ContractorMatch, offer: JobOffer
    ) -> OfferCallResult:
        delay = index * self.policy.offer_stagger_seconds
        if delay:
            await self.sleep(delay)

        request = JobOfferCallRequest(
            phone_number=match.contractor.phone_number,
            contractor_name=match.contractor.display_name,
            job_id=str(offer.job_id),
            job_title=offer.title,
            job_description=offer.description,
            estimated_price=offer.estimated_price,
            customer_name=offer.customer_name,
            customer_location=offer.customer_location,
            appointment_window=offer.priority.appointment_window(),
            metadata={
                "enriched_issue_id": str(offer.job_id),
                "contractor_id": str(match.contractor_id),
                "match_score": match.match_score,
            },
        )

        try:
            call_id = await self.retry_handler.execute_with_retry(
                lambda: self.voice_client.place_job_offer_call(request),
                max_retries=self.max_call_retries,
                operation_key="voice_job_offer",
                retry_on=(UpstreamServiceError,),
            )
        except Exception as e:
            circuit = self.retry_handler.get_circuit_breaker_status("voice_job_offer")
            self.logger.error(
                "Failed to call contractor",
                job_id=str(offer.job_id),
                contractor_id=str(match.contractor_id),
                error=str(e),
                circuit_state=circuit["state"],
                circuit_failures=circuit["failure_count"],
            )
            return OfferCallResult(
                contractor_id=match.contractor_id, success=False, error=str(e)
            )

        self.logger.info(
            "Offer call initiated",
            job_id=str(offer.job_id),
            contractor_id=str(match.contractor_id),
            call_id=call_id,
            rank=index + 1,
        )
        return OfferCallResult(
            contractor_id=match.contractor_id, success=True, call_id=call_id
        )
