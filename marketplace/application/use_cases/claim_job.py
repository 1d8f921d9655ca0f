"""Claim job use case."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional
from uuid import UUID

from marketplace.application.interfaces.repositories import (
    AppointmentRepositoryInterface,
    EnrichedIssueRepositoryInterface,
    IssueRepositoryInterface,
    UserRepositoryInterface,
)
from marketplace.application.services.scheduling_policy import SchedulingPolicy
from marketplace.application.services.slot_finder import SlotFinder
from marketplace.application.services.transactional_outbox import (
    OutboxEventType,
    TransactionalOutbox,
)
from marketplace.config.logging import get_logger
from marketplace.domain.entities.appointment import Appointment
from marketplace.domain.entities.enriched_issue import EnrichedIssue
from marketplace.domain.events.job_claimed import JobClaimed
from marketplace.domain.exceptions.authorization_error import (
    AuthorizationError,
    NotAContractorError,
)
from marketplace.domain.exceptions.claim_error import (
    ClaimRetryExceededError,
    JobAlreadyClaimedError,
    SlotConflictError,
)
from marketplace.domain.exceptions.not_found_error import NotFoundError
from marketplace.domain.value_objects.issue_status import IssueStatus
from marketplace.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)
from marketplace.infrastructure.monitoring.metrics import (
    record_appointment_booked,
    record_claim,
    record_slot_search,
)

logger = get_logger(__name__)


@dataclass
class ClaimJobRequest:
    """Request for claiming a job."""

    enriched_issue_id: UUID
    contractor_id: UUID


@dataclass
class ClaimJobResult:
    """Result of a successful claim."""

    claimed_job: EnrichedIssue
    appointment: Optional[Appointment] = None
    notification_event_id: Optional[UUID] = None


class ClaimJobUseCase:
    """
    Claim a job and book the contractor's next free slot in one transaction.

    The claim itself is a conditional update, so of any number of concurrent
    claimers exactly one wins. The contractor row is locked before the
    appointment ledger is read, serializing bookings per contractor.
    """

    def __init__(
        self,
        enriched_issue_repo: EnrichedIssueRepositoryInterface,
        issue_repo: IssueRepositoryInterface,
        user_repo: UserRepositoryInterface,
        appointment_repo: AppointmentRepositoryInterface,
        slot_finder: SlotFinder,
        outbox: TransactionalOutbox,
        transaction_service: TransactionService,
        policy: Optional[SchedulingPolicy] = None,
        on_committed: Optional[Callable[[ClaimJobResult], Any]] = None,
    ):
        self.enriched_issue_repo = enriched_issue_repo
        self.issue_repo = issue_repo
        self.user_repo = user_repo
        self.appointment_repo = appointment_repo
        self.slot_finder = slot_finder
        self.outbox = outbox
        self.transaction_service = transaction_service
        self.policy = policy or slot_finder.policy
        self.on_committed = on_committed

    async def execute(self, request: ClaimJobRequest) -> ClaimJobResult:
        """Claim the job for the contractor."""
        logger.info(
            "Claiming job",
            enriched_issue_id=str(request.enriched_issue_id),
            contractor_id=str(request.contractor_id),
        )

        attempts = self.policy.max_claim_attempts
        for attempt in range(1, attempts + 1):
            try:
                result = await self.transaction_service.execute_in_transaction(
                    lambda: self._claim(request),
                    expected=(
                        JobAlreadyClaimedError,
                        NotFoundError,
                        AuthorizationError,
                        SlotConflictError,
                    ),
                )
            except SlotConflictError as e:
                logger.info(
                    "Slot taken before insert, retrying claim",
                    enriched_issue_id=str(request.enriched_issue_id),
                    contractor_id=str(request.contractor_id),
                    attempt=attempt,
                    scheduled_date=e.scheduled_date,
                )
                record_claim("slot_conflict")
                continue
            except JobAlreadyClaimedError:
                record_claim("already_claimed")
                raise
            except (NotFoundError, AuthorizationError):
                record_claim("rejected")
                raise

            record_claim("claimed")
            logger.info(
                "Job claimed",
                enriched_issue_id=str(request.enriched_issue_id),
                contractor_id=str(request.contractor_id),
                appointment_id=str(result.appointment.id) if result.appointment else None,
                scheduled_date=result.appointment.scheduled_date.isoformat()
                if result.appointment
                else None,
            )
            self._notify_committed(result)
            return result

        raise ClaimRetryExceededError(str(request.enriched_issue_id), attempts)

    async def _claim(self, request: ClaimJobRequest) -> ClaimJobResult:
        # 1. Load the job
        job = await self.enriched_issue_repo.get_by_id(request.enriched_issue_id)
        if not job:
            raise NotFoundError("Job", str(request.enriched_issue_id))

        # 2. Lock the contractor row; serializes bookings for this contractor
        contractor = await self.user_repo.get_by_id_for_update(request.contractor_id)
        if not contractor or not contractor.is_contractor():
            raise NotAContractorError(str(request.contractor_id))
        if job.is_claimed:
            raise JobAlreadyClaimedError(str(job.id))

        # 3. Conditional claim; zero rows means someone else won
        claimed_at = datetime.now(timezone.utc)
        if not await self.enriched_issue_repo.claim(
            job.id, contractor.id, claimed_at
        ):
            raise JobAlreadyClaimedError(str(job.id))
        job.mark_claimed(contractor.id, claimed_at)

        # 4. Move the issue to ASSIGNED
        await self.issue_repo.update_status(job.issue_id, IssueStatus.ASSIGNED)
        issue = await self.issue_repo.get_by_id(job.issue_id)
        if not issue:
            raise NotFoundError("Issue", str(job.issue_id))

        # 5. Book the earliest free slot, if any
        slot = await self.slot_finder.find_next_slot(
            contractor.id, issue.priority.value
        )
        record_slot_search(slot is not None)

        appointment = None
        if slot:
            booked = await self.appointment_repo.find_blocking_for_contractor(
                contractor.id
            )
            if self.slot_finder.has_conflict(slot.start, booked):
                raise SlotConflictError(str(contractor.id), slot.start.isoformat())

            appointment = await self.appointment_repo.create(
                Appointment(
                    issue_id=issue.id,
                    contractor_id=contractor.id,
                    customer_id=issue.customer_id,
                    scheduled_date=slot.start,
                    estimated_duration=self.policy.appointment_duration(
                        job.estimated_time_hours
                    ),
                    quoted_price=job.total_quoted_price,
                )
            )
            record_appointment_booked(issue.priority.value)
        else:
            logger.info(
                "No free slot in horizon, job claimed without appointment",
                enriched_issue_id=str(job.id),
                contractor_id=str(contractor.id),
                priority=issue.priority.value,
            )

        # 6. Queue the customer notification with the same commit
        notification_event_id = None
        customer = await self.user_repo.get_by_id(issue.customer_id)
        if appointment and customer and customer.phone_number:
            event = JobClaimed(
                enriched_issue_id=job.id,
                issue_id=issue.id,
                contractor_id=contractor.id,
                customer_id=customer.id,
                claimed_at=claimed_at,
                appointment_id=appointment.id,
                scheduled_date=appointment.scheduled_date,
                estimated_cost=str(job.total_quoted_price)
                if job.total_quoted_price is not None
                else None,
            )
            outbox_event = await self.outbox.create_event(
                event_type=OutboxEventType.CUSTOMER_NOTIFICATION,
                aggregate_id=str(appointment.id),
                event_data={
                    **event.to_payload(),
                    "customer_phone": customer.phone_number,
                    "customer_name": customer.display_name,
                    "contractor_name": contractor.display_name,
                    "job_title": issue.title,
                },
            )
            notification_event_id = outbox_event.id

        return ClaimJobResult(
            claimed_job=job,
            appointment=appointment,
            notification_event_id=notification_event_id,
        )

    def _notify_committed(self, result: ClaimJobResult) -> None:
        if not self.on_committed:
            return

        try:
            self.on_committed(result)
        except Exception as e:
            # The claim is committed; the outbox poller picks the event up later
            logger.warning(
                "Post-commit hook failed",
                enriched_issue_id=str(result.claimed_job.id),
                error=str(e),
            )
