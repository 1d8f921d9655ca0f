"""
Integration tests for claiming a job against the database.
"""

from unittest.mock import MagicMock

import pytest

from marketplace.application.services.scheduling_policy import SchedulingPolicy
from marketplace.application.services.slot_finder import SlotFinder
from marketplace.application.services.transactional_outbox import (
    OutboxEventStatus,
    OutboxEventType,
    TransactionalOutbox,
)
from marketplace.application.use_cases.claim_job import (
    ClaimJobRequest,
    ClaimJobUseCase,
)
from marketplace.domain.entities.enriched_issue import EnrichedIssue
from marketplace.domain.entities.issue import Issue
from marketplace.domain.entities.user import User
from marketplace.domain.exceptions.claim_error import JobAlreadyClaimedError
from marketplace.domain.value_objects.issue_status import IssueStatus
from marketplace.domain.value_objects.user_role import UserRole
from marketplace.infrastructure.database.repositories.appointment_repository import (
    AppointmentRepository,
)
from marketplace.infrastructure.database.repositories.availability_repository import (
    AvailabilityRepository,
)
from marketplace.infrastructure.database.repositories.enriched_issue_repository import (
    EnrichedIssueRepository,
)
from marketplace.infrastructure.database.repositories.issue_repository import (
    IssueRepository,
)
from marketplace.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)
from marketplace.infrastructure.database.repositories.user_repository import (
    UserRepository,
)

pytestmark = pytest.mark.integration


def build_use_case(session, on_committed=None):
    policy = SchedulingPolicy()
    appointment_repo = AppointmentRepository(session)
    return ClaimJobUseCase(
        enriched_issue_repo=EnrichedIssueRepository(session),
        issue_repo=IssueRepository(session),
        user_repo=UserRepository(session),
        appointment_repo=appointment_repo,
        slot_finder=SlotFinder(
            AvailabilityRepository(session), appointment_repo, policy=policy
        ),
        outbox=TransactionalOutbox(session),
        transaction_service=TransactionService(session),
        policy=policy,
        on_committed=on_committed,
    )


class TestClaimFlow:
    """End-to-end claim against the in-memory database."""

    @pytest.mark.asyncio
    async def test_claim_persists_everything(self, db_session, seeded):
        # Arrange
        on_committed = MagicMock()
        use_case = build_use_case(db_session, on_committed)
        job = seeded["job"]
        contractor = seeded["contractor"]

        # Act
        result = await use_case.execute(
            ClaimJobRequest(enriched_issue_id=job.id, contractor_id=contractor.id)
        )

        # Assert
        assert result.appointment is not None
        stored_job = await EnrichedIssueRepository(db_session).get_by_id(job.id)
        assert stored_job.claimed_by_contractor_id == contractor.id

        issue = await IssueRepository(db_session).get_by_id(seeded["issue"].id)
        assert issue.status == IssueStatus.ASSIGNED

        booked = await AppointmentRepository(db_session).list_for_contractor(
            contractor.id
        )
        assert [a.id for a in booked] == [result.appointment.id]
        assert booked[0].estimated_duration == 90

        event = await TransactionalOutbox(db_session).get_event(
            result.notification_event_id
        )
        assert event.event_type == OutboxEventType.CUSTOMER_NOTIFICATION
        assert event.status == OutboxEventStatus.PENDING
        assert event.event_data["customer_phone"] == seeded["customer"].phone_number
        on_committed.assert_called_once_with(result)

    @pytest.mark.asyncio
    async def test_second_claim_is_rejected_and_rolled_back(
        self, db_session, seeded, contractor
    ):
        # Arrange
        rival = await UserRepository(db_session).create(
            User(
                username="rival",
                email="rival@example.com",
                role=UserRole.CONTRACTOR,
                phone_number="+15550009999",
            )
        )
        await db_session.commit()
        use_case = build_use_case(db_session)
        job = seeded["job"]

        # Act
        await use_case.execute(
            ClaimJobRequest(enriched_issue_id=job.id, contractor_id=contractor.id)
        )
        with pytest.raises(JobAlreadyClaimedError):
            await use_case.execute(
                ClaimJobRequest(enriched_issue_id=job.id, contractor_id=rival.id)
            )

        # Assert
        stored_job = await EnrichedIssueRepository(db_session).get_by_id(job.id)
        assert stored_job.claimed_by_contractor_id == contractor.id
        assert await AppointmentRepository(db_session).list_for_contractor(
            rival.id
        ) == []

    @pytest.mark.asyncio
    async def test_back_to_back_claims_get_different_slots(
        self, db_session, seeded, customer, contractor
    ):
        # Arrange
        second_issue = await IssueRepository(db_session).create(
            Issue(
                customer_id=customer.id,
                title="Running toilet",
                description="Toilet keeps running after flushing",
                zip_code="94105",
            )
        )
        second_job = await EnrichedIssueRepository(db_session).create(
            EnrichedIssue(
                issue_id=second_issue.id,
                identified_problem="Second visit",
                repair_solution="Finish the job",
            )
        )
        await db_session.commit()
        use_case = build_use_case(db_session)

        # Act
        first = await use_case.execute(
            ClaimJobRequest(
                enriched_issue_id=seeded["job"].id, contractor_id=contractor.id
            )
        )
        second = await use_case.execute(
            ClaimJobRequest(enriched_issue_id=second_job.id, contractor_id=contractor.id)
        )

        # Assert
        assert first.appointment.scheduled_date != second.appointment.scheduled_date
        assert second.appointment.scheduled_date > first.appointment.scheduled_date
