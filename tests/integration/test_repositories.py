"""
Integration tests for the SQLAlchemy repositories.
"""

from datetime import datetime, time, timedelta, timezone
from uuid import uuid4

import pytest

from marketplace.domain.entities.appointment import Appointment
from marketplace.domain.entities.availability_slot import AvailabilitySlot
from marketplace.domain.entities.offer_call import OfferCall
from marketplace.domain.entities.user import User
from marketplace.domain.value_objects.appointment_status import AppointmentStatus
from marketplace.domain.value_objects.day_of_week import DayOfWeek
from marketplace.domain.value_objects.offer_state import OfferOutcome, OfferState
from marketplace.domain.value_objects.phone_number import phone_variants
from marketplace.domain.value_objects.user_role import UserRole
from marketplace.infrastructure.database.repositories.appointment_repository import (
    AppointmentRepository,
)
from marketplace.infrastructure.database.repositories.availability_repository import (
    AvailabilityRepository,
)
from marketplace.infrastructure.database.repositories.contractor_profile_repository import (
    ContractorProfileRepository,
)
from marketplace.infrastructure.database.repositories.enriched_issue_repository import (
    EnrichedIssueRepository,
)
from marketplace.infrastructure.database.repositories.offer_call_repository import (
    OfferCallRepository,
)
from marketplace.infrastructure.database.repositories.user_repository import (
    UserRepository,
)

pytestmark = pytest.mark.integration


class TestEnrichedIssueRepository:
    """Conditional claim and offer state updates."""

    @pytest.mark.asyncio
    async def test_second_claim_loses(self, db_session, seeded):
        # Arrange
        repo = EnrichedIssueRepository(db_session)
        job = seeded["job"]
        now = datetime.now(timezone.utc)

        # Act
        first = await repo.claim(job.id, seeded["contractor"].id, now)
        second = await repo.claim(job.id, uuid4(), now)
        await db_session.commit()

        # Assert
        assert first is True
        assert second is False
        stored = await repo.get_by_id(job.id)
        assert stored.claimed_by_contractor_id == seeded["contractor"].id
        assert stored.offer_state == OfferState.CLAIMED
        assert stored.claimed_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_claimed_job_leaves_open_list(self, db_session, seeded):
        repo = EnrichedIssueRepository(db_session)
        job = seeded["job"]

        assert [j.id for j in await repo.list_open()] == [job.id]

        await repo.claim(job.id, seeded["contractor"].id, datetime.now(timezone.utc))
        await db_session.commit()

        assert await repo.list_open() == []
        claimed = await repo.list_claimed_by(seeded["contractor"].id)
        assert [j.id for j in claimed] == [job.id]

    @pytest.mark.asyncio
    async def test_set_offer_state_respects_current_state(self, db_session, seeded):
        repo = EnrichedIssueRepository(db_session)
        job = seeded["job"]

        moved = await repo.set_offer_state(
            job.id, OfferState.OFFERING, only_from=[OfferState.UNCLAIMED]
        )
        again = await repo.set_offer_state(
            job.id, OfferState.OFFERING, only_from=[OfferState.UNCLAIMED]
        )
        await db_session.commit()

        assert moved is True
        assert again is False
        assert (await repo.get_by_id(job.id)).offer_state == OfferState.OFFERING


class TestAvailabilityRepository:
    @pytest.mark.asyncio
    async def test_replace_and_list_sorted(self, db_session, contractor):
        # Arrange
        await UserRepository(db_session).create(contractor)
        repo = AvailabilityRepository(db_session)
        await repo.replace_for_contractor(
            contractor.id,
            [
                AvailabilitySlot(contractor.id, DayOfWeek.MONDAY, time(9), time(12)),
            ],
        )

        # Act
        await repo.replace_for_contractor(
            contractor.id,
            [
                AvailabilitySlot(contractor.id, DayOfWeek.FRIDAY, time(9), time(12)),
                AvailabilitySlot(contractor.id, DayOfWeek.TUESDAY, time(13), time(17)),
                AvailabilitySlot(
                    contractor.id,
                    DayOfWeek.TUESDAY,
                    time(8),
                    time(12),
                    is_available=False,
                ),
            ],
        )
        await db_session.commit()

        # Assert
        slots = await repo.list_for_contractor(contractor.id)
        assert [(s.day_of_week, s.start_time) for s in slots] == [
            (DayOfWeek.TUESDAY, time(8)),
            (DayOfWeek.TUESDAY, time(13)),
            (DayOfWeek.FRIDAY, time(9)),
        ]
        available = await repo.list_for_contractor(contractor.id, only_available=True)
        assert len(available) == 2


class TestAppointmentRepository:
    @pytest.mark.asyncio
    async def test_only_blocking_appointments_are_returned(self, db_session, seeded):
        # Arrange
        repo = AppointmentRepository(db_session)
        contractor = seeded["contractor"]
        start = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
        statuses = [
            AppointmentStatus.SCHEDULED,
            AppointmentStatus.CANCELLED,
            AppointmentStatus.IN_PROGRESS,
            AppointmentStatus.COMPLETED,
        ]
        for offset, status in enumerate(statuses):
            await repo.create(
                Appointment(
                    issue_id=seeded["issue"].id,
                    contractor_id=contractor.id,
                    customer_id=seeded["customer"].id,
                    scheduled_date=start + timedelta(days=offset),
                    estimated_duration=120,
                    status=status,
                )
            )
        await db_session.commit()

        # Act
        blocking = await repo.find_blocking_for_contractor(contractor.id)

        # Assert
        assert [a.status for a in blocking] == [
            AppointmentStatus.SCHEDULED,
            AppointmentStatus.IN_PROGRESS,
        ]
        assert all(a.scheduled_date.tzinfo is not None for a in blocking)
        assert len(await repo.list_for_customer(seeded["customer"].id)) == 4


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_find_contractor_by_any_phone_spelling(self, db_session):
        # Arrange
        repo = UserRepository(db_session)
        stored = await repo.create(
            User(
                username="sam",
                email="sam@example.com",
                role=UserRole.CONTRACTOR,
                phone_number="5551112222",
            )
        )
        await repo.create(
            User(
                username="pat",
                email="pat@example.com",
                role=UserRole.CUSTOMER,
                phone_number="+15553334444",
            )
        )
        await db_session.commit()

        # Act
        found = await repo.find_contractor_by_phone(phone_variants("+15551112222"))
        customer = await repo.find_contractor_by_phone(phone_variants("+15553334444"))

        # Assert
        assert found.id == stored.id
        assert customer is None
        assert await repo.find_contractor_by_phone([]) is None


class TestContractorProfileRepository:
    @pytest.mark.asyncio
    async def test_upsert_replaces_profile(self, db_session, seeded):
        repo = ContractorProfileRepository(db_session)
        profile = seeded["profile"]
        profile.skills = ["plumbing", "hvac"]
        profile.accept_auto_assignment = False

        await repo.upsert(profile)
        await db_session.commit()

        stored = await repo.get_by_user_id(seeded["contractor"].id)
        assert stored.skills == ["plumbing", "hvac"]
        assert await repo.find_auto_assign_candidates() == []

    @pytest.mark.asyncio
    async def test_candidates_join_user(self, db_session, seeded):
        candidates = await ContractorProfileRepository(
            db_session
        ).find_auto_assign_candidates()

        assert len(candidates) == 1
        user, profile = candidates[0]
        assert user.id == seeded["contractor"].id
        assert profile.years_in_business == 3


class TestOfferCallRepository:
    @pytest.mark.asyncio
    async def test_open_offer_count(self, db_session, seeded):
        # Arrange
        repo = OfferCallRepository(db_session)
        job = seeded["job"]
        other = uuid4()
        await repo.create_many(
            [
                OfferCall(job.id, seeded["contractor"].id, "+15559870000", 1, 80),
                OfferCall(job.id, other, "+15550000000", 2, 60),
            ]
        )
        await db_session.commit()

        # Act
        offer = await repo.find_for_contractor(job.id, other)
        offer.mark_responded(OfferOutcome.DECLINED, "busy")
        await repo.update(offer)
        await db_session.commit()

        # Assert
        assert await repo.count_open(job.id) == 1
        offers = await repo.list_for_job(job.id)
        assert [o.rank for o in offers] == [1, 2]
        assert offers[1].decline_reason == "busy"
