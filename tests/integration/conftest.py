"""
Fixtures for tests that run against the in-memory database.
"""

from datetime import time

import pytest_asyncio

from marketplace.domain.entities.availability_slot import AvailabilitySlot
from marketplace.domain.value_objects.day_of_week import DayOfWeek
from marketplace.infrastructure.database.repositories.availability_repository import (
    AvailabilityRepository,
)
from marketplace.infrastructure.database.repositories.contractor_profile_repository import (
    ContractorProfileRepository,
)
from marketplace.infrastructure.database.repositories.enriched_issue_repository import (
    EnrichedIssueRepository,
)
from marketplace.infrastructure.database.repositories.issue_repository import (
    IssueRepository,
)
from marketplace.infrastructure.database.repositories.user_repository import (
    UserRepository,
)


@pytest_asyncio.fixture
async def seeded(
    db_session, customer, contractor, contractor_profile, issue, enriched_issue
):
    """Customer, contractor with weekday availability, and one open job."""
    await UserRepository(db_session).create(customer)
    await UserRepository(db_session).create(contractor)
    await ContractorProfileRepository(db_session).upsert(contractor_profile)
    await IssueRepository(db_session).create(issue)
    await EnrichedIssueRepository(db_session).create(enriched_issue)
    await AvailabilityRepository(db_session).replace_for_contractor(
        contractor.id,
        [
            AvailabilitySlot(
                contractor_id=contractor.id,
                day_of_week=day,
                start_time=time(8, 0),
                end_time=time(17, 0),
            )
            for day in DayOfWeek
        ],
    )
    await db_session.commit()

    return {
        "customer": customer,
        "contractor": contractor,
        "profile": contractor_profile,
        "issue": issue,
        "job": enriched_issue,
    }
