"""
Pytest configuration and fixtures.
"""

from decimal import Decimal
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from marketplace.application.services.scheduling_policy import SchedulingPolicy
from marketplace.config.settings import Settings
from marketplace.domain.entities.contractor_profile import ContractorProfile
from marketplace.domain.entities.enriched_issue import EnrichedIssue
from marketplace.domain.entities.issue import Issue
from marketplace.domain.entities.user import User
from marketplace.domain.value_objects.difficulty import DifficultyLevel
from marketplace.domain.value_objects.priority import Priority
from marketplace.domain.value_objects.user_role import UserRole
from marketplace.infrastructure.database.models import Base

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def test_settings():
    """Test settings configuration."""
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL=TEST_DATABASE_URL,
        REDIS_URL="redis://localhost:6379/1",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        MOCK_VOICE=True,
        MOCK_ENRICHMENT=True,
    )


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def policy():
    """Scheduling policy with the stock defaults."""
    return SchedulingPolicy()


@pytest.fixture
def mock_transaction_service():
    """Transaction service that simply runs the operation."""

    async def run(operation, expected=()):
        return await operation()

    service = AsyncMock()
    service.execute_in_transaction = AsyncMock(side_effect=run)
    return service


@pytest.fixture
def customer():
    """Sample customer."""
    return User(
        username="jane",
        email="jane@example.com",
        first_name="Jane",
        last_name="Doe",
        phone_number="+15551230000",
        address="12 Elm St",
        role=UserRole.CUSTOMER,
    )


@pytest.fixture
def contractor():
    """Sample contractor."""
    return User(
        username="bob-plumbing",
        email="bob@example.com",
        first_name="Bob",
        phone_number="+15559870000",
        role=UserRole.CONTRACTOR,
    )


@pytest.fixture
def contractor_profile(contractor):
    """Profile of the sample contractor."""
    return ContractorProfile(
        user_id=contractor.id,
        business_name="Bob's Plumbing",
        skills=["plumbing"],
        preferred_job_types=["MEDIUM"],
        years_in_business=3,
        bonded_and_insured=True,
    )


@pytest.fixture
def issue(customer):
    """Sample customer issue."""
    return Issue(
        customer_id=customer.id,
        title="Leaky faucet",
        description="Kitchen faucet drips all night",
        priority=Priority.NORMAL,
        zip_code="94105",
    )


@pytest.fixture
def enriched_issue(issue):
    """Sample claimable job."""
    return EnrichedIssue(
        issue_id=issue.id,
        identified_problem="Worn faucet cartridge",
        repair_solution="Replace the cartridge",
        difficulty_level=DifficultyLevel.MEDIUM,
        estimated_time_hours=1.5,
        total_estimated_cost=Decimal("180.00"),
        total_quoted_price=Decimal("180.00"),
    )
