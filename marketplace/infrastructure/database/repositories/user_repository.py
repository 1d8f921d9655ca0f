"""
User repository implementation.
"""

from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces.repositories import UserRepositoryInterface
from marketplace.config.logging import get_logger
from marketplace.domain.entities.user import User
from marketplace.domain.value_objects.user_role import UserRole
from marketplace.infrastructure.database.models.base import as_utc
from marketplace.infrastructure.database.models.user import UserModel

logger = get_logger(__name__)


class UserRepository(UserRepositoryInterface):
    """User repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user: User) -> User:
        """Create a new user."""
        model = UserModel(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            phone_number=user.phone_number,
            address=user.address,
            role=user.role.value,
            created_at=user.created_at,
        )
        self.db.add(model)
        await self.db.flush()

        logger.info("User created", user_id=str(model.id), role=model.role)
        return self.model_to_entity(model)

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID."""
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self.model_to_entity(model) if model else None

    async def get_by_id_for_update(self, user_id: UUID) -> Optional[User]:
        """Get user by ID, locking the row until the transaction ends."""
        stmt = select(UserModel).where(UserModel.id == user_id).with_for_update()
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self.model_to_entity(model) if model else None

    async def find_contractor_by_phone(
        self, phone_numbers: Sequence[str]
    ) -> Optional[User]:
        """Find a contractor whose phone matches any of the given spellings."""
        if not phone_numbers:
            return None

        stmt = (
            select(UserModel)
            .where(
                and_(
                    UserModel.phone_number.in_(list(phone_numbers)),
                    UserModel.role.in_(
                        [role.value for role in UserRole.contractor_roles()]
                    ),
                )
            )
            .order_by(UserModel.created_at.asc())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self.model_to_entity(model) if model else None

    @staticmethod
    def model_to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            username=model.username,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            phone_number=model.phone_number,
            address=model.address,
            role=UserRole(model.role),
            created_at=as_utc(model.created_at),
        )
