"""
Contractor profile repository implementation.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces.repositories import (
    ContractorProfileRepositoryInterface,
)
from marketplace.config.logging import get_logger
from marketplace.domain.entities.contractor_profile import ContractorProfile
from marketplace.domain.entities.user import User
from marketplace.domain.value_objects.user_role import UserRole
from marketplace.infrastructure.database.models.contractor_profile import (
    ContractorProfileModel,
)
from marketplace.infrastructure.database.models.user import UserModel
from marketplace.infrastructure.database.repositories.user_repository import (
    UserRepository,
)

logger = get_logger(__name__)

PROFILE_FIELDS = (
    "business_name",
    "skills",
    "specialties",
    "preferred_job_types",
    "service_zip_codes",
    "service_radius",
    "minimum_job_value",
    "accept_auto_assignment",
    "auto_call_enabled",
    "years_in_business",
    "bonded_and_insured",
    "preferred_contact_time",
)


class ContractorProfileRepository(ContractorProfileRepositoryInterface):
    """Contractor profile repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_user_id(self, user_id: UUID) -> Optional[ContractorProfile]:
        """Get the profile of a contractor."""
        stmt = select(ContractorProfileModel).where(
            ContractorProfileModel.user_id == user_id
        )
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def upsert(self, profile: ContractorProfile) -> ContractorProfile:
        """Create or replace the profile of a contractor."""
        stmt = select(ContractorProfileModel).where(
            ContractorProfileModel.user_id == profile.user_id
        )
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            model = ContractorProfileModel(id=profile.id, user_id=profile.user_id)
            self.db.add(model)

        for name in PROFILE_FIELDS:
            setattr(model, name, getattr(profile, name))

        await self.db.flush()

        logger.info(
            "Contractor profile saved",
            profile_id=str(model.id),
            user_id=str(model.user_id),
        )
        return self._model_to_entity(model)

    async def find_auto_assign_candidates(
        self,
    ) -> List[tuple[User, ContractorProfile]]:
        """Contractors with auto-assignment on and a phone on file."""
        stmt = (
            select(UserModel, ContractorProfileModel)
            .join(ContractorProfileModel, ContractorProfileModel.user_id == UserModel.id)
            .where(
                and_(
                    ContractorProfileModel.accept_auto_assignment.is_(True),
                    UserModel.role.in_(
                        [role.value for role in UserRole.contractor_roles()]
                    ),
                    UserModel.phone_number.is_not(None),
                    UserModel.phone_number != "",
                )
            )
            .order_by(ContractorProfileModel.created_at.asc())
        )
        result = await self.db.execute(stmt)

        return [
            (UserRepository.model_to_entity(user), self._model_to_entity(profile))
            for user, profile in result.all()
        ]

    def _model_to_entity(self, model: ContractorProfileModel) -> ContractorProfile:
        return ContractorProfile(
            id=model.id,
            user_id=model.user_id,
            business_name=model.business_name,
            skills=list(model.skills or []),
            specialties=list(model.specialties or []),
            preferred_job_types=list(model.preferred_job_types or []),
            service_zip_codes=list(model.service_zip_codes or []),
            service_radius=model.service_radius,
            minimum_job_value=model.minimum_job_value,
            accept_auto_assignment=model.accept_auto_assignment,
            auto_call_enabled=model.auto_call_enabled,
            years_in_business=model.years_in_business,
            bonded_and_insured=model.bonded_and_insured,
            preferred_contact_time=model.preferred_contact_time,
        )
