"""
Contractor profile API schemas.
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from marketplace.domain.entities.contractor_profile import ContractorProfile


class ContractorProfileRequest(BaseModel):
    """Contractor profile upsert request."""

    business_name: Optional[str] = Field(None, max_length=255)
    skills: list[str] = Field(default_factory=list)
    specialties: list[str] = Field(default_factory=list)
    preferred_job_types: list[str] = Field(default_factory=list)
    service_zip_codes: list[str] = Field(default_factory=list)
    service_radius: int = Field(25, ge=0, le=500)
    minimum_job_value: Optional[Decimal] = Field(None, ge=0)
    accept_auto_assignment: bool = True
    auto_call_enabled: bool = True
    years_in_business: Optional[int] = Field(None, ge=0, le=100)
    bonded_and_insured: bool = False
    preferred_contact_time: Optional[str] = Field(None, max_length=100)

    @field_validator("preferred_job_types")
    @classmethod
    def validate_job_types(cls, v):
        return [job_type.upper() for job_type in v]

    def to_entity(self, user_id: UUID) -> ContractorProfile:
        return ContractorProfile(user_id=user_id, **self.model_dump())


class ContractorProfileResponse(ContractorProfileRequest):
    """Stored contractor profile."""

    id: UUID
    user_id: UUID

    @classmethod
    def from_entity(cls, profile: ContractorProfile) -> "ContractorProfileResponse":
        return cls(
            id=profile.id,
            user_id=profile.user_id,
            business_name=profile.business_name,
            skills=profile.skills,
            specialties=profile.specialties,
            preferred_job_types=profile.preferred_job_types,
            service_zip_codes=profile.service_zip_codes,
            service_radius=profile.service_radius,
            minimum_job_value=profile.minimum_job_value,
            accept_auto_assignment=profile.accept_auto_assignment,
            auto_call_enabled=profile.auto_call_enabled,
            years_in_business=profile.years_in_business,
            bonded_and_insured=profile.bonded_and_insured,
            preferred_contact_time=profile.preferred_contact_time,
        )
