"""Contractor profile domain entity."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4


@dataclass
class ContractorProfile:
    """Skills and job preferences of a contractor."""

    user_id: UUID
    id: UUID = field(default_factory=uuid4)
    business_name: Optional[str] = None
    skills: list[str] = field(default_factory=list)
    specialties: list[str] = field(default_factory=list)
    preferred_job_types: list[str] = field(default_factory=list)
    service_zip_codes: list[str] = field(default_factory=list)
    service_radius: int = 25
    minimum_job_value: Optional[Decimal] = None
    accept_auto_assignment: bool = True
    auto_call_enabled: bool = True
    years_in_business: Optional[int] = None
    bonded_and_insured: bool = False
    preferred_contact_time: Optional[str] = None

    def prefers_difficulty(self, difficulty: Optional[str]) -> bool:
        """Check if the difficulty is one of the preferred job types."""
        if not difficulty:
            return False
        wanted = difficulty.lower()
        return any(job_type.lower() == wanted for job_type in self.preferred_job_types)

    def accepts_value(self, value: Optional[Decimal]) -> bool:
        """Check if a job worth value clears the minimum."""
        if self.minimum_job_value is None:
            return True
        if value is None:
            return False
        return Decimal(str(value)) >= self.minimum_job_value

    def serves_zip_code(self, zip_code: Optional[str]) -> bool:
        """Check if the job site lies in the service area."""
        if not zip_code or not self.service_zip_codes:
            return True
        if zip_code in self.service_zip_codes:
            return True
        return self.service_radius >= 10
