"""
Job-related API schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from marketplace.application.services.contractor_matcher import ContractorMatch
from marketplace.domain.entities.enriched_issue import EnrichedIssue
from marketplace.domain.entities.issue import Issue

from .appointment import AppointmentResponse
from .common import BaseResponse


class JobResponse(BaseModel):
    """Claimable job (an enriched issue) response schema."""

    id: UUID
    issue_id: UUID
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    zip_code: Optional[str] = None
    identified_problem: str
    repair_solution: str
    difficulty_level: Optional[str] = None
    estimated_time_hours: Optional[float] = None
    required_items: list[dict[str, Any]] = Field(default_factory=list)
    total_estimated_cost: Optional[Decimal] = None
    total_quoted_price: Optional[Decimal] = None
    questions_for_user: list[str] = Field(default_factory=list)
    contractor_checklist: list[str] = Field(default_factory=list)
    claimed_by_contractor_id: Optional[UUID] = None
    claimed_at: Optional[datetime] = None
    offer_state: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_entities(
        cls, job: EnrichedIssue, issue: Optional[Issue] = None
    ) -> "JobResponse":
        return cls(
            id=job.id,
            issue_id=job.issue_id,
            title=issue.title if issue else None,
            description=issue.description if issue else None,
            priority=issue.priority.value if issue else None,
            zip_code=issue.zip_code if issue else None,
            identified_problem=job.identified_problem,
            repair_solution=job.repair_solution,
            difficulty_level=job.difficulty_level.value
            if job.difficulty_level
            else None,
            estimated_time_hours=job.estimated_time_hours,
            required_items=job.required_items,
            total_estimated_cost=job.total_estimated_cost,
            total_quoted_price=job.total_quoted_price,
            questions_for_user=job.questions_for_user,
            contractor_checklist=job.contractor_checklist,
            claimed_by_contractor_id=job.claimed_by_contractor_id,
            claimed_at=job.claimed_at,
            offer_state=job.offer_state.value,
            created_at=job.created_at,
        )


class ClaimJobResponse(BaseResponse):
    """Claim result schema."""

    job: JobResponse
    appointment: Optional[AppointmentResponse] = None


class ContractorMatchResponse(BaseModel):
    """Ranked contractor for a job."""

    contractor_id: UUID
    name: str
    business_name: Optional[str] = None
    match_score: int = Field(..., ge=0)
    matched_skills: list[str] = Field(default_factory=list)
    auto_call_enabled: bool

    @classmethod
    def from_match(cls, match: ContractorMatch) -> "ContractorMatchResponse":
        return cls(
            contractor_id=match.contractor_id,
            name=match.contractor.display_name,
            business_name=match.profile.business_name,
            match_score=match.match_score,
            matched_skills=match.matched_skills,
            auto_call_enabled=match.profile.auto_call_enabled,
        )


class OfferDispatchResponse(BaseResponse):
    """Offer dispatch queueing response."""

    enriched_issue_id: UUID
