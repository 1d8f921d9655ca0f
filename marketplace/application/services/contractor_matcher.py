"""
Contractor Matcher for ranking contractors against a job.
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Sequence
from uuid import UUID

from marketplace.application.interfaces.repositories import (
    ContractorProfileRepositoryInterface,
)
from marketplace.application.services.skill_extractor import extract_skills
from marketplace.config.logging import get_logger
from marketplace.domain.entities.contractor_profile import ContractorProfile
from marketplace.domain.entities.enriched_issue import EnrichedIssue
from marketplace.domain.entities.issue import Issue
from marketplace.domain.entities.user import User
from marketplace.domain.value_objects.priority import Priority

logger = get_logger(__name__)


@dataclass
class MatchCriteria:
    """What a job asks of a contractor."""

    required_skills: List[str]
    difficulty: Optional[str] = None
    priority: Priority = Priority.NORMAL
    job_value: Optional[Decimal] = None
    zip_code: Optional[str] = None
    job_id: Optional[UUID] = None


@dataclass
class ContractorMatch:
    """Contractor match result."""

    contractor: User
    profile: ContractorProfile
    match_score: int
    matched_skills: List[str] = field(default_factory=list)

    @property
    def contractor_id(self) -> UUID:
        return self.contractor.id


class ContractorMatcher:
    """Filters and scores contractor profiles for a job."""

    def __init__(self, profile_repo: ContractorProfileRepositoryInterface):
        self.profile_repo = profile_repo
        self.logger = logger

    async def find_matching_contractors(
        self, criteria: MatchCriteria, max_results: Optional[int] = None
    ) -> List[ContractorMatch]:
        """
        Find contractors that fit the job, best first.

        Args:
            criteria: Job requirements
            max_results: Optional cap on the number of matches

        Returns:
            Matches sorted by score, highest first; ties keep query order
        """
        self.logger.info(
            "Finding matching contractors",
            job_id=str(criteria.job_id) if criteria.job_id else None,
            required_skills=criteria.required_skills,
            difficulty=criteria.difficulty,
            priority=criteria.priority.value,
        )

        candidates = await self.profile_repo.find_auto_assign_candidates()
        matches = self.rank(criteria, candidates)

        if max_results is not None:
            matches = matches[:max_results]

        self.logger.info(
            "Found matching contractors",
            job_id=str(criteria.job_id) if criteria.job_id else None,
            candidate_count=len(candidates),
            total_matches=len(matches),
            top_score=matches[0].match_score if matches else 0,
        )
        return matches

    def rank(
        self,
        criteria: MatchCriteria,
        candidates: Sequence[tuple[User, ContractorProfile]],
    ) -> List[ContractorMatch]:
        """Apply the soft filters and score the survivors."""
        matches = []
        for contractor, profile in candidates:
            if not self.is_candidate(criteria, profile):
                continue

            score, matched_skills = self._calculate_match_score(criteria, profile)
            matches.append(
                ContractorMatch(
                    contractor=contractor,
                    profile=profile,
                    match_score=score,
                    matched_skills=matched_skills,
                )
            )

        # sort is stable, so equal scores keep query order
        matches.sort(key=lambda match: match.match_score, reverse=True)
        return matches

    def is_candidate(self, criteria: MatchCriteria, profile: ContractorProfile) -> bool:
        """Skill overlap (or no declared skills) and a service area covering the job."""
        if profile.skills and criteria.required_skills:
            if not self._matched_skills(criteria.required_skills, profile.skills):
                return False

        return profile.serves_zip_code(criteria.zip_code)

    def criteria_for_job(
        self, issue: Issue, enriched_issue: Optional[EnrichedIssue] = None
    ) -> MatchCriteria:
        """Build match criteria from an issue and its AI diagnosis."""
        text = issue.text
        difficulty = None
        job_value = None

        if enriched_issue:
            text = f"{text} {enriched_issue.identified_problem}"
            if enriched_issue.difficulty_level:
                difficulty = enriched_issue.difficulty_level.value
            job_value = (
                enriched_issue.total_quoted_price
                if enriched_issue.total_quoted_price is not None
                else enriched_issue.total_estimated_cost
            )

        return MatchCriteria(
            required_skills=extract_skills(text),
            difficulty=difficulty,
            priority=issue.priority,
            job_value=job_value,
            zip_code=issue.zip_code,
            job_id=enriched_issue.id if enriched_issue else None,
        )

    def _calculate_match_score(
        self, criteria: MatchCriteria, profile: ContractorProfile
    ) -> tuple[int, List[str]]:
        """
        Calculate match score between a job and a contractor.

        Returns:
            Tuple of (rounded score, matched skills)
        """
        score = 0.0

        # Skill overlap carries the most weight
        matched_skills = self._matched_skills(criteria.required_skills, profile.skills)
        score += len(matched_skills) / max(len(criteria.required_skills), 1) * 50

        if profile.prefers_difficulty(criteria.difficulty):
            score += 20
        elif not profile.preferred_job_types:
            score += 10

        if criteria.priority == Priority.EMERGENCY:
            score += 15
        elif criteria.priority == Priority.URGENT:
            score += 10

        if profile.accepts_value(criteria.job_value):
            score += 15

        if profile.auto_call_enabled:
            score += 10

        if profile.years_in_business:
            score += min(profile.years_in_business * 2, 20)

        if profile.bonded_and_insured:
            score += 5

        self.logger.debug(
            "Contractor scored",
            profile_id=str(profile.id),
            matched_skills=matched_skills,
            score=score,
        )
        # half-up rounding, not banker's
        return int(math.floor(score + 0.5)), matched_skills

    def _matched_skills(
        self, required_skills: Sequence[str], contractor_skills: Sequence[str]
    ) -> List[str]:
        """Required skills covered by the contractor, substring match both ways."""
        owned = [skill.lower() for skill in contractor_skills]
        return [
            skill
            for skill in required_skills
            if any(own in skill.lower() or skill.lower() in own for own in owned)
        ]
