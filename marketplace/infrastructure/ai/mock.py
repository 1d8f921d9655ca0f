"""
Deterministic enrichment provider for development and tests.
"""

from decimal import Decimal

from marketplace.application.interfaces.enrichment import (
    EnrichmentProviderInterface,
    EnrichmentResult,
)
from marketplace.application.services.skill_extractor import extract_skills
from marketplace.domain.entities.issue import Issue


class MockEnrichmentProvider(EnrichmentProviderInterface):
    """Builds a plausible diagnosis from the issue text without calling out."""

    async def analyze_issue(self, issue: Issue) -> EnrichmentResult:
        trade = extract_skills(issue.text)[0]
        return EnrichmentResult(
            identified_problem=f"{trade.capitalize()} problem: {issue.title}",
            repair_solution=f"Inspect and repair the reported {trade} fault.",
            difficulty_level="Medium",
            estimated_time_hours=2.0,
            required_items=[{"name": "Parts and materials", "estimatedCost": 100.0}],
            total_estimated_cost=Decimal("100.00"),
            questions_for_user=["When did the problem start?"],
            contractor_checklist=["Confirm the scope on site"],
        )
