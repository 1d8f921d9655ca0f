"""
AI enrichment collaborator interfaces.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from marketplace.domain.entities.issue import Issue


@dataclass
class EnrichmentResult:
    """Structured diagnosis returned by the AI collaborator."""

    identified_problem: str
    repair_solution: str
    difficulty_level: Optional[str] = None
    estimated_time_hours: Optional[float] = None
    required_items: List[Dict[str, Any]] = field(default_factory=list)
    total_estimated_cost: Optional[Decimal] = None
    questions_for_user: List[str] = field(default_factory=list)
    contractor_checklist: List[str] = field(default_factory=list)


class EnrichmentProviderInterface(ABC):
    """AI diagnosis collaborator."""

    @abstractmethod
    async def analyze_issue(self, issue: Issue) -> EnrichmentResult:
        """
        Diagnose an issue.

        Raises:
            EnrichmentError: If the provider fails or returns unusable output
        """
        pass
