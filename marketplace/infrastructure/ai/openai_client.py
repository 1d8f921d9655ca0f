"""
OpenAI chat-completions client producing issue diagnoses.
"""

import json
from decimal import Decimal
from typing import List, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from marketplace.application.interfaces.enrichment import (
    EnrichmentProviderInterface,
    EnrichmentResult,
)
from marketplace.config.logging import get_logger
from marketplace.domain.entities.issue import Issue
from marketplace.domain.exceptions.upstream_error import EnrichmentError
from marketplace.infrastructure.external.http_client import HTTPClient

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a professional contractor and home repair expert. "
    "Respond only with valid JSON."
)

USER_PROMPT = """You are an expert home repair and maintenance contractor with 20+ years of experience. Analyze the following customer issue and provide a comprehensive assessment.

Issue Title: {title}
Issue Description: {description}

Respond with a JSON object with these keys:
identifiedProblem (string), repairSolution (string), estimatedTimeHours (number),
difficultyLevel (one of Easy, Medium, Hard, Expert),
requiredItems (list of objects with name, estimatedCost, quantity, unit),
totalEstimatedCost (number, sum of item costs in USD),
questionsForUser (list of strings), contractorChecklist (list of strings).

Difficulty levels:
- Easy: Simple DIY, basic tools, low risk
- Medium: Some experience needed, moderate tools, moderate risk
- Hard: Skilled trade knowledge required, specialized tools
- Expert: Licensed professional required, high risk/complexity

Use realistic average US prices and include safety checks in the contractor checklist."""


class RequiredItem(BaseModel):
    name: str
    estimated_cost: float = Field(default=0, alias="estimatedCost")
    quantity: Optional[float] = None
    unit: Optional[str] = None


class DiagnosisPayload(BaseModel):
    """Shape of the JSON the model is asked to return."""

    identified_problem: str = Field(alias="identifiedProblem", min_length=1)
    repair_solution: str = Field(alias="repairSolution", min_length=1)
    difficulty_level: str = Field(alias="difficultyLevel", min_length=1)
    estimated_time_hours: Optional[float] = Field(
        default=None, alias="estimatedTimeHours"
    )
    required_items: List[RequiredItem] = Field(default_factory=list, alias="requiredItems")
    total_estimated_cost: Optional[float] = Field(
        default=None, alias="totalEstimatedCost"
    )
    questions_for_user: List[str] = Field(default_factory=list, alias="questionsForUser")
    contractor_checklist: List[str] = Field(
        default_factory=list, alias="contractorChecklist"
    )


class OpenAIEnrichmentProvider(EnrichmentProviderInterface):
    """Diagnoses issues with an OpenAI chat model."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("OpenAI API key is required")

        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings) -> "OpenAIEnrichmentProvider":
        return cls(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL,
            base_url=settings.OPENAI_BASE_URL,
            timeout=settings.OPENAI_REQUEST_TIMEOUT,
        )

    async def analyze_issue(self, issue: Issue) -> EnrichmentResult:
        """Ask the model for a diagnosis of the issue."""
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": USER_PROMPT.format(
                        title=issue.title or "Not provided",
                        description=issue.description or "Not provided",
                    ),
                },
            ],
            "temperature": 0.3,
            "max_tokens": 2000,
            "response_format": {"type": "json_object"},
        }

        try:
            async with HTTPClient(
                service="openai",
                base_url=self.base_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.post("/chat/completions", data=body)
        except httpx.HTTPError as e:
            raise EnrichmentError(f"OpenAI unreachable: {e}")

        if response.status_code >= 400:
            raise EnrichmentError(response.text[:500], status_code=response.status_code)

        try:
            content = response.json()["choices"][0]["message"]["content"]
            payload = DiagnosisPayload.model_validate(json.loads(content))
        except (KeyError, IndexError, TypeError, json.JSONDecodeError) as e:
            raise EnrichmentError(f"No usable response from OpenAI: {e}")
        except ValidationError as e:
            raise EnrichmentError(f"Invalid response structure from OpenAI: {e}")

        logger.debug(
            "Issue diagnosed",
            issue_id=str(issue.id),
            difficulty=payload.difficulty_level,
            items=len(payload.required_items),
        )
        return to_enrichment_result(payload)


def to_enrichment_result(payload: DiagnosisPayload) -> EnrichmentResult:
    items = [item.model_dump(by_alias=True, exclude_none=True) for item in payload.required_items]
    total = payload.total_estimated_cost
    if total is None and payload.required_items:
        total = sum(item.estimated_cost * (item.quantity or 1) for item in payload.required_items)

    return EnrichmentResult(
        identified_problem=payload.identified_problem,
        repair_solution=payload.repair_solution,
        difficulty_level=payload.difficulty_level,
        estimated_time_hours=payload.estimated_time_hours,
        required_items=items,
        total_estimated_cost=Decimal(str(round(total, 2))) if total is not None else None,
        questions_for_user=payload.questions_for_user,
        contractor_checklist=payload.contractor_checklist,
    )
