"""
Voice webhook schemas.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CallCustomer(BaseModel):
    """Party the voice agent called."""

    model_config = ConfigDict(extra="ignore")

    number: Optional[str] = None
    name: Optional[str] = None


class OfferStructuredData(BaseModel):
    """Answers the voice agent extracted from the offer call."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    job_accepted: bool = Field(False, alias="jobAccepted")
    contractor_response: Optional[str] = Field(None, alias="contractorResponse")
    enriched_issue_id: Optional[str] = Field(None, alias="enrichedIssueId")
    reason_for_decline: Optional[str] = Field(None, alias="reasonForDecline")


class CallAnalysis(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    structured_data: Optional[OfferStructuredData] = Field(
        None, alias="structuredData"
    )


class VoiceCall(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    customer: Optional[CallCustomer] = None
    analysis: Optional[CallAnalysis] = None


class VoiceJobResponseWebhook(BaseModel):
    """End-of-call report posted by the voice provider."""

    model_config = ConfigDict(extra="ignore")

    type: Optional[str] = None
    call: Optional[VoiceCall] = None

    @property
    def is_call_end(self) -> bool:
        return self.type == "call-end"

    @property
    def structured_data(self) -> Optional[OfferStructuredData]:
        if self.call and self.call.analysis:
            return self.call.analysis.structured_data
        return None

    @property
    def contractor_phone(self) -> Optional[str]:
        if self.call and self.call.customer:
            return self.call.customer.number
        return None


class VoiceJobResponseResult(BaseModel):
    """Outcome of processing an offer response."""

    success: bool
    message: str
    job_id: Optional[UUID] = None
    contractor_id: Optional[UUID] = None
    appointment_id: Optional[UUID] = None
    contractor_response: Optional[str] = None
