"""
Voice provider client for outbound phone calls.
"""

from typing import Any, Dict, Optional

import httpx

from marketplace.application.interfaces.voice import (
    CustomerNotificationCallRequest,
    JobOfferCallRequest,
    VoiceClientInterface,
)
from marketplace.config.logging import get_logger
from marketplace.domain.exceptions.upstream_error import VoiceCallError
from marketplace.domain.value_objects.phone_number import normalize_phone_number
from marketplace.infrastructure.external.http_client import HTTPClient

logger = get_logger(__name__)

# spoken descriptions are cut to keep calls short
MAX_SPOKEN_DESCRIPTION = 200


class VapiVoiceClient(VoiceClientInterface):
    """Places calls through the Vapi REST API with pre-configured assistants."""

    def __init__(
        self,
        api_key: str,
        phone_number_id: str,
        job_offer_assistant_id: str,
        customer_assistant_id: str,
        base_url: str = "https://api.vapi.ai",
        timeout: float = 15.0,
        default_country_code: str = "+1",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("Voice API key is required")

        self.api_key = api_key
        self.phone_number_id = phone_number_id
        self.job_offer_assistant_id = job_offer_assistant_id
        self.customer_assistant_id = customer_assistant_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.default_country_code = default_country_code
        self.transport = transport

    @classmethod
    def from_settings(cls, settings) -> "VapiVoiceClient":
        """Build a client from application settings."""
        return cls(
            api_key=settings.VOICE_API_KEY,
            phone_number_id=settings.VOICE_PHONE_NUMBER_ID,
            job_offer_assistant_id=settings.VOICE_JOB_OFFER_ASSISTANT_ID,
            customer_assistant_id=settings.VOICE_CUSTOMER_ASSISTANT_ID,
            base_url=settings.VOICE_API_BASE_URL,
            timeout=settings.VOICE_REQUEST_TIMEOUT,
            default_country_code=settings.DEFAULT_COUNTRY_CODE,
        )

    async def place_job_offer_call(self, request: JobOfferCallRequest) -> str:
        """Start a job-offer call to a contractor."""
        location = request.customer_location or "your area"
        price = request.estimated_price or "to be quoted"
        window = request.appointment_window or "within the next few days"

        first_message = (
            f"Hi {request.contractor_name}! This is Sarah from ContractMe. "
            f"We have a {request.job_title} job opportunity in {location} that "
            f"matches your skills. The estimated value is ${price} and the customer "
            f"needs it done {window}. Do you have a moment to hear more details?"
        )

        payload = self._call_payload(
            assistant_id=self.job_offer_assistant_id,
            phone_number=request.phone_number,
            name=request.contractor_name,
            first_message=first_message,
            variables={
                "jobTitle": request.job_title,
                "jobDescription": (request.job_description or "")[
                    :MAX_SPOKEN_DESCRIPTION
                ],
                "estimatedPrice": price,
                "customerName": request.customer_name or "the customer",
                "customerLocation": location,
                "appointmentTime": window,
                "enrichedIssueId": request.job_id,
            },
            metadata=request.metadata,
        )
        return await self._create_call(payload, call_type="job_offer")

    async def place_customer_notification_call(
        self, request: CustomerNotificationCallRequest
    ) -> str:
        """Start a call telling the customer a contractor was assigned."""
        when = request.appointment_time or "a time they will confirm with you"
        cost = request.estimated_cost or "to be quoted"

        first_message = (
            f"Hi {request.customer_name}! This is Sarah from ContractMe with news "
            f"about your repair request. We found a qualified contractor, "
            f"{request.contractor_name}, who is scheduled to visit on {when} with an "
            f"estimated cost of ${cost}. Do you have a moment to confirm?"
        )

        payload = self._call_payload(
            assistant_id=self.customer_assistant_id,
            phone_number=request.phone_number,
            name=request.customer_name,
            first_message=first_message,
            variables={
                "contractorName": request.contractor_name,
                "jobTitle": request.job_title,
                "appointmentTime": when,
                "estimatedCost": cost,
            },
            metadata=request.metadata,
        )
        return await self._create_call(payload, call_type="customer_notification")

    def _call_payload(
        self,
        assistant_id: str,
        phone_number: str,
        name: str,
        first_message: str,
        variables: Dict[str, Any],
        metadata: Dict[str, Any],
    ) -> Dict[str, Any]:
        try:
            number = normalize_phone_number(phone_number, self.default_country_code)
        except ValueError as e:
            raise VoiceCallError(str(e))

        return {
            "assistantId": assistant_id,
            "phoneNumberId": self.phone_number_id,
            "customer": {"number": number, "name": name},
            "assistantOverrides": {
                "firstMessage": first_message,
                "variableValues": variables,
            },
            "metadata": metadata or {},
        }

    async def _create_call(self, payload: Dict[str, Any], call_type: str) -> str:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with HTTPClient(
                service="voice",
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.post("/call", data=payload)
        except httpx.HTTPError as e:
            raise VoiceCallError(f"voice provider unreachable: {e}")

        if response.status_code >= 400:
            raise VoiceCallError(
                response.text[:500] or "call rejected", status_code=response.status_code
            )

        try:
            call_id = response.json().get("id")
        except (ValueError, AttributeError) as e:
            raise VoiceCallError(f"unreadable voice provider response: {e}")
        if not call_id:
            raise VoiceCallError("voice provider returned no call id")

        logger.info(
            "Voice call created",
            call_type=call_type,
            call_id=call_id,
            number=payload["customer"]["number"],
        )
        return call_id
