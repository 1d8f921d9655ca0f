"""
In-process voice client for development and tests.
"""

from typing import List, Union
from uuid import uuid4

from marketplace.application.interfaces.voice import (
    CustomerNotificationCallRequest,
    JobOfferCallRequest,
    VoiceClientInterface,
)
from marketplace.config.logging import get_logger
from marketplace.domain.exceptions.upstream_error import VoiceCallError

logger = get_logger(__name__)


class MockVoiceClient(VoiceClientInterface):
    """Records calls instead of dialing; numbers in fail_numbers raise."""

    def __init__(self, fail_numbers: List[str] = None):
        self.fail_numbers = set(fail_numbers or [])
        self.calls: List[Union[JobOfferCallRequest, CustomerNotificationCallRequest]] = []

    async def place_job_offer_call(self, request: JobOfferCallRequest) -> str:
        return self._record(request)

    async def place_customer_notification_call(
        self, request: CustomerNotificationCallRequest
    ) -> str:
        return self._record(request)

    def _record(self, request) -> str:
        if request.phone_number in self.fail_numbers:
            raise VoiceCallError(f"mock failure for {request.phone_number}", 503)

        self.calls.append(request)
        call_id = f"mock-{uuid4()}"
        logger.info(
            "Mock voice call placed",
            call_type=type(request).__name__,
            phone_number=request.phone_number,
            call_id=call_id,
        )
        return call_id
