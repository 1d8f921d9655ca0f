"""
Voice collaborator interfaces for dependency inversion.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class JobOfferCallRequest:
    """Variables for a job-offer call to a contractor."""

    phone_number: str
    contractor_name: str
    job_id: str
    job_title: str
    job_description: str
    estimated_price: Optional[str] = None
    customer_name: Optional[str] = None
    customer_location: Optional[str] = None
    appointment_window: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CustomerNotificationCallRequest:
    """Variables for the call telling a customer their job was assigned."""

    phone_number: str
    customer_name: str
    contractor_name: str
    job_title: str
    appointment_time: Optional[str] = None
    estimated_cost: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class VoiceClientInterface(ABC):
    """Outbound voice-call collaborator."""

    @abstractmethod
    async def place_job_offer_call(self, request: JobOfferCallRequest) -> str:
        """
        Start a job-offer call.

        Returns:
            Call id assigned by the provider

        Raises:
            VoiceCallError: If the provider rejects or cannot be reached
        """
        pass

    @abstractmethod
    async def place_customer_notification_call(
        self, request: CustomerNotificationCallRequest
    ) -> str:
        """Start an assignment notification call; returns the call id."""
        pass
