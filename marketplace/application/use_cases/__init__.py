"""
Application use cases package.
"""

from .claim_job import ClaimJobRequest, ClaimJobResult, ClaimJobUseCase
from .dispatch_offers import DispatchOffersResult, DispatchOffersUseCase
from .enrich_issues import EnrichIssuesResult, EnrichIssuesUseCase
from .process_offer_response import (
    OfferResponseRequest,
    OfferResponseResult,
    ProcessOfferResponseUseCase,
)
from .process_outbox_events import ProcessOutboxEventsUseCase, ProcessOutboxResult
from .replace_availability import (
    AvailabilityInput,
    ReplaceAvailabilityRequest,
    ReplaceAvailabilityResult,
    ReplaceAvailabilityUseCase,
)
from .save_contractor_profile import SaveContractorProfileUseCase
from .update_appointment import UpdateAppointmentRequest, UpdateAppointmentUseCase

__all__ = [
    "AvailabilityInput",
    "ClaimJobRequest",
    "ClaimJobResult",
    "ClaimJobUseCase",
    "DispatchOffersResult",
    "DispatchOffersUseCase",
    "EnrichIssuesResult",
    "EnrichIssuesUseCase",
    "OfferResponseRequest",
    "OfferResponseResult",
    "ProcessOfferResponseUseCase",
    "ProcessOutboxEventsUseCase",
    "ProcessOutboxResult",
    "ReplaceAvailabilityRequest",
    "ReplaceAvailabilityResult",
    "ReplaceAvailabilityUseCase",
    "SaveContractorProfileUseCase",
    "UpdateAppointmentRequest",
    "UpdateAppointmentUseCase",
]
