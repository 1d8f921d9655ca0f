"""
Domain exceptions package.
"""

from .authorization_error import AuthorizationError, NotAContractorError
from .claim_error import (
    ClaimError,
    ClaimRetryExceededError,
    JobAlreadyClaimedError,
    SlotConflictError,
)
from .not_found_error import NotFoundError
from .upstream_error import EnrichmentError, UpstreamServiceError, VoiceCallError
from .validation_error import InvalidStatusTransitionError, ValidationError

__all__ = [
    "AuthorizationError",
    "ClaimError",
    "ClaimRetryExceededError",
    "EnrichmentError",
    "InvalidStatusTransitionError",
    "JobAlreadyClaimedError",
    "NotAContractorError",
    "NotFoundError",
    "SlotConflictError",
    "UpstreamServiceError",
    "ValidationError",
    "VoiceCallError",
]
