"""
Offer dispatch value objects.
"""

from enum import Enum


class OfferState(str, Enum):
    """Per-job offer dispatch state."""

    UNCLAIMED = "UNCLAIMED"
    OFFERING = "OFFERING"
    CLAIMED = "CLAIMED"
    EXPIRED = "EXPIRED"

    def can_dispatch(self) -> bool:
        """Check if offers may be sent for the job."""
        return self == self.UNCLAIMED

    def is_final(self) -> bool:
        """Check if the offer process has ended."""
        return self in [self.CLAIMED, self.EXPIRED]


class OfferOutcome(str, Enum):
    """Outcome of one outbound offer call."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    FAILED = "FAILED"
    SUPERSEDED = "SUPERSEDED"

    def is_open(self) -> bool:
        """Check if a response may still arrive."""
        return self == self.PENDING
