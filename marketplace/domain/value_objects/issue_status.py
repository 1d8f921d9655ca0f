"""
Issue status value object.
"""

from enum import Enum


class IssueStatus(str, Enum):
    """Customer issue lifecycle status."""

    SUBMITTED = "SUBMITTED"
    ANALYZING = "ANALYZING"
    PENDING_CONTRACTOR = "PENDING_CONTRACTOR"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
