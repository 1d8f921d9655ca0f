"""
Validation-related domain exceptions.
"""


class ValidationError(Exception):
    """Base exception for validation errors."""

    pass


class InvalidStatusTransitionError(ValidationError):
    """Raised when an appointment status change is not allowed."""

    def __init__(self, current_status: str, requested_status: str):
        self.current_status = current_status
        self.requested_status = requested_status
        super().__init__(
            f"Cannot change appointment status from '{current_status}' to '{requested_status}'"
        )
