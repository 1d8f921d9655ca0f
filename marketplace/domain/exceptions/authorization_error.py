"""
Authorization-related domain exceptions.
"""


class AuthorizationError(Exception):
    """Raised when the acting user may not perform the operation."""

    pass


class NotAContractorError(AuthorizationError):
    """Raised when a non-contractor attempts contractor work."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} is not a contractor")
