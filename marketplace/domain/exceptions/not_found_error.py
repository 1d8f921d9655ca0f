"""
Lookup-related domain exceptions.
"""


class NotFoundError(Exception):
    """Raised when a referenced record does not exist."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")
