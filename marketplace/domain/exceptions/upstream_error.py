"""
External collaborator domain exceptions.
"""


class UpstreamServiceError(Exception):
    """Base exception for failures of external collaborators."""

    def __init__(self, service: str, message: str, status_code: int = None):
        self.service = service
        self.status_code = status_code
        self.message = message
        detail = f"{service} error"
        if status_code:
            detail += f" ({status_code})"
        super().__init__(f"{detail}: {message}")


class VoiceCallError(UpstreamServiceError):
    """Raised when the voice provider cannot place a call."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__("voice", message, status_code)


class EnrichmentError(UpstreamServiceError):
    """Raised when the AI provider cannot analyze an issue."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__("enrichment", message, status_code)
