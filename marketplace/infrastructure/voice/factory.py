"""
Voice client construction.
"""

from marketplace.application.interfaces.voice import VoiceClientInterface
from marketplace.config.logging import get_logger
from marketplace.infrastructure.voice.client import VapiVoiceClient
from marketplace.infrastructure.voice.mock import MockVoiceClient

logger = get_logger(__name__)


def create_voice_client(settings) -> VoiceClientInterface:
    """Build the voice client selected by settings; a new instance per call."""
    if settings.MOCK_VOICE:
        logger.debug("Using mock voice client")
        return MockVoiceClient()
    return VapiVoiceClient.from_settings(settings)
