"""
Voice provider integrations.
"""

from .client import VapiVoiceClient
from .factory import create_voice_client
from .mock import MockVoiceClient

__all__ = ["MockVoiceClient", "VapiVoiceClient", "create_voice_client"]
