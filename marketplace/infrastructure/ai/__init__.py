"""
AI enrichment integrations.
"""

from .factory import create_enrichment_provider
from .mock import MockEnrichmentProvider
from .openai_client import OpenAIEnrichmentProvider

__all__ = [
    "MockEnrichmentProvider",
    "OpenAIEnrichmentProvider",
    "create_enrichment_provider",
]
