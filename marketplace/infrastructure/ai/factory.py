"""
Enrichment provider construction.
"""

from marketplace.application.interfaces.enrichment import EnrichmentProviderInterface
from marketplace.infrastructure.ai.mock import MockEnrichmentProvider
from marketplace.infrastructure.ai.openai_client import OpenAIEnrichmentProvider


def create_enrichment_provider(settings) -> EnrichmentProviderInterface:
    """Build the enrichment provider selected by settings."""
    if settings.MOCK_ENRICHMENT:
        return MockEnrichmentProvider()
    return OpenAIEnrichmentProvider.from_settings(settings)
