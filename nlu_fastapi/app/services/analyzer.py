"""Analyzer service wiring the NLU client to settings and metrics."""

import logging
from functools import lru_cache

from nlu_fastapi.app.config import settings
from nlu_fastapi.app.errors import ProviderError
from nlu_fastapi.app.models import AnalysisResult
from nlu_fastapi.app.prometheus import track_entity, track_provider_error
from nlu_fastapi.app.services.feature_loader import load_feature_limits
from nlu_fastapi.app.services.nlu_client import NLUClient

logger = logging.getLogger(__name__)


@lru_cache()
def get_nlu_client() -> NLUClient:
    """Creates and caches the NLU client from application settings.

    Returns:
        NLUClient: A client configured with the credentials from settings and
                   the feature limits from the features YAML file.

    Raises:
        ConfigurationError: If credentials are missing or the feature
                            configuration is invalid.
    """
    try:
        feature_limits = load_feature_limits(settings.NLU_FEATURES_FILE)
        client = NLUClient.from_settings(settings, feature_limits)
        logger.info("NLU client created successfully")
        return client
    except Exception as e:
        logger.error("Error creating NLU client: %s", str(e))
        raise


def analyze_with_metrics(client: NLUClient, text: str) -> AnalysisResult:
    """Analyzes text with the NLU provider and records metrics.

    Args:
        client: The NLUClient instance
        text: The text to analyze

    Returns:
        The raw AnalysisResult from the provider
    """
    try:
        result = client.analyze(text)
    except ProviderError as e:
        track_provider_error(str(e.provider_status or "transport"))
        raise

    for entity in result.entities:
        track_entity(entity.type)

    return result
