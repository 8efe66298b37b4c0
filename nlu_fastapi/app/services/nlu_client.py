"""Client for the Watson Natural Language Understanding service."""

import logging

import requests
from ibm_cloud_sdk_core import ApiException
from ibm_cloud_sdk_core.authenticators import IAMAuthenticator
from ibm_watson import NaturalLanguageUnderstandingV1
from ibm_watson.natural_language_understanding_v1 import (
    ConceptsOptions,
    EntitiesOptions,
    Features,
    KeywordsOptions,
)
from pydantic import ValidationError

from nlu_fastapi.app.config import Settings
from nlu_fastapi.app.errors import ConfigurationError, ProviderError
from nlu_fastapi.app.models import AnalysisRequest, AnalysisResult, FeatureLimits

logger = logging.getLogger(__name__)
# The SDK logs every request and token refresh at INFO
logging.getLogger("ibm_cloud_sdk_core").setLevel(logging.WARNING)
logging.getLogger("ibm_watson").setLevel(logging.WARNING)


def build_features(limits: FeatureLimits) -> Features:
    """Translate FeatureLimits into the SDK's Features options."""
    return Features(
        entities=EntitiesOptions(limit=limits.entities),
        keywords=KeywordsOptions(limit=limits.keywords),
        concepts=ConceptsOptions(limit=limits.concepts),
    )


class NLUClient:
    """Sends text to Watson NLU and returns the parsed analysis.

    One instance is built at startup and shared by all requests; it holds no
    per-request state.

    Attributes:
        service: The configured NaturalLanguageUnderstandingV1 instance.
        feature_limits: Result caps applied to every analysis.
    """

    def __init__(
        self,
        service: NaturalLanguageUnderstandingV1,
        feature_limits: FeatureLimits | None = None,
    ) -> None:
        self.service = service
        self.feature_limits = feature_limits or FeatureLimits()

    @classmethod
    def from_settings(
        cls, settings: Settings, feature_limits: FeatureLimits | None = None
    ) -> "NLUClient":
        """Build a client from application settings.

        Args:
            settings: Settings holding the NLU credentials and endpoint.
            feature_limits: Result caps; defaults to 3 per feature.

        Returns:
            A ready-to-use NLUClient.

        Raises:
            ConfigurationError: If the API key or service URL is missing,
                or the SDK rejects them.
        """
        if not settings.has_provider_credentials:
            missing = [
                name
                for name, value in (
                    ("NLU_APIKEY", settings.NLU_APIKEY),
                    ("NLU_URL", settings.NLU_URL),
                )
                if not (value and value.strip())
            ]
            raise ConfigurationError(
                f"Missing NLU provider configuration: {', '.join(missing)}"
            )

        try:
            authenticator = IAMAuthenticator(apikey=settings.NLU_APIKEY)
            service = NaturalLanguageUnderstandingV1(
                version=settings.NLU_VERSION, authenticator=authenticator
            )
            service.set_service_url(settings.NLU_URL)
        except ValueError as e:
            raise ConfigurationError(f"Invalid NLU provider configuration: {e}") from e

        service.set_http_config({"timeout": settings.NLU_TIMEOUT})
        logger.info(
            "NLU client configured for %s (version %s, timeout %.1fs)",
            settings.NLU_URL,
            settings.NLU_VERSION,
            settings.NLU_TIMEOUT,
        )
        return cls(service, feature_limits)

    def build_request(self, text: str) -> AnalysisRequest:
        return AnalysisRequest(text=text, feature_limits=self.feature_limits)

    def analyze(self, text: str) -> AnalysisResult:
        """Analyze text for entities, keywords and concepts.

        This makes exactly one blocking call to the provider.

        Args:
            text: The text to analyze.

        Returns:
            The provider's analysis as an AnalysisResult.

        Raises:
            ProviderError: If the call fails for any reason (authentication,
                bad input, service error, network error or timeout) or the
                response cannot be parsed.
        """
        request = self.build_request(text)
        try:
            response = self.service.analyze(
                text=request.text,
                features=build_features(request.feature_limits),
            )
            payload = response.get_result()
        except ApiException as e:
            logger.error("NLU provider returned %s: %s", e.code, e.message)
            raise ProviderError(
                f"NLU provider error ({e.code}): {e.message}", provider_status=e.code
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error("NLU provider request failed: %s", str(e))
            raise ProviderError(f"NLU provider unreachable: {str(e)}") from e

        try:
            result = AnalysisResult.model_validate(payload)
        except ValidationError as e:
            logger.error("Malformed NLU provider response: %s", str(e))
            raise ProviderError("Malformed response from NLU provider") from e

        logger.debug(
            "NLU analysis returned %d entities, %d keywords, %d concepts",
            len(result.entities),
            len(result.keywords),
            len(result.concepts),
        )
        return result
