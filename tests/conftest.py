"""Test configuration and fixtures."""

from typing import Any, Generator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from nlu_fastapi.app.config import settings
from nlu_fastapi.app.main import create_app
from nlu_fastapi.app.models import AnalysisResult
from nlu_fastapi.app.services.analyzer import get_nlu_client
from nlu_fastapi.app.services.nlu_client import NLUClient

TEST_APIKEY = "test-apikey"
TEST_URL = "https://api.us-south.natural-language-understanding.watson.cloud.ibm.com"

# Trimmed Watson NLU response for "I visited the Eiffel Tower in Paris with Marie."
SAMPLE_ANALYSIS: dict[str, Any] = {
    "usage": {"text_units": 1, "text_characters": 47, "features": 3},
    "language": "en",
    "entities": [
        {"type": "Location", "text": "Paris", "relevance": 0.96, "count": 1},
        {"type": "Facility", "text": "Eiffel Tower", "relevance": 0.88, "count": 1},
        {"type": "Person", "text": "Marie", "relevance": 0.52, "count": 1},
    ],
    "keywords": [
        {"text": "Eiffel Tower", "relevance": 0.97, "count": 1},
        {"text": "Paris", "relevance": 0.71, "count": 1},
    ],
    "concepts": [
        {"text": "Eiffel Tower", "relevance": 0.95, "dbpedia_resource": "http://dbpedia.org/resource/Eiffel_Tower"},
        {"text": "Tourism", "relevance": 0.64, "dbpedia_resource": "http://dbpedia.org/resource/Tourism"},
    ],
}


@pytest.fixture(autouse=True)
def disable_telemetry(monkeypatch: pytest.MonkeyPatch) -> None:
    """Disable OpenTelemetry for all tests.

    Args:
        monkeypatch: pytest's monkeypatch fixture for modifying values.
    """
    monkeypatch.setenv("OTEL_TRACES_EXPORTER", "none")
    monkeypatch.setattr(settings, "OTEL_ENABLED", False)


@pytest.fixture(autouse=True)
def provider_credentials(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Provide fake Watson credentials and reset the cached client.

    The SDK only fetches an IAM token on the first real call, so building a
    client with these values never touches the network.
    """
    monkeypatch.setattr(settings, "NLU_APIKEY", TEST_APIKEY)
    monkeypatch.setattr(settings, "NLU_URL", TEST_URL)
    get_nlu_client.cache_clear()
    yield
    get_nlu_client.cache_clear()


@pytest.fixture
def sample_analysis() -> AnalysisResult:
    return AnalysisResult.model_validate(SAMPLE_ANALYSIS)


@pytest.fixture
def mock_nlu_client(sample_analysis: AnalysisResult) -> Mock:
    """An NLUClient stand-in returning SAMPLE_ANALYSIS."""
    client = Mock(spec=NLUClient)
    client.analyze.return_value = sample_analysis
    return client


@pytest.fixture
def client(mock_nlu_client: Mock) -> Generator[TestClient, None, None]:
    """Create a test client with lifespan run and the NLU client mocked.

    Args:
        mock_nlu_client: The mock placed on app.state after startup.

    Yields:
        TestClient: A configured test client for making requests.
    """
    app = create_app()
    with TestClient(app) as test_client:
        app.state.nlu_client = mock_nlu_client
        yield test_client
