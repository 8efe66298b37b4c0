"""Test main application functionality."""

from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from nlu_fastapi.app.config import settings
from nlu_fastapi.app.errors import ConfigurationError
from nlu_fastapi.app.main import create_app, lifespan
from nlu_fastapi.app.services.nlu_client import NLUClient


def test_create_app_basic_functionality() -> None:
    """Test that create_app returns a FastAPI instance with routes mounted."""
    app = create_app()

    assert app.title == "NLU Analysis API v1"
    assert app.docs_url == "/api/v1/docs"

    paths = app.openapi()["paths"]
    assert "/api/v1/" in paths
    assert "/api/v1/health" in paths
    assert "/api/v1/nlu/" in paths

    with TestClient(app) as client:
        assert client.get("/api/v1/metrics").status_code == 200


def test_startup_builds_nlu_client() -> None:
    """Test that startup stores a real client built from settings."""
    app = create_app()

    with TestClient(app):
        assert isinstance(app.state.nlu_client, NLUClient)
        assert app.state.nlu_client.service.service_url == settings.NLU_URL


def test_startup_fails_without_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that the application refuses to start half-configured."""
    monkeypatch.setattr(settings, "NLU_URL", None)
    app = create_app()

    with pytest.raises(ConfigurationError, match="NLU_URL"):
        with TestClient(app):
            pass


@pytest.mark.asyncio
async def test_lifespan_successful_startup_shutdown() -> None:
    """Test successful lifespan startup and shutdown."""
    app = create_app()

    with patch("nlu_fastapi.app.main.get_nlu_client") as mock_get_client, patch(
        "nlu_fastapi.app.main.telemetry"
    ) as mock_telemetry:
        mock_client = Mock(spec=NLUClient)
        mock_get_client.return_value = mock_client

        async with lifespan(app):
            assert app.state.nlu_client is mock_client
            mock_telemetry.setup_telemetry.assert_called_once_with(app)

        mock_telemetry.shutdown_telemetry.assert_called_once()


@pytest.mark.asyncio
async def test_lifespan_client_initialization_failure() -> None:
    """Test lifespan behavior when client initialization fails."""
    app = create_app()

    with patch("nlu_fastapi.app.main.get_nlu_client") as mock_get_client:
        mock_get_client.side_effect = ConfigurationError("Missing NLU provider configuration")

        with pytest.raises(ConfigurationError, match="Missing NLU provider configuration"):
            async with lifespan(app):
                pass


def test_cors_enabled_when_origins_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "ALLOWED_ORIGINS", "https://app.example.com")
    app = create_app()

    with TestClient(app) as client:
        response = client.options(
            "/api/v1/nlu/",
            headers={
                "Origin": "https://app.example.com",
                "Access-Control-Request-Method": "GET",
            },
        )

    assert response.headers["access-control-allow-origin"] == "https://app.example.com"
