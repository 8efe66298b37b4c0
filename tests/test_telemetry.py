"""Tests for OpenTelemetry helpers."""

from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI

from nlu_fastapi.app import telemetry
from nlu_fastapi.app.config import settings


def test_setup_telemetry_disabled() -> None:
    """Test that nothing is instrumented while OTEL is disabled."""
    with patch.object(telemetry.FastAPIInstrumentor, "instrument_app") as mock_instrument:
        telemetry.setup_telemetry(FastAPI())

    mock_instrument.assert_not_called()
    assert telemetry._is_setup_complete is False


def test_shutdown_telemetry_without_setup_is_noop() -> None:
    telemetry.shutdown_telemetry()

    assert telemetry._span_processors == []


def test_is_collector_available_unreachable() -> None:
    assert telemetry._is_collector_available("127.0.0.1", 1, timeout=0.1) is False


@pytest.mark.asyncio
async def test_trace_method_passthrough_when_disabled() -> None:
    @telemetry.trace_method("sample")
    async def sample(value: int) -> int:
        return value * 2

    assert await sample(21) == 42
    assert sample.__name__ == "sample"


@pytest.mark.asyncio
async def test_trace_method_reraises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "OTEL_ENABLED", True)

    @telemetry.trace_method()
    async def failing() -> None:
        raise RuntimeError("traced failure")

    with pytest.raises(RuntimeError, match="traced failure"):
        await failing()


def test_enrich_span_records_query_length_only() -> None:
    span = Mock()
    span.is_recording.return_value = True

    telemetry._enrich_span_with_request_details(
        span,
        {"query_string": b"text=Paris", "headers": [(b"x-request-id", b"abc-123")]},
    )

    span.set_attribute.assert_called_once_with("app.nlu.query_length", 10)
