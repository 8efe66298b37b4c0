"""Prometheus metrics integration for FastAPI."""

import logging
import time
from typing import Callable

from fastapi import FastAPI
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from starlette.responses import Response

from nlu_fastapi.app.config import settings

logger = logging.getLogger(__name__)

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total count of HTTP requests",
    ["method", "endpoint", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
)
ERROR_COUNT = Counter(
    "http_errors_total",
    "Total count of HTTP errors",
    ["method", "endpoint", "status_code"],
)
ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of currently active HTTP requests",
    ["method", "endpoint"],
)
NLU_ENTITIES_DETECTED = Counter(
    "nlu_entities_detected_total",
    "Total count of entities returned by the NLU provider",
    ["entity_type"],
)
NLU_PROVIDER_ERRORS = Counter(
    "nlu_provider_errors_total",
    "Total count of failed NLU provider calls",
    ["reason"],
)


class PrometheusMiddleware:
    """ASGI middleware collecting Prometheus metrics on monitored paths."""

    def __init__(self, app: FastAPI):
        self.app = app
        logger.info("Prometheus middleware initialized")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        path = scope["path"]
        method = scope["method"]

        if path not in settings.monitored_paths:
            return await self.app(scope, receive, send)

        ACTIVE_REQUESTS.labels(method=method, endpoint=path).inc()
        start_time = time.perf_counter()

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                status_code = message["status"]
                REQUEST_COUNT.labels(
                    method=method, endpoint=path, status_code=status_code
                ).inc()
                if status_code >= 400:
                    ERROR_COUNT.labels(
                        method=method, endpoint=path, status_code=status_code
                    ).inc()

            await send(message)

            if message["type"] == "http.response.body" and not message.get("more_body"):
                REQUEST_LATENCY.labels(method=method, endpoint=path).observe(
                    time.perf_counter() - start_time
                )
                ACTIVE_REQUESTS.labels(method=method, endpoint=path).dec()

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as e:
            ACTIVE_REQUESTS.labels(method=method, endpoint=path).dec()
            ERROR_COUNT.labels(method=method, endpoint=path, status_code=500).inc()
            logger.exception("Error in request: %s", str(e))
            raise


def track_entity(entity_type: str) -> None:
    """Increment counter for an entity returned by the provider.

    Args:
        entity_type: The provider's entity type, e.g. Location
    """
    NLU_ENTITIES_DETECTED.labels(entity_type=entity_type).inc()


def track_provider_error(reason: str) -> None:
    """Increment counter for a failed provider call.

    Args:
        reason: Provider HTTP status code, or "transport" for network failures
    """
    NLU_PROVIDER_ERRORS.labels(reason=reason).inc()


def metrics_endpoint() -> Callable:
    """Create metrics endpoint handler.

    Returns:
        Callable: FastAPI endpoint handler function
    """
    async def metrics(request):
        return Response(
            content=generate_latest(REGISTRY),
            media_type=CONTENT_TYPE_LATEST
        )
    return metrics


def setup_prometheus(app: FastAPI) -> None:
    """Set up Prometheus metrics for FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(PrometheusMiddleware)
    app.add_route(f"{settings.api_prefix}/metrics", metrics_endpoint())
    logger.info(
        "Prometheus metrics setup complete. Monitoring paths: %s",
        ", ".join(settings.monitored_paths),
    )
