"""Main application module for the NLU FastAPI service."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nlu_fastapi.app import telemetry
from nlu_fastapi.app.api.routes import nlu_router, router
from nlu_fastapi.app.config import settings
from nlu_fastapi.app.middleware import (
    RateLimiterMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from nlu_fastapi.app.prometheus import setup_prometheus
from nlu_fastapi.app.services.analyzer import get_nlu_client

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan events."""
    await startup_event(app)
    yield
    await shutdown_event(app)


async def startup_event(app: FastAPI) -> None:
    """Perform startup activities.

    Raises:
        ConfigurationError: If the NLU client cannot be built from settings.
    """
    logger.info("Application startup")

    logger.info("Setting up telemetry...")
    telemetry.setup_telemetry(app)

    try:
        logger.info("Initializing NLU client...")
        app.state.nlu_client = get_nlu_client()
        logger.info("NLU client initialization complete")
    except Exception as e:
        logger.error("Failed to initialize NLU client: %s", str(e))
        raise

    logger.info("Application startup complete")


async def shutdown_event(app: FastAPI) -> None:
    """Perform shutdown activities."""
    logger.info("Application shutdown")
    telemetry.shutdown_telemetry()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance.
    """
    app = FastAPI(
        title=f"NLU Analysis API {settings.API_VERSION}",
        description="Simplified entity, location and concept extraction backed by Watson NLU",
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan,
    )

    # Middleware runs in reverse order of registration
    app.add_middleware(
        RateLimiterMiddleware,
        path_prefix=f"{settings.api_prefix}{settings.NLU_ROUTE_PREFIX}",
        requests_per_minute=settings.REQUESTS_PER_MINUTE,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
            max_age=86400,
        )
    app.add_middleware(RequestLoggingMiddleware)
    setup_prometheus(app)

    app.include_router(router, prefix=settings.api_prefix)
    app.include_router(
        nlu_router, prefix=f"{settings.api_prefix}{settings.NLU_ROUTE_PREFIX}"
    )

    return app


app = create_app()
