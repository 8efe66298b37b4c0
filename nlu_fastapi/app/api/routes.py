"""Routes module for the NLU FastAPI API."""

import asyncio
import logging
from typing import Dict

from fastapi import APIRouter, HTTPException, Query, Request, status

from nlu_fastapi.app.config import settings
from nlu_fastapi.app.errors import ConfigurationError, InputError, NLUServiceError
from nlu_fastapi.app.models import ErrorResponse, SimplifiedResult
from nlu_fastapi.app.services.analyzer import analyze_with_metrics
from nlu_fastapi.app.services.nlu_client import NLUClient
from nlu_fastapi.app.services.reducer import reduce_analysis
from nlu_fastapi.app.telemetry import trace_method

logger = logging.getLogger(__name__)
router = APIRouter()
nlu_router = APIRouter()


@router.get(
    "/",
    summary="Root endpoint",
    response_description="API status",
    status_code=status.HTTP_200_OK,
    tags=["Monitoring"],
)
@trace_method("root")
async def root() -> Dict[str, str]:
    """Root API endpoint.

    Returns:
        A simple status message confirming the API is running.
    """
    return {"status": "ok"}


@router.get(
    "/health",
    summary="Health check endpoint",
    response_description="Service health status",
    status_code=status.HTTP_200_OK,
    tags=["Monitoring"],
)
@trace_method("health_check")
async def health_check() -> Dict[str, str]:
    """Health check endpoint.

    Returns:
        A simple status message confirming the service is healthy.
    """
    return {"status": "healthy"}


@nlu_router.get(
    "/",
    response_model=SimplifiedResult,
    summary="Analyze text for location, entities and concepts",
    response_description="Simplified NLU analysis",
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
    tags=["NLU"],
)
@trace_method("analyze_text")
async def analyze_text(
    req: Request,
    text: str | None = Query(default=None, description="The text to analyze"),
) -> SimplifiedResult:
    """Sends text to Watson NLU and returns a simplified analysis.

    The provider is asked for entities, keywords and concepts. The first
    Location entity becomes ``location`` (``"none"`` if there is none), all
    other entities are listed in ``entities`` and concept labels in
    ``concepts``.

    Args:
        req: FastAPI request object to access application state,
            specifically the NLU client instance.
        text: The text to analyze, from the ``text`` query parameter.

    Returns:
        SimplifiedResult: The location, concepts and entities found.

    Raises:
        HTTPException:
            - 400 (Bad Request): If text is missing, blank or too long.
            - 502 (Bad Gateway): If the NLU provider call fails.
            - 503 (Service Unavailable): If the NLU client is not configured.
            - 500 (Internal Server Error): For unexpected errors.
    """
    try:
        text = _validate_text(text)
        client = _get_client_from_request(req)

        logger.info("Analyzing text of length %d", len(text))
        raw = await asyncio.to_thread(analyze_with_metrics, client, text)
        result = reduce_analysis(raw)

        logger.info(
            "Reduced analysis: location=%s, %d entities, %d concepts",
            result.location,
            len(result.entities),
            len(result.concepts),
        )
        return result

    except InputError as e:
        logger.error("Invalid request: %s", e.message)
        raise e.to_http_exception() from e
    except NLUServiceError as e:
        logger.error("NLU analysis failed (%s): %s", e.code, e.message)
        raise e.to_http_exception() from e
    except Exception as e:
        logger.exception("Unexpected error during analysis")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": "internal_error", "message": "Internal server error occurred"},
        ) from e


def _validate_text(text: str | None) -> str:
    if text is None or not text.strip():
        raise InputError("Query parameter 'text' is required")
    if len(text) > settings.MAX_TEXT_LENGTH:
        raise InputError(
            f"Query parameter 'text' exceeds {settings.MAX_TEXT_LENGTH} characters"
        )
    return text


def _get_client_from_request(req: Request) -> NLUClient:
    client = getattr(req.app.state, "nlu_client", None)
    if not client:
        raise ConfigurationError("NLU service not available")
    return client
