"""Custom middleware for the application."""

import asyncio
import logging
import time
import uuid
from collections import defaultdict, deque
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
WINDOW_SECONDS = 60


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all HTTP responses."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        # Swagger UI loads its assets from cdn.jsdelivr.net
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self' https://cdn.jsdelivr.net 'unsafe-inline'; "
            "style-src 'self' https://cdn.jsdelivr.net; "
            "img-src 'self' data: https://fastapi.tiangolo.com; "
            "connect-src 'self';"
        )
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log one access line when it completes.

    An incoming ``X-Request-ID`` header is reused; otherwise a new id is
    generated. The id is echoed on the response, stored on
    ``request.state.request_id`` and set on the current server span as
    ``app.request_id``.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        trace.get_current_span().set_attribute("app.request_id", request_id)
        start_time = time.monotonic()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "%s %s failed [request_id=%s]", request.method, request.url.path, request_id
            )
            raise

        duration_ms = (time.monotonic() - start_time) * 1000
        logger.info(
            "%s %s -> %d in %.1fms [request_id=%s]",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RateLimiterMiddleware(BaseHTTPMiddleware):
    """Limit calls to the NLU route per client IP.

    Each client gets ``requests_per_minute`` calls in any sliding 60-second
    window. Paths outside ``path_prefix`` are not limited.

    Attributes:
        requests_per_minute: Allowed requests per minute per client.
        path_prefix: Only requests whose path starts with this are limited.
    """

    def __init__(
        self,
        app: Any,
        path_prefix: str = "/",
        requests_per_minute: int = 60,
    ) -> None:
        super().__init__(app)
        self.path_prefix = path_prefix
        self.requests_per_minute = requests_per_minute
        self.requests: dict[str, deque[float]] = defaultdict(deque)
        self._last_sweep = time.monotonic()
        self._lock = asyncio.Lock()

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown_client"
        now = time.monotonic()

        async with self._lock:
            if now - self._last_sweep >= WINDOW_SECONDS:
                self._sweep(now)

            window = self.requests[client_ip]
            while window and now - window[0] >= WINDOW_SECONDS:
                window.popleft()

            if len(window) >= self.requests_per_minute:
                retry_after = max(int(WINDOW_SECONDS - (now - window[0])), 1)
                logger.warning("Rate limit exceeded for %s", client_ip)
                return JSONResponse(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    content={
                        "detail": {
                            "code": "rate_limited",
                            "message": "Too many requests",
                        },
                        "retry_after": retry_after,
                    },
                    headers={"Retry-After": str(retry_after)},
                )

            window.append(now)
            remaining = self.requests_per_minute - len(window)

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.requests_per_minute)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response

    def _sweep(self, now: float) -> None:
        """Drop clients whose newest request is outside the window.

        Runs at most once per window, under the lock.
        """
        stale = [
            client_ip
            for client_ip, window in self.requests.items()
            if not window or now - window[-1] >= WINDOW_SECONDS
        ]
        for client_ip in stale:
            del self.requests[client_ip]
        self._last_sweep = now
        if stale:
            logger.debug("Rate limiter dropped %d idle clients", len(stale))
