"""
Request logging middleware.

Logs one line per request and response with a short request id, and
echoes the id back in ``X-Request-ID``.
"""

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """HTTP middleware for request/response logging."""

    # Health checks are not logged
    QUIET_PATHS: tuple[str, ...] = ("/health",)

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id

        if request.url.path.startswith(self.QUIET_PATHS):
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        started = time.perf_counter()
        logger.info(f"[{request_id}] --> {request.method} {request.url.path}")

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(f"[{request_id}] <-- {request.method} {request.url.path} failed in {elapsed_ms:.1f}ms: {e}")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(level, f"[{request_id}] <-- {request.method} {request.url.path} {response.status_code} in {elapsed_ms:.1f}ms")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
