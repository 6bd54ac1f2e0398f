"""Per-request logging for the match API."""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from advisor_match.api.version import BUILD_VERSION

logger = logging.getLogger("advisor_match.api.middleware")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with a short id and log one line per request.

    Snapshot payloads can be large, so the line carries the request body
    size next to status and duration. Responses echo the id and the engine
    build in X-Request-ID / X-Engine-Version.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        body_size = request.headers.get("content-length", "0")

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                "[%s] %s %s (%s bytes) failed after %.0fms",
                request_id,
                request.method,
                request.url.path,
                body_size,
                (time.perf_counter() - start) * 1000,
                exc_info=True,
            )
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.log(
            logging.WARNING if response.status_code >= 400 else logging.INFO,
            "[%s] %s %s (%s bytes) -> %s in %.0fms",
            request_id,
            request.method,
            request.url.path,
            body_size,
            response.status_code,
            elapsed_ms,
        )
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Engine-Version"] = BUILD_VERSION
        return response
