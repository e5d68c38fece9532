"""Logging middleware for request tracking."""
import re
import time
import uuid
from typing import Callable, Optional

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = structlog.get_logger(__name__)

GROUP_PATH_PATTERN = re.compile(r"/groups/(\d{6})(?:/|$)")


def group_code_from_path(path: str) -> Optional[str]:
    """Extract the join code from a /groups/{code}/... path, if any."""
    match = GROUP_PATH_PATTERN.search(path)
    return match.group(1) if match else None


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request with a request ID and, for group routes, the group code."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        # Store request ID in request.state for access in endpoint handlers
        request.state.request_id = request_id

        # Everything logged while handling this request carries these fields
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )
        group_code = group_code_from_path(request.url.path)
        if group_code:
            structlog.contextvars.bind_contextvars(group_code=group_code)

        start_time = time.perf_counter()

        logger.info(
            "request_started",
            query_params=str(request.query_params) if request.query_params else None,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                exception=str(exc),
                exception_type=type(exc).__name__,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        response.headers["X-Request-ID"] = request_id

        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )

        return response
