"""HTTP middleware binding request context for structured logs."""

from __future__ import annotations

import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response

log = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


async def request_context_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Bind request_id/method/path to structlog contextvars and log completion."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:16]

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )

    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        log.exception("request_failed")
        raise

    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    log.info("request_completed", status=response.status_code, duration_ms=duration_ms)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response
