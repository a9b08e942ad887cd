"""Uniform error responses and application-level exception handlers.

Every error leaving the gateway has the body ``{"error": <message>}``.
Handlers branch on the exception type, never on message text.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gateway.exceptions import (
    ConfigurationError,
    DuplicateRecordError,
    UpstreamError,
    ValidationError,
)

log = structlog.get_logger(__name__)


def create_error_response(
    error: BaseException | str, status_code: int = 400
) -> JSONResponse:
    """Build a JSON error response from an exception or a plain message."""
    message = error if isinstance(error, str) else str(error)
    return JSONResponse(content={"error": message}, status_code=status_code)


def upstream_error_response(error: UpstreamError, fallback: str) -> JSONResponse:
    """Relay an upstream JSON error with its status, or fall back to a 500.

    The upstream body is relayed only when the upstream actually answered
    with a parseable JSON payload.
    """
    if error.responded and error.body is not None:
        return JSONResponse(content=error.body, status_code=error.status_code)
    return create_error_response(fallback, 500)


async def _validation_error_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    log.info(
        "request_validation_failed",
        kind=exc.kind.value,
        field=exc.field,
        error=exc.message,
    )
    return create_error_response(exc, 400)


async def _duplicate_record_handler(
    request: Request, exc: DuplicateRecordError
) -> JSONResponse:
    return create_error_response(exc, 409)


async def _configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    log.error("gateway_misconfigured", error=str(exc))
    return create_error_response(exc, 500)


async def _upstream_error_handler(
    request: Request, exc: UpstreamError
) -> JSONResponse:
    return upstream_error_response(exc, "Upstream request failed")


def register_exception_handlers(app: FastAPI) -> None:
    """Map gateway exception types to HTTP status codes."""
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(DuplicateRecordError, _duplicate_record_handler)
    app.add_exception_handler(ConfigurationError, _configuration_error_handler)
    app.add_exception_handler(UpstreamError, _upstream_error_handler)
