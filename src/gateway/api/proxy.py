"""Forward-and-relay helpers shared by the backend proxy routes."""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from gateway.api.errors import upstream_error_response
from gateway.exceptions import UpstreamError
from gateway.upstream.client import UpstreamClient


def _client(request: Request) -> UpstreamClient:
    return request.app.state.upstream


async def proxy_get(request: Request, url: str, fallback: str) -> JSONResponse:
    """GET ``url`` on the backend and relay the JSON answer."""
    try:
        data = await _client(request).get_json(url, authenticated=True)
    except UpstreamError as e:
        return upstream_error_response(e, fallback)
    return JSONResponse(content=data)


async def proxy_post(
    request: Request, url: str, payload: Any, fallback: str
) -> JSONResponse:
    """POST ``payload`` to ``url`` on the backend and relay the JSON answer."""
    try:
        data = await _client(request).post_json(url, payload, authenticated=True)
    except UpstreamError as e:
        return upstream_error_response(e, fallback)
    return JSONResponse(content=data)
