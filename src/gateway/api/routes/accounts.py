"""Per-wallet read endpoints: AI activity analysis, balance and holdings."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from gateway.api.errors import upstream_error_response
from gateway.api.proxy import proxy_get
from gateway.exceptions import UpstreamError
from gateway.validation import validate_and_checksum_url_param

router = APIRouter()


@router.get("/ai-analyser")
async def ai_analyser(request: Request) -> JSONResponse:
    """AI analysis of a wallet's on-chain activity."""
    address = validate_and_checksum_url_param(request.query_params, "address")
    upstream = request.app.state.upstream
    endpoints = request.app.state.endpoints
    try:
        data = await upstream.get_json(endpoints.ai_analyzer(address))
    except UpstreamError as e:
        return upstream_error_response(e, "Failed to fetch activity")
    return JSONResponse(content=data)


@router.get("/balance")
async def get_balance(request: Request) -> JSONResponse:
    address = validate_and_checksum_url_param(request.query_params, "address")
    url = request.app.state.endpoints.balance(address)
    return await proxy_get(request, url, "Failed to fetch balance")


@router.get("/holdings")
async def get_holdings(request: Request) -> JSONResponse:
    address = validate_and_checksum_url_param(request.query_params, "address")
    url = request.app.state.endpoints.holdings(address)
    return await proxy_get(request, url, "Failed to fetch holdings")
