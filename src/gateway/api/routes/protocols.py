"""Read-only protocol catalogue endpoints relayed from the backend."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from gateway.api.errors import create_error_response
from gateway.api.proxy import proxy_get

router = APIRouter()


@router.get("/protocols")
async def get_protocols(request: Request) -> JSONResponse:
    url = request.app.state.endpoints.protocols()
    return await proxy_get(request, url, "Failed to fetch protocols")


@router.get("/protocol-pairs")
async def get_protocol_pairs(request: Request) -> JSONResponse:
    url = request.app.state.endpoints.protocol_pairs()
    return await proxy_get(request, url, "Failed to fetch protocol pairs")


@router.get("/protocol-pairs-apy")
async def get_protocol_pairs_apy(request: Request) -> JSONResponse:
    """Protocol pairs with APY; the backend already supplies ids and logos."""
    url = request.app.state.endpoints.protocol_pairs_apy()
    return await proxy_get(request, url, "Failed to fetch protocol pairs")


@router.get("/protocol-pairs-apy/{protocol_id}")
async def get_protocol_pair_apy(request: Request, protocol_id: str) -> JSONResponse:
    if not protocol_id.strip():
        return create_error_response("Protocol ID is required", 400)
    url = request.app.state.endpoints.protocol_pairs_apy_single(protocol_id)
    return await proxy_get(request, url, "Failed to fetch protocol details")


@router.get("/minimum-deposits")
async def get_minimum_deposits(request: Request) -> JSONResponse:
    url = request.app.state.endpoints.minimum_deposits()
    return await proxy_get(request, url, "Failed to fetch minimum deposits")
