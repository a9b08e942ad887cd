"""JSON-RPC passthrough to the chain RPC provider and Tenderly simulations."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from gateway.api.errors import create_error_response
from gateway.exceptions import ConfigurationError, UpstreamError
from gateway.validation import read_json_body

log = structlog.get_logger(__name__)

router = APIRouter()

TENDERLY_SIMULATE_METHOD = "tenderly_simulateBundle"


def _rpc_url(request: Request) -> str:
    url = request.app.state.settings.rpc.alchemy_url
    if not url:
        raise ConfigurationError("RPC endpoint is not configured")
    return url


def _rpc_error_response(error: UpstreamError, label: str) -> JSONResponse:
    if error.responded:
        return JSONResponse(
            content={"error": f"{label}: {error.reason}", "details": error.details},
            status_code=error.status_code,
        )
    return create_error_response("Internal server error", 500)


@router.post("/rpc")
async def rpc_post(request: Request) -> JSONResponse:
    """Forward a JSON-RPC request (single or batch) unchanged."""
    payload = await read_json_body(request)
    url = _rpc_url(request)
    try:
        result = await request.app.state.upstream.post_json(url, payload)
    except UpstreamError as e:
        log.warning("rpc_proxy_failed", status=e.status_code, reason=e.reason)
        return _rpc_error_response(e, "RPC error")
    return JSONResponse(content=result)


@router.get("/rpc")
async def rpc_get(request: Request) -> JSONResponse:
    """Forward the query string to the RPC provider."""
    url = _rpc_url(request)
    params = list(request.query_params.multi_items())
    try:
        result = await request.app.state.upstream.get_json(url, params=params)
    except UpstreamError as e:
        log.warning("rpc_proxy_failed", status=e.status_code, reason=e.reason)
        return _rpc_error_response(e, "RPC error")
    return JSONResponse(content=result)


def _log_simulation(result: Any) -> None:
    """Log per-transaction outcome of a bundle simulation."""
    if not isinstance(result, dict):
        return
    if result.get("error"):
        log.error("tenderly_simulation_error", error=result["error"])

    simulations = result.get("result")
    if not isinstance(simulations, list):
        return

    all_passed = all(isinstance(s, dict) and s.get("status") is True for s in simulations)
    log.info(
        "tenderly_simulation_completed",
        transactions=len(simulations),
        all_passed=all_passed,
    )
    for index, sim in enumerate(simulations, start=1):
        if not isinstance(sim, dict):
            continue
        try:
            gas_used = int(sim.get("gasUsed") or "0x0", 16)
        except (TypeError, ValueError):
            gas_used = None
        if sim.get("status") is True:
            log.debug("tenderly_simulated_tx", index=index, gas_used=gas_used)
        else:
            log.warning(
                "tenderly_simulated_tx_failed",
                index=index,
                gas_used=gas_used,
                error=sim.get("error"),
                revert_reason=sim.get("revertReason"),
                logs=len(sim.get("logs") or []),
            )


@router.post("/tenderly-rpc")
async def tenderly_rpc(request: Request) -> JSONResponse:
    """Simulate a transaction bundle through Tenderly's node RPC."""
    body = await read_json_body(request)
    method = body.get("method") if isinstance(body, dict) else None
    if method != TENDERLY_SIMULATE_METHOD:
        return create_error_response(
            f"Only {TENDERLY_SIMULATE_METHOD} method is supported", 400
        )

    settings = request.app.state.settings.rpc
    access_key = settings.tenderly_access_key.get_secret_value()
    if not access_key:
        raise ConfigurationError("Tenderly configuration missing")

    params = body.get("params")
    bundle = params[0] if isinstance(params, list) and params else None
    log.info(
        "tenderly_simulation_requested",
        transactions=len(bundle) if isinstance(bundle, list) else 0,
    )

    url = settings.tenderly_url_template.format(key=access_key)
    payload = {
        "id": 0,
        "jsonrpc": "2.0",
        "method": TENDERLY_SIMULATE_METHOD,
        "params": params,
    }
    try:
        result = await request.app.state.upstream.post_json(url, payload)
    except UpstreamError as e:
        log.error("tenderly_rpc_failed", status=e.status_code, reason=e.reason)
        return _rpc_error_response(e, "Tenderly RPC error")

    _log_simulation(result)
    return JSONResponse(content=result)
