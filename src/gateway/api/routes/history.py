"""Wallet transaction history built from Etherscan data."""

from __future__ import annotations

import asyncio

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from gateway.api.errors import create_error_response
from gateway.exceptions import UpstreamError
from gateway.history import CHAIN_CONFIGS, DEFAULT_CHAIN, build_history
from gateway.upstream.etherscan import EtherscanClient
from gateway.validation import validate_and_checksum_url_param

log = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/transactions")
async def get_transactions(request: Request) -> JSONResponse:
    """Lending-pool transactions for a wallet, classified by type."""
    address = validate_and_checksum_url_param(request.query_params, "address")
    chain_name = request.query_params.get("chain") or DEFAULT_CHAIN
    chain = CHAIN_CONFIGS.get(chain_name)
    if chain is None:
        return create_error_response("Invalid chain specified", 400)

    etherscan: EtherscanClient = request.app.state.etherscan
    try:
        transactions, token_transfers = await asyncio.gather(
            etherscan.fetch_transactions(chain.chain_id, address),
            etherscan.fetch_token_transfers(chain.chain_id, address),
        )
    except UpstreamError as e:
        log.error("transaction_history_failed", address=address, error=e.message)
        return create_error_response("Failed to fetch transactions", 500)

    history = build_history(address, chain, transactions, token_transfers)
    log.debug(
        "transaction_history_built",
        address=address,
        total=history["metadata"]["totalTransactions"],
    )
    return JSONResponse(content=history)
