"""POST endpoints that forward deposit and withdraw actions to the backend.

Each body is normalized first: user addresses are checksummed and amounts
coerced to numbers before the payload leaves the gateway.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from gateway.api.proxy import proxy_post
from gateway.validation import validate_and_parse_request_body

log = structlog.get_logger(__name__)

router = APIRouter()

ACTION_REQUIRED_FIELDS = ("user_address", "protocol_pair_id", "amount")


@router.post("/deposit")
async def deposit(request: Request) -> JSONResponse:
    body = await validate_and_parse_request_body(
        request, ACTION_REQUIRED_FIELDS, ["user_address"]
    )
    log.info(
        "deposit_requested",
        user_address=body["user_address"],
        protocol_pair_id=body["protocol_pair_id"],
    )
    url = request.app.state.endpoints.deposit()
    return await proxy_post(request, url, body, "Failed to process deposit")


@router.post("/looping-deposit")
async def looping_deposit(request: Request) -> JSONResponse:
    body = await validate_and_parse_request_body(
        request, ACTION_REQUIRED_FIELDS, ["user_address"]
    )
    payload = {field: body[field] for field in ACTION_REQUIRED_FIELDS}
    url = request.app.state.endpoints.looping_deposit()
    return await proxy_post(request, url, payload, "Failed to process looping deposit")


@router.post("/withdraw")
async def withdraw(request: Request) -> JSONResponse:
    body = await validate_and_parse_request_body(
        request, ACTION_REQUIRED_FIELDS, ["user_address"]
    )
    url = request.app.state.endpoints.withdraw()
    return await proxy_post(request, url, body, "Failed to process withdraw")


@router.post("/withdraw-tracking")
async def withdraw_tracking(request: Request) -> JSONResponse:
    """Withdraw with backend-side tracking; withdrawToken may be omitted."""
    body = await validate_and_parse_request_body(
        request,
        ACTION_REQUIRED_FIELDS,
        ["user_address"],
        ["amount"],
        ["withdrawToken"],
    )
    log.info(
        "withdraw_tracking_requested",
        user_address=body["user_address"],
        withdraw_token=body.get("withdrawToken"),
    )
    url = request.app.state.endpoints.withdraw_tracking()
    return await proxy_post(request, url, body, "Failed to process withdraw")


@router.post("/update-deposit-tx")
async def update_deposit_tx(request: Request) -> JSONResponse:
    """Attach the on-chain transaction hash and block to a pending deposit."""
    body = await validate_and_parse_request_body(
        request,
        ["depositId", "transactionHash"],
        [],
        ["blockNumber"],
    )
    url = request.app.state.endpoints.update_deposit_tx()
    return await proxy_post(request, url, body, "Failed to process update deposit tx")


@router.post("/update-withdraw-tx")
async def update_withdraw_tx(request: Request) -> JSONResponse:
    """Attach the on-chain transaction hash and block to pending withdrawals."""
    body = await validate_and_parse_request_body(
        request,
        ["transactionHash"],
        [],
        ["blockNumber"],
        [],
        ["withdrawalIds"],
    )
    url = request.app.state.endpoints.update_withdraw_tx()
    return await proxy_post(request, url, body, "Failed to process update withdraw tx")
