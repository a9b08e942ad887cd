"""Feedback submissions and confirmed deposit transactions stored locally."""

from __future__ import annotations

from decimal import Decimal

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from gateway.data.models import FeedbackRecord, TransactionRecord
from gateway.data.store import RecordStore
from gateway.validation import (
    validate_and_checksum_url_param,
    validate_and_parse_request_body,
)

log = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/feedbacks")
async def submit_feedback(request: Request) -> JSONResponse:
    """Store one feedback submission and report whether it was the wallet's first."""
    body = await validate_and_parse_request_body(
        request,
        required_fields=["walletAddress", "email"],
        address_fields=["walletAddress"],
        number_fields=["rating"],
        optional_fields=["additionalFeedback"],
        array_fields=["protocols", "strategies"],
    )
    store: RecordStore = request.app.state.store

    first_submission = not await store.has_feedback(body["walletAddress"])
    additional = body.get("additionalFeedback")
    record = await store.save_feedback(FeedbackRecord(
        wallet_address=body["walletAddress"],
        email=body["email"].strip(),
        protocols=[str(p) for p in body["protocols"]],
        strategies=[str(s) for s in body["strategies"]],
        rating=Decimal(str(body["rating"])),
        additional_feedback=str(additional) if additional is not None else None,
    ))

    return JSONResponse(content={
        "success": True,
        "message": "Feedback submitted successfully",
        "feedbackId": record.id,
        "firstSubmission": first_submission,
    })


@router.post("/deposit-transactions")
async def record_transaction(request: Request) -> JSONResponse:
    """Record a confirmed transaction; a repeated hash is rejected with 409."""
    body = await validate_and_parse_request_body(
        request,
        required_fields=["address", "hash", "amount"],
        address_fields=["address"],
        number_fields=["amount"],
        optional_fields=["type", "status"],
    )
    store: RecordStore = request.app.state.store

    record = await store.save_transaction(TransactionRecord(
        address=body["address"],
        hash=body["hash"].strip(),
        amount=Decimal(str(body["amount"])),
        type=str(body.get("type") or "deposit"),
        status=str(body.get("status") or "completed"),
    ))
    return JSONResponse(
        content={"success": True, "transaction": record.to_dict()},
        status_code=201,
    )


@router.get("/deposit-transactions")
async def list_transactions(request: Request) -> JSONResponse:
    address = validate_and_checksum_url_param(request.query_params, "address")
    store: RecordStore = request.app.state.store
    records = await store.list_transactions(address)
    return JSONResponse(content={
        "success": True,
        "transactions": [r.to_dict() for r in records],
    })
