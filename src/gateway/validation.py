"""Request validation and normalization shared by every proxy route.

Extracts named fields from query strings and JSON bodies, checks that
required ones are present, converts address fields to their EIP-55
checksummed form and coerces number fields. Every failure is raised as a
``ValidationError`` tagged with its kind and the offending field; nothing
here performs I/O beyond reading the request body.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from starlette.requests import Request
from web3 import Web3

from gateway.exceptions import ValidationError

DEFAULT_ADDRESS_FIELDS: tuple[str, ...] = ("user_address", "address")
DEFAULT_NUMBER_FIELDS: tuple[str, ...] = ("amount",)

_HEX_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def checksum_address(value: Any, field: str = "address") -> str:
    """Return the EIP-55 checksummed form of a 0x-prefixed hex address.

    Any letter case is accepted on input. Raises ValidationError
    (INVALID_ADDRESS) for non-strings, wrong length or non-hex characters.
    """
    if not isinstance(value, str):
        raise ValidationError.invalid_address(field)
    candidate = value.strip()
    if not _HEX_ADDRESS_RE.match(candidate):
        raise ValidationError.invalid_address(field)
    try:
        return Web3.to_checksum_address(candidate)
    except ValueError as e:
        raise ValidationError.invalid_address(field) from e


def parse_number(value: Any, field: str) -> int | float:
    """Coerce a JSON number or numeric string to int (integral) or float.

    Booleans, NaN, infinities and anything that is not a plain decimal
    literal are rejected with INVALID_NUMBER.
    """
    if isinstance(value, bool):
        raise ValidationError.invalid_number(field)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError.invalid_number(field)
        return value
    if not isinstance(value, str):
        raise ValidationError.invalid_number(field)

    text = value.strip()
    if not _NUMBER_RE.match(text):
        raise ValidationError.invalid_number(field)
    if _INTEGER_RE.match(text):
        try:
            return int(text)
        except ValueError as e:
            # beyond the interpreter's integer string conversion limit
            raise ValidationError.invalid_number(field) from e

    number = float(text)
    if not math.isfinite(number):
        raise ValidationError.invalid_number(field)
    return number


def validate_and_checksum_url_param(
    params: Mapping[str, str],
    key: str = "address",
    required: bool = True,
) -> str | None:
    """Read an address from query parameters and return it checksummed.

    Returns None when the parameter is absent and not required.
    """
    raw = params.get(key)
    if raw is None or not raw.strip():
        if required:
            raise ValidationError.missing_field(key, f"{key} parameter is required")
        return None
    return checksum_address(raw, field=key)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_request_body(
    body: Any,
    required_fields: Iterable[str] = (),
    address_fields: Iterable[str] = DEFAULT_ADDRESS_FIELDS,
    number_fields: Iterable[str] = DEFAULT_NUMBER_FIELDS,
    optional_fields: Iterable[str] = (),
    array_fields: Iterable[str] = (),
) -> dict[str, Any]:
    """Validate a decoded JSON body and return a normalized copy.

    Checks run in a fixed order: required strings, then addresses, then
    numbers, then arrays. A field that is both required and address typed
    therefore reports the missing-field error before the address error.
    Fields not named in any list pass through unchanged.
    """
    if not isinstance(body, dict):
        raise ValidationError.invalid_body("Invalid request body")

    optional = set(optional_fields)
    numbers = tuple(number_fields)
    processed = dict(body)

    for field in required_fields:
        if field in optional and _is_blank(processed.get(field)):
            continue
        value = processed.get(field)
        if field in numbers and isinstance(value, (int, float)) and not isinstance(value, bool):
            continue
        if not isinstance(value, str) or not value.strip():
            raise ValidationError.missing_field(field)

    for field in address_fields:
        value = processed.get(field)
        if _is_blank(value):
            continue
        processed[field] = checksum_address(value, field=field)

    for field in numbers:
        value = processed.get(field)
        if _is_blank(value):
            if field in optional:
                continue
            raise ValidationError.invalid_number(field)
        processed[field] = parse_number(value, field)

    for field in array_fields:
        value = processed.get(field)
        if value is None:
            if field in optional:
                continue
            raise ValidationError.missing_field(field, f"{field} is required")
        if not isinstance(value, list):
            raise ValidationError.invalid_array(field)

    return processed


async def read_json_body(request: Request) -> Any:
    """Return the decoded JSON body of ``request``.

    Rejects empty bodies, non-JSON content types and malformed JSON with
    INVALID_BODY. Any JSON value is returned; callers decide on its shape.
    """
    raw = await request.body()
    if not raw or not raw.strip():
        raise ValidationError.invalid_body("Request body is required")

    content_type = request.headers.get("content-type", "")
    if "application/json" not in content_type.lower():
        raise ValidationError.invalid_body("Content-Type must be application/json")

    try:
        return json.loads(raw)
    except ValueError as e:
        raise ValidationError.invalid_body("Invalid request body") from e


async def validate_and_parse_request_body(
    request: Request,
    required_fields: Iterable[str] = (),
    address_fields: Iterable[str] = DEFAULT_ADDRESS_FIELDS,
    number_fields: Iterable[str] = DEFAULT_NUMBER_FIELDS,
    optional_fields: Iterable[str] = (),
    array_fields: Iterable[str] = (),
) -> dict[str, Any]:
    """Read the JSON body of ``request`` and normalize it with parse_request_body."""
    body = await read_json_body(request)
    return parse_request_body(
        body,
        required_fields=required_fields,
        address_fields=address_fields,
        number_fields=number_fields,
        optional_fields=optional_fields,
        array_fields=array_fields,
    )
