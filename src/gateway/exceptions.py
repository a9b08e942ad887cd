"""Custom exceptions for the Synthos gateway.

Validation, upstream and persistence failures live here so route handlers
and exception handlers can branch on the failure type instead of matching
on message text.
"""

from enum import Enum
from typing import Any


class GatewayError(Exception):
    """Base exception for all gateway errors."""


class ValidationErrorKind(str, Enum):
    """What part of a request failed validation."""

    MISSING_FIELD = "missing_field"
    INVALID_ADDRESS = "invalid_address"
    INVALID_NUMBER = "invalid_number"
    INVALID_ARRAY = "invalid_array"
    INVALID_BODY = "invalid_body"


class ValidationError(GatewayError):
    """Raised when a request parameter or body field is missing or malformed.

    Messages always name the offending field, and address failures always
    contain the word "address".
    """

    def __init__(
        self,
        message: str,
        kind: ValidationErrorKind,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.field = field

    @classmethod
    def missing_field(cls, field: str, message: str | None = None) -> "ValidationError":
        return cls(
            message or f"{field} must be a non-empty string",
            ValidationErrorKind.MISSING_FIELD,
            field,
        )

    @classmethod
    def invalid_address(cls, field: str) -> "ValidationError":
        return cls(
            f"Invalid {field}: not a valid Ethereum address",
            ValidationErrorKind.INVALID_ADDRESS,
            field,
        )

    @classmethod
    def invalid_number(cls, field: str) -> "ValidationError":
        return cls(
            f"{field} must be a valid number",
            ValidationErrorKind.INVALID_NUMBER,
            field,
        )

    @classmethod
    def invalid_array(cls, field: str) -> "ValidationError":
        return cls(
            f"{field} must be an array",
            ValidationErrorKind.INVALID_ARRAY,
            field,
        )

    @classmethod
    def invalid_body(cls, message: str) -> "ValidationError":
        return cls(message, ValidationErrorKind.INVALID_BODY)


class UpstreamError(GatewayError):
    """Raised when a forwarded call fails or returns a non-success status.

    ``body`` holds the upstream JSON payload when one could be parsed and
    ``details`` the raw response text, so routes can relay either.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        reason: str | None = None,
        body: Any = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.reason = reason
        self.body = body
        self.details = details

    @property
    def responded(self) -> bool:
        """True when the upstream answered (as opposed to a transport failure)."""
        return self.reason is not None


class DuplicateRecordError(GatewayError):
    """Raised when a record with the same unique key already exists."""


class ConfigurationError(GatewayError):
    """Raised when a route needs a credential or URL that is not configured."""
