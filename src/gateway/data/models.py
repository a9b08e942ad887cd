"""Record shapes persisted by the gateway.

Amounts and ratings are Decimal in memory and TEXT in SQLite so that
fractional token amounts survive a round trip without float rounding.
"""

import time
from dataclasses import dataclass, field
from decimal import Decimal


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class TransactionRecord:
    """A confirmed deposit (or other action) transaction.

    ``hash`` is unique across all records. Records are written once and
    never updated or deleted.
    """

    address: str
    hash: str
    amount: Decimal
    type: str = "deposit"
    status: str = "completed"
    created_at: int = field(default_factory=_now_ms)  # ms since epoch
    id: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "address": self.address,
            "hash": self.hash,
            "amount": str(self.amount),
            "type": self.type,
            "status": self.status,
            "createdAt": self.created_at,
        }


@dataclass
class FeedbackRecord:
    """One feedback submission from a wallet. Immutable once stored."""

    wallet_address: str
    email: str
    protocols: list[str]
    strategies: list[str]
    rating: Decimal
    additional_feedback: str | None = None
    created_at: int = field(default_factory=_now_ms)
    id: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "walletAddress": self.wallet_address,
            "email": self.email,
            "protocols": list(self.protocols),
            "strategies": list(self.strategies),
            "rating": str(self.rating),
            "additionalFeedback": self.additional_feedback,
            "createdAt": self.created_at,
        }
