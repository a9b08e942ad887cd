"""Typed SQLite read/write abstraction for transaction and feedback records.

All SQL is isolated behind RecordStore. Amounts and ratings are stored as
TEXT and restored as Decimal on read; feedback protocol and strategy lists
are stored as JSON text in their submitted order.
"""

import json
import sqlite3
from decimal import Decimal

from gateway.data.database import RecordsDatabase
from gateway.data.models import FeedbackRecord, TransactionRecord
from gateway.exceptions import DuplicateRecordError
from gateway.logging import get_logger

logger = get_logger(__name__)


class RecordStore:
    """Async SQLite store for transaction and feedback records.

    Usage:
        async with RecordsDatabase("data/records.db") as database:
            store = RecordStore(database)
            saved = await store.save_transaction(record)
    """

    def __init__(self, database: RecordsDatabase) -> None:
        self._database = database

    # ──────────────────────────────────────────────
    # Transactions
    # ──────────────────────────────────────────────

    async def save_transaction(self, record: TransactionRecord) -> TransactionRecord:
        """Insert a transaction record and return it with its row id.

        Raises DuplicateRecordError if the hash is already recorded.
        """
        try:
            cursor = await self._database.db.execute(
                "INSERT INTO transactions "
                "(address, hash, amount, type, status, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    record.address,
                    record.hash,
                    str(record.amount),
                    record.type,
                    record.status,
                    record.created_at,
                ),
            )
        except sqlite3.IntegrityError as e:
            await self._database.db.rollback()
            logger.warning("duplicate_transaction", hash=record.hash)
            raise DuplicateRecordError(
                f"Transaction {record.hash} already recorded"
            ) from e
        await self._database.db.commit()

        record.id = cursor.lastrowid
        logger.info(
            "transaction_saved",
            id=record.id,
            address=record.address,
            hash=record.hash,
            type=record.type,
        )
        return record

    async def get_transaction(self, tx_hash: str) -> TransactionRecord | None:
        """Return the record for ``tx_hash`` or None."""
        cursor = await self._database.db.execute(
            "SELECT * FROM transactions WHERE hash = ?", (tx_hash,)
        )
        row = await cursor.fetchone()
        return self._row_to_transaction(row) if row is not None else None

    async def list_transactions(
        self, address: str, limit: int = 100
    ) -> list[TransactionRecord]:
        """Return transactions for ``address``, newest first."""
        cursor = await self._database.db.execute(
            "SELECT * FROM transactions WHERE address = ? "
            "ORDER BY created_at DESC, id DESC LIMIT ?",
            (address, limit),
        )
        rows = await cursor.fetchall()
        return [self._row_to_transaction(row) for row in rows]

    # ──────────────────────────────────────────────
    # Feedback
    # ──────────────────────────────────────────────

    async def has_feedback(self, wallet_address: str) -> bool:
        """True if the wallet has submitted feedback before."""
        cursor = await self._database.db.execute(
            "SELECT 1 FROM feedback WHERE wallet_address = ? LIMIT 1",
            (wallet_address,),
        )
        return await cursor.fetchone() is not None

    async def save_feedback(self, record: FeedbackRecord) -> FeedbackRecord:
        """Insert a feedback record and return it with its row id."""
        cursor = await self._database.db.execute(
            "INSERT INTO feedback "
            "(wallet_address, email, protocols, strategies, rating, "
            "additional_feedback, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                record.wallet_address,
                record.email,
                json.dumps(record.protocols),
                json.dumps(record.strategies),
                str(record.rating),
                record.additional_feedback,
                record.created_at,
            ),
        )
        await self._database.db.commit()

        record.id = cursor.lastrowid
        logger.info(
            "feedback_saved", id=record.id, wallet_address=record.wallet_address
        )
        return record

    async def list_feedback(self, wallet_address: str) -> list[FeedbackRecord]:
        """Return every feedback submission for a wallet, oldest first."""
        cursor = await self._database.db.execute(
            "SELECT * FROM feedback WHERE wallet_address = ? "
            "ORDER BY created_at ASC, id ASC",
            (wallet_address,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_feedback(row) for row in rows]

    # ──────────────────────────────────────────────
    # Row mapping
    # ──────────────────────────────────────────────

    @staticmethod
    def _row_to_transaction(row: sqlite3.Row) -> TransactionRecord:
        return TransactionRecord(
            id=row["id"],
            address=row["address"],
            hash=row["hash"],
            amount=Decimal(row["amount"]),
            type=row["type"],
            status=row["status"],
            created_at=row["created_at"],
        )

    @staticmethod
    def _row_to_feedback(row: sqlite3.Row) -> FeedbackRecord:
        return FeedbackRecord(
            id=row["id"],
            wallet_address=row["wallet_address"],
            email=row["email"],
            protocols=json.loads(row["protocols"]),
            strategies=json.loads(row["strategies"]),
            rating=Decimal(row["rating"]),
            additional_feedback=row["additional_feedback"],
            created_at=row["created_at"],
        )
