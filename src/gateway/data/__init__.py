"""Record persistence layer.

Provides record models, SQLite database management and a typed
read/write store for transaction and feedback records.
"""

from gateway.data.database import RecordsDatabase
from gateway.data.models import FeedbackRecord, TransactionRecord
from gateway.data.store import RecordStore

__all__ = [
    "FeedbackRecord",
    "RecordStore",
    "RecordsDatabase",
    "TransactionRecord",
]
