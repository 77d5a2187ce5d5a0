"""SQLite-backed persistence for favorites and receipt history."""

from .schema import ensure_schema
from .storage import (
    FAVORITES_KEY,
    RECEIPT_HISTORY_KEY,
    CorruptEntryError,
    FavoritesStore,
    KeyValueStore,
    ReceiptHistoryStore,
)

__all__ = [
    "FAVORITES_KEY",
    "RECEIPT_HISTORY_KEY",
    "CorruptEntryError",
    "FavoritesStore",
    "KeyValueStore",
    "ReceiptHistoryStore",
    "ensure_schema",
]
