"""Named JSON entries for favorites and receipt history."""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Sequence
from pathlib import Path

from ..models import ReceiptData
from .schema import ensure_schema

FAVORITES_KEY = "혜택ON_favorites"
RECEIPT_HISTORY_KEY = "혜택ON_receiptHistory"

DEFAULT_DB_PATH = "~/.config/hyetaek/hyetaek.db"


class CorruptEntryError(ValueError):
    """A stored value could not be decoded; the whole entry is unusable."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"저장된 값이 손상되었습니다 ({key}): {reason}")
        self.key = key


class KeyValueStore:
    """Manages the kv_store table. Values are JSON text."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def get_raw(self, key: str) -> str | None:
        conn = self._get_conn()
        row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def set_raw(self, key: str, value: str) -> None:
        """Overwrite the entry for *key*."""
        conn = self._get_conn()
        conn.execute(
            """INSERT INTO kv_store (key, value, updated_at)
               VALUES (?, ?, datetime('now', 'localtime'))
               ON CONFLICT(key) DO UPDATE
               SET value = excluded.value, updated_at = excluded.updated_at""",
            (key, value),
        )
        conn.commit()

    def get_json(self, key: str):
        """Decode the entry for *key*; None if it was never written.

        Raises:
            CorruptEntryError: If the stored text is not valid JSON.
        """
        raw = self.get_raw(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptEntryError(key, str(e)) from e

    def set_json(self, key: str, value) -> None:
        self.set_raw(key, json.dumps(value, ensure_ascii=False))


class FavoritesStore:
    """The persisted set of favorite store ids, in insertion order."""

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    def load(self) -> tuple[str, ...]:
        data = self._kv.get_json(FAVORITES_KEY)
        if data is None:
            return ()
        if not isinstance(data, list) or not all(isinstance(i, str) for i in data):
            raise CorruptEntryError(FAVORITES_KEY, "expected an array of ids")
        return tuple(data)

    def save(self, favorites: Sequence[str]) -> None:
        self._kv.set_json(FAVORITES_KEY, list(favorites))


class ReceiptHistoryStore:
    """The persisted receipt history, most recent first."""

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    def load(self) -> tuple[ReceiptData, ...]:
        data = self._kv.get_json(RECEIPT_HISTORY_KEY)
        if data is None:
            return ()
        if not isinstance(data, list):
            raise CorruptEntryError(RECEIPT_HISTORY_KEY, "expected an array of receipts")
        try:
            return tuple(ReceiptData.from_dict(item) for item in data)
        except (KeyError, TypeError, AttributeError) as e:
            raise CorruptEntryError(RECEIPT_HISTORY_KEY, repr(e)) from e

    def save(self, history: Sequence[ReceiptData]) -> None:
        self._kv.set_json(RECEIPT_HISTORY_KEY, [r.to_dict() for r in history])
