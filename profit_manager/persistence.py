"""Key-value persistence for the menu, order and expense collections."""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when stored data cannot be read or written."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.key = key

    def __str__(self) -> str:
        if self.key is None:
            return self.message
        return f"{self.message} (key={self.key!r})"


class KeyValueStore(Protocol):
    """Storage collaborator: one JSON document per key."""

    def load(self, key: str) -> Any | None:
        """Return the stored JSON value, or None when the key is absent."""

    def save(self, key: str, value: Any) -> None:
        """Serialize ``value`` to JSON and store it under ``key``."""

    def clear_all(self) -> None:
        """Remove every stored key."""


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _decode(key: str, payload: str) -> Any:
    try:
        return json.loads(payload)
    except (ValueError, RecursionError) as exc:
        raise StorageError(f"Stored value is not valid JSON: {exc}", key=key) from exc


def _encode(key: str, value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as exc:
        raise StorageError(f"Value is not JSON serializable: {exc}", key=key) from exc


class SqliteStore:
    """JSON documents in a single SQLite table."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self._bootstrapped = False

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(self.db_path)

    def bootstrap_schema(self) -> None:
        """Create the key-value table if it does not already exist."""
        try:
            with closing(self._connect()) as conn, conn:
                conn.executescript(
                    """
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    );
                    """
                )
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Cannot open store at {self.db_path}: {exc}") from exc
        self._bootstrapped = True

    def load(self, key: str) -> Any | None:
        self._ensure_schema()
        try:
            with closing(self._connect()) as conn:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Read failed: {exc}", key=key) from exc
        if row is None:
            return None
        return _decode(key, row[0])

    def save(self, key: str, value: Any) -> None:
        payload = _encode(key, value)
        self._ensure_schema()
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                    """,
                    (key, payload, _utc_now_iso()),
                )
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Write failed: {exc}", key=key) from exc

    def clear_all(self) -> None:
        self._ensure_schema()
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute("DELETE FROM kv_store")
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Clear failed: {exc}") from exc
        logger.info("cleared all stored collections in %s", self.db_path)

    def _ensure_schema(self) -> None:
        if not self._bootstrapped:
            self.bootstrap_schema()


class MemoryStore:
    """In-process store keeping JSON text, so values round-trip like on disk."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.raw: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Any | None:
        payload = self.raw.get(key)
        if payload is None:
            return None
        return _decode(key, payload)

    def save(self, key: str, value: Any) -> None:
        self.raw[key] = _encode(key, value)

    def clear_all(self) -> None:
        self.raw.clear()
