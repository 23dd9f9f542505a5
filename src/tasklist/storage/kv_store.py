# src/tasklist/storage/kv_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any, TypeVar

from ..core.ports import KeyValueBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqliteKeyValueBackend:
    """
    SQLite-backed string slots.

    One table, one row per key. Each method opens its own SQLite connection,
    so the backend holds no open handles between calls.
    """

    def __init__(self, db_path: str | Path = "storage.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("KeyValue backend ready db=%s", self._db_path)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_items (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def get_item(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            cur = conn.execute("SELECT value FROM kv_items WHERE key = ?", (key,))
            row = cur.fetchone()
            return None if row is None else str(row[0])
        finally:
            conn.close()

    def set_item(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv_items(key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
            conn.commit()
        finally:
            conn.close()

    def remove_item(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv_items WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()


class MemoryKeyValueBackend:
    """Dict-backed slots for tests and throwaway sessions."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class DurableStore:
    """
    JSON values on top of a KeyValueBackend.

    Neither load nor save ever raises: a missing or corrupt slot yields the
    caller's default, and a failed write is logged and reported as False.
    """

    def __init__(self, backend: KeyValueBackend) -> None:
        self._backend = backend

    @staticmethod
    def encode(value: Any) -> str:
        # Stable output: the same value always produces the same stored text.
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))

    def load(self, key: str, default: T) -> Any | T:
        try:
            raw = self._backend.get_item(key)
        except Exception:
            logger.exception("Error reading storage key %r; using default.", key)
            return default

        if raw is None:
            logger.debug("Storage key %r is empty; using default.", key)
            return default

        try:
            return json.loads(raw)
        except Exception:
            logger.exception("Error decoding storage key %r; using default.", key)
            return default

    def save(self, key: str, value: Any) -> bool:
        try:
            payload = self.encode(value)
        except Exception:
            logger.exception("Error encoding value for storage key %r.", key)
            return False

        try:
            self._backend.set_item(key, payload)
        except Exception:
            logger.exception("Error setting storage key %r.", key)
            return False

        logger.debug("Saved storage key %r (%d chars).", key, len(payload))
        return True

    def remove(self, key: str) -> bool:
        try:
            self._backend.remove_item(key)
        except Exception:
            logger.exception("Error removing storage key %r.", key)
            return False
        return True
