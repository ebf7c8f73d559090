# src/taskflow/storage/kv_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from ..core.errors import MalformedStoredData
from ..core.ports import KeyValueStore

logger = logging.getLogger(__name__)

USERS_KEY = "taskflow_users"
TASKS_KEY = "taskflow_tasks"
SESSION_KEY = "taskflow_auth"


class SqliteKeyValueStore:
    """
    SQLite-backed blob store with localStorage-like semantics.

    One table, one row per key, the value is an opaque string (JSON in practice).
    Every call is a synchronous round trip:
    - each method opens its own SQLite connection
    - no caching, so two processes sharing the file see each other's writes
      (and can overwrite them, there is no locking above SQLite itself)
    """

    def __init__(self, db_path: str | Path = "store.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("KeyValueStore ready db=%s keys=%s", self._db_path, len(self.keys()))

    @property
    def path(self) -> Path:
        return self._db_path

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
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def get(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return None if row is None else str(row[0])
        finally:
            conn.close()

    def set(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT INTO kv(key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value),
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    def clear(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv")
            conn.commit()
        finally:
            conn.close()
        logger.info("KeyValueStore cleared db=%s", self._db_path)

    def keys(self) -> list[str]:
        conn = self._get_conn()
        try:
            return [str(r[0]) for r in conn.execute("SELECT key FROM kv ORDER BY key")]
        finally:
            conn.close()


# ---- JSON codec shared by the directories ----


def decode_json(key: str, raw: str | None) -> Any:
    """Decode a stored blob; raises MalformedStoredData on garbage. Missing key -> None."""
    if raw is None or raw == "":
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedStoredData(key, str(e)) from e


def encode_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def load_records(store: KeyValueStore, key: str) -> list[dict[str, Any]]:
    """
    Read a JSON array of objects stored under `key`.

    Missing or malformed data reads as an empty collection; non-object
    entries inside the array are dropped.
    """
    try:
        data = decode_json(key, store.get(key))
    except MalformedStoredData as e:
        logger.warning("Ignoring malformed stored data key=%s reason=%s", e.key, e.reason)
        return []
    if data is None:
        return []
    if not isinstance(data, list):
        logger.warning("Ignoring stored data key=%s: expected a list, got %s", key, type(data).__name__)
        return []
    return [r for r in data if isinstance(r, dict)]


def save_records(store: KeyValueStore, key: str, records: list[dict[str, Any]]) -> None:
    store.set(key, encode_json(records))
