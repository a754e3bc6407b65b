# src/taskpad/tasks/task_persistence.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
from pathlib import Path

from ..core.ports import KeyValueStore, WarningSink
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tasks"


class SqliteKeyValueStore:
    """
    SQLite-backed key-value store.

    One table, one row per key, value is an opaque string:
    - set_item() is an upsert (full overwrite of the slot)
    - get_item() returns None for a missing key

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "storage.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SqliteKeyValueStore ready db=%s", self._db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

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

    def get_item(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            cur = conn.execute("SELECT value FROM kv WHERE key = ?", (key,))
            row = cur.fetchone()
            return None if row is None else str(row[0])
        finally:
            conn.close()

    def set_item(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )
            conn.commit()
        finally:
            conn.close()

    def remove_item(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()


class MemoryKeyValueStore:
    """Volatile key-value store (tests, demos, --no-persist runs)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class TaskPersistence:
    """
    Round-trips the whole task collection through a KeyValueStore.

    Every save is a full overwrite of one JSON array under a fixed key.
    Load never raises: missing or corrupted data degrades to an empty list.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        on_warning: WarningSink | None = None,
    ) -> None:
        self._kv = kv
        self._key = key
        self._on_warning = on_warning

    @property
    def key(self) -> str:
        return self._key

    def save(self, tasks: list[Task]) -> bool:
        """Persist the collection. Returns False (and warns) if the write failed."""
        try:
            payload = json.dumps([t.to_record() for t in tasks])
            self._kv.set_item(self._key, payload)
        except Exception as e:
            logger.warning("Failed to save %d tasks under key=%s: %s", len(tasks), self._key, e)
            if self._on_warning is not None:
                try:
                    self._on_warning(f"Could not save tasks: {e}")
                except Exception:
                    logger.exception("on_warning callback failed")
            return False

        logger.debug("Saved %d tasks under key=%s", len(tasks), self._key)
        return True

    def load(self) -> list[Task]:
        try:
            raw = self._kv.get_item(self._key)
        except Exception:
            logger.exception("Failed to read key=%s; starting with an empty list", self._key)
            return []

        if not raw:
            return []

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError):
            logger.warning("Stored tasks under key=%s are not valid JSON; ignoring", self._key)
            return []

        if not isinstance(data, list):
            logger.warning("Stored tasks under key=%s are not a list; ignoring", self._key)
            return []

        out: list[Task] = []
        for record in data:
            task = Task.from_record(record)
            if task is None:
                logger.debug("Skipping unusable task record: %r", record)
                continue
            out.append(task)

        logger.info("Loaded %d tasks from key=%s", len(out), self._key)
        return out
