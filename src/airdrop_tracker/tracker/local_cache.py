# src/airdrop_tracker/tracker/local_cache.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from ..core.ports import KeyValueCache
from ..errors import MalformedCacheEntry
from .clock import date_key_from_millis, epoch_millis, today_key

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "task_completions_"


class SQLiteKeyValueStore:
    """
    SQLite key/value store standing in for browser localStorage.

    Thread-safety:
    - each method opens its own SQLite connection (writes arrive from the persistence worker)
    """

    def __init__(self, db_path: str | Path = "local_cache.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("Local cache ready db=%s", self._db_path)

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


def cache_key(project_id: str) -> str:
    return f"{CACHE_KEY_PREFIX}{project_id}"


def encode_entry(completions: list[bool], timestamp_ms: int) -> str:
    return json.dumps({"completions": [bool(c) for c in completions], "timestamp": int(timestamp_ms)})


def decode_entry(raw: str) -> tuple[list[bool], int]:
    """Parse {"completions": [bool...], "timestamp": <epoch ms>}. Raises MalformedCacheEntry."""
    try:
        data: Any = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedCacheEntry(f"not JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedCacheEntry("entry is not an object")

    completions = data.get("completions")
    timestamp = data.get("timestamp")
    if not isinstance(completions, list) or not all(isinstance(c, bool) for c in completions):
        raise MalformedCacheEntry("completions must be a list of booleans")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        raise MalformedCacheEntry("timestamp must be a number")

    return list(completions), int(timestamp)


class LocalProgressCache:
    """
    Today's completions per project, kept on this device only.

    An entry saved on an earlier reference day is stale: it is deleted on read and reported as absent.
    """

    def __init__(self, store: KeyValueCache) -> None:
        self._store = store

    def load(self, project_id: str, *, now: datetime | float | None = None) -> list[bool] | None:
        key = cache_key(project_id)
        try:
            raw = self._store.get(key)
        except (sqlite3.Error, OSError):
            logger.warning("Cache read failed key=%s; treating as absent", key, exc_info=True)
            return None
        if raw is None:
            return None

        try:
            completions, timestamp_ms = decode_entry(raw)
        except MalformedCacheEntry:
            logger.warning("Ignoring malformed cache entry key=%s", key, exc_info=True)
            return None

        if date_key_from_millis(timestamp_ms) != today_key(now):
            logger.debug("Discarding stale cache entry key=%s", key)
            with contextlib.suppress(Exception):
                self._store.delete(key)
            return None

        return completions

    def save(self, project_id: str, completions: list[bool], *, now: datetime | float | None = None) -> None:
        self._store.set(cache_key(project_id), encode_entry(completions, epoch_millis(now)))
