"""
storage/store.py -- SQLite-backed JSON key-value store.

The durable store for everything LocalAuth persists. Values are JSON documents
addressed by a string key, one row per key. Callers (auth/repository.py) own
the key names and the shape of the documents; this module only moves JSON in
and out.

Uses SQLAlchemy Core (not ORM): the store is a single table and the only
query shapes are point reads, upserts and deletes.

Errors: every database or encoding failure is raised as StorageError with the
original exception chained, so callers depend on one exception type and never
import sqlalchemy.

Usage:
    store = KeyValueStore()                    # SQLite default
    store.set("AUTH_SESSION_V1", {"userId": "..."})
    store.get("AUTH_SESSION_V1")               # returns the decoded value or None
    store.remove("AUTH_SESSION_V1")
    store.close()
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.config import get_settings

logger = logging.getLogger("localauth.storage")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_kv_store = Table(
    "kv_store",
    _metadata,
    Column("key", String(255), primary_key=True),
    Column("value", Text, nullable=False),  # JSON document
    Column("updated_at", String(32), nullable=False),
)


class StorageError(Exception):
    """Raised when the underlying store cannot be read or written."""


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode. Set per-connection because SQLite PRAGMAs are not inherited."""
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class KeyValueStore:
    """get/set/remove by string key with JSON serialization.

    db_url defaults to Settings.db_url. File-backed SQLite databases run in
    WAL mode. sqlite:///:memory: gives each thread its own blank database,
    so it is unsuitable behind AuthRepository (which calls from worker threads).
    """

    def __init__(self, db_url: str | None = None) -> None:
        self.db_url = db_url or get_settings().db_url
        connect_args: dict = {}
        if self.db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        try:
            self.engine: Engine = create_engine(self.db_url, connect_args=connect_args)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not open store at {self.db_url}") from exc
        if self.db_url.startswith("sqlite") and ":memory:" not in self.db_url:
            event.listen(self.engine, "connect", _set_wal_mode)
        try:
            _metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            self.engine.dispose()
            raise StorageError(f"Could not open store at {self.db_url}") from exc
        logger.debug("Key-value store ready (%s)", self.db_url)

    def get(self, key: str) -> Any | None:
        """Return the decoded value stored under key, or None if absent.

        A value that is not valid JSON is treated as absent. The row is left
        in place so the next set() overwrites it.
        """
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_kv_store.select().where(_kv_store.c.key == key)).fetchone()
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not read key {key!r}") from exc
        if row is None:
            return None
        try:
            return json.loads(row.value)
        except ValueError:
            logger.warning("Ignoring undecodable value stored under %r", key)
            return None

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any existing entry."""
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Value for key {key!r} is not JSON-serializable") from exc
        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    _kv_store.update().where(_kv_store.c.key == key).values(value=payload, updated_at=_now_iso())
                )
                if result.rowcount == 0:
                    conn.execute(_kv_store.insert().values(key=key, value=payload, updated_at=_now_iso()))
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not write key {key!r}") from exc

    def remove(self, key: str) -> None:
        """Delete key. Removing a key that does not exist is a no-op."""
        try:
            with self.engine.begin() as conn:
                conn.execute(_kv_store.delete().where(_kv_store.c.key == key))
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not remove key {key!r}") from exc

    def clear(self) -> None:
        """Delete every key in the store. Use with caution."""
        try:
            with self.engine.begin() as conn:
                result = conn.execute(_kv_store.delete())
        except SQLAlchemyError as exc:
            raise StorageError("Could not clear store") from exc
        logger.info("Store cleared (%d keys removed)", result.rowcount)

    def close(self) -> None:
        self.engine.dispose()
