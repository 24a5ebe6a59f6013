"""Storage layer for the preposition drill.

Provides the record source (CSV rows mapped to item records) and a small
key-value persistence layer for session stats and filter criteria, with
in-memory and SQLite implementations.
"""

from pathlib import Path

from .base import InMemoryKeyValueStore, KeyValueStore
from .connection import (
    DEFAULT_DATA_PATH,
    DEFAULT_DB_PATH,
    connect,
    get_connection,
    init_schema,
)
from .records import coerce_record, load_records, read_csv_records
from .session_store import SessionStore
from .sqlite import SQLiteKeyValueStore

__all__ = [
    # Key-value stores
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "SQLiteKeyValueStore",
    "SessionStore",
    # Record source
    "coerce_record",
    "load_records",
    "read_csv_records",
    # Connection utilities
    "connect",
    "get_connection",
    "init_schema",
    "DEFAULT_DB_PATH",
    "DEFAULT_DATA_PATH",
    # Factory functions
    "get_session_store",
]


def get_session_store(db_path: Path | None = DEFAULT_DB_PATH) -> SessionStore:
    """Get a SessionStore backed by SQLite, or by memory when db_path is None."""
    if db_path is None:
        return SessionStore(InMemoryKeyValueStore())
    init_schema(db_path)
    return SessionStore(SQLiteKeyValueStore(db_path))
