"""SQLite implementation of the key-value store."""

from pathlib import Path

from .base import KeyValueStore
from .connection import DEFAULT_DB_PATH, connect

UPSERT_SQL = """
INSERT INTO kv_store (key, value, updated_at)
VALUES (?, ?, datetime('now'))
ON CONFLICT(key) DO UPDATE SET
    value = excluded.value,
    updated_at = excluded.updated_at
"""


class SQLiteKeyValueStore(KeyValueStore):
    """KeyValueStore over the kv_store table.

    Opens a short-lived connection per call, so instances are cheap and
    several can point at the same file. Expects init_schema() to have run.
    """

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def get(self, key: str) -> str | None:
        with connect(self.db_path) as conn:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with connect(self.db_path) as conn:
            conn.execute(UPSERT_SQL, (key, value))

    def delete(self, key: str) -> None:
        with connect(self.db_path) as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def keys(self) -> list[str]:
        """All stored keys, sorted."""
        with connect(self.db_path) as conn:
            rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [row["key"] for row in rows]
