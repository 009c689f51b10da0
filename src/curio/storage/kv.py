"""Key-value persistence backends."""

import sqlite3
from pathlib import Path
from typing import Protocol, runtime_checkable

PROGRESS_KEY = "fact-progress"
PROFILE_KEY = "user-profile"
BOOKMARKS_KEY = "bookmarks"


def storage_key(profile_id: str, name: str) -> str:
    """Build the storage key for a blob belonging to one profile."""
    return f"curio:{profile_id}:{name}"


@runtime_checkable
class KeyValueStore(Protocol):
    """Durable string storage keyed by name."""

    def get(self, key: str) -> str | None:
        """Return the stored blob, or None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a blob, replacing any previous value."""
        ...

    def delete(self, key: str) -> bool:
        """Remove a blob. Returns True if something was removed."""
        ...

    def close(self) -> None:
        """Release any underlying resources."""
        ...


class MemoryKeyValueStore:
    """In-process store. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def close(self) -> None:
        pass


class SQLiteKeyValueStore:
    """Persistent key-value storage using SQLite.

    Every write is committed before returning, so a value that was set
    is durable even if the process exits right after.
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the store with a database path.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def init_db(self) -> None:
        """Create the kv table if it doesn't exist."""
        conn = self._get_connection()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key         TEXT PRIMARY KEY,
                value       TEXT NOT NULL,
                updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """)
        conn.commit()

    def get(self, key: str) -> str | None:
        conn = self._get_connection()
        row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return row["value"]

    def set(self, key: str, value: str) -> None:
        conn = self._get_connection()
        conn.execute(
            """
            INSERT INTO kv (key, value)
            VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = datetime('now')
            """,
            (key, value),
        )
        conn.commit()

    def delete(self, key: str) -> bool:
        conn = self._get_connection()
        cursor = conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        conn.commit()
        return cursor.rowcount > 0

    def keys(self) -> list[str]:
        """List all stored keys."""
        conn = self._get_connection()
        cursor = conn.execute("SELECT key FROM kv ORDER BY key")
        return [row["key"] for row in cursor.fetchall()]

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
