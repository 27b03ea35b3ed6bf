"""
SQLite-backed key-value store for host state blobs.

One table per slot family:
- blobs: slot name → whole JSON document (UTF-8 bytes)

Values are stored as BLOB with the write timestamp, so a host can keep
several independent documents side by side in one database file.
"""

import sqlite3
import time
from pathlib import Path
from typing import Iterable, Optional


DEFAULT_TABLES = ("blobs",)


class KVStore:
    """
    File-backed SQLite key-value store.

    WAL mode, one connection shared across threads.
    """

    def __init__(self, db_path: Path, tables: Iterable[str] = DEFAULT_TABLES):
        """
        Initialize KV store at given path.

        Args:
            db_path: Path to SQLite database file
            tables: Table names to create
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.tables = tuple(tables)

        for table in self.tables:
            if not table.isidentifier():
                raise ValueError(f"Invalid table name: {table!r}")

        self._conn = sqlite3.connect(
            str(self.db_path),
            check_same_thread=False,  # saves run in worker threads
            timeout=10.0,
        )

        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=NORMAL")

        self._init_tables()

    def _init_tables(self) -> None:
        """Create tables if they don't exist."""
        for table in self.tables:
            self._conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {table} (
                    key TEXT PRIMARY KEY,
                    value BLOB NOT NULL,
                    ts INTEGER NOT NULL
                )
            """)

        self._conn.commit()

    def _check_table(self, table: str) -> None:
        if table not in self.tables:
            raise ValueError(f"Unknown table: {table!r}")

    def set(self, table: str, key: str, value: bytes) -> None:
        """
        Set a key-value pair in the specified table.

        Args:
            table: Table name
            key: String key
            value: Binary value
        """
        self._check_table(table)
        self._conn.execute(
            f"INSERT OR REPLACE INTO {table} (key, value, ts) VALUES (?, ?, ?)",
            (key, value, int(time.time()))
        )
        self._conn.commit()

    def get(self, table: str, key: str) -> Optional[bytes]:
        """
        Get value for a key from the specified table.

        Returns:
            Binary value if found, None otherwise
        """
        self._check_table(table)
        cursor = self._conn.execute(
            f"SELECT value FROM {table} WHERE key = ?",
            (key,)
        )
        row = cursor.fetchone()
        return row[0] if row else None

    def close(self) -> None:
        """Close database connection."""
        self._conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
