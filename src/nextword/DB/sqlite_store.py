# nextword/DB/sqlite_store.py
from __future__ import annotations
import asyncio
import sqlite3
from contextlib import closing
from typing import Optional
from .api import KeyValueStore

_SCHEMA = """
CREATE TABLE IF NOT EXISTS blobs (
  key TEXT PRIMARY KEY,
  value BLOB NOT NULL
);
"""


class SQLiteStore(KeyValueStore):
    """
    Blob table in a SQLite file. Each call opens its own connection and runs
    in a worker thread, so the event loop never blocks on disk I/O.
    """
    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        with closing(sqlite3.connect(self.db_path)) as conn:
            conn.executescript(_SCHEMA)

    # ---- Read ----
    async def get(self, key: str) -> Optional[bytes]:
        return await asyncio.to_thread(self._get, key)

    def _get(self, key: str) -> Optional[bytes]:
        with closing(sqlite3.connect(self.db_path)) as conn:
            row = conn.execute("SELECT value FROM blobs WHERE key=?", (key,)).fetchone()
        return bytes(row[0]) if row else None

    # ---- Write ----
    async def put(self, key: str, value: bytes) -> None:
        await asyncio.to_thread(self._put, key, bytes(value))

    def _put(self, key: str, value: bytes) -> None:
        with closing(sqlite3.connect(self.db_path)) as conn:
            conn.execute("INSERT OR REPLACE INTO blobs(key, value) VALUES (?,?)", (key, value))
            conn.commit()

    # ---- lifecycle ----
    def close(self) -> None:
        # connections are per-call
        pass
