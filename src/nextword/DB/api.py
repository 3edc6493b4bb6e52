# nextword/DB/api.py
from __future__ import annotations
import os
from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Narrow async blob store: one value per key, absent -> None."""
    async def get(self, key: str) -> Optional[bytes]: ...
    async def put(self, key: str, value: bytes) -> None: ...
    # lifecycle
    def close(self) -> None: ...


def make_store(dsn: str) -> KeyValueStore:
    """
    Factory:
      - sqlite:///path -> SQLiteStore (table created on first open)
      - file:///dir    -> FileStore (one file per key)
      - memory://      -> MemoryStore (process lifetime only)
    """
    if dsn.startswith("sqlite:///"):
        path = dsn.removeprefix("sqlite:///")
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        # Lazy imports to avoid circular imports
        from .sqlite_store import SQLiteStore
        return SQLiteStore(path)

    if dsn.startswith("file:///"):
        from .file_store import FileStore
        return FileStore(dsn.removeprefix("file://"))

    if dsn.startswith("memory://"):
        from .memory_store import MemoryStore
        return MemoryStore()

    raise ValueError(f"Unsupported store DSN: {dsn}")
