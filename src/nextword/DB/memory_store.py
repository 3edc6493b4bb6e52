# nextword/DB/memory_store.py
from __future__ import annotations
from typing import Dict, Optional
from .api import KeyValueStore


class MemoryStore(KeyValueStore):
    """Dict-backed store (useful for tests or ephemeral runs)."""
    def __init__(self) -> None:
        self._rows: Dict[str, bytes] = {}

    async def get(self, key: str) -> Optional[bytes]:
        return self._rows.get(key)

    async def put(self, key: str, value: bytes) -> None:
        self._rows[key] = bytes(value)

    def close(self) -> None:
        self._rows.clear()
