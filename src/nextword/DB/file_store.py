# nextword/DB/file_store.py
from __future__ import annotations
import asyncio
import os
import re
from typing import Optional
from .api import KeyValueStore

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


class FileStore(KeyValueStore):
    """One file per key under `root`; writes go to a .tmp file and are swapped in."""
    def __init__(self, root: str) -> None:
        self.root = os.path.abspath(root)
        os.makedirs(self.root, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.root, _UNSAFE.sub("_", key) + ".blob")

    async def get(self, key: str) -> Optional[bytes]:
        return await asyncio.to_thread(self._read, self._path(key))

    async def put(self, key: str, value: bytes) -> None:
        await asyncio.to_thread(self._write, self._path(key), bytes(value))

    @staticmethod
    def _read(path: str) -> Optional[bytes]:
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            return None

    @staticmethod
    def _write(path: str, value: bytes) -> None:
        tmp = f"{path}.tmp"
        with open(tmp, "wb") as f:
            f.write(value)
        os.replace(tmp, path)

    def close(self) -> None:
        pass
