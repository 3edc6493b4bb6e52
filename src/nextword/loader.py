from __future__ import annotations
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Tuple

import aiohttp

from .DB.storage import ModelStore
from .errors import ModelUnavailable
from .models import Model
from .schema import parse_model
from . import config as CFG

log = logging.getLogger(__name__)

# A fetcher returns the decoded JSON payload of the model resource.
Fetcher = Callable[[], Awaitable[Any]]


class HttpModelFetcher:
    """GET the model JSON over HTTP(S)."""
    def __init__(self, url: str, timeout: float = 30.0) -> None:
        self.url = url
        self.timeout = timeout

    async def __call__(self) -> Any:
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(self.url) as resp:
                resp.raise_for_status()
                # content_type=None: static hosts often serve JSON as text/plain
                return await resp.json(content_type=None)

    def __repr__(self) -> str:
        return f"HttpModelFetcher({self.url!r})"


class FileModelFetcher:
    """Read the model JSON from a local file (the bundled sample by default)."""
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def __call__(self) -> Any:
        text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        return json.loads(text)

    def __repr__(self) -> str:
        return f"FileModelFetcher({str(self.path)!r})"


def make_fetcher(source: str | None = None) -> Fetcher:
    """http:// and https:// sources are fetched over the network, anything else is a path."""
    source = source or CFG.MODEL_SOURCE
    if source.startswith(("http://", "https://")):
        return HttpModelFetcher(source)
    return FileModelFetcher(source.removeprefix("file://"))


class ModelLoader:
    """
    Cache-then-network model loading with at-most-once semantics.

    initialize():
      1) model already held     -> return it
      2) store hit              -> hold it
      3) store miss             -> fetch, validate, save (best effort), hold
    Concurrent callers await the same in-flight attempt, so a cold start
    performs exactly one fetch. Failure raises ModelUnavailable; a later
    call starts a fresh attempt.
    """

    def __init__(self, store: ModelStore, fetcher: Fetcher) -> None:
        self.store = store
        self.fetcher = fetcher
        self._model: Optional[Model] = None
        self._pending: Optional[asyncio.Future[Model]] = None

    # ------------- state -------------

    def is_ready(self) -> bool:
        return self._model is not None

    @property
    def model(self) -> Optional[Model]:
        return self._model

    @property
    def vocabulary(self) -> Tuple[str, ...]:
        return self._model.vocabulary if self._model is not None else ()

    # ------------- init -------------

    async def initialize(self) -> Model:
        if self._model is not None:
            return self._model
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._load())
            self._pending.add_done_callback(self._settle)
        # shield: one caller being cancelled must not abort the shared attempt
        return await asyncio.shield(self._pending)

    def _settle(self, attempt: asyncio.Future) -> None:
        # the slot frees itself even when every caller was cancelled
        if self._pending is attempt:
            self._pending = None

    async def _load(self) -> Model:
        model = await self.store.load()
        if model is not None:
            log.info("Model loaded from cache (%d bigram contexts, %d trigram contexts)",
                     len(model.bigrams), len(model.trigrams))
        else:
            log.info("Model not found in cache, fetching via %r", self.fetcher)
            model = await self._fetch()
            if await self.store.save(model):
                log.info("Model fetched and cached")
        self._model = model
        return model

    async def _fetch(self) -> Model:
        try:
            payload = await self.fetcher()
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as exc:
            log.error("Failed to fetch model: %r", exc)
            raise ModelUnavailable(f"model fetch failed: {exc!r}") from exc
        try:
            return parse_model(payload)
        except ModelUnavailable as exc:
            log.error("Fetched model is malformed: %s", exc)
            raise
