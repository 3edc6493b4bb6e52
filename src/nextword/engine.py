# nextword/engine.py
from __future__ import annotations

import os
import logging
from typing import Callable, List, Optional

from . import config as CFG
from .models import Model, Suggestion
from .errors import ModelUnavailable
from .loader import Fetcher, ModelLoader, make_fetcher
from .merge import merge
from .normalize import ends_in_whitespace
from .orchestrator import DebouncedOrchestrator
from .predict import predict
from .remote import RemotePredictor
from .DB.api import KeyValueStore, make_store
from .DB.storage import ModelStore

log = logging.getLogger(__name__)

STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_FAILED = "failed"


class Engine:
    """
    Composition root that glues together:
      - the key-value store (via make_store DSN) and its ModelStore adapter,
      - the ModelLoader (cache first, network on a cold start),
      - the pure predict()/merge() functions, fed the held Model explicitly,
      - the optional remote predictor.

    Public API (used by CLI/Flask/desktop client):
      * load():               initialize the model; never raises, sets status
      * predict(text):        offline words, instant
      * suggest(text):        offline + remote merged, one shot (no debounce)
      * orchestrator(cb):     debounced keystroke driver bound to this engine
      * shutdown():           close the store

    Storage DSNs (via nextword.DB.api.make_store):
      - "memory://", "sqlite:///path/to/cache.sqlite", "file:///path/to/dir"
    """

    # ------------- lifecycle -------------

    def __init__(
        self,
        *,
        store_dsn: Optional[str] = None,
        store: Optional[KeyValueStore] = None,
        model_source: Optional[str] = None,
        fetcher: Optional[Fetcher] = None,
        remote: Optional[RemotePredictor] = None,
        verbose: bool = False,
    ) -> None:
        if verbose:
            logging.basicConfig(level=logging.INFO)
            os.environ["NEXTWORD_VERBOSE"] = "1"

        dsn = store_dsn or CFG.STORE_DSN
        if store is None:
            log.info("Initializing model store: %s", dsn)
            store = make_store(dsn)
        self._store: Optional[KeyValueStore] = store
        self.loader = ModelLoader(ModelStore(store), fetcher or make_fetcher(model_source))
        self.remote = remote
        self.status = STATUS_LOADING
        self.error: Optional[str] = None

    # /* ~~~ Load the model (cache, else network); degrade instead of raising ~~~ */
    async def load(self) -> bool:
        try:
            await self.loader.initialize()
        except ModelUnavailable as exc:
            self.status = STATUS_FAILED
            self.error = str(exc)
            log.error("Offline suggestions unavailable: %s", exc)
            return False
        self.status = STATUS_READY
        self.error = None
        log.info("Engine load() complete: vocabulary=%d", len(self.loader.vocabulary))
        return True

    @property
    def model(self) -> Optional[Model]:
        return self.loader.model

    def is_ready(self) -> bool:
        return self.loader.is_ready()

    # ------------- query -------------

    def predict(self, text: str) -> List[str]:
        return predict(text, self.loader.model)

    # /* ~~~ Local and remote suggestions merged, for request/response callers ~~~ */
    async def suggest(self, text: str) -> List[Suggestion]:
        local = self.predict(text)
        remote: List[str] = []
        if self.remote is not None and self.is_ready() and text.strip() and ends_in_whitespace(text):
            try:
                remote = await self.remote.predict(text)
            except Exception as exc:
                log.warning("Remote suggestions unavailable: %r", exc)
        return merge(local, remote)

    def orchestrator(self, on_update: Callable[[List[Suggestion]], None], *,
                     quiet_period: float = CFG.DEBOUNCE_SECONDS) -> DebouncedOrchestrator:
        return DebouncedOrchestrator(
            self.predict, self.is_ready, self.remote, on_update, quiet_period=quiet_period
        )

    # ------------- teardown -------------

    def shutdown(self) -> None:
        try:
            if self._store:
                self._store.close()
        finally:
            self._store = None
            log.info("Engine shutdown complete")
