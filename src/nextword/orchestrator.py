from __future__ import annotations
import asyncio
import logging
from typing import Callable, List, Optional, Set

from .merge import merge
from .models import Suggestion
from .normalize import ends_in_whitespace
from .remote import RemotePredictor
from . import config as CFG

log = logging.getLogger(__name__)


class DebouncedOrchestrator:
    """
    Decides when the remote predictor runs, given a stream of text changes.

    Every change:
      * publishes the local (offline) suggestions at once,
      * bumps the generation counter,
      * restarts the quiet-period timer.
    When the timer fires, the remote lookup is issued only if the model is
    ready and the text ends in whitespace after a non-empty word. A lookup
    that completes after the generation moved on is dropped.

    Must be driven from a running asyncio loop.
    """

    def __init__(
        self,
        predict: Callable[[str], List[str]],
        is_ready: Callable[[], bool],
        remote: Optional[RemotePredictor],
        on_update: Callable[[List[Suggestion]], None],
        *,
        quiet_period: float = CFG.DEBOUNCE_SECONDS,
    ) -> None:
        self._predict = predict
        self._is_ready = is_ready
        self._remote = remote
        self._on_update = on_update
        self.quiet_period = quiet_period

        self._generation = 0
        self._timer: Optional[asyncio.TimerHandle] = None
        self._in_flight: Set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def busy(self) -> bool:
        """True while a quiet period is running or a remote lookup is in flight."""
        return self._timer is not None or bool(self._in_flight)

    # ------------- events -------------

    def text_changed(self, text: str) -> List[Suggestion]:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        local = merge(self._predict(text), [])
        self._on_update(local)

        if self._remote is not None:
            loop = asyncio.get_running_loop()
            self._timer = loop.call_later(self.quiet_period, self._fire, text, self._generation)
        return local

    def _fire(self, text: str, generation: int) -> None:
        self._timer = None
        if not self._should_query(text):
            return
        task = asyncio.get_running_loop().create_task(self._lookup(text, generation))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    def _should_query(self, text: str) -> bool:
        return self._is_ready() and bool(text.strip()) and ends_in_whitespace(text)

    async def _lookup(self, text: str, generation: int) -> None:
        assert self._remote is not None
        try:
            remote = await self._remote.predict(text)
        except Exception as exc:
            # any remote failure leaves the local suggestions standing
            log.warning("Remote suggestions unavailable: %r", exc)
            remote = []
        if generation != self._generation:
            log.debug("Dropping stale remote result (generation %d, now %d)", generation, self._generation)
            return
        self._on_update(merge(self._predict(text), remote))

    # ------------- lifecycle -------------

    async def drain(self) -> None:
        """Wait for every in-flight remote lookup to finish."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    def close(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        for task in list(self._in_flight):
            task.cancel()
