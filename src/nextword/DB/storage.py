# nextword/DB/storage.py
from __future__ import annotations
import json
import logging
from typing import Optional

from .api import KeyValueStore
from ..errors import ModelValidationError, StorePersistFailure
from ..models import Model
from ..schema import parse_model
from .. import config as CFG

log = logging.getLogger(__name__)


def encode_model(model: Model) -> bytes:
    return json.dumps(model.to_payload(), ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def decode_model(blob: bytes) -> Model:
    try:
        payload = json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise ModelValidationError(f"cached model is not valid JSON: {exc}") from exc
    return parse_model(payload)


class ModelStore:
    """
    Persists the single model record in a KeyValueStore.

      * load(): Model, or None when nothing usable is cached (fetch needed)
      * save(): True on success; failures are logged, never raised
    """

    def __init__(self, store: KeyValueStore, key: str = CFG.MODEL_KEY) -> None:
        self.store = store
        self.key = key

    async def load(self) -> Optional[Model]:
        try:
            blob = await self.store.get(self.key)
        except Exception as exc:
            log.warning("Model cache read failed (%r); will fetch", exc)
            return None
        if blob is None:
            return None
        try:
            return decode_model(blob)
        except ModelValidationError as exc:
            log.warning("Ignoring unusable cached model: %s", exc)
            return None

    async def save(self, model: Model) -> bool:
        try:
            await self.persist(model)
        except StorePersistFailure as exc:
            log.warning("%s; model stays in memory for this session", exc)
            return False
        return True

    async def persist(self, model: Model) -> None:
        """Like save() but raises StorePersistFailure."""
        try:
            await self.store.put(self.key, encode_model(model))
        except Exception as exc:
            raise StorePersistFailure(f"could not persist model under {self.key!r}: {exc!r}") from exc
