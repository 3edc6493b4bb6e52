from __future__ import annotations
import math
from numbers import Real
from typing import Any, Dict

from .errors import ModelValidationError
from .models import Model

BIGRAM_FIELD = "bigramModel"
TRIGRAM_FIELD = "trigramModel"


def _check_table(name: str, table: Any) -> Dict[str, Dict[str, int]]:
    if not isinstance(table, dict):
        raise ModelValidationError(f"{name}: expected an object, got {type(table).__name__}")
    for ctx, candidates in table.items():
        if not isinstance(candidates, dict):
            raise ModelValidationError(f"{name}[{ctx!r}]: expected an object of frequencies")
        for word, freq in candidates.items():
            # bool is an int subclass; reject it explicitly
            if isinstance(freq, bool) or not isinstance(freq, Real):
                raise ModelValidationError(f"{name}[{ctx!r}][{word!r}]: frequency is not a number")
            if not math.isfinite(freq) or freq <= 0:
                raise ModelValidationError(f"{name}[{ctx!r}][{word!r}]: frequency must be finite and positive")
    return table


def parse_model(payload: Any) -> Model:
    """
    Validate a decoded {bigramModel, trigramModel} payload and build a Model.
    Raises ModelValidationError on any shape problem.
    """
    if not isinstance(payload, dict):
        raise ModelValidationError("model payload must be a JSON object")
    missing = [f for f in (BIGRAM_FIELD, TRIGRAM_FIELD) if f not in payload]
    if missing:
        raise ModelValidationError(f"model payload is missing {', '.join(missing)}")
    bigrams = _check_table(BIGRAM_FIELD, payload[BIGRAM_FIELD])
    trigrams = _check_table(TRIGRAM_FIELD, payload[TRIGRAM_FIELD])
    return Model.from_tables(bigrams, trigrams)
