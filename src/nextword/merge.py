from __future__ import annotations
from typing import Iterable, List

from .models import Suggestion
from . import config as CFG


def merge(local: Iterable[str], remote: Iterable[str], limit: int = CFG.MAX_SUGGESTIONS) -> List[Suggestion]:
    """
    Local words first, in engine order, then remote words that are not
    already present (exact, case-sensitive match). Capped at `limit`.
    A remote word never displaces or reorders a local one.
    """
    out = [Suggestion(text, is_remote=False) for text in local]
    seen = {s.text for s in out}
    for text in remote:
        if text in seen:
            continue
        seen.add(text)
        out.append(Suggestion(text, is_remote=True))
    return out[:limit]
