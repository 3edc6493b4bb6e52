from __future__ import annotations
from typing import List, Mapping, Optional

from .models import Model, FrequencyTable
from .normalize import ends_in_whitespace, split_words, last_fragment, context_key
from . import config as CFG


def rank_candidates(table: FrequencyTable, key: str, limit: int = CFG.MAX_LOCAL_SUGGESTIONS) -> List[str]:
    """
    /* ~~~ Top `limit` candidates for one context, by descending frequency.
       sorted() is stable, so equal counts keep the table's key order.
       A missing key is a lookup miss: empty list, not an error. ~~~ */
    """
    candidates: Optional[Mapping[str, int]] = table.get(key)
    if not candidates:
        return []
    ranked = sorted(candidates.items(), key=lambda kv: -kv[1])
    return [word for word, _ in ranked[:limit]]


def complete_next_word(words: List[str], model: Model, limit: int = CFG.MAX_LOCAL_SUGGESTIONS) -> List[str]:
    """Trigram on the last two words, falling back to bigram on the last word."""
    if not words:
        return []
    if len(words) >= 2:
        hits = rank_candidates(model.trigrams, context_key(words[-2], words[-1]), limit)
        if hits:
            return hits
    return rank_candidates(model.bigrams, words[-1], limit)


def complete_fragment(fragment: str, model: Model, limit: int = CFG.MAX_LOCAL_SUGGESTIONS) -> List[str]:
    """
    Vocabulary words extending `fragment`, in vocabulary order.
    The vocabulary carries no frequencies, so there is no ranking here.
    """
    if not fragment:
        return []
    out: List[str] = []
    for word in model.vocabulary:
        if word != fragment and word.startswith(fragment):
            out.append(word)
            if len(out) >= limit:
                break
    return out


def predict(text: str, model: Optional[Model], limit: int = CFG.MAX_LOCAL_SUGGESTIONS) -> List[str]:
    """
    Offline suggestions for the raw input `text`.

    Text ending in whitespace -> next-word mode (trigram, then bigram).
    Otherwise -> completion of the word being typed.
    Returns [] while no model is loaded.
    """
    if model is None:
        return []
    finished_word = ends_in_whitespace(text)
    if not text.strip() and not finished_word:
        return []
    if finished_word:
        return complete_next_word(split_words(text), model, limit)
    return complete_fragment(last_fragment(text), model, limit)
