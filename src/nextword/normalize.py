from __future__ import annotations
import re
from typing import List

_WS_RUN = re.compile(r"\s+")


def ends_in_whitespace(text: str) -> bool:
    """True when the user just finished a word (last character is whitespace)."""
    return text[-1:].isspace()


def split_words(text: str) -> List[str]:
    """
    Lowercase and split on runs of whitespace.
    Leading/trailing whitespace never produces empty tokens.
    """
    trimmed = text.strip()
    if not trimmed:
        return []
    return _WS_RUN.split(trimmed.lower())


def last_fragment(text: str) -> str:
    """The (lowercased) token currently being typed, or "" if there is none."""
    words = split_words(text)
    return words[-1] if words else ""


def context_key(*words: str) -> str:
    """Join context words the way table keys are written ("a lot")."""
    return " ".join(words)
