# src/nextword/models.py
"""
Data models for the prediction engine.

- FrequencyTable: context key -> candidate word -> positive frequency.
- Model: the immutable {bigrams, trigrams} pair plus its derived vocabulary.
- Suggestion: one entry of the list shown to the user, tagged with provenance.

These classes hold no prediction logic; see predict.py and merge.py.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

FrequencyTable = Mapping[str, Mapping[str, int]]


def _freeze(table: Mapping[str, Mapping[str, int]]) -> FrequencyTable:
    # read-only views; key order of the source tables is kept
    return MappingProxyType({k: MappingProxyType(dict(v)) for k, v in table.items()})


@dataclass(frozen=True, slots=True)
class Model:
    """
    The loaded n-gram model.

    Attributes
    ----------
    bigrams : FrequencyTable
        Keyed by a single preceding word.
    trigrams : FrequencyTable
        Keyed by the two preceding words joined by one space ("a lot").
    vocabulary : Tuple[str, ...]
        All bigram keys in table order. Derived once, used only for
        completing the word currently being typed.
    """
    bigrams: FrequencyTable
    trigrams: FrequencyTable
    vocabulary: Tuple[str, ...] = field(default=(), compare=False)

    @classmethod
    def from_tables(cls, bigrams: Mapping[str, Mapping[str, int]],
                    trigrams: Mapping[str, Mapping[str, int]]) -> "Model":
        return cls(
            bigrams=_freeze(bigrams),
            trigrams=_freeze(trigrams),
            vocabulary=tuple(bigrams.keys()),
        )

    def to_payload(self) -> Dict[str, Any]:
        """Serializable {bigramModel, trigramModel} shape (the wire/cache format)."""
        return {
            "bigramModel": {k: dict(v) for k, v in self.bigrams.items()},
            "trigramModel": {k: dict(v) for k, v in self.trigrams.items()},
        }


@dataclass(frozen=True, slots=True)
class Suggestion:
    """A suggested word. `is_remote` is for styling only and is ignored by ==."""
    text: str
    is_remote: bool = field(default=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "is_remote": self.is_remote}
