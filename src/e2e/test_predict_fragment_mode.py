# src/e2e/test_predict_fragment_mode.py

from nextword.models import Model
from nextword.predict import predict


def _model() -> Model:
    bigrams = {w: {"x": 1} for w in (
        "kno", "know", "knowledge", "known", "knob", "knot", "knight", "knack", "the", "then",
    )}
    return Model.from_tables(bigrams=bigrams, trigrams={})


def test_fragment_excludes_exact_match():
    m = Model.from_tables(bigrams={"know": {"x": 1}, "knowledge": {"x": 1}}, trigrams={})
    assert predict("I want to know", m) == ["knowledge"]


def test_fragment_candidates_start_with_fragment():
    out = predict("I want to kno", _model())
    assert out
    assert all(w.startswith("kno") and w != "kno" for w in out)


def test_fragment_keeps_vocabulary_order_and_cap():
    out = predict("kn", _model())
    assert out == ["kno", "know", "knowledge", "known", "knob"]


def test_fragment_is_lowercased():
    assert predict("THE", _model()) == ["then"]


def test_fragment_no_match():
    assert predict("xyz", _model()) == []


def test_fragment_uses_last_token_only():
    assert predict("the kno", _model())[:1] == ["know"]
