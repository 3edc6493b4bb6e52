"""
Next-word prediction engine.

Offline n-gram suggestions (trigram with bigram fallback, plus completion of
the word being typed), a cached model loader, and the merge/debounce logic
that blends in an optional remote predictor.

Main entry points:
    Engine: composition root (load, predict, suggest, orchestrator)
    predict(text, model): pure offline prediction
    merge(local, remote): combine local and remote words into Suggestions

Example Usage:
    import asyncio
    from nextword import Engine

    eng = Engine(store_dsn="sqlite:///cache.sqlite")
    asyncio.run(eng.load())
    print(eng.predict("thank you "))   # ['for', 'very', 'so']
"""

# src/nextword/__init__.py
from .engine import Engine  # re-export
from .predict import predict
from .merge import merge
from .models import Model, Suggestion

__version__ = "1.0.0"
__all__ = ["Engine", "predict", "merge", "Model", "Suggestion"]
