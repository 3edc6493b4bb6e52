"""Flask web UI and JSON API for the next-word engine."""
from __future__ import annotations
from .web import app, main

__all__ = ["app", "main"]
