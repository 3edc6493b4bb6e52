from __future__ import annotations
import os
from pathlib import Path

# Result caps
MAX_LOCAL_SUGGESTIONS: int = 5
MAX_SUGGESTIONS: int = 7

# Quiet period before a remote lookup fires (seconds)
DEBOUNCE_SECONDS: float = 0.5

# Persisted record: one blob under a fixed key
MODEL_KEY: str = "prediction-model"

# /* ~~~ where the model comes from on a cold cache: http(s) URL or JSON path ~~~ */
BUNDLED_MODEL: Path = Path(__file__).resolve().parent / "data" / "model.json"
MODEL_SOURCE: str = os.environ.get("NEXTWORD_MODEL_URL", str(BUNDLED_MODEL))

# Key-value store DSN: "memory://", "sqlite:///path", "file:///dir"
STORE_DSN: str = os.environ.get("NEXTWORD_STORE", "memory://")

# Remote predictor (Gemini REST)
GEMINI_ENDPOINT: str = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_MODEL: str = os.environ.get("NEXTWORD_GEMINI_MODEL", "gemini-2.5-flash")
API_KEY_VARS = ("NEXTWORD_GEMINI_API_KEY", "GEMINI_API_KEY", "API_KEY")
REMOTE_TIMEOUT: float = 10.0
REMOTE_TEMPERATURE: float = 0.3
