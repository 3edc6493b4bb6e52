"""Remote (LLM-backed) next-word predictor.

The remote side is optional. It takes the raw text typed so far and returns
a short ranked list of lowercase single words. Every failure is raised as
RemoteLookupFailure; callers turn that into "no remote suggestions".
"""
from __future__ import annotations
import asyncio
import json
import logging
import os
from typing import Any, Dict, List, Optional, Protocol

import aiohttp

from .errors import RemoteLookupFailure
from . import config as CFG

log = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are an expert next-word prediction engine. Your task is to predict the next word a user might type.\n"
    "- Analyze the provided text context.\n"
    "- Provide a list of 3 to 5 common and contextually relevant next words.\n"
    "- The words must be single words and in lowercase.\n"
    "- Return ONLY the JSON object with the suggestions. Do not add any other text or formatting."
)

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "suggestions": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "A list of 3 to 5 likely next words, in lowercase.",
        },
    },
    "required": ["suggestions"],
}


class RemotePredictor(Protocol):
    async def predict(self, text: str) -> List[str]: ...


def clean_words(items: Any) -> List[str]:
    """Keep non-empty string items, stripped, in the order given."""
    if not isinstance(items, list):
        return []
    out: List[str] = []
    for item in items:
        if isinstance(item, str) and item.strip():
            out.append(item.strip())
    return out


def parse_response(body: Any) -> List[str]:
    """
    Pull the suggestion list out of a generateContent response body:
    candidates[0].content.parts[0].text holds the JSON document.
    """
    try:
        text = body["candidates"][0]["content"]["parts"][0]["text"].strip()
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise RemoteLookupFailure(f"unexpected response shape: {exc!r}") from exc
    if not text:
        return []
    try:
        result = json.loads(text)
    except ValueError as exc:
        raise RemoteLookupFailure(f"response text is not JSON: {exc}") from exc
    if isinstance(result, dict):
        return clean_words(result.get("suggestions"))
    return []


class GeminiPredictor:
    """Next-word suggestions from the Gemini generateContent REST endpoint."""

    def __init__(self, api_key: str, *, model: str = CFG.GEMINI_MODEL,
                 endpoint: str = CFG.GEMINI_ENDPOINT, timeout: float = CFG.REMOTE_TIMEOUT,
                 temperature: float = CFG.REMOTE_TEMPERATURE) -> None:
        self.api_key = api_key
        self.model = model
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.temperature = temperature

    @property
    def url(self) -> str:
        return f"{self.endpoint}/models/{self.model}:generateContent"

    def build_request(self, text: str) -> Dict[str, Any]:
        return {
            "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
            "contents": [{
                "role": "user",
                "parts": [{"text": f'Given the text "{text.strip()}", what are the most likely next words?'}],
            }],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
                "temperature": self.temperature,
            },
        }

    async def predict(self, text: str) -> List[str]:
        if not text or not text.strip():
            return []
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    self.url,
                    params={"key": self.api_key},
                    json=self.build_request(text),
                ) as resp:
                    resp.raise_for_status()
                    body = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise RemoteLookupFailure(f"remote lookup failed: {exc!r}") from exc
        return parse_response(body)

    def __repr__(self) -> str:
        return f"GeminiPredictor(model={self.model!r})"


def find_api_key() -> Optional[str]:
    for var in CFG.API_KEY_VARS:
        value = os.environ.get(var)
        if value:
            return value
    return None


def make_remote(api_key: Optional[str] = None) -> Optional[RemotePredictor]:
    """A Gemini predictor when a key is configured, otherwise None (offline only)."""
    key = api_key or find_api_key()
    if not key:
        log.info("No Gemini API key configured; remote suggestions disabled")
        return None
    return GeminiPredictor(key)
