# src/e2e/test_remote_gemini.py

import asyncio
import json

import pytest
from aiohttp import web
from aiohttp import test_utils

from nextword.errors import RemoteLookupFailure
from nextword.remote import GeminiPredictor, clean_words, make_remote, parse_response


def _body(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_parse_response_extracts_suggestions():
    body = _body(json.dumps({"suggestions": ["for", " very ", "", 3, "so"]}))
    assert parse_response(body) == ["for", "very", "so"]


def test_parse_response_empty_text():
    assert parse_response(_body("  ")) == []


@pytest.mark.parametrize("body", [{}, {"candidates": []}, {"candidates": [{"content": {}}]}, None])
def test_parse_response_bad_shape(body):
    with pytest.raises(RemoteLookupFailure):
        parse_response(body)


def test_parse_response_bad_json():
    with pytest.raises(RemoteLookupFailure):
        parse_response(_body("suggestions: for, very"))


def test_clean_words_requires_list():
    assert clean_words("for") == []
    assert clean_words(None) == []


def test_request_carries_schema_and_trimmed_text():
    req = GeminiPredictor("k").build_request("  thank you  ")
    assert '"thank you"' in req["contents"][0]["parts"][0]["text"]
    cfg = req["generationConfig"]
    assert cfg["responseMimeType"] == "application/json"
    assert cfg["responseSchema"]["required"] == ["suggestions"]


def test_blank_text_makes_no_call():
    # unroutable endpoint: any request would fail
    p = GeminiPredictor("k", endpoint="http://127.0.0.1:9")
    assert asyncio.run(p.predict("   ")) == []


def test_make_remote_without_key(monkeypatch):
    for var in ("NEXTWORD_GEMINI_API_KEY", "GEMINI_API_KEY", "API_KEY"):
        monkeypatch.delenv(var, raising=False)
    assert make_remote() is None
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    assert isinstance(make_remote(), GeminiPredictor)


@pytest.mark.e2e
def test_predict_against_local_server():
    seen = {}

    async def generate(request):
        seen["key"] = request.query.get("key")
        seen["path"] = request.path
        payload = await request.json()
        seen["prompt"] = payload["contents"][0]["parts"][0]["text"]
        return web.json_response(_body(json.dumps({"suggestions": ["for", "so"]})))

    async def broken(request):
        return web.Response(status=500)

    async def scenario():
        app = web.Application()
        app.router.add_post("/v1beta/models/test-model:generateContent", generate)
        app.router.add_post("/down/models/test-model:generateContent", broken)
        async with test_utils.TestServer(app) as server:
            ok = GeminiPredictor("abc", model="test-model", endpoint=str(server.make_url("/v1beta")))
            words = await ok.predict("thank you ")
            down = GeminiPredictor("abc", model="test-model", endpoint=str(server.make_url("/down")))
            with pytest.raises(RemoteLookupFailure):
                await down.predict("thank you ")
            return words

    assert asyncio.run(scenario()) == ["for", "so"]
    assert seen["key"] == "abc"
    assert seen["path"].endswith(":generateContent")
    assert "thank you" in seen["prompt"]
