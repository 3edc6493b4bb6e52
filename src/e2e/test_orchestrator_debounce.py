# src/e2e/test_orchestrator_debounce.py

import asyncio

from nextword.errors import RemoteLookupFailure
from nextword.merge import merge
from nextword.models import Model
from nextword.orchestrator import DebouncedOrchestrator
from nextword.predict import predict

QUIET = 0.02
SETTLE = 0.1

MODEL = Model.from_tables(
    bigrams={"you": {"are": 150, "can": 100}, "lot": {"more": 5}, "know": {"that": 1}},
    trigrams={"a lot": {"of": 100, "more": 50}, "thank you": {"for": 150, "very": 80, "so": 60}},
)


def _predict(text: str) -> list[str]:
    return predict(text, MODEL)


class FakeRemote:
    """
    answers: text -> list of words, or an exception to raise.
    gated=True: each call waits until gates[text] is set.
    """
    def __init__(self, answers: dict, gated: bool = False):
        self.answers = answers
        self.gated = gated
        self.calls: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}

    async def predict(self, text: str) -> list[str]:
        self.calls.append(text)
        if self.gated:
            await self.gates.setdefault(text, asyncio.Event()).wait()
        answer = self.answers.get(text, [])
        if isinstance(answer, Exception):
            raise answer
        return list(answer)


def _orch(remote, updates, ready=lambda: True) -> DebouncedOrchestrator:
    return DebouncedOrchestrator(_predict, ready, remote, updates.append, quiet_period=QUIET)


def _texts(update) -> list[str]:
    return [s.text for s in update]


def test_local_suggestions_are_published_immediately():
    updates = []
    orch = _orch(None, updates)
    shown = orch.text_changed("a lot ")
    assert _texts(shown) == ["of", "more"]
    assert updates == [shown]
    assert not any(s.is_remote for s in shown)


def test_generation_increments_on_every_change():
    orch = _orch(None, [])
    for text in ("a", "a ", "a l"):
        orch.text_changed(text)
    assert orch.generation == 3


def test_rapid_changes_issue_one_remote_call():
    remote = FakeRemote({"a lot ": ["deal"]})
    updates = []

    async def scenario():
        orch = _orch(remote, updates)
        for text in ("a", "a ", "a l", "a lo", "a lot", "a lot "):
            orch.text_changed(text)
            await asyncio.sleep(0)
        await asyncio.sleep(SETTLE)
        await orch.drain()

    asyncio.run(scenario())
    assert remote.calls == ["a lot "]
    assert updates[-1] == merge(["of", "more"], ["deal"])
    assert [s.is_remote for s in updates[-1]] == [False, False, True]


def test_no_remote_call_mid_word():
    remote = FakeRemote({})

    async def scenario():
        orch = _orch(remote, [])
        orch.text_changed("thank yo")
        await asyncio.sleep(SETTLE)

    asyncio.run(scenario())
    assert remote.calls == []


def test_no_remote_call_for_blank_text():
    remote = FakeRemote({})

    async def scenario():
        orch = _orch(remote, [])
        orch.text_changed("   ")
        await asyncio.sleep(SETTLE)

    asyncio.run(scenario())
    assert remote.calls == []


def test_no_remote_call_before_model_ready():
    remote = FakeRemote({})

    async def scenario():
        orch = _orch(remote, [], ready=lambda: False)
        orch.text_changed("thank you ")
        await asyncio.sleep(SETTLE)

    asyncio.run(scenario())
    assert remote.calls == []


def test_superseded_result_is_discarded():
    remote = FakeRemote({"a lot ": ["stale"], "thank you ": ["much"]}, gated=True)
    updates = []

    async def scenario():
        orch = _orch(remote, updates)
        orch.text_changed("a lot ")
        await asyncio.sleep(SETTLE)
        assert remote.calls == ["a lot "]

        orch.text_changed("thank you ")
        await asyncio.sleep(SETTLE)
        assert remote.calls == ["a lot ", "thank you "]

        # newer call resolves first, the stale one afterwards
        remote.gates["thank you "].set()
        await asyncio.sleep(0.01)
        remote.gates["a lot "].set()
        await orch.drain()

    asyncio.run(scenario())
    assert all("stale" not in _texts(u) for u in updates)
    assert _texts(updates[-1]) == ["for", "very", "so", "much"]


def test_any_later_edit_supersedes_in_flight_lookup():
    remote = FakeRemote({"thank you ": ["stale"]}, gated=True)
    updates = []

    async def scenario():
        orch = _orch(remote, updates)
        orch.text_changed("thank you ")
        await asyncio.sleep(SETTLE)
        orch.text_changed("thank you v")
        remote.gates["thank you "].set()
        await orch.drain()

    asyncio.run(scenario())
    assert all("stale" not in _texts(u) for u in updates)
    assert remote.calls == ["thank you "]


def test_remote_failure_degrades_to_local_only():
    remote = FakeRemote({"you ": RemoteLookupFailure("503")})
    updates = []

    async def scenario():
        orch = _orch(remote, updates)
        orch.text_changed("you ")
        await asyncio.sleep(SETTLE)
        await orch.drain()

    asyncio.run(scenario())
    assert remote.calls == ["you "]
    assert _texts(updates[-1]) == ["are", "can"]
    assert not any(s.is_remote for s in updates[-1])


def test_close_cancels_pending_lookup():
    remote = FakeRemote({"you ": ["all"]})

    async def scenario():
        orch = _orch(remote, [])
        orch.text_changed("you ")
        assert orch.busy
        orch.close()
        await asyncio.sleep(SETTLE)
        return orch.busy

    assert asyncio.run(scenario()) is False
    assert remote.calls == []


def test_unexpected_remote_error_degrades_to_local_only():
    remote = FakeRemote({"you ": ConnectionError("network down")})
    updates = []

    async def scenario():
        orch = _orch(remote, updates)
        orch.text_changed("you ")
        await asyncio.sleep(SETTLE)
        await orch.drain()

    asyncio.run(scenario())
    assert remote.calls == ["you "]
    assert len(updates) == 2
    assert _texts(updates[-1]) == ["are", "can"]
    assert not any(s.is_remote for s in updates[-1])
