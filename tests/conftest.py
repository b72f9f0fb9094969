"""
Shared pytest fixtures for the quiz test suite.

Fakes stand in for the Gemini HTTP transport and the event-loop timer so
the state machine can be stepped deterministically.
"""

import json

import pytest
from unittest.mock import AsyncMock

from quiz_challenge.models import Question
from quiz_challenge.services.gemini_client import HttpReply
from quiz_challenge.services.model_registry import ModelRegistry
from quiz_challenge.state import GameSession


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def candidates_body(text: str) -> dict:
    """A generateContent reply in the current candidates shape."""
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


QUESTION_JSON = '{"promptText": "2+2?", "options": ["3", "4", "5", "6"], "correctIndex": 1}'


class FakeTransport:
    """Records every send() and replays canned HttpReply objects."""

    def __init__(self, replies=None):
        self._replies = list(replies or [])
        self.calls = []

    @property
    def call_count(self):
        return len(self.calls)

    def queue(self, status: int, body):
        if not isinstance(body, str):
            body = json.dumps(body)
        self._replies.append(HttpReply(status=status, body=body))

    async def send(self, method, path, *, credential, json_body=None):
        self.calls.append({"method": method, "path": path, "credential": credential, "json_body": json_body})
        if not self._replies:
            raise AssertionError("no more canned replies")
        return self._replies.pop(0)

    async def close(self):
        pass


class ManualScheduler:
    """Collects (delay, callback) pairs; tests fire them explicitly."""

    def __init__(self):
        self.pending = []

    def __call__(self, delay, callback):
        self.pending.append((delay, callback))

    def fire_all(self):
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


def make_question(correct_index: int = 1) -> Question:
    return Question(prompt_text="2+2?", options=["3", "4", "5", "6"], correct_index=correct_index)


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def mock_provider():
    """AsyncMock provider that always hands out the 2+2 question."""
    provider = AsyncMock()
    provider.request_question = AsyncMock(return_value=make_question())
    return provider


@pytest.fixture
def game(mock_provider, transport, scheduler):
    registry = ModelRegistry(transport, default_model="models/gemini-1.5-flash")
    return GameSession(
        provider=mock_provider,
        registry=registry,
        credential="test-key",
        scheduler=scheduler,
        correct_delay=2.0,
        incorrect_delay=2.5,
    )
