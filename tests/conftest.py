import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from contextlib import asynccontextmanager
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from studio.config import Settings
from studio.main import create_app
from studio.storage import MemoryStorage


class ScriptedProvider:
    """Stands in for the Anthropic stream: yields fixed tokens and records what was pulled."""

    def __init__(self, tokens, fail_at=None):
        self.tokens = list(tokens)
        self.fail_at = fail_at
        self.calls = []
        self.pulls = 0
        self.closed = False

    def stream(self, *, system, message):
        self.calls.append({"system": system, "message": message})
        return self._open()

    @asynccontextmanager
    async def _open(self):
        try:
            yield SimpleNamespace(text_stream=self._texts())
        finally:
            self.closed = True

    async def _texts(self):
        for index, token in enumerate(self.tokens):
            if index == self.fail_at:
                raise RuntimeError("upstream overloaded")
            self.pulls += 1
            yield token


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def provider():
    return ScriptedProvider(["Hel", "lo", " world"])


@pytest.fixture
def client(storage, provider):
    app = create_app(Settings(), storage=storage, provider=provider)
    return TestClient(app)
