"""Shared fixtures: client configuration and a fake service behind httpx.MockTransport."""

import json
from typing import Any

import httpx
import pytest

from graphjs.client import GraphJsClient
from graphjs.config import ClientConfig
from graphjs.engine.session import SessionStore

PUBLIC_ID = "79982844-6a27-4b3b-b77f-419a79be0e10"
COOKIE_KEY = "799828446a274b3bb77f419a79be0e10"
BASE_URL = "http://api.example.com:1338/"


class FakeService:
    """Answers requests from a per-operation table and records every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._answers: dict[str, tuple[int, bytes] | Exception] = {}

    def reply(self, operation: str, payload: dict[str, Any], *, status: int = 200) -> None:
        """Answer ``operation`` with a JSON payload."""
        self._answers[operation] = (status, json.dumps(payload).encode())

    def reply_raw(self, operation: str, body: bytes, *, status: int = 200) -> None:
        """Answer ``operation`` with an arbitrary body."""
        self._answers[operation] = (status, body)

    def fail(self, operation: str, error: Exception) -> None:
        """Make ``operation`` raise a transport-level error."""
        self._answers[operation] = error

    def last(self, operation: str) -> httpx.Request:
        """Most recent request sent for ``operation``."""
        return [r for r in self.requests if r.url.path.endswith("/" + operation)][-1]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        operation = request.url.path.rsplit("/", 1)[-1]
        answer = self._answers.get(operation)
        if isinstance(answer, Exception):
            raise answer
        if answer is None:
            return httpx.Response(404, content=b"Unknown method")
        status, body = answer
        return httpx.Response(status, content=body)

    def client(self, cfg: ClientConfig, store: SessionStore | None = None) -> GraphJsClient:
        """Client wired to this fake service."""
        return GraphJsClient(cfg, store=store, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def cfg():
    """Client configuration pointing at the fake service host."""
    return ClientConfig(public_id=PUBLIC_ID, base_url=BASE_URL)


@pytest.fixture
def service():
    """Empty fake service; tests register the answers they need."""
    return FakeService()
