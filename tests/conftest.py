"""Shared test fixtures for todoapiclient.

Provides a scripted mock server built on :class:`httpx.MockTransport`,
helpers for loading recorded JSON fixtures, and automatic reset of the
global output state. These fixtures are discovered by pytest and are
available to every test module without imports.
"""

from __future__ import annotations

import json
from collections import deque
from pathlib import Path
from typing import Any, Iterator, Optional, Union

import httpx
import pytest

from todoapiclient.client import TodoApiClient
from todoapiclient.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"
BASE_ENDPOINT = "http://todo.test"


def load_fixture(name: str) -> str:
    """Return the text of ``tests/fixtures/<name>`` without the trailing newline."""
    return (FIXTURES_DIR / name).read_text(encoding="utf-8").rstrip("\n")


class MockApiServer:
    """Queue canned responses and record the requests the client sends.

    Responses are served in FIFO order; when the queue is empty an empty
    ``200`` is returned. Queued exceptions are raised from the transport
    instead of producing a response.
    """

    def __init__(self) -> None:
        self._queue: deque[Union[httpx.Response, Exception]] = deque()
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def enqueue(
        self,
        status_code: int = 200,
        fixture: Optional[str] = None,
        body: Optional[Any] = None,
    ) -> None:
        """Queue one response, with a fixture file or JSON-serialisable *body*."""
        if fixture is not None:
            content = load_fixture(fixture).encode("utf-8")
        elif body is not None:
            content = json.dumps(body).encode("utf-8")
        else:
            content = b""
        headers = {"content-type": "application/json"} if content else {}
        self._queue.append(httpx.Response(status_code, content=content, headers=headers))

    def enqueue_error(self, exc: Exception) -> None:
        """Queue a transport-level failure."""
        self._queue.append(exc)

    def take_request(self) -> httpx.Request:
        """Pop the oldest recorded request."""
        assert self.requests, "No request was sent"
        return self.requests.pop(0)

    def assert_request_sent(
        self,
        method: str,
        path: str,
        body_fixture: Optional[str] = None,
    ) -> httpx.Request:
        """Assert the oldest recorded request matches verb, path and body."""
        request = self.take_request()
        assert request.method == method
        assert request.url.path == path
        if body_fixture is not None:
            assert request.content == load_fixture(body_fixture).encode("utf-8")
        return request

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._queue:
            return httpx.Response(200)
        item = self._queue.popleft()
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> Iterator[None]:
    """Reset the global OutputManager after every test.

    The manager caches references to sys.stdout/sys.stderr at creation
    time; CliRunner swaps those streams, so a stale manager would write to
    closed files in the next test.
    """
    yield
    reset_output()


@pytest.fixture
def mock_server() -> MockApiServer:
    return MockApiServer()


@pytest.fixture
def api_client(mock_server: MockApiServer) -> Iterator[TodoApiClient]:
    """A :class:`TodoApiClient` wired to :func:`mock_server`."""
    client = TodoApiClient(BASE_ENDPOINT, transport=mock_server.transport)
    yield client
    client.close()


@pytest.fixture
def base_endpoint() -> str:
    return BASE_ENDPOINT
