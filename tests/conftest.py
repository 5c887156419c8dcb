"""
Shared pytest fixtures for komodo-terminal tests.

This module provides common fixtures including:
- FakeWebSocket / FakeConnector: scripted WebSocket connections for channels
- HTTP helpers: httpx clients backed by MockTransport handlers
- Chunked body helpers for streaming responses
"""

import asyncio
import os
import sys
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest
from websockets.exceptions import ConnectionClosedOK

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from komodo_terminal.modules.auth import ClientState

BASE_URL = "http://komodo.test"


# =============================================================================
# WebSocket Mocking Infrastructure
# =============================================================================

_END = object()


class FakeWebSocket:
    """
    Scripted stand-in for a websockets ClientConnection.

    Inbound frames are queued up front or pushed later; iteration ends when
    the script runs out (clean close) or raises a queued exception
    (abnormal close).

    Usage:
        ws = FakeWebSocket(["LOGGED_IN", b"\\x1b[0m$ "])
        channel = TerminalChannel(url, state, listener, connect=FakeConnector(ws))
    """

    def __init__(
        self,
        frames: Tuple[Union[str, bytes], ...] = (),
        error: Optional[BaseException] = None,
        auto_close: bool = True,
    ):
        self.sent: List[Union[str, bytes]] = []
        self.closed = False
        self._inbox: asyncio.Queue = asyncio.Queue()
        for frame in frames:
            self._inbox.put_nowait(frame)
        if error is not None:
            self._inbox.put_nowait(error)
        elif auto_close:
            self._inbox.put_nowait(_END)

    def push(self, frame: Union[str, bytes]) -> None:
        self._inbox.put_nowait(frame)

    async def send(self, frame: Union[str, bytes]) -> None:
        if self.closed:
            raise ConnectionClosedOK(None, None)
        self.sent.append(frame)

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._inbox.put_nowait(_END)

    def __aiter__(self) -> "FakeWebSocket":
        return self

    async def __anext__(self) -> Union[str, bytes]:
        item = await self._inbox.get()
        if item is _END:
            self.closed = True
            raise StopAsyncIteration
        if isinstance(item, BaseException):
            self.closed = True
            raise item
        return item


class FakeConnector:
    """Connect factory returning a FakeWebSocket and recording calls."""

    def __init__(self, ws: Optional[FakeWebSocket] = None, error: Optional[BaseException] = None):
        self.ws = ws
        self.error = error
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    async def __call__(self, url: str, **kwargs: Any) -> FakeWebSocket:
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.ws

    @property
    def urls(self) -> List[str]:
        return [url for url, _ in self.calls]


class EventRecorder:
    """Records channel/execution callbacks in call order."""

    def __init__(self):
        self.events: List[Tuple[str, Any]] = []

    def callback(self, name: str) -> Callable[..., None]:
        def record(*args: Any) -> None:
            self.events.append((name, args[0] if args else None))

        record.__name__ = name
        return record

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def values(self, name: str) -> List[Any]:
        return [value for event, value in self.events if event == name]


@pytest.fixture
def recorder():
    return EventRecorder()


# =============================================================================
# HTTP Mocking Infrastructure
# =============================================================================


def make_http_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """httpx client whose requests are answered by handler."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def chunked_body(*chunks: Union[str, bytes], pulled: Optional[List[bytes]] = None):
    """
    Async byte stream delivering chunks one at a time.

    Each chunk is appended to pulled (if given) when it is handed out, so
    tests can check how far the body was read.
    """

    async def body():
        for chunk in chunks:
            data = chunk.encode("utf-8") if isinstance(chunk, str) else chunk
            if pulled is not None:
                pulled.append(data)
            yield data

    return body()


class RecordingHandler:
    """MockTransport handler recording requests and replying with a fixed response."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.respond = respond
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def jwt_state():
    return ClientState(jwt="jwt-token-123")


@pytest.fixture
def api_key_state():
    return ClientState(key="key-abc", secret="secret-xyz")


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Tests running a real local WebSocket server"
    )
