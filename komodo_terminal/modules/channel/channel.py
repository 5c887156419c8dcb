"""
Authenticated duplex terminal channel.

A channel opens a WebSocket to the core API, sends a login frame built from
the caller's current credentials, and waits for the server's literal
"LOGGED_IN" acknowledgment. From then on it is a raw pipe: inbound frames go
to the listener verbatim and the caller sends whatever the remote shell
expects.

Lifecycle:
    CONNECTING -> AWAITING_LOGIN -> AUTHENTICATED -> CLOSED
    any of the above -> ERRORED (transport failure, absorbing)
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedError, WebSocketException

from komodo_terminal.modules.auth import CredentialSource, build_login_message
from komodo_terminal.modules.events import dispatch

logger = logging.getLogger("komodo_terminal.channel")

LOGGED_IN = "LOGGED_IN"

Frame = Union[str, bytes]


class ConnectionState(str, Enum):
    """State of a terminal channel."""

    CONNECTING = "connecting"
    AWAITING_LOGIN = "awaiting_login"
    AUTHENTICATED = "authenticated"
    CLOSED = "closed"
    ERRORED = "errored"


class ChannelError(Exception):
    """Base error for terminal channels."""


class ChannelConnectError(ChannelError):
    """The socket could not be opened or the login frame could not be sent."""


class ChannelNotOpen(ChannelError):
    """A frame was sent on a channel that is not open."""


class ChannelListener:
    """
    Observer for channel events.

    Subclass and override the events you care about. Methods may be plain or
    async; each is awaited before the next inbound frame is read.
    """

    def on_open(self) -> Any:
        """Socket is open and the login frame has been sent."""

    def on_login(self) -> Any:
        """Server acknowledged the login. Fires at most once."""

    def on_message(self, frame: Frame) -> Any:
        """Inbound frame, text or binary, delivered verbatim."""

    def on_close(self) -> Any:
        """Socket closed. Fires exactly once per opened channel."""

    def on_handshake_anomaly(self, frame: Frame) -> Any:
        """A frame other than LOGGED_IN arrived before login."""


class CallbackListener(ChannelListener):
    """Listener built from plain keyword callbacks."""

    def __init__(
        self,
        on_message: Optional[Callable[[Frame], Any]] = None,
        on_login: Optional[Callable[[], Any]] = None,
        on_open: Optional[Callable[[], Any]] = None,
        on_close: Optional[Callable[[], Any]] = None,
        on_handshake_anomaly: Optional[Callable[[Frame], Any]] = None,
    ):
        self._on_message = on_message
        self._on_login = on_login
        self._on_open = on_open
        self._on_close = on_close
        self._on_handshake_anomaly = on_handshake_anomaly

    def on_open(self) -> Any:
        return self._on_open() if self._on_open else None

    def on_login(self) -> Any:
        return self._on_login() if self._on_login else None

    def on_message(self, frame: Frame) -> Any:
        return self._on_message(frame) if self._on_message else None

    def on_close(self) -> Any:
        return self._on_close() if self._on_close else None

    def on_handshake_anomaly(self, frame: Frame) -> Any:
        if self._on_handshake_anomaly:
            return self._on_handshake_anomaly(frame)
        return None


class TerminalChannel:
    """One WebSocket terminal session, owned by the caller that opened it."""

    def __init__(
        self,
        url: str,
        credentials: CredentialSource,
        listener: Optional[ChannelListener] = None,
        open_timeout: Optional[float] = 10.0,
        connect: Callable[..., Any] = ws_connect,
        connect_kwargs: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize channel (no I/O until open()).

        Args:
            url: Full ws:// or wss:// URL including the query string
            credentials: Caller state, read once when open() is called
            listener: Event observer; events are dropped if omitted
            open_timeout: Seconds allowed for the opening handshake
            connect: WebSocket connect factory, replaceable for tests
            connect_kwargs: Extra keyword arguments for the connect factory
        """
        self.url = url
        self.credentials = credentials
        self.listener = listener or ChannelListener()
        self.open_timeout = open_timeout
        self._connect = connect
        self._connect_kwargs = connect_kwargs or {}
        self._ws = None
        self._reader: Optional[asyncio.Task] = None
        self._close_notified = False
        self.state = ConnectionState.CONNECTING

    def _transition(self, new_state: ConnectionState) -> None:
        if self.state is ConnectionState.ERRORED:
            return
        logger.debug(f"Terminal channel {self.url}: {self.state.value} -> {new_state.value}")
        self.state = new_state

    async def _deliver(self, callback: Callable[..., Any], *args: Any) -> None:
        try:
            await dispatch(callback, *args)
        except Exception:
            logger.exception(f"Terminal channel listener failed in {callback.__name__}")

    async def open(self) -> "TerminalChannel":
        """
        Open the socket, send the login frame and start reading.

        Raises:
            MissingCredentials: No JWT or API key pair in the caller state
            ChannelConnectError: Socket could not be opened
            ChannelError: Channel was already opened or failed to connect
        """
        if self._ws is not None or self.state is not ConnectionState.CONNECTING:
            raise ChannelError(
                f"Terminal channel is {self.state.value}; create a new channel to reconnect"
            )

        login = build_login_message(self.credentials)

        logger.info(f"Connecting terminal channel: {self.url}")
        try:
            self._ws = await self._connect(
                self.url, open_timeout=self.open_timeout, **self._connect_kwargs
            )
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            self._transition(ConnectionState.ERRORED)
            logger.error(f"Failed to open terminal channel {self.url}: {e!r}")
            raise ChannelConnectError(f"Failed to open terminal channel: {e}") from e

        self._transition(ConnectionState.AWAITING_LOGIN)
        try:
            await self._ws.send(login.model_dump_json())
        except ConnectionClosed as e:
            self._transition(ConnectionState.ERRORED)
            await self._notify_closed()
            raise ChannelConnectError(f"Socket closed before login was sent: {e}") from e

        await self._deliver(self.listener.on_open)
        self._reader = asyncio.create_task(self._read_loop())
        return self

    async def _read_loop(self) -> None:
        try:
            async for frame in self._ws:
                await self._handle_frame(frame)
        except ConnectionClosedError as e:
            logger.warning(f"Terminal channel {self.url} closed abnormally: {e}")
            self._transition(ConnectionState.ERRORED)
        finally:
            await self._notify_closed()

    async def _handle_frame(self, frame: Frame) -> None:
        if self.state is ConnectionState.AUTHENTICATED:
            await self._deliver(self.listener.on_message, frame)
            return

        if isinstance(frame, str) and frame == LOGGED_IN:
            self._transition(ConnectionState.AUTHENTICATED)
            logger.info(f"Terminal channel logged in: {self.url}")
            await self._deliver(self.listener.on_login)
            return

        # Not an error: forwarded as payload, channel keeps waiting for LOGGED_IN
        logger.warning(f"Terminal channel {self.url} received a frame before LOGGED_IN")
        await self._deliver(self.listener.on_handshake_anomaly, frame)
        await self._deliver(self.listener.on_message, frame)

    async def _notify_closed(self) -> None:
        if self._close_notified:
            return
        self._close_notified = True
        self._transition(ConnectionState.CLOSED)
        logger.info(f"Terminal channel closed: {self.url}")
        await self._deliver(self.listener.on_close)

    async def send(self, frame: Frame) -> None:
        """Send a raw frame (str as text, bytes as binary)."""
        if self._ws is None or self.state in (ConnectionState.CLOSED, ConnectionState.ERRORED):
            raise ChannelNotOpen(f"Terminal channel is {self.state.value}")
        await self._ws.send(frame)

    async def close(self) -> None:
        """Close the socket; the only way to cancel a channel."""
        if self._ws is not None:
            await self._ws.close()
        await self.wait_closed()

    async def wait_closed(self) -> None:
        """Wait until the reader has delivered on_close."""
        if self._reader is not None and self._reader is not asyncio.current_task():
            await self._reader

    async def __aenter__(self) -> "TerminalChannel":
        if self._ws is None:
            await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
