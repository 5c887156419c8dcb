"""
Terminal client: per-target entry points over the channel and requester.

Every method is a thin parameterization; the target alone decides the path
and the payload shape.
"""

import logging
import ssl
from typing import Any, Callable, Dict, Mapping, Optional, Union

import httpx
from pydantic import BaseModel

from komodo_terminal.config.provider import ClientConfig
from komodo_terminal.modules.api.models import to_payload
from komodo_terminal.modules.auth import ClientState, CredentialSource
from komodo_terminal.modules.channel import (
    CallbackListener,
    ChannelListener,
    Frame,
    TerminalChannel,
)
from komodo_terminal.modules.execute import ExecutionRequester, LineStream
from komodo_terminal.modules.execute.requester import FinishCallback, LineCallback

from .targets import ExecutionTarget, TargetRequest, to_ws_url

logger = logging.getLogger("komodo_terminal.router")

Payload = Union[BaseModel, Mapping[str, Any], None]


class TerminalClient:
    """
    Entry point for terminals and container/deployment/stack exec.

    Example:
        >>> client = TerminalClient("https://komodo.example.com", ClientState(jwt=token))
        >>> await client.execute_container_exec(
        ...     {"server": "srv", "container": "web", "shell": "sh", "command": "ls"},
        ...     on_line=print,
        ... )
        '0'
    """

    def __init__(
        self,
        url: str,
        state: CredentialSource,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        open_timeout: Optional[float] = 10.0,
        verify_ssl: bool = True,
        ws_connect: Optional[Callable[..., Any]] = None,
    ):
        self.url = url.rstrip("/")
        self.state = state
        self.open_timeout = open_timeout
        self.requester = ExecutionRequester(
            self.url, state, client=http_client, timeout=timeout, verify=verify_ssl
        )
        self._ws_connect = ws_connect
        self._ws_kwargs: Dict[str, Any] = {}
        if not verify_ssl and self.url.startswith("https"):
            insecure = ssl.create_default_context()
            insecure.check_hostname = False
            insecure.verify_mode = ssl.CERT_NONE
            self._ws_kwargs["ssl"] = insecure

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> "TerminalClient":
        """Build a client from a ClientConfig."""
        return cls(
            config.address,
            config.to_state(),
            timeout=config.timeout,
            open_timeout=config.open_timeout,
            verify_ssl=config.verify_ssl,
            **kwargs,
        )

    async def aclose(self) -> None:
        await self.requester.aclose()

    async def __aenter__(self) -> "TerminalClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # Duplex channels

    async def _open_channel(
        self,
        request: TargetRequest,
        listener: Optional[ChannelListener],
        callbacks: Dict[str, Any],
    ) -> TerminalChannel:
        if listener is None:
            listener = CallbackListener(**callbacks)
        elif any(callbacks.values()):
            raise ValueError("Pass either a listener or callbacks, not both")

        url = to_ws_url(self.url) + request.ws_path_with_query()
        logger.debug(f"Opening {request.type.value} channel")
        kwargs: Dict[str, Any] = {}
        if self._ws_connect is not None:
            kwargs["connect"] = self._ws_connect
        channel = TerminalChannel(
            url,
            self.state,
            listener,
            open_timeout=self.open_timeout,
            connect_kwargs=dict(self._ws_kwargs),
            **kwargs,
        )
        return await channel.open()

    async def connect_terminal(
        self,
        query: Payload,
        listener: Optional[ChannelListener] = None,
        on_message: Optional[Callable[[Frame], Any]] = None,
        on_login: Optional[Callable[[], Any]] = None,
        on_open: Optional[Callable[[], Any]] = None,
        on_close: Optional[Callable[[], Any]] = None,
        on_handshake_anomaly: Optional[Callable[[Frame], Any]] = None,
    ) -> TerminalChannel:
        """Open a channel to a server terminal (/ws/terminal)."""
        return await self._open_channel(
            TargetRequest(ExecutionTarget.TERMINAL, to_payload(query)),
            listener,
            dict(
                on_message=on_message,
                on_login=on_login,
                on_open=on_open,
                on_close=on_close,
                on_handshake_anomaly=on_handshake_anomaly,
            ),
        )

    async def connect_exec(
        self,
        target: Union[ExecutionTarget, str],
        query: Payload,
        listener: Optional[ChannelListener] = None,
        **callbacks: Any,
    ) -> TerminalChannel:
        """Open an exec channel to a container, deployment or stack."""
        target = ExecutionTarget(target)
        if target.is_bare:
            raise ValueError("Use connect_terminal for plain terminals")
        return await self._open_channel(
            TargetRequest(target, to_payload(query)), listener, callbacks
        )

    async def connect_container_exec(
        self, query: Payload, listener: Optional[ChannelListener] = None, **callbacks: Any
    ) -> TerminalChannel:
        return await self.connect_exec(ExecutionTarget.CONTAINER, query, listener, **callbacks)

    async def connect_deployment_exec(
        self, query: Payload, listener: Optional[ChannelListener] = None, **callbacks: Any
    ) -> TerminalChannel:
        return await self.connect_exec(ExecutionTarget.DEPLOYMENT, query, listener, **callbacks)

    async def connect_stack_exec(
        self, query: Payload, listener: Optional[ChannelListener] = None, **callbacks: Any
    ) -> TerminalChannel:
        return await self.connect_exec(ExecutionTarget.STACK, query, listener, **callbacks)

    # One-shot executions

    async def execute_terminal_stream(self, request: Payload) -> LineStream:
        """Run a command on a server terminal and stream raw output lines."""
        return await self.requester.execute_stream(
            ExecutionTarget.TERMINAL.execute_path, to_payload(request)
        )

    async def execute_terminal(
        self,
        request: Payload,
        on_line: Optional[LineCallback] = None,
        on_finish: Optional[FinishCallback] = None,
    ) -> str:
        """Run a command on a server terminal; returns the exit code."""
        return await self.requester.execute(
            ExecutionTarget.TERMINAL.execute_path, to_payload(request), on_line, on_finish
        )

    async def execute_exec_stream(self, request: TargetRequest) -> LineStream:
        return await self.requester.execute_stream(request.type.execute_path, request.payload)

    async def execute_exec(
        self,
        request: TargetRequest,
        on_line: Optional[LineCallback] = None,
        on_finish: Optional[FinishCallback] = None,
    ) -> str:
        return await self.requester.execute(
            request.type.execute_path, request.payload, on_line, on_finish
        )

    async def execute_container_exec_stream(self, body: Payload) -> LineStream:
        return await self.execute_exec_stream(
            TargetRequest(ExecutionTarget.CONTAINER, to_payload(body))
        )

    async def execute_container_exec(
        self,
        body: Payload,
        on_line: Optional[LineCallback] = None,
        on_finish: Optional[FinishCallback] = None,
    ) -> str:
        return await self.execute_exec(
            TargetRequest(ExecutionTarget.CONTAINER, to_payload(body)), on_line, on_finish
        )

    async def execute_deployment_exec_stream(self, body: Payload) -> LineStream:
        return await self.execute_exec_stream(
            TargetRequest(ExecutionTarget.DEPLOYMENT, to_payload(body))
        )

    async def execute_deployment_exec(
        self,
        body: Payload,
        on_line: Optional[LineCallback] = None,
        on_finish: Optional[FinishCallback] = None,
    ) -> str:
        return await self.execute_exec(
            TargetRequest(ExecutionTarget.DEPLOYMENT, to_payload(body)), on_line, on_finish
        )

    async def execute_stack_exec_stream(self, body: Payload) -> LineStream:
        return await self.execute_exec_stream(
            TargetRequest(ExecutionTarget.STACK, to_payload(body))
        )

    async def execute_stack_exec(
        self,
        body: Payload,
        on_line: Optional[LineCallback] = None,
        on_finish: Optional[FinishCallback] = None,
    ) -> str:
        return await self.execute_exec(
            TargetRequest(ExecutionTarget.STACK, to_payload(body)), on_line, on_finish
        )
