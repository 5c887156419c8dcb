"""
One-shot command execution over chunked HTTP responses.

The core API streams command output as plain text lines and ends the stream
with a sentinel line carrying the exit code:

    hello
    world
    __KOMODO_EXIT_CODE:0

execute_stream() exposes the raw line sequence; execute() interprets the
sentinel and reports lines and the exit code through callbacks.
"""

import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional, Union

import httpx

from komodo_terminal.modules.auth import CredentialSource, auth_headers
from komodo_terminal.modules.events import dispatch
from komodo_terminal.modules.lines import split_lines

from .errors import (
    BodyDecodeFailure,
    HttpStatusFailure,
    NoResponseBody,
    RequestFailure,
)

logger = logging.getLogger("komodo_terminal.execute")

EXIT_CODE_PREFIX = "__KOMODO_EXIT_CODE"
EARLY_EXIT = "Early exit without code"

LineCallback = Callable[[str], Union[None, Awaitable[None]]]
FinishCallback = Callable[[str], Union[None, Awaitable[None]]]


def parse_exit_code(line: str) -> Optional[str]:
    """
    Extract the exit code from a sentinel line.

    Returns:
        Everything after the first ':' ("" if there is none), or None when
        the line is not a sentinel line
    """
    if not line.startswith(EXIT_CODE_PREFIX):
        return None
    _, _, code = line.partition(":")
    return code


class LineStream:
    """
    Lazy sequence of output lines backed by an open HTTP response.

    Each pull awaits at most one more body chunk. The response is released
    when the stream is exhausted, closed, or its context exits.
    """

    def __init__(self, response: httpx.Response):
        self._response = response
        self._response.encoding = "utf-8"
        self._lines = split_lines(self._chunks())

    @property
    def status_code(self) -> int:
        return self._response.status_code

    async def _chunks(self) -> AsyncIterator[str]:
        try:
            async for chunk in self._response.aiter_text():
                yield chunk
        except httpx.RequestError as e:
            raise RequestFailure(e) from e

    def __aiter__(self) -> "LineStream":
        return self

    async def __anext__(self) -> str:
        try:
            return await self._lines.__anext__()
        except StopAsyncIteration:
            await self._response.aclose()
            raise

    async def aclose(self) -> None:
        """Stop reading and release the underlying connection."""
        await self._lines.aclose()
        await self._response.aclose()

    async def __aenter__(self) -> "LineStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


class ExecutionRequester:
    """Issues execute requests against the core API."""

    def __init__(
        self,
        base_url: str,
        state: CredentialSource,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        verify: bool = True,
    ):
        """
        Initialize requester.

        Args:
            base_url: Core API address, e.g. https://komodo.example.com
            state: Caller state holding credentials, read on every request
            client: Optional shared httpx client (not closed by aclose())
            timeout: Connect/write timeout in seconds; body reads never time out
            verify: TLS verification for the owned client
        """
        self.base_url = base_url.rstrip("/")
        self.state = state
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, read=None), verify=verify
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def execute_stream(self, path: str, request: Dict[str, Any]) -> LineStream:
        """
        POST an execute request and return its output as a line stream.

        Args:
            path: API path, e.g. /terminal/execute/container
            request: JSON-serializable request body

        Returns:
            LineStream over the response body

        Raises:
            RequestFailure: No response at all (status 1)
            HttpStatusFailure: Non-200 with a JSON error body
            BodyDecodeFailure: Non-200 with an unparsable body
            NoResponseBody: 200 without a body
        """
        url = f"{self.base_url}{path}"
        headers = {**auth_headers(self.state), "content-type": "application/json"}

        logger.debug(f"POST {url}")
        try:
            http_request = self._client.build_request("POST", url, json=request, headers=headers)
            response = await self._client.send(http_request, stream=True)
        except httpx.RequestError as e:
            logger.error(f"Execute request to {path} failed: {e!r}")
            raise RequestFailure(e) from e

        if response.status_code == 200:
            if response.headers.get("content-length") == "0":
                await response.aclose()
                raise NoResponseBody(response.status_code)
            return LineStream(response)

        try:
            await response.aread()
            result = response.json()
        except ValueError as e:
            logger.error(f"Execute request to {path} returned {response.status_code} with unreadable body")
            raise BodyDecodeFailure(response.status_code, e) from e
        except httpx.RequestError as e:
            raise BodyDecodeFailure(response.status_code, e) from e
        finally:
            await response.aclose()

        logger.error(f"Execute request to {path} returned {response.status_code}: {result}")
        raise HttpStatusFailure(response.status_code, result)

    async def execute(
        self,
        path: str,
        request: Dict[str, Any],
        on_line: Optional[LineCallback] = None,
        on_finish: Optional[FinishCallback] = None,
    ) -> str:
        """
        Run a command and report its output line by line.

        on_line fires once per output line in order; on_finish fires exactly
        once, with the exit code from the sentinel line or EARLY_EXIT when the
        stream ends without one. Lines after the sentinel are never read.

        Returns:
            The value passed to on_finish
        """
        async with await self.execute_stream(path, request) as lines:
            async for line in lines:
                code = parse_exit_code(line)
                if code is not None:
                    logger.debug(f"Command on {path} finished with exit code {code}")
                    await dispatch(on_finish, code)
                    return code
                await dispatch(on_line, line)

        logger.warning(f"Command on {path} ended without an exit code")
        await dispatch(on_finish, EARLY_EXIT)
        return EARLY_EXIT
