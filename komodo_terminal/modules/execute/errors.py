"""Errors raised by one-shot executions."""

from typing import Any, Dict, Optional

from komodo_terminal.modules.api.models import error_result

# Status reported when the request never produced an HTTP status.
TRANSPORT_FAILURE_STATUS = 1


class TerminalRequestError(Exception):
    """
    Rejection of an execute request.

    Attributes:
        status: HTTP status, or 1 when no response was received
        result: Error body, {"error": str, "trace": [str]} for errors built here,
            or whatever JSON the server returned for HttpStatusFailure
        error: Underlying exception, if any
    """

    def __init__(
        self,
        status: int,
        result: Dict[str, Any],
        error: Optional[BaseException] = None,
    ):
        self.status = status
        self.result = result
        self.error = error
        message = result.get("error") if isinstance(result, dict) else None
        super().__init__(f"[{status}] {message or result}")


class RequestFailure(TerminalRequestError):
    """The request failed at the transport level, no status was received."""

    def __init__(self, error: BaseException):
        super().__init__(
            TRANSPORT_FAILURE_STATUS,
            error_result("Request failed with error", [repr(error)]),
            error,
        )


class HttpStatusFailure(TerminalRequestError):
    """Non-200 response carrying a parsed error body."""

    def __init__(self, status: int, result: Dict[str, Any]):
        super().__init__(status, result)


class BodyDecodeFailure(TerminalRequestError):
    """Non-200 response whose body could not be parsed."""

    def __init__(self, status: int, error: BaseException):
        super().__init__(
            status,
            error_result("Failed to get response body", [repr(error)]),
            error,
        )


class NoResponseBody(TerminalRequestError):
    """200 response without a body to stream."""

    def __init__(self, status: int):
        super().__init__(status, error_result("No response body"))
