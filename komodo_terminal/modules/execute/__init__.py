"""
Execute Module - Black Box Interface

Purpose: Run one-shot commands and stream their output as lines
Interface: ExecutionRequester.execute_stream(), ExecutionRequester.execute()
Hidden: HTTP transport, body decoding, exit-code sentinel parsing

Errors surface as TerminalRequestError subclasses; a missing exit code is
reported through on_finish as EARLY_EXIT, never raised.
"""

from .errors import (
    BodyDecodeFailure,
    HttpStatusFailure,
    NoResponseBody,
    RequestFailure,
    TerminalRequestError,
    TRANSPORT_FAILURE_STATUS,
)
from .requester import (
    EARLY_EXIT,
    EXIT_CODE_PREFIX,
    ExecutionRequester,
    LineStream,
    parse_exit_code,
)

__all__ = [
    "BodyDecodeFailure",
    "EARLY_EXIT",
    "EXIT_CODE_PREFIX",
    "ExecutionRequester",
    "HttpStatusFailure",
    "LineStream",
    "NoResponseBody",
    "RequestFailure",
    "TRANSPORT_FAILURE_STATUS",
    "TerminalRequestError",
    "parse_exit_code",
]
