"""
Router Module - Black Box Interface

Purpose: Per-target entry points (terminal, container, deployment, stack)
Interface: TerminalClient.connect_*(), execute_*(), execute_*_stream()
Hidden: Path construction, query encoding, payload wrapping
"""

from .client import TerminalClient
from .targets import ExecutionTarget, TargetRequest, encode_query, to_ws_url

__all__ = [
    "ExecutionTarget",
    "TargetRequest",
    "TerminalClient",
    "encode_query",
    "to_ws_url",
]
