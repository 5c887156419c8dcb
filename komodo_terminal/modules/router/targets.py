"""
Execution targets and their paths.

Path and payload shape are decided here and nowhere else:

    target       duplex path                 execute path
    terminal     /ws/terminal                /terminal/execute
    container    /ws/container/terminal      /terminal/execute/container
    deployment   /ws/deployment/terminal     /terminal/execute/deployment
    stack        /ws/stack/terminal          /terminal/execute/stack
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping
from urllib.parse import urlencode


class ExecutionTarget(str, Enum):
    """Kinds of remote target a command can run against."""

    TERMINAL = "terminal"
    CONTAINER = "container"
    DEPLOYMENT = "deployment"
    STACK = "stack"

    @property
    def is_bare(self) -> bool:
        return self is ExecutionTarget.TERMINAL

    @property
    def ws_path(self) -> str:
        if self.is_bare:
            return "/ws/terminal"
        return f"/ws/{self.value}/terminal"

    @property
    def execute_path(self) -> str:
        if self.is_bare:
            return "/terminal/execute"
        return f"/terminal/execute/{self.value}"


@dataclass
class TargetRequest:
    """
    Target-tagged payload, i.e. {type: <target>, query|body: <payload>}.

    Only the payload goes on the wire; the tag selects the path.
    """

    type: ExecutionTarget
    payload: Dict[str, Any] = field(default_factory=dict)

    def ws_path_with_query(self) -> str:
        return f"{self.type.ws_path}?{encode_query(self.payload)}"


def encode_query(query: Mapping[str, Any]) -> str:
    """
    URL-encode a query mapping.

    Booleans are written as true/false and None values are left out.
    """
    pairs = []
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        pairs.append((key, value))
    return urlencode(pairs)


def to_ws_url(base_url: str) -> str:
    """Rewrite an http(s) base URL to ws(s)."""
    base_url = base_url.rstrip("/")
    if base_url.startswith("http"):
        return "ws" + base_url[len("http"):]
    return base_url
