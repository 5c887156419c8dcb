"""
komodo-terminal - Terminal and exec client for the Komodo core API

Runs shell sessions and one-shot commands against servers, containers,
deployments and stacks managed by Komodo.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- lines: Line reconstruction from chunked text streams
- auth: Credential selection, login frames and auth headers
- api: Wire models (login frames, error body, per-target payloads)
- channel: Authenticated duplex WebSocket channel
- execute: One-shot execution with exit-code sentinel
- router: Per-target entry points
"""

__version__ = "1.0.0"

from komodo_terminal.modules.auth import ClientState
from komodo_terminal.modules.router import ExecutionTarget, TerminalClient

__all__ = ["ClientState", "ExecutionTarget", "TerminalClient", "__version__"]
