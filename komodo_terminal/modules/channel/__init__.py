"""
Channel Module - Black Box Interface

Purpose: Authenticated duplex WebSocket pipe to a remote shell
Interface: TerminalChannel.open(), send(), close(), ChannelListener events
Hidden: Login handshake, state transitions, frame dispatch

No retry, no reconnect: callers open a new channel to try again.
"""

from .channel import (
    LOGGED_IN,
    CallbackListener,
    ChannelConnectError,
    ChannelError,
    ChannelListener,
    ChannelNotOpen,
    ConnectionState,
    Frame,
    TerminalChannel,
)

__all__ = [
    "LOGGED_IN",
    "CallbackListener",
    "ChannelConnectError",
    "ChannelError",
    "ChannelListener",
    "ChannelNotOpen",
    "ConnectionState",
    "Frame",
    "TerminalChannel",
]
