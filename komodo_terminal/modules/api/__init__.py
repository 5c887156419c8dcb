"""
API Module - Black Box Interface

Purpose: Wire models shared by the duplex channel and the execution requester
Interface: login frames, error body, per-target queries and bodies
Hidden: pydantic validation and serialization details
"""

from .models import (
    ApiKeyParams,
    ApiKeysLogin,
    ConnectContainerExecQuery,
    ConnectDeploymentExecQuery,
    ConnectStackExecQuery,
    ConnectTerminalQuery,
    ErrorBody,
    ExecuteContainerExecBody,
    ExecuteDeploymentExecBody,
    ExecuteStackExecBody,
    ExecuteTerminalBody,
    JwtLogin,
    JwtParams,
    LoginMessage,
    error_result,
    parse_login_message,
    to_payload,
)

__all__ = [
    "ApiKeyParams",
    "ApiKeysLogin",
    "ConnectContainerExecQuery",
    "ConnectDeploymentExecQuery",
    "ConnectStackExecQuery",
    "ConnectTerminalQuery",
    "ErrorBody",
    "ExecuteContainerExecBody",
    "ExecuteDeploymentExecBody",
    "ExecuteStackExecBody",
    "ExecuteTerminalBody",
    "JwtLogin",
    "JwtParams",
    "LoginMessage",
    "error_result",
    "parse_login_message",
    "to_payload",
]
