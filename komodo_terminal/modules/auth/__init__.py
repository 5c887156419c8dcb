"""
Authentication Module - Black Box Interface

Purpose: Turn caller-held credentials into login frames and HTTP headers
Interface: select_credentials(), build_login_message(), auth_headers()
Hidden: Credential precedence rules, header names

Credentials are read, never stored or renewed, by this module.
"""

from .credentials import (
    ApiKeyCredentials,
    ClientState,
    Credentials,
    JwtCredentials,
    MissingCredentials,
    auth_headers,
    build_login_message,
    select_credentials,
)
from .interfaces import CredentialSource

__all__ = [
    "ApiKeyCredentials",
    "ClientState",
    "CredentialSource",
    "Credentials",
    "JwtCredentials",
    "MissingCredentials",
    "auth_headers",
    "build_login_message",
    "select_credentials",
]
