"""
Credential selection for the Komodo terminal client.

The client never stores or renews credentials. It reads whatever the caller
holds in its ClientState at the moment a channel is opened or a request is
sent, and turns it into either a login frame (duplex channels) or HTTP
headers (one-shot executions).
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

from komodo_terminal.modules.api.models import (
    ApiKeyParams,
    ApiKeysLogin,
    JwtLogin,
    JwtParams,
)

from .interfaces import CredentialSource

logger = logging.getLogger("komodo_terminal.auth")


class MissingCredentials(Exception):
    """
    Raised when a login frame is needed but the state holds no credentials.

    Stricter than choosing the login variant by JWT presence alone: without
    a JWT, a key or secret missing from the pair is rejected here instead of
    being sent as an incomplete ApiKeys frame.
    """


@dataclass
class ClientState:
    """
    Caller-owned session state.

    The caller may swap credentials at any time (e.g. after renewing a JWT);
    the next connect/execute call picks them up.
    """

    jwt: Optional[str] = None
    key: Optional[str] = None
    secret: Optional[str] = None


@dataclass(frozen=True)
class JwtCredentials:
    token: str

    def login_message(self) -> JwtLogin:
        return JwtLogin(params=JwtParams(jwt=self.token))

    def headers(self) -> Dict[str, str]:
        return {"authorization": self.token}


@dataclass(frozen=True)
class ApiKeyCredentials:
    key: str
    secret: str

    def login_message(self) -> ApiKeysLogin:
        return ApiKeysLogin(params=ApiKeyParams(key=self.key, secret=self.secret))

    def headers(self) -> Dict[str, str]:
        return {"x-api-key": self.key, "x-api-secret": self.secret}


Credentials = Union[JwtCredentials, ApiKeyCredentials]


def select_credentials(state: CredentialSource) -> Optional[Credentials]:
    """
    Pick the single credential variant to use for one connection attempt.

    A JWT always wins over an API key pair. The key pair is only used when
    both halves are present.

    Args:
        state: Object exposing jwt, key and secret attributes

    Returns:
        JwtCredentials, ApiKeyCredentials, or None if nothing usable is held
    """
    jwt = getattr(state, "jwt", None)
    if jwt:
        return JwtCredentials(token=jwt)

    key = getattr(state, "key", None)
    secret = getattr(state, "secret", None)
    if key and secret:
        return ApiKeyCredentials(key=key, secret=secret)

    return None


def build_login_message(state: CredentialSource) -> Union[JwtLogin, ApiKeysLogin]:
    """
    Build the first frame of a duplex channel from current credentials.

    Raises:
        MissingCredentials: If the state holds neither a JWT nor a key pair
    """
    credentials = select_credentials(state)
    if credentials is None:
        raise MissingCredentials(
            "No JWT or API key pair available to log in the terminal channel"
        )
    return credentials.login_message()


def auth_headers(state: CredentialSource) -> Dict[str, str]:
    """HTTP auth headers for current credentials; empty when none are held."""
    credentials = select_credentials(state)
    if credentials is None:
        logger.debug("Sending execute request without auth headers")
        return {}
    return credentials.headers()
