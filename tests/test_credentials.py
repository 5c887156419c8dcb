"""
Unit tests for credential selection.
"""

import json
from dataclasses import dataclass
from typing import Optional

import pytest

from komodo_terminal.modules.auth import (
    ApiKeyCredentials,
    ClientState,
    JwtCredentials,
    MissingCredentials,
    auth_headers,
    build_login_message,
    select_credentials,
)


def test_select_jwt():
    """Test that a JWT alone selects the Jwt variant."""
    assert select_credentials(ClientState(jwt="tok")) == JwtCredentials(token="tok")


def test_select_api_key_pair():
    """Test that a complete key pair selects the ApiKeys variant."""
    credentials = select_credentials(ClientState(key="k", secret="s"))
    assert credentials == ApiKeyCredentials(key="k", secret="s")


def test_jwt_wins_over_api_keys():
    """Test that the JWT is used exclusively when both are present."""
    state = ClientState(jwt="tok", key="k", secret="s")

    assert select_credentials(state) == JwtCredentials(token="tok")
    assert auth_headers(state) == {"authorization": "tok"}
    assert json.loads(build_login_message(state).model_dump_json()) == {
        "type": "Jwt",
        "params": {"jwt": "tok"},
    }


@pytest.mark.parametrize(
    "state",
    [
        ClientState(),
        ClientState(key="k"),
        ClientState(secret="s"),
        ClientState(jwt="", key="k"),
    ],
)
def test_incomplete_credentials(state):
    """Test that nothing is selected without a JWT or a full key pair."""
    assert select_credentials(state) is None
    assert auth_headers(state) == {}


def test_login_message_api_keys():
    """Test the ApiKeys login frame wire shape."""
    login = build_login_message(ClientState(key="k", secret="s"))
    assert json.loads(login.model_dump_json()) == {
        "type": "ApiKeys",
        "params": {"key": "k", "secret": "s"},
    }


def test_login_message_without_credentials():
    """Test that a login frame cannot be built from an empty state."""
    with pytest.raises(MissingCredentials):
        build_login_message(ClientState())


def test_api_key_headers():
    """Test the API key header pair."""
    assert auth_headers(ClientState(key="k", secret="s")) == {
        "x-api-key": "k",
        "x-api-secret": "s",
    }


def test_credentials_read_from_any_state_object():
    """Test that caller session objects work without ClientState."""

    @dataclass
    class Session:
        jwt: Optional[str] = None
        key: Optional[str] = None
        secret: Optional[str] = None
        user: str = "alice"

    assert auth_headers(Session(jwt="tok")) == {"authorization": "tok"}


def test_credentials_not_cached():
    """Test that state changes are picked up on the next call."""
    state = ClientState(key="k", secret="s")
    assert "x-api-key" in auth_headers(state)

    state.jwt = "renewed"
    assert auth_headers(state) == {"authorization": "renewed"}


@pytest.mark.parametrize("state", [ClientState(key="k"), ClientState(secret="s")])
def test_login_message_rejects_incomplete_key_pair(state):
    """Test that half a key pair is never sent as an ApiKeys frame."""
    with pytest.raises(MissingCredentials):
        build_login_message(state)
