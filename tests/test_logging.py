"""
Unit tests for the logging configuration and credential redaction.
"""

import logging

import pytest

from komodo_terminal.logging_config import (
    CredentialRedactionFilter,
    get_logging_config,
    redact,
)


@pytest.mark.parametrize(
    "message,secret",
    [
        ('{"type":"Jwt","params":{"jwt":"eyJhbGciOi"}}', "eyJhbGciOi"),
        ('{"type": "ApiKeys", "params": {"key": "K", "secret": "S3CR3T"}}', "S3CR3T"),
        ("headers={'authorization': 'eyJtoken'}", "eyJtoken"),
        ("x-api-secret: hunter2", "hunter2"),
    ],
)
def test_redact_masks_credentials(message, secret):
    redacted = redact(message)

    assert secret not in redacted
    assert "***" in redacted


def test_redact_keeps_api_key():
    """The key half of an API key pair is an identifier and stays visible."""
    redacted = redact('{"key": "K-123", "secret": "S"}')

    assert '"key": "K-123"' in redacted
    assert '"secret": "***"' in redacted


def test_redact_leaves_plain_messages():
    message = "Terminal channel authenticated to ws://komodo.test/ws/terminal"
    assert redact(message) == message


def test_filter_rewrites_record():
    record = logging.LogRecord(
        "komodo_terminal.channel", logging.INFO, __file__, 1,
        "sending %s", ('{"jwt": "tok"}',), None,
    )

    assert CredentialRedactionFilter().filter(record) is True
    assert record.getMessage() == 'sending {"jwt": "***"}'
    assert record.args is None


def test_filter_passes_clean_record_untouched():
    record = logging.LogRecord(
        "komodo_terminal.execute", logging.INFO, __file__, 1, "finished %s", ("0",), None,
    )

    assert CredentialRedactionFilter().filter(record) is True
    assert record.args == ("0",)


def test_logging_config_structure():
    config = get_logging_config("debug")

    assert config["loggers"]["komodo_terminal"]["level"] == "DEBUG"
    assert config["loggers"]["httpx"]["level"] == "WARNING"
    assert config["loggers"]["websockets"]["level"] == "WARNING"
    assert config["handlers"]["default"]["filters"] == ["credential_filter"]
    assert config["filters"]["credential_filter"]["()"] is CredentialRedactionFilter
