"""
Custom logging configuration that keeps credentials out of log output
"""

import logging
import re
from typing import Any, Dict

_SECRET_PATTERNS = [
    # JSON login frames: "jwt": "...", "secret": "..."
    re.compile(r'("(?:jwt|secret)"\s*:\s*")[^"]*(")'),
    # HTTP headers: authorization: ..., x-api-secret: ...
    re.compile(r"((?:authorization|x-api-secret)['\"]?\s*[:=]\s*['\"]?)[^'\"\s,}]+()", re.IGNORECASE),
]


def redact(message: str) -> str:
    """Mask JWTs and API secrets in a log message."""
    for pattern in _SECRET_PATTERNS:
        message = pattern.sub(r"\1***\2", message)
    return message


class CredentialRedactionFilter(logging.Filter):
    """Filter that masks credentials in any record passing through it."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True  # Never drop records, only rewrite them


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration with credential redaction."""
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "credential_filter": {
                "()": CredentialRedactionFilter
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
                "filters": ["credential_filter"]
            }
        },
        "loggers": {
            "komodo_terminal": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            },
            "httpx": {
                "handlers": ["default"],
                "level": "WARNING",
                "propagate": False
            },
            "websockets": {
                "handlers": ["default"],
                "level": "WARNING",
                "propagate": False
            }
        },
        "root": {
            "level": "WARNING",
            "handlers": ["default"]
        }
    }
