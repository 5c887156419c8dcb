"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol

from komodo_terminal.modules.auth import ClientState


@dataclass
class ClientConfig:
    """Terminal client configuration."""
    address: str
    jwt: Optional[str] = None
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    timeout: float = 30.0
    open_timeout: float = 10.0
    verify_ssl: bool = True

    @property
    def has_credentials(self) -> bool:
        """Check if a JWT or a complete API key pair is configured."""
        return bool(self.jwt) or bool(self.api_key and self.api_secret)

    def to_state(self) -> ClientState:
        """Build the caller-owned credential state."""
        return ClientState(jwt=self.jwt, key=self.api_key, secret=self.api_secret)


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_client_config(self) -> ClientConfig:
        """Get terminal client configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_client_config(self) -> ClientConfig:
        """Get terminal client configuration from environment variables."""
        address = os.getenv("KOMODO_ADDRESS")
        if not address:
            raise ValueError(
                "KOMODO_ADDRESS environment variable is required. "
                "Example: https://komodo.example.com"
            )

        return ClientConfig(
            address=address.rstrip("/"),
            jwt=os.getenv("KOMODO_JWT") or None,
            api_key=os.getenv("KOMODO_API_KEY") or None,
            api_secret=os.getenv("KOMODO_API_SECRET") or None,
            timeout=float(os.getenv("KOMODO_TIMEOUT", "30")),
            open_timeout=float(os.getenv("KOMODO_OPEN_TIMEOUT", "10")),
            verify_ssl=os.getenv("KOMODO_SSL_VERIFY", "true").lower() == "true",
        )
