"""Authentication interfaces following Black Box Design principles."""
from typing import Optional, Protocol


class CredentialSource(Protocol):
    """
    Protocol for caller-held session state.

    Any object with these attributes works, so callers can hand over their
    own session objects instead of ClientState.
    """

    jwt: Optional[str]
    key: Optional[str]
    secret: Optional[str]
