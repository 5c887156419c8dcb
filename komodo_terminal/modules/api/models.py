"""
Komodo terminal wire models.

These models define the structure of the frames and payloads exchanged
with the Komodo core API by the terminal client.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

# Login frames (first frame on every duplex channel)


class JwtParams(BaseModel):
    """Parameters of a JWT login."""

    jwt: str


class ApiKeyParams(BaseModel):
    """Parameters of an API key login."""

    key: str
    secret: str


class JwtLogin(BaseModel):
    """Login frame authenticating with a JWT."""

    type: Literal["Jwt"] = "Jwt"
    params: JwtParams


class ApiKeysLogin(BaseModel):
    """Login frame authenticating with an API key pair."""

    type: Literal["ApiKeys"] = "ApiKeys"
    params: ApiKeyParams


LoginMessage = Annotated[Union[JwtLogin, ApiKeysLogin], Field(discriminator="type")]

_login_adapter: TypeAdapter = TypeAdapter(LoginMessage)


def parse_login_message(data: Union[str, bytes]) -> Union[JwtLogin, ApiKeysLogin]:
    """Parse a serialized login frame back into its variant."""
    return _login_adapter.validate_json(data)


# Error body returned by the core API on non-200 responses


class ErrorBody(BaseModel):
    """Structured error returned by the core API."""

    error: str
    trace: List[str] = Field(default_factory=list)


# Connect queries (duplex channel query strings)


class ConnectTerminalQuery(BaseModel):
    """Query to connect to a terminal on a server."""

    server: str = Field(..., description="Server id or name")
    terminal: str = Field(..., description="Terminal name")


class ConnectContainerExecQuery(BaseModel):
    """Query to exec into a container on a server."""

    server: str = Field(..., description="Server id or name")
    container: str = Field(..., description="Container name")
    shell: str = Field(default="sh", description="Shell to exec, e.g. sh or bash")


class ConnectDeploymentExecQuery(BaseModel):
    """Query to exec into a deployment's container."""

    deployment: str = Field(..., description="Deployment id or name")
    shell: str = Field(default="sh", description="Shell to exec")


class ConnectStackExecQuery(BaseModel):
    """Query to exec into a stack service's container."""

    stack: str = Field(..., description="Stack id or name")
    service: str = Field(..., description="Compose service name")
    shell: str = Field(default="sh", description="Shell to exec")


# Execute bodies (one-shot command requests)


class ExecuteTerminalBody(BaseModel):
    """Run a command on a server terminal."""

    server: str
    terminal: str
    command: str = Field(..., min_length=1)


class ExecuteContainerExecBody(BaseModel):
    """Run a command inside a container."""

    server: str
    container: str
    shell: str = "sh"
    command: str = Field(..., min_length=1)


class ExecuteDeploymentExecBody(BaseModel):
    """Run a command inside a deployment's container."""

    deployment: str
    shell: str = "sh"
    command: str = Field(..., min_length=1)


class ExecuteStackExecBody(BaseModel):
    """Run a command inside a stack service's container."""

    stack: str
    service: str
    shell: str = "sh"
    command: str = Field(..., min_length=1)


def to_payload(value: Union[BaseModel, Dict[str, Any], None]) -> Dict[str, Any]:
    """
    Normalize a query or body to a plain dict.

    Models are dumped without unset optional (None) fields; mappings are
    copied as-is.
    """
    if value is None:
        return {}
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_none=True)
    return dict(value)


def error_result(error: str, trace: Optional[List[str]] = None) -> Dict[str, Any]:
    """Build an error body dict in the shape the core API uses."""
    return ErrorBody(error=error, trace=trace or []).model_dump()
