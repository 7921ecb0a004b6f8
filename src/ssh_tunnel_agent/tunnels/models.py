"""Forward spec models.

This module defines the three forward shapes an ssh invocation can carry
and the named tunnel group that bundles them.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..common.utils import validate_hostname, validate_non_empty_string


class ForwardType(str, Enum):
    """Forward type enumeration, keyed by the token's type letter."""

    LOCAL = "L"
    DYNAMIC = "D"
    REMOTE = "R"

    @property
    def label(self) -> str:
        """Human readable category shown by status and list."""
        return _LABELS[self]


_LABELS = {
    ForwardType.LOCAL: "Local",
    ForwardType.DYNAMIC: "SOCKS",
    ForwardType.REMOTE: "Remote",
}


class BaseForward(BaseModel, ABC):
    """Base forward model with immutable design pattern."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    forward_type: ForwardType

    @abstractmethod
    def to_ssh_args(self) -> list[str]:
        """Return the ssh flag and value for this forward."""

    @abstractmethod
    def describe(self) -> str:
        """Return a one-line description for humans."""


class LocalForward(BaseForward):
    """Listen locally and forward to a host reachable from the server."""

    forward_type: Literal[ForwardType.LOCAL] = ForwardType.LOCAL
    local_port: int = Field(ge=1, le=65535, description="Local listening port")
    remote_host: str = Field(description="Destination host, resolved by the server")
    remote_port: int = Field(ge=1, le=65535, description="Destination port")

    @field_validator("remote_host")
    @classmethod
    def validate_remote_host(cls, v: str) -> str:
        return validate_hostname(v, "Remote host")

    def to_ssh_args(self) -> list[str]:
        return ["-L", f"localhost:{self.local_port}:{self.remote_host}:{self.remote_port}"]

    def describe(self) -> str:
        return f"localhost:{self.local_port} -> {self.remote_host}:{self.remote_port}"


class DynamicForward(BaseForward):
    """SOCKS proxy listening on a local port."""

    forward_type: Literal[ForwardType.DYNAMIC] = ForwardType.DYNAMIC
    local_port: int = Field(ge=1, le=65535, description="Local SOCKS port")

    def to_ssh_args(self) -> list[str]:
        return ["-D", str(self.local_port)]

    def describe(self) -> str:
        return f"localhost:{self.local_port}"


class RemoteForward(BaseForward):
    """Listen on the server and forward back to a host reachable locally."""

    forward_type: Literal[ForwardType.REMOTE] = ForwardType.REMOTE
    remote_port: int = Field(ge=1, le=65535, description="Server listening port")
    local_host: str = Field(description="Destination host, resolved locally")
    local_port: int = Field(ge=1, le=65535, description="Destination port")

    @field_validator("local_host")
    @classmethod
    def validate_local_host(cls, v: str) -> str:
        return validate_hostname(v, "Local host")

    def to_ssh_args(self) -> list[str]:
        return ["-R", f"{self.remote_port}:{self.local_host}:{self.local_port}"]

    def describe(self) -> str:
        return f"remote:{self.remote_port} -> {self.local_host}:{self.local_port}"


ForwardSpec = Annotated[
    LocalForward | DynamicForward | RemoteForward,
    Field(discriminator="forward_type"),
]


class TunnelGroup(BaseModel):
    """A named bundle of forward specs run as one ssh invocation."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1, description="Unique group name")
    raw_spec_text: str = Field(
        default="", description="Space separated forward spec tokens"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_non_empty_string(v, "Group name")

    @property
    def tokens(self) -> list[str]:
        """Spec tokens in the order they were written."""
        return self.raw_spec_text.split()
