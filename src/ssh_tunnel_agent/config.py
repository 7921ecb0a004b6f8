"""Configuration loading for ssh-tunnel-agent.

The configuration is a TOML file with two tables::

    [connection]
    host = "bastion.example.com"
    port = 22
    user = "alice"
    terminal_type = "xterm-256color"

    [tunnels]
    web = "L:8080:web.internal:80 D:1080"

The first existing file from ``candidate_config_paths()`` is used. When none
exists the built-in defaults apply.
"""

import getpass
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .common.exceptions import ConfigurationError
from .common.logging import get_logger
from .common.utils import validate_hostname
from .tunnels.models import TunnelGroup

logger = get_logger(__name__)

APP_NAME = "ssh-tunnel-agent"
CONFIG_FILENAME = "config.toml"
CONFIG_ENV_VAR = "SSH_TUNNEL_AGENT_CONFIG"


def _default_user() -> str:
    return os.environ.get("USER") or getpass.getuser()


class ConnectionSettings(BaseModel):
    """Connection settings shared by every tunnel group."""

    model_config = ConfigDict(
        frozen=True, str_strip_whitespace=True, extra="forbid"
    )

    host: str = Field(default="localhost", min_length=1, description="SSH server")
    port: int = Field(default=22, ge=1, le=65535, description="SSH server port")
    user: str = Field(default_factory=_default_user, min_length=1, description="Login user")
    terminal_type: str = Field(
        default="xterm-256color", min_length=1, description="TERM sent to the server"
    )

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        return validate_hostname(v, "Host")

    @property
    def destination(self) -> str:
        return f"{self.user}@{self.host}"


class AgentConfig(BaseModel):
    """Merged configuration: defaults overridden by one config file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    connection: ConnectionSettings = Field(default_factory=ConnectionSettings)
    tunnels: dict[str, str] = Field(
        default_factory=dict, description="Tunnel group name to raw spec text"
    )
    source: Path | None = Field(default=None, description="File the config came from")

    @field_validator("tunnels")
    @classmethod
    def validate_tunnels(cls, v: dict[str, str]) -> dict[str, str]:
        for name in v:
            if not name.strip():
                raise ValueError("Tunnel group names cannot be empty")
            # Names become pane titles, read back from tab separated list-panes rows
            if any(char.isspace() for char in name):
                raise ValueError(f"Tunnel group name '{name}' cannot contain whitespace")
        return v

    def tunnel_groups(self) -> list[TunnelGroup]:
        """Tunnel groups sorted by name, the order panes are created in."""
        return [
            TunnelGroup(name=name, raw_spec_text=raw)
            for name, raw in sorted(self.tunnels.items())
        ]


def candidate_config_paths(environ: Mapping[str, str] | None = None) -> list[Path]:
    """Return config file candidates in lookup order.

    Args:
        environ: Environment to read (defaults to ``os.environ``)
    """
    env = os.environ if environ is None else environ
    home = Path(env.get("HOME") or Path.home())
    candidates: list[Path] = []

    override = env.get(CONFIG_ENV_VAR)
    if override:
        candidates.append(Path(override).expanduser())

    xdg_config_home = env.get("XDG_CONFIG_HOME") or str(home / ".config")
    candidates.append(Path(xdg_config_home) / APP_NAME / CONFIG_FILENAME)
    candidates.append(home / ".local" / "etc" / APP_NAME / CONFIG_FILENAME)
    return candidates


def find_config_file(environ: Mapping[str, str] | None = None) -> Path | None:
    """Return the first existing candidate, or None."""
    for path in candidate_config_paths(environ):
        if path.is_file():
            return path
    return None


def _read_toml(path: Path) -> dict:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AgentConfig:
    """Load configuration.

    Args:
        path: Explicit config file; must exist when given
        environ: Environment used for candidate lookup

    Returns:
        AgentConfig built from defaults and the chosen file

    Raises:
        ConfigurationError: If the file is missing (explicit path only),
            unreadable, or holds invalid values
    """
    if path is not None:
        config_path: Path | None = Path(path).expanduser()
        if not config_path.is_file():
            raise ConfigurationError(f"Config file not found: {config_path}")
    else:
        config_path = find_config_file(environ)

    if config_path is None:
        logger.info("No config file found, using defaults")
        return AgentConfig()

    data = _read_toml(config_path)
    unknown = set(data) - {"connection", "tunnels"}
    if unknown:
        raise ConfigurationError(
            f"Unknown section(s) in {config_path}: {', '.join(sorted(unknown))}"
        )

    try:
        config = AgentConfig(
            connection=ConnectionSettings(**data.get("connection", {})),
            tunnels=data.get("tunnels", {}),
            source=config_path,
        )
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

    logger.info(
        "Loaded config",
        path=str(config_path),
        host=config.connection.host,
        groups=len(config.tunnels),
    )
    return config
