"""ssh-tunnel-agent - Supervise groups of SSH tunnels as panes of one tmux session."""

from .common.exceptions import (
    ConfigurationError,
    DependencyNotFoundError,
    MultiplexerError,
    SessionError,
    SpecParseError,
    TunnelAgentError,
    TunnelBuildError,
)
from .common.logging import get_logger, setup_logging
from .config import AgentConfig, ConnectionSettings, candidate_config_paths, load_config
from .session import (
    SESSION_NAME,
    SessionOrchestrator,
    SessionState,
    SessionStatus,
    SSHLauncher,
    StartResult,
    TmuxController,
)
from .tunnels import (
    DynamicForward,
    ForwardType,
    LocalForward,
    RemoteForward,
    SSHCommandBuilder,
    TunnelGroup,
    build_group_command,
    parse_forward_spec,
    parse_group,
)

__version__ = "0.1.0"


__all__ = [
    # Configuration
    "AgentConfig",
    "ConnectionSettings",
    "candidate_config_paths",
    "load_config",
    # Tunnels
    "ForwardType",
    "LocalForward",
    "DynamicForward",
    "RemoteForward",
    "TunnelGroup",
    "parse_forward_spec",
    "parse_group",
    "SSHCommandBuilder",
    "build_group_command",
    # Session
    "SESSION_NAME",
    "SessionOrchestrator",
    "SessionState",
    "SessionStatus",
    "StartResult",
    "SSHLauncher",
    "TmuxController",
    # Exceptions
    "TunnelAgentError",
    "SpecParseError",
    "TunnelBuildError",
    "ConfigurationError",
    "DependencyNotFoundError",
    "MultiplexerError",
    "SessionError",
    # Logging
    "get_logger",
    "setup_logging",
]
