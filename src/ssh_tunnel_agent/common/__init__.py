"""Common utilities and shared functionality."""

from .exceptions import (
    ConfigurationError,
    DependencyNotFoundError,
    MultiplexerError,
    SessionError,
    SpecParseError,
    TunnelAgentError,
    TunnelBuildError,
)
from .logging import DEFAULT_LOG_FILE, get_logger, setup_logging
from .utils import (
    MAX_PORT,
    MIN_PORT,
    parse_port,
    validate_hostname,
    validate_non_empty_string,
    validate_port,
)

__all__ = [
    # Exceptions
    "TunnelAgentError",
    "SpecParseError",
    "TunnelBuildError",
    "ConfigurationError",
    "DependencyNotFoundError",
    "MultiplexerError",
    "SessionError",
    # Logging
    "DEFAULT_LOG_FILE",
    "get_logger",
    "setup_logging",
    # Utils
    "parse_port",
    "validate_port",
    "validate_hostname",
    "validate_non_empty_string",
    "MIN_PORT",
    "MAX_PORT",
]
