"""Custom exceptions for ssh-tunnel-agent."""


class TunnelAgentError(Exception):
    """Base exception for all ssh-tunnel-agent errors."""
    pass


class SpecParseError(TunnelAgentError):
    """A forward-spec token could not be parsed.

    The parser returns these instead of raising them, so every bad token
    of a group can be reported at once.
    """

    def __init__(self, group: str, spec: str, rule: str):
        self.group = group
        self.spec = spec
        self.rule = rule
        super().__init__(f"Group '{group}': invalid forward spec '{spec}': {rule}")


class TunnelBuildError(TunnelAgentError):
    """Raised when a tunnel group has no usable forward specs."""

    def __init__(self, group: str, errors: list[SpecParseError] | None = None):
        self.group = group
        self.errors = list(errors or [])
        super().__init__(f"Group '{group}' has no valid forward specs")


class ConfigurationError(TunnelAgentError):
    """Raised when configuration is invalid."""
    pass


class DependencyNotFoundError(TunnelAgentError):
    """Raised when a required external binary is not found in PATH."""
    pass


class MultiplexerError(TunnelAgentError):
    """Raised when a terminal multiplexer command fails."""

    def __init__(self, message: str, command: list[str] | None = None, stderr: str = ""):
        self.command = list(command or [])
        self.stderr = stderr
        if stderr:
            message = f"{message}: {stderr}"
        super().__init__(message)


class SessionError(TunnelAgentError):
    """Raised when a session operation cannot be carried out."""
    pass
