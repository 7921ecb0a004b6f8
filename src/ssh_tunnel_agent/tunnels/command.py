"""Command builder for ssh tunnel invocations."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..common.exceptions import SpecParseError, TunnelBuildError
from ..common.logging import get_logger
from .models import ForwardSpec, TunnelGroup
from .parser import parse_group

if TYPE_CHECKING:
    from ..config import ConnectionSettings

logger = get_logger(__name__)

# Keep-alive probing: a dead link is detected after roughly 90 seconds
SERVER_ALIVE_INTERVAL = 30
SERVER_ALIVE_COUNT_MAX = 3


@dataclass
class GroupCommand:
    """A tunnel group ready to be run."""

    group: str
    forwards: list[ForwardSpec]
    argv: list[str]
    errors: list[SpecParseError] = field(default_factory=list)


class SSHCommandBuilder:
    """Builder for ssh argument vectors."""

    def __init__(self, settings: "ConnectionSettings", binary: str = "ssh") -> None:
        """Initialize SSHCommandBuilder.

        Args:
            settings: Connection settings shared by every group
            binary: ssh executable placed at argv[0]
        """
        self.settings = settings
        self.binary = binary
        self._forwards: list[ForwardSpec] = []

    def add_forward(self, spec: ForwardSpec) -> "SSHCommandBuilder":
        """Add one forward; flags are emitted in the order added.

        Returns:
            Self for method chaining
        """
        self._forwards.append(spec)
        return self

    def add_forwards(self, specs: list[ForwardSpec]) -> "SSHCommandBuilder":
        for spec in specs:
            self.add_forward(spec)
        return self

    def build(self) -> list[str]:
        """Build the argument vector.

        Returns:
            ssh argv with fixed flags, forwards and destination last

        Raises:
            ValueError: If no forward was added
        """
        if not self._forwards:
            raise ValueError("At least one forward is required. Call add_forward() first.")

        settings = self.settings
        argv = [
            self.binary,
            "-N",
            "-T",
            "-o", "BatchMode=yes",
            "-o", "ExitOnForwardFailure=yes",
            "-o", f"ServerAliveInterval={SERVER_ALIVE_INTERVAL}",
            "-o", f"ServerAliveCountMax={SERVER_ALIVE_COUNT_MAX}",
            "-o", f"SetEnv=TERM={settings.terminal_type}",
            "-p", str(settings.port),
        ]
        for spec in self._forwards:
            argv.extend(spec.to_ssh_args())
        argv.append(f"{settings.user}@{settings.host}")
        return argv


def build_group_command(
    settings: "ConnectionSettings",
    group: TunnelGroup,
    binary: str = "ssh",
) -> GroupCommand:
    """Parse a tunnel group and build its ssh invocation.

    Every rejected token is logged with the group, the token and the rule.

    Args:
        settings: Connection settings
        group: Tunnel group to build
        binary: ssh executable

    Returns:
        GroupCommand with the argv and any per-token errors

    Raises:
        TunnelBuildError: If no forward spec in the group is valid
    """
    parsed = parse_group(group.name, group.raw_spec_text)

    for error in parsed.errors:
        logger.error(
            "Invalid forward spec",
            group=error.group,
            spec=error.spec,
            rule=error.rule,
        )

    if not parsed.ok:
        logger.error(
            "Tunnel group has no valid forward specs",
            group=group.name,
            raw=group.raw_spec_text,
        )
        raise TunnelBuildError(group.name, parsed.errors)

    argv = SSHCommandBuilder(settings, binary).add_forwards(parsed.specs).build()
    logger.debug("Built ssh command", group=group.name, argv=argv)
    return GroupCommand(
        group=group.name,
        forwards=parsed.specs,
        argv=argv,
        errors=parsed.errors,
    )
