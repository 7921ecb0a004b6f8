"""Forward spec models, parser and ssh command builder."""

from .command import GroupCommand, SSHCommandBuilder, build_group_command
from .models import (
    BaseForward,
    DynamicForward,
    ForwardSpec,
    ForwardType,
    LocalForward,
    RemoteForward,
    TunnelGroup,
)
from .parser import GroupParseResult, ParseResult, parse_forward_spec, parse_group

__all__ = [
    # Models
    "ForwardType",
    "BaseForward",
    "LocalForward",
    "DynamicForward",
    "RemoteForward",
    "ForwardSpec",
    "TunnelGroup",
    # Parser
    "ParseResult",
    "GroupParseResult",
    "parse_forward_spec",
    "parse_group",
    # Command builder
    "GroupCommand",
    "SSHCommandBuilder",
    "build_group_command",
]
