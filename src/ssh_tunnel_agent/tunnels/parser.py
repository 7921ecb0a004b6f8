"""Parser for the compact forward spec grammar.

A token looks like ``TYPE:field1[:field2:field3]``:

    L:localPort:remoteHost:remotePort
    D:localPort
    R:remotePort:localHost:localPort

Parsing never raises. Each token yields a ``ParseResult`` holding either a
forward model or a ``SpecParseError`` naming the group, the token and the
rule it broke.
"""

from dataclasses import dataclass, field

from pydantic import ValidationError

from ..common.exceptions import SpecParseError
from ..common.logging import get_logger
from ..common.utils import parse_port, validate_hostname
from .models import DynamicForward, ForwardSpec, ForwardType, LocalForward, RemoteForward

logger = get_logger(__name__)

# Field layout per type letter, used for both arity checks and messages
FIELD_LAYOUTS: dict[ForwardType, tuple[str, ...]] = {
    ForwardType.LOCAL: ("localPort", "remoteHost", "remotePort"),
    ForwardType.DYNAMIC: ("localPort",),
    ForwardType.REMOTE: ("remotePort", "localHost", "localPort"),
}


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing one token."""

    token: str
    spec: ForwardSpec | None = None
    error: SpecParseError | None = None

    @property
    def ok(self) -> bool:
        return self.spec is not None


@dataclass
class GroupParseResult:
    """Outcome of parsing every token of one group."""

    group: str
    specs: list[ForwardSpec] = field(default_factory=list)
    errors: list[SpecParseError] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.specs)


def _layout_rule(forward_type: ForwardType) -> str:
    layout = ":".join(FIELD_LAYOUTS[forward_type])
    return f"type {forward_type.value} requires exactly {layout}"


def _build_spec(forward_type: ForwardType, fields: list[str]) -> ForwardSpec:
    """Turn raw fields into a forward model.

    Raises:
        ValueError: If a port or hostname is invalid
    """
    if forward_type == ForwardType.DYNAMIC:
        (local_port,) = fields
        return DynamicForward(local_port=parse_port(local_port, "localPort"))

    if forward_type == ForwardType.LOCAL:
        local_port, remote_host, remote_port = fields
        return LocalForward(
            local_port=parse_port(local_port, "localPort"),
            remote_host=validate_hostname(remote_host, "remoteHost"),
            remote_port=parse_port(remote_port, "remotePort"),
        )

    remote_port, local_host, local_port = fields
    return RemoteForward(
        remote_port=parse_port(remote_port, "remotePort"),
        local_host=validate_hostname(local_host, "localHost"),
        local_port=parse_port(local_port, "localPort"),
    )


def parse_forward_spec(token: str, group: str) -> ParseResult:
    """Parse a single forward spec token.

    Args:
        token: Token such as ``L:8080:web:80``
        group: Owning group name, used in error messages

    Returns:
        ParseResult with either ``spec`` or ``error`` set
    """

    def failure(rule: str) -> ParseResult:
        return ParseResult(token=token, error=SpecParseError(group, token, rule))

    type_letter, sep, rest = token.partition(":")
    if not sep:
        return failure("missing ':' after forward type")

    try:
        forward_type = ForwardType(type_letter)
    except ValueError:
        return failure(f"unknown forward type '{type_letter}' (expected L, D or R)")

    fields = rest.split(":")
    if len(fields) != len(FIELD_LAYOUTS[forward_type]):
        return failure(_layout_rule(forward_type))

    try:
        spec = _build_spec(forward_type, fields)
    except ValidationError as e:
        return failure(e.errors()[0]["msg"])
    except ValueError as e:
        return failure(str(e))

    return ParseResult(token=token, spec=spec)


def parse_group(
    group: str, raw_spec_text: str, warn_duplicates: bool = True
) -> GroupParseResult:
    """Parse every whitespace separated token of a group.

    Tokens are parsed independently; a bad token never stops the others.
    Repeated identical tokens are kept once.

    Args:
        group: Group name
        raw_spec_text: Raw spec text from the configuration
        warn_duplicates: Log a warning for each repeated token

    Returns:
        GroupParseResult with specs in token order and all errors
    """
    result = GroupParseResult(group=group)
    seen: set[str] = set()

    for token in raw_spec_text.split():
        if token in seen:
            if warn_duplicates:
                logger.warning("Ignoring duplicate forward spec", group=group, spec=token)
            result.duplicates.append(token)
            continue
        seen.add(token)

        parsed = parse_forward_spec(token, group)
        if parsed.spec is not None:
            result.specs.append(parsed.spec)
        elif parsed.error is not None:
            result.errors.append(parsed.error)

    return result
