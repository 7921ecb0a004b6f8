"""Session state models returned by the orchestrator."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..common.exceptions import SpecParseError
from ..tunnels.models import ForwardSpec


class SessionState(str, Enum):
    """Session lifecycle states."""

    ABSENT = "absent"
    RUNNING = "running"


class PaneInfo(BaseModel):
    """One pane as reported by the multiplexer."""

    model_config = ConfigDict(frozen=True)

    pane_id: str = Field(min_length=1)
    title: str = ""
    dead: bool = False
    pid: int | None = None
    exit_status: int | None = None


class GroupStatus(BaseModel):
    """A configured tunnel group and the pane running it, if any."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    raw_spec_text: str
    forwards: list[ForwardSpec] = Field(default_factory=list)
    errors: list[SpecParseError] = Field(default_factory=list)
    pane: PaneInfo | None = None

    @property
    def alive(self) -> bool:
        return self.pane is not None and not self.pane.dead


class SessionStatus(BaseModel):
    """Snapshot of the session and its tunnel groups."""

    model_config = ConfigDict(frozen=True)

    session_name: str
    state: SessionState
    panes: list[PaneInfo] = Field(default_factory=list)
    groups: list[GroupStatus] = Field(default_factory=list, description="Groups owning a pane")
    unstarted: list[str] = Field(
        default_factory=list, description="Configured groups without a pane"
    )

    @property
    def running(self) -> bool:
        return self.state == SessionState.RUNNING


class StartResult(BaseModel):
    """What a start call did."""

    model_config = ConfigDict(frozen=True)

    session_name: str
    already_running: bool = False
    started: list[str] = Field(default_factory=list, description="Groups given a pane")
    skipped: list[str] = Field(default_factory=list, description="Groups that failed to build")
    panes: list[PaneInfo] = Field(default_factory=list)
