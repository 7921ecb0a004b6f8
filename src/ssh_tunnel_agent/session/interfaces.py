"""Protocol interfaces for the external processes the orchestrator drives."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import PaneInfo


class TransportLauncher(Protocol):
    """Protocol for the secure transport client."""

    def executable(self) -> str:
        """Return the client executable to place at argv[0].

        Raises DependencyNotFoundError when it is not installed.
        """
        ...


class MultiplexerController(Protocol):
    """Protocol for terminal multiplexer operations."""

    def has_session(self, session: str) -> bool:
        """Check whether the session exists."""
        ...

    def create_session(self, session: str, argv: list[str], title: str) -> str:
        """Create the session with a first pane running argv; return the pane id."""
        ...

    def split_pane(self, session: str, argv: list[str], title: str) -> str:
        """Add a pane running argv to the session; return the pane id."""
        ...

    def select_layout(self, session: str, layout: str) -> None:
        """Apply a layout to the session's window."""
        ...

    def list_panes(self, session: str) -> list[PaneInfo]:
        """List the session's panes."""
        ...

    def kill_session(self, session: str) -> None:
        """Kill the session and every process in it."""
        ...

    def attach(self, session: str) -> int:
        """Take over the terminal with the session view; return the exit code."""
        ...
