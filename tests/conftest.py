"""Shared pytest fixtures for ssh-tunnel-agent tests."""

import logging

import pytest
import structlog

from ssh_tunnel_agent.common.exceptions import DependencyNotFoundError, MultiplexerError
from ssh_tunnel_agent.config import AgentConfig, ConnectionSettings
from ssh_tunnel_agent.session.models import PaneInfo
from ssh_tunnel_agent.session.orchestrator import SessionOrchestrator


class FakeMultiplexer:
    """In-memory stand-in for tmux.

    Every call is recorded in ``calls`` as ``(method, session, ...)``.
    Setting ``fail_on`` to a method name makes that method raise before it
    does anything; ``fail_after`` makes it raise once its effect is applied.
    """

    def __init__(self):
        self.sessions: dict[str, list[PaneInfo]] = {}
        self.calls: list[tuple] = []
        self.commands: dict[str, list[str]] = {}
        self.layouts: list[str] = []
        self.fail_on: str | None = None
        self.fail_after: str | None = None
        self.attach_code = 0
        self._next_pane = 0

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, *args))
        if self.fail_on == method:
            raise MultiplexerError(f"tmux {method} failed", ["tmux", method], "boom")

    def _new_pane(self, session: str, argv: list[str], title: str) -> str:
        pane_id = f"%{self._next_pane}"
        self._next_pane += 1
        self.sessions[session].append(PaneInfo(pane_id=pane_id, title=title, pid=1000 + self._next_pane))
        self.commands[pane_id] = list(argv)
        if self.fail_after is not None and self.calls[-1][0] == self.fail_after:
            raise MultiplexerError(f"tmux {self.fail_after} failed", ["tmux", self.fail_after], "boom")
        return pane_id

    def method_calls(self, method: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == method]

    def has_session(self, session: str) -> bool:
        self.calls.append(("has_session", session))
        return session in self.sessions

    def create_session(self, session: str, argv: list[str], title: str) -> str:
        self._record("create_session", session, title)
        if session in self.sessions:
            raise MultiplexerError(f"duplicate session: {session}")
        self.sessions[session] = []
        return self._new_pane(session, argv, title)

    def split_pane(self, session: str, argv: list[str], title: str) -> str:
        self._record("split_pane", session, title)
        if session not in self.sessions:
            raise MultiplexerError(f"can't find session: {session}")
        return self._new_pane(session, argv, title)

    def select_layout(self, session: str, layout: str) -> None:
        self._record("select_layout", session, layout)
        self.layouts.append(layout)

    def list_panes(self, session: str) -> list[PaneInfo]:
        self._record("list_panes", session)
        return list(self.sessions[session])

    def kill_session(self, session: str) -> None:
        self._record("kill_session", session)
        if session not in self.sessions:
            raise MultiplexerError(f"can't find session: {session}")
        del self.sessions[session]

    def attach(self, session: str) -> int:
        self._record("attach", session)
        return self.attach_code

    def mark_dead(self, title: str, exit_status: int = 255) -> None:
        """Simulate the ssh inside a pane exiting."""
        for session, panes in self.sessions.items():
            self.sessions[session] = [
                pane.model_copy(update={"dead": True, "exit_status": exit_status})
                if pane.title == title
                else pane
                for pane in panes
            ]


class FakeLauncher:
    """Stand-in for SSHLauncher."""

    def __init__(self, binary: str | None = "/usr/bin/ssh"):
        self.binary = binary

    def executable(self) -> str:
        if self.binary is None:
            raise DependencyNotFoundError("SSH client 'ssh' not found in system PATH.")
        return self.binary


@pytest.fixture
def settings():
    """Connection settings used across tests."""
    return ConnectionSettings(
        host="bastion.example.com", port=2222, user="alice", terminal_type="xterm-256color"
    )


@pytest.fixture
def tunnels():
    """Three valid tunnel groups."""
    return {
        "web": "L:8080:web.internal:80",
        "db": "L:5432:db.internal:5432 R:9000:localhost:3000",
        "proxy": "D:1080",
    }


@pytest.fixture
def agent_config(settings, tunnels):
    return AgentConfig(connection=settings, tunnels=tunnels)


@pytest.fixture
def fake_mux():
    return FakeMultiplexer()


@pytest.fixture
def fake_launcher():
    return FakeLauncher()


@pytest.fixture
def orchestrator(agent_config, fake_mux, fake_launcher):
    """Orchestrator wired to in-memory fakes."""
    return SessionOrchestrator(agent_config, fake_mux, fake_launcher)


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration after each test.

    This prevents tests from interfering with each other's logging setup.
    """
    yield
    structlog.reset_defaults()
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
