"""tmux implementation of the multiplexer controller."""

import os
import shlex
import shutil
import subprocess

from ..common.exceptions import DependencyNotFoundError, MultiplexerError
from ..common.logging import get_logger
from .models import PaneInfo

logger = get_logger(__name__)

PANE_FORMAT = "\t".join(
    [
        "#{pane_id}",
        "#{pane_title}",
        "#{pane_dead}",
        "#{pane_pid}",
        "#{pane_dead_status}",
    ]
)


def _optional_int(value: str) -> int | None:
    value = value.strip()
    return int(value) if value.lstrip("-").isdigit() else None


def parse_pane_line(line: str) -> PaneInfo:
    """Parse one line of ``list-panes -F PANE_FORMAT`` output."""
    fields = line.split("\t")
    fields += [""] * (5 - len(fields))
    pane_id, title, dead, pid, dead_status = fields[:5]
    return PaneInfo(
        pane_id=pane_id,
        title=title,
        dead=dead.strip() == "1",
        pid=_optional_int(pid),
        exit_status=_optional_int(dead_status),
    )


class TmuxController:
    """Runs tmux commands for one supervised session."""

    def __init__(self, binary_path: str | None = None):
        """Initialize TmuxController.

        Args:
            binary_path: Path to tmux (auto-detected on first use if None)
        """
        self._binary_path = binary_path

    @property
    def binary_path(self) -> str:
        if self._binary_path is None:
            self._binary_path = self._find_tmux_binary()
        return self._binary_path

    def _find_tmux_binary(self) -> str:
        """Find tmux in system PATH.

        Raises:
            DependencyNotFoundError: If tmux is not found
        """
        tmux_binary = shutil.which("tmux")
        if tmux_binary is None:
            raise DependencyNotFoundError(
                "Terminal multiplexer 'tmux' not found in system PATH. "
                "Please install tmux and ensure it is available in your PATH."
            )
        return tmux_binary

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        """Run a tmux command and capture its output.

        Raises:
            MultiplexerError: If tmux cannot be run, or exits non-zero with check set
        """
        command = [self.binary_path, *args]
        logger.debug("Running tmux command", command=command)
        try:
            result = subprocess.run(command, capture_output=True, text=True)
        except OSError as e:
            raise MultiplexerError(f"Failed to run tmux: {e}", command) from e

        if check and result.returncode != 0:
            logger.error(
                "tmux command failed",
                command=command,
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
            raise MultiplexerError(
                f"tmux {args[0]} failed with exit code {result.returncode}",
                command,
                result.stderr.strip(),
            )
        return result

    @staticmethod
    def _target(session: str) -> str:
        # '=' forces an exact session name match
        return f"={session}"

    def has_session(self, session: str) -> bool:
        result = self._run("has-session", "-t", self._target(session), check=False)
        return result.returncode == 0

    def create_session(self, session: str, argv: list[str], title: str) -> str:
        """Create a detached session whose first pane runs argv.

        ``remain-on-exit`` is set in the same tmux invocation so a pane whose
        ssh dies stays visible as dead instead of closing.

        Returns:
            The new pane id
        """
        result = self._run(
            "new-session", "-d",
            "-s", session,
            "-n", session,
            "-P", "-F", "#{pane_id}",
            shlex.join(argv),
            ";",
            "set-option", "-t", self._target(session), "remain-on-exit", "on",
        )
        pane_id = self._pane_id(result)
        self._set_title(pane_id, title)
        return pane_id

    def split_pane(self, session: str, argv: list[str], title: str) -> str:
        result = self._run(
            "split-window", "-d",
            "-t", self._target(session),
            "-P", "-F", "#{pane_id}",
            shlex.join(argv),
        )
        pane_id = self._pane_id(result)
        self._set_title(pane_id, title)
        return pane_id

    @staticmethod
    def _pane_id(result: subprocess.CompletedProcess[str]) -> str:
        lines = result.stdout.strip().splitlines()
        if not lines:
            raise MultiplexerError("tmux did not report the new pane id", list(result.args))
        return lines[0].strip()

    def _set_title(self, pane_id: str, title: str) -> None:
        self._run("select-pane", "-t", pane_id, "-T", title)

    def select_layout(self, session: str, layout: str) -> None:
        self._run("select-layout", "-t", self._target(session), layout)

    def list_panes(self, session: str) -> list[PaneInfo]:
        result = self._run("list-panes", "-s", "-t", self._target(session), "-F", PANE_FORMAT)
        return [parse_pane_line(line) for line in result.stdout.splitlines() if line.strip()]

    def kill_session(self, session: str) -> None:
        self._run("kill-session", "-t", self._target(session))

    def attach(self, session: str) -> int:
        """Attach the calling terminal to the session.

        Inside tmux the current client is switched instead, since nesting
        sessions is refused by tmux.
        """
        if os.environ.get("TMUX"):
            command = [self.binary_path, "switch-client", "-t", self._target(session)]
        else:
            command = [self.binary_path, "attach-session", "-t", self._target(session)]
        logger.debug("Attaching to tmux session", command=command)
        try:
            return subprocess.run(command).returncode
        except OSError as e:
            raise MultiplexerError(f"Failed to run tmux: {e}", command) from e
