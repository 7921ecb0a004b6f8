"""Session orchestration: one multiplexer session, one pane per tunnel group."""

import time

from ..common.exceptions import MultiplexerError, SessionError, TunnelBuildError
from ..common.logging import get_logger
from ..config import AgentConfig
from ..tunnels.command import GroupCommand, build_group_command
from ..tunnels.parser import parse_group
from .interfaces import MultiplexerController, TransportLauncher
from .models import GroupStatus, PaneInfo, SessionState, SessionStatus, StartResult

logger = get_logger(__name__)

SESSION_NAME = "ssh-tunnel-agent"
# Lets the previous ssh processes release their listening ports
RESTART_DELAY = 2.0
EVEN_LAYOUT = "tiled"


class SessionOrchestrator:
    """Reconciles configured tunnel groups with the running session.

    The session is either absent or running. Its pane set is fixed when it is
    created; picking up a new group takes a restart.
    """

    def __init__(
        self,
        config: AgentConfig,
        multiplexer: MultiplexerController,
        launcher: TransportLauncher,
        session_name: str = SESSION_NAME,
        restart_delay: float = RESTART_DELAY,
    ):
        """Initialize SessionOrchestrator.

        Args:
            config: Loaded agent configuration
            multiplexer: Multiplexer controller owning the session
            launcher: Resolves the ssh client
            session_name: Name of the supervised session
            restart_delay: Seconds to wait between stop and start on restart
        """
        self.config = config
        self.multiplexer = multiplexer
        self.launcher = launcher
        self.session_name = session_name
        self.restart_delay = restart_delay

    @property
    def state(self) -> SessionState:
        if self.multiplexer.has_session(self.session_name):
            return SessionState.RUNNING
        return SessionState.ABSENT

    def is_running(self) -> bool:
        return self.state == SessionState.RUNNING

    def build_commands(self) -> tuple[list[GroupCommand], list[str]]:
        """Build ssh commands for every configured group, in name order.

        Returns:
            Built commands and the names of groups that failed to build
        """
        binary = self.launcher.executable()
        commands: list[GroupCommand] = []
        skipped: list[str] = []

        for group in self.config.tunnel_groups():
            try:
                commands.append(build_group_command(self.config.connection, group, binary))
            except TunnelBuildError as e:
                logger.error("Skipping tunnel group", group=e.group, reason=str(e))
                skipped.append(group.name)

        return commands, skipped

    def start(self) -> StartResult:
        """Create the session with one pane per buildable group.

        Returns:
            StartResult describing the panes created, or already_running

        Raises:
            SessionError: If no group could be built
            MultiplexerError: If a tmux call fails; any half-built session is killed
            DependencyNotFoundError: If ssh or tmux is missing
        """
        if self.is_running():
            logger.info("Session already running", session=self.session_name)
            return StartResult(session_name=self.session_name, already_running=True)

        logger.info("Starting session", session=self.session_name, host=self.config.connection.host)
        commands, skipped = self.build_commands()
        if not commands:
            if skipped:
                message = f"None of the {len(skipped)} configured tunnel group(s) could be built"
            else:
                message = "No tunnel groups configured"
            logger.error("Refusing to start empty session", session=self.session_name, reason=message)
            raise SessionError(message)

        panes: list[PaneInfo] = []
        try:
            for command in commands:
                if not panes:
                    pane_id = self.multiplexer.create_session(
                        self.session_name, command.argv, command.group
                    )
                else:
                    pane_id = self.multiplexer.split_pane(
                        self.session_name, command.argv, command.group
                    )
                panes.append(PaneInfo(pane_id=pane_id, title=command.group))
                logger.info("Started tunnel group", group=command.group, pane=pane_id)

                # Re-tile after every split so later splits have room
                if len(panes) > 1:
                    self.multiplexer.select_layout(self.session_name, EVEN_LAYOUT)
        except MultiplexerError:
            # The session may exist even though no pane was recorded yet
            self._discard_partial_session()
            raise

        logger.info(
            "Session started",
            session=self.session_name,
            panes=len(panes),
            skipped=skipped,
        )
        return StartResult(
            session_name=self.session_name,
            started=[command.group for command in commands],
            skipped=skipped,
            panes=panes,
        )

    def _discard_partial_session(self) -> None:
        try:
            if not self.multiplexer.has_session(self.session_name):
                return
            logger.error("Killing partially created session", session=self.session_name)
            self.multiplexer.kill_session(self.session_name)
        except MultiplexerError as e:
            logger.error("Failed to kill partial session", session=self.session_name, error=str(e))

    def stop(self) -> bool:
        """Kill the session and every tunnel in it.

        Returns:
            True if a session was killed, False if none was running
        """
        if not self.is_running():
            logger.info("Session not running, nothing to stop", session=self.session_name)
            return False

        logger.info("Stopping session", session=self.session_name)
        self.multiplexer.kill_session(self.session_name)
        logger.info("Session stopped", session=self.session_name)
        return True

    def restart(self) -> StartResult:
        """Stop, wait for ports to be released, then start."""
        logger.info("Restarting session", session=self.session_name)
        self.stop()
        time.sleep(self.restart_delay)
        return self.start()

    def _group_statuses(self, panes: list[PaneInfo]) -> list[GroupStatus]:
        panes_by_title = {pane.title: pane for pane in panes}
        statuses = []
        for group in self.config.tunnel_groups():
            # Duplicates were already reported when the session was built
            parsed = parse_group(group.name, group.raw_spec_text, warn_duplicates=False)
            statuses.append(
                GroupStatus(
                    name=group.name,
                    raw_spec_text=group.raw_spec_text,
                    forwards=parsed.specs,
                    errors=parsed.errors,
                    pane=panes_by_title.get(group.name),
                )
            )
        return statuses

    def status(self) -> SessionStatus:
        """Report the session state and, when running, each group's pane.

        Only groups that own a pane are listed in ``groups``; configured groups
        without one (skipped at start, or added since) are named in
        ``unstarted``. A pane whose ssh exited is reported dead; nothing is
        respawned.
        """
        if not self.is_running():
            logger.debug("Session not running", session=self.session_name)
            return SessionStatus(session_name=self.session_name, state=SessionState.ABSENT)

        panes = self.multiplexer.list_panes(self.session_name)
        for pane in panes:
            if pane.dead:
                logger.warning(
                    "Tunnel pane is dead",
                    group=pane.title,
                    pane=pane.pane_id,
                    exit_status=pane.exit_status,
                )
        statuses = self._group_statuses(panes)
        return SessionStatus(
            session_name=self.session_name,
            state=SessionState.RUNNING,
            panes=panes,
            groups=[group for group in statuses if group.pane is not None],
            unstarted=[group.name for group in statuses if group.pane is None],
        )

    def list_groups(self) -> list[GroupStatus]:
        """Configured groups with their parsed forwards, whatever the session state."""
        return self._group_statuses([])

    def attach(self) -> int:
        """Attach the terminal to the running session.

        Returns:
            Exit code of the multiplexer's attach command

        Raises:
            SessionError: If the session is not running
        """
        if not self.is_running():
            raise SessionError(
                f"Session '{self.session_name}' is not running. "
                "Start it first with 'ssh-tunnel-agent start'."
            )
        logger.info("Attaching to session", session=self.session_name)
        return self.multiplexer.attach(self.session_name)
