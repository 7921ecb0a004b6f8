"""Command line interface for ssh-tunnel-agent.

Commands:
    - start: Create the tunnel session (optionally attach)
    - stop: Kill the tunnel session
    - restart: Stop, wait, start
    - status: Show the session and each tunnel group's pane
    - list: Show configured tunnel groups
    - attach: Attach the terminal to the session
    - paths: Show config and log file locations
"""

import functools
import sys
from pathlib import Path

import click

from . import __version__
from .common.exceptions import TunnelAgentError
from .common.logging import DEFAULT_LOG_FILE, get_logger, setup_logging
from .config import AgentConfig, candidate_config_paths, load_config
from .session import (
    GroupStatus,
    PaneInfo,
    SessionOrchestrator,
    SSHLauncher,
    StartResult,
    TmuxController,
)

logger = get_logger(__name__)

__all__ = ["main"]


class CLIContext:
    """State shared by every subcommand."""

    def __init__(self, config_path: Path | None, log_file: Path):
        self.config_path = config_path
        self.log_file = log_file
        self._config: AgentConfig | None = None

    @property
    def config(self) -> AgentConfig:
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    def orchestrator(self) -> SessionOrchestrator:
        return SessionOrchestrator(self.config, TmuxController(), SSHLauncher())


pass_cli_context = click.make_pass_decorator(CLIContext)


def handle_errors(func):
    """Report agent errors as one line on stderr and exit 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except TunnelAgentError as e:
            logger.error("Command failed", command=func.__name__, error=str(e))
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    return wrapper


def _pane_state(pane: PaneInfo) -> str:
    if pane.dead:
        detail = "dead" if pane.exit_status is None else f"dead, exit {pane.exit_status}"
        return click.style(f"[{detail}]", fg="red") + f" pane {pane.pane_id}"
    return click.style("[alive]", fg="green") + f" pane {pane.pane_id}"


def _describe_forwards(group: GroupStatus) -> None:
    for forward in group.forwards:
        click.echo(f"      {forward.forward_type.label:<7}{forward.describe()}")
    for error in group.errors:
        click.echo(f"      ! {error.spec}: {error.rule}")


def _report_start(result: StartResult) -> None:
    if result.already_running:
        click.echo(f"Session '{result.session_name}' is already running.")
        return
    click.echo(
        f"Started session '{result.session_name}' with "
        f"{len(result.started)} tunnel group(s): {', '.join(result.started)}"
    )
    if result.skipped:
        click.echo(
            f"Skipped tunnel group(s) with no valid forward specs: {', '.join(result.skipped)}",
            err=True,
        )


def _attach(orchestrator: SessionOrchestrator) -> None:
    code = orchestrator.attach()
    if code != 0:
        sys.exit(code)


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: first of the paths shown by 'paths')",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="SSH_TUNNEL_AGENT_LOG",
    default=DEFAULT_LOG_FILE,
    show_default=True,
    help="File every operation is logged to",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
@click.version_option(__version__, prog_name="ssh-tunnel-agent")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, log_file: Path, verbose: bool) -> None:
    """Run SSH tunnel groups as panes of one tmux session.

    \b
    Examples:
        ssh-tunnel-agent start --attach     # Start tunnels and watch them
        ssh-tunnel-agent status             # Show which tunnels are up
        ssh-tunnel-agent restart            # Pick up config changes
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help(), err=True)
        ctx.exit(2)

    setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=log_file,
        console_level="DEBUG" if verbose else "WARNING",
    )
    ctx.obj = CLIContext(config_path=config_path, log_file=log_file)


@main.command()
@click.option("--attach", "attach_after", is_flag=True, help="Attach to the session afterwards")
@pass_cli_context
@handle_errors
def start(cli: CLIContext, attach_after: bool) -> None:
    """Start the tunnel session; a running session is left as is."""
    orchestrator = cli.orchestrator()
    _report_start(orchestrator.start())
    if attach_after:
        _attach(orchestrator)


@main.command()
@pass_cli_context
@handle_errors
def stop(cli: CLIContext) -> None:
    """Kill the tunnel session and every tunnel in it."""
    orchestrator = cli.orchestrator()
    if orchestrator.stop():
        click.echo(f"Stopped session '{orchestrator.session_name}'.")
    else:
        click.echo(f"Session '{orchestrator.session_name}' is not running.")


@main.command()
@click.option("--attach", "attach_after", is_flag=True, help="Attach to the session afterwards")
@pass_cli_context
@handle_errors
def restart(cli: CLIContext, attach_after: bool) -> None:
    """Stop the session, wait for ports to free up, start it again."""
    orchestrator = cli.orchestrator()
    _report_start(orchestrator.restart())
    if attach_after:
        _attach(orchestrator)


@main.command()
@pass_cli_context
@handle_errors
def status(cli: CLIContext) -> None:
    """Show whether the session runs and the state of each tunnel group."""
    report = cli.orchestrator().status()
    if not report.running:
        click.echo(f"Session '{report.session_name}' is not running.")
        return

    click.echo(f"Session '{report.session_name}' is running ({len(report.panes)} pane(s))")
    for group in report.groups:
        click.echo(f"  {group.name} {_pane_state(group.pane)}")
        _describe_forwards(group)
    for name in report.unstarted:
        click.echo(f"  {name} " + click.style("[no pane]", fg="yellow"))


@main.command(name="list")
@pass_cli_context
@handle_errors
def list_command(cli: CLIContext) -> None:
    """List configured tunnel groups and their forward specs."""
    orchestrator = cli.orchestrator()
    groups = orchestrator.list_groups()
    if not groups:
        click.echo("No tunnel groups configured.")
        return

    connection = cli.config.connection
    click.echo(f"Tunnel groups for {connection.destination} (port {connection.port}):")
    for group in groups:
        click.echo(f"  {group.name}: {group.raw_spec_text}")
        _describe_forwards(group)


@main.command()
@pass_cli_context
@handle_errors
def attach(cli: CLIContext) -> None:
    """Attach the terminal to the running tunnel session."""
    _attach(cli.orchestrator())


@main.command()
@pass_cli_context
def paths(cli: CLIContext) -> None:
    """Show config file candidates and the log file."""
    click.echo("Config file candidates (first existing wins):")
    for candidate in candidate_config_paths():
        marker = "*" if candidate.is_file() else " "
        click.echo(f"  {marker} {candidate}")
    if cli.config_path is not None:
        click.echo(f"Config override: {cli.config_path}")
    click.echo(f"Log file: {cli.log_file}")


@main.command(name="help")
@click.pass_context
def help_command(ctx: click.Context) -> None:
    """Show this message."""
    parent = ctx.parent if ctx.parent is not None else ctx
    click.echo(parent.get_help())


if __name__ == "__main__":
    main()
