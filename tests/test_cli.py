"""Tests for the click command line interface."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from ssh_tunnel_agent.cli import main
from ssh_tunnel_agent.session.orchestrator import SESSION_NAME

CONFIG = """
[connection]
host = "bastion.example.com"
user = "alice"

[tunnels]
web = "L:8080:web.internal:80 D:bogus"
proxy = "D:1080"
broken = "X:1"
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(CONFIG)
    return path


@pytest.fixture
def log_file(tmp_path):
    return tmp_path / "logs" / "agent.log"


@pytest.fixture
def run(config_file, log_file, fake_mux, fake_launcher, monkeypatch):
    """Invoke the CLI against the fakes with an isolated config and log file."""
    monkeypatch.setattr("ssh_tunnel_agent.cli.TmuxController", lambda: fake_mux)
    monkeypatch.setattr("ssh_tunnel_agent.cli.SSHLauncher", lambda: fake_launcher)
    runner = CliRunner()

    def invoke(*args, config=config_file):
        options = ["--log-file", str(log_file)]
        if config is not None:
            options += ["--config", str(config)]
        return runner.invoke(main, [*options, *args])

    return invoke


class TestCLIUsage:
    """Test usage and help handling"""

    def test_no_command_prints_usage(self, run):
        result = run()

        assert result.exit_code == 2
        assert "Usage:" in result.output

    def test_unknown_command(self, run):
        result = run("launch")

        assert result.exit_code == 2
        assert "No such command" in result.output

    def test_unknown_flag(self, run):
        result = run("stop", "--force")

        assert result.exit_code == 2

    def test_help_command(self, run):
        result = run("help")

        assert result.exit_code == 0
        assert "Usage:" in result.output
        for command in ("start", "stop", "restart", "status", "list", "attach"):
            assert command in result.output

    def test_version(self, run):
        result = run("--version")

        assert result.exit_code == 0
        assert "ssh-tunnel-agent" in result.output


class TestCLILifecycle:
    """Test lifecycle commands"""

    def test_start(self, run, fake_mux):
        result = run("start")

        assert result.exit_code == 0
        assert "Started session 'ssh-tunnel-agent' with 2 tunnel group(s): proxy, web" in result.output
        assert "broken" in result.output
        assert [pane.title for pane in fake_mux.sessions[SESSION_NAME]] == ["proxy", "web"]

    def test_start_twice(self, run, fake_mux):
        run("start")

        result = run("start")

        assert result.exit_code == 0
        assert "already running" in result.output
        assert len(fake_mux.method_calls("create_session")) == 1

    def test_start_with_attach(self, run, fake_mux):
        result = run("start", "--attach")

        assert result.exit_code == 0
        assert fake_mux.method_calls("attach") == [("attach", SESSION_NAME)]

    def test_attach_exit_code_propagates(self, run, fake_mux):
        run("start")
        fake_mux.attach_code = 3

        result = run("attach")

        assert result.exit_code == 3

    def test_start_nothing_valid_is_fatal(self, run, tmp_path, fake_mux):
        config = tmp_path / "bad.toml"
        config.write_text('[tunnels]\nbroken = "X:1"\n')

        result = run("start", config=config)

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert fake_mux.sessions == {}

    def test_missing_ssh_is_fatal(self, run, fake_launcher):
        fake_launcher.binary = None

        result = run("start")

        assert result.exit_code == 1
        assert "ssh" in result.output

    def test_stop(self, run, fake_mux):
        run("start")

        result = run("stop")

        assert result.exit_code == 0
        assert "Stopped session" in result.output
        assert fake_mux.sessions == {}

    def test_stop_when_not_running(self, run):
        result = run("stop")

        assert result.exit_code == 0
        assert "not running" in result.output

    @patch("ssh_tunnel_agent.session.orchestrator.time.sleep")
    def test_restart(self, mock_sleep, run, fake_mux):
        run("start")

        result = run("restart")

        assert result.exit_code == 0
        assert "Started session" in result.output
        assert len(fake_mux.method_calls("kill_session")) == 1
        mock_sleep.assert_called_once()

    def test_attach_when_not_running(self, run):
        result = run("attach")

        assert result.exit_code == 1
        assert "Start it first" in result.output

    def test_missing_explicit_config(self, run, tmp_path):
        result = run("list", config=tmp_path / "nope.toml")

        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_operations_are_logged(self, run, log_file):
        run("start")

        contents = log_file.read_text()
        assert "Session started" in contents
        assert "Invalid forward spec" in contents
        assert "D:bogus" in contents


class TestCLIReporting:
    """Test status, list and paths output"""

    def test_status_not_running(self, run):
        result = run("status")

        assert result.exit_code == 0
        assert "is not running" in result.output

    def test_status_running(self, run, fake_mux):
        run("start")
        fake_mux.mark_dead("proxy", exit_status=255)

        result = run("status")

        assert result.exit_code == 0
        assert "is running (2 pane(s))" in result.output
        assert "[alive]" in result.output
        assert "[dead, exit 255]" in result.output
        assert "broken [no pane]" in result.output
        assert "SOCKS  localhost:1080" in result.output
        assert "Local  localhost:8080 -> web.internal:80" in result.output
        assert "! D:bogus" in result.output

    def test_list(self, run, fake_mux):
        result = run("list")

        assert result.exit_code == 0
        assert "alice@bastion.example.com" in result.output
        assert "web: L:8080:web.internal:80 D:bogus" in result.output
        assert "! X:1: unknown forward type" in result.output
        assert fake_mux.calls == []

    def test_list_empty(self, run, tmp_path):
        config = tmp_path / "empty.toml"
        config.write_text("")

        result = run("list", config=config)

        assert result.exit_code == 0
        assert "No tunnel groups configured." in result.output

    def test_paths(self, run, log_file, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

        result = run("paths", config=None)

        assert result.exit_code == 0
        assert str(tmp_path / "xdg" / "ssh-tunnel-agent" / "config.toml") in result.output
        assert f"Log file: {log_file}" in result.output
