"""Tests for CLI."""

import subprocess
import sys

import pytest

from hostkeeper.cli import main, resolve_choice

PREREQ_CMD = ("pacman", "-S", "--needed", "--noconfirm", "smartmontools")


def run_cli(*args: str) -> subprocess.CompletedProcess:
    """Run hostkeeper CLI with arguments."""
    return subprocess.run(
        [sys.executable, "-m", "hostkeeper"] + list(args),
        capture_output=True,
        text=True,
    )


@pytest.fixture
def cli_args(tmp_path):
    """Common arguments pointing logs and config at tmp_path."""
    config = tmp_path / "config.yaml"
    config.write_text("prerequisites:\n  - smartmontools\nbackup_paths: []\n")
    log_dir = tmp_path / "logs"
    return ["--config", str(config), "--log-dir", str(log_dir)], log_dir


class TestCLI:
    """Tests for hostkeeper CLI."""

    def test_help_displays(self):
        """--help shows usage info."""
        result = run_cli("--help")

        assert result.returncode == 0
        assert "hostkeeper" in result.stdout
        assert "--interactive" in result.stdout

    def test_version_displays(self):
        """--version shows version."""
        result = run_cli("--version")

        assert result.returncode == 0
        assert "0.1.0" in result.stdout

    def test_invalid_option_shows_error(self):
        result = run_cli("--bogus")

        assert result.returncode != 0


class TestResolveChoice:
    @pytest.mark.parametrize("answer,key", [
        ("1", "update"),
        ("cleanup", "cleanup"),
        (" 3 ", "security"),
        ("AUDIT", "audit"),
        ("5", "exit"),
    ])
    def test_number_or_name(self, answer, key):
        assert resolve_choice(answer)[0] == key

    def test_unknown(self):
        assert resolve_choice("9") is None


class TestMain:
    """Scenario tests for main()."""

    def test_interactive_exit_runs_nothing(self, mock_context, cli_args):
        """Choosing exit immediately runs no steps and exits 0."""
        args, log_dir = cli_args
        ctx = mock_context(prompts=["5"])

        assert main(["--interactive", *args], context=ctx) == 0

        assert ctx.commands_run == []
        assert list(log_dir.glob("audit_*.txt")) == []
        assert list(log_dir.glob("full_report_*.txt")) == []
        assert len(list(log_dir.glob("maintenance_*.log"))) == 1

    def test_interactive_unknown_choice_redisplays(self, mock_context, cli_args):
        args, _ = cli_args
        ctx = mock_context(prompts=["nope", "exit"])

        assert main(["-i", *args], context=ctx) == 0
        assert len(ctx.prompts_shown) == 2

    def test_interactive_security_bundle(self, mock_context, cli_args):
        args, log_dir = cli_args
        ctx = mock_context(prompts=["security", "exit"], default_output="")

        assert main(["-i", *args], context=ctx) == 0

        audit = next(log_dir.glob("audit_*.txt")).read_text()
        assert "===== Listening Ports =====" in audit
        assert len(ctx.prompts_shown) == 2

    def test_package_install_failure(self, mock_context, cli_args):
        """Failed prerequisite install exits 1, is logged, and leaves no final report."""
        args, log_dir = cli_args
        ctx = mock_context(stream_returncodes={PREREQ_CMD: 1})

        assert main(args, context=ctx) == 1

        log_text = next(log_dir.glob("maintenance_*.log")).read_text()
        assert "[ERROR] Install prerequisite packages failed" in log_text
        assert list(log_dir.glob("full_report_*.txt")) == []

    def test_unattended_run_writes_final_report(self, mock_context, cli_args):
        args, log_dir = cli_args
        ctx = mock_context(default_output="")

        assert main(args, context=ctx) == 0

        reports = list(log_dir.glob("full_report_*.txt"))
        assert len(reports) == 1
        assert "=== AUDIT REPORT ===" in reports[0].read_text()

    def test_log_dir_failure(self, mock_context, tmp_path, capsys):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        ctx = mock_context()

        assert main(["--log-dir", str(blocker / "logs")], context=ctx) == 1
        assert "Cannot create log directory" in capsys.readouterr().err

    def test_no_privilege_available(self, mock_context, cli_args, capsys):
        args, _ = cli_args
        ctx = mock_context(euid=1000, tools_available=[])

        assert main(args, context=ctx) == 1
        assert "sudo is not available" in capsys.readouterr().err
