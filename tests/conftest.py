"""Shared test fixtures."""

import subprocess
import sys
from pathlib import Path

import pytest

# Add project root to path for package imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from hostkeeper.core.config import Settings  # noqa: E402
from hostkeeper.core.output import Console  # noqa: E402
from hostkeeper.core.session import Session  # noqa: E402

CommandKey = tuple | str
CommandOutput = str | Exception | subprocess.CompletedProcess


class MockContext:
    """Mock Context for testing steps without real system access."""

    def __init__(
        self,
        tools_available: list[str] | None = None,
        command_outputs: dict[CommandKey, CommandOutput] | None = None,
        stream_returncodes: dict[tuple, int] | None = None,
        file_contents: dict[str, str] | None = None,
        env: dict[str, str] | None = None,
        euid: int = 0,
        prompts: list[str] | None = None,
        default_output: str | None = None,
    ):
        self.tools_available = set(tools_available or [])
        self.command_outputs = command_outputs or {}
        self.stream_returncodes = stream_returncodes or {}
        self.file_contents = file_contents or {}
        self.env = env or {}
        self.euid = euid
        self.prompts = list(prompts or [])
        self.default_output = default_output
        self.commands_run: list[list[str] | str] = []
        self.prompts_shown: list[str] = []
        self.exec_calls: list[tuple[str, list[str]]] = []
        self.written_files: dict[str, str] = {}

    def check_tool(self, name: str) -> bool:
        """Check if tool is in mocked available list."""
        return name in self.tools_available

    def _lookup(self, key: CommandKey, cmd) -> subprocess.CompletedProcess:
        if key not in self.command_outputs:
            if self.default_output is not None:
                return subprocess.CompletedProcess(cmd, 0, self.default_output, "")
            raise KeyError(f"No mock output for command: {cmd}")

        output = self.command_outputs[key]
        if isinstance(output, Exception):
            raise output
        if isinstance(output, subprocess.CompletedProcess):
            return output

        return subprocess.CompletedProcess(
            cmd,
            returncode=0,
            stdout=output,
            stderr="",
        )

    def run(
        self,
        cmd: list[str],
        check: bool = False,
        **kwargs,
    ) -> subprocess.CompletedProcess:
        """Return mocked command output."""
        self.commands_run.append(cmd)
        return self._lookup(tuple(cmd), cmd)

    def run_combined(
        self,
        cmd: list[str] | str,
        shell: bool = False,
    ) -> subprocess.CompletedProcess:
        """Return mocked combined output; shell commands are keyed by string."""
        self.commands_run.append(cmd)
        key = cmd if shell else tuple(cmd)
        return self._lookup(key, cmd)

    def stream(self, cmd: list[str]) -> int:
        """Record a streamed command and return its mocked exit code."""
        self.commands_run.append(cmd)
        return self.stream_returncodes.get(tuple(cmd), 0)

    def read_file(self, path: str) -> str:
        """Return mocked file content."""
        if path not in self.file_contents:
            raise FileNotFoundError(f"No mock content for: {path}")
        return self.file_contents[path]

    def write_file(self, path: str, content: str) -> None:
        """Record a file write."""
        self.written_files[path] = content
        self.file_contents[path] = content

    def file_exists(self, path: str) -> bool:
        """Check if path is in mocked files."""
        return path in self.file_contents

    def get_env(self, key: str, default: str | None = None) -> str | None:
        """Return mocked environment variable."""
        return self.env.get(key, default)

    def geteuid(self) -> int:
        """Return mocked effective uid."""
        return self.euid

    def execvp(self, file: str, args: list[str]) -> None:
        """Record an exec instead of replacing the process."""
        self.exec_calls.append((file, args))

    def prompt(self, message: str) -> str:
        """Return the next scripted answer; EOF when none are left."""
        self.prompts_shown.append(message)
        if not self.prompts:
            raise EOFError
        return self.prompts.pop(0)


@pytest.fixture
def mock_context():
    """Factory fixture for creating MockContext instances."""
    def _create(**kwargs) -> MockContext:
        return MockContext(**kwargs)
    return _create


@pytest.fixture
def session(tmp_path) -> Session:
    """Session rooted in a temporary log directory."""
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    return Session(timestamp="20250115_103000", log_dir=log_dir)


@pytest.fixture
def console() -> Console:
    """Console without colour codes."""
    return Console(color=False)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a temporary log directory."""
    return Settings(log_dir=tmp_path / "logs", backup_paths=[])
