"""Execution context for testability."""

import os
import shutil
import subprocess
import sys
from pathlib import Path


class Context:
    """
    Wraps external calls for testability.

    In production: executes real commands
    In tests: can be replaced with MockContext
    """

    def check_tool(self, name: str) -> bool:
        """Check if a tool exists in PATH."""
        return shutil.which(name) is not None

    def run(
        self,
        cmd: list[str],
        check: bool = False,
        **kwargs,
    ) -> subprocess.CompletedProcess:
        """
        Run a command and return result.

        Args:
            cmd: Command and arguments as list
            check: Raise on non-zero exit code
            **kwargs: Additional subprocess.run arguments

        Returns:
            CompletedProcess with stdout, stderr, returncode
        """
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=check,
            **kwargs,
        )

    def run_combined(
        self,
        cmd: list[str] | str,
        shell: bool = False,
    ) -> subprocess.CompletedProcess:
        """
        Run a command with stderr folded into stdout.

        Args:
            cmd: Argument list, or a shell string when shell=True
            shell: Run through /bin/sh

        Returns:
            CompletedProcess whose stdout holds both streams in order
        """
        return subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            shell=shell,
        )

    def stream(self, cmd: list[str]) -> int:
        """
        Run a command, echoing its output line by line to sys.stdout.

        Output goes through the current sys.stdout so an installed log
        tee sees it.

        Returns:
            Process exit code
        """
        with subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            text=True,
            errors="replace",
        ) as proc:
            for line in proc.stdout:
                sys.stdout.write(line)
            return proc.wait()

    def read_file(self, path: str) -> str:
        """Read file contents."""
        return Path(path).read_text()

    def write_file(self, path: str, content: str) -> None:
        """Write file contents."""
        Path(path).write_text(content)

    def file_exists(self, path: str) -> bool:
        """Check if file exists."""
        return Path(path).exists()

    def get_env(self, key: str, default: str | None = None) -> str | None:
        """Get environment variable."""
        return os.environ.get(key, default)

    def geteuid(self) -> int:
        """Get effective user id."""
        return os.geteuid()

    def execvp(self, file: str, args: list[str]) -> None:
        """Replace the current process image."""
        os.execvp(file, args)

    def prompt(self, message: str) -> str:
        """Ask the operator for a line of input."""
        print(message, end="", flush=True)
        return input()
