"""Session log: stdout/stderr tee and retention."""

import re
import sys
from datetime import datetime
from pathlib import Path
from typing import IO

from hostkeeper.core.session import AUDIT_PREFIX, FINAL_PREFIX, LOG_PREFIX, Session
from hostkeeper.lib.filesystem import prune_files

# File names eligible for retention pruning
RETENTION_PATTERNS = [
    f"{LOG_PREFIX}*.log",
    f"{AUDIT_PREFIX}*.txt",
    f"{FINAL_PREFIX}*.txt",
]

ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


class LogSinkError(Exception):
    """The session log could not be set up."""

    pass


def strip_ansi(text: str) -> str:
    """Remove terminal colour escape sequences."""
    return ANSI_PATTERN.sub("", text)


class Tee:
    """
    Stream wrapper that copies every write into the session log.

    The log handle is shared between the stdout and stderr tees and flushed
    on every write, so interleaving in the log matches production order.
    """

    def __init__(self, stream: IO[str], log: IO[str]):
        self.stream = stream
        self.log = log

    def write(self, data: str) -> int:
        self.stream.write(data)
        self.log.write(strip_ansi(data))
        self.log.flush()
        return len(data)

    def flush(self) -> None:
        self.stream.flush()
        self.log.flush()

    def isatty(self) -> bool:
        return self.stream.isatty()

    def __getattr__(self, name: str):
        return getattr(self.stream, name)


class LogSink:
    """
    Session-scoped log destination.

    Creates the log directory, prunes expired logs and reports, and
    duplicates all subsequent process output into the session log.
    """

    def __init__(self, session: Session, retention_days: int = 30):
        """
        Initialize sink.

        Args:
            session: Session whose log file receives the transcript
            retention_days: Age after which old logs/reports are deleted
        """
        self.session = session
        self.retention_days = retention_days
        self.removed: list[Path] = []
        self._file = None
        self._saved: tuple[IO[str], IO[str]] | None = None

    def open(self, now: datetime | None = None) -> "LogSink":
        """
        Prepare the log directory and start capturing output.

        Raises:
            LogSinkError: If the log directory cannot be created or pruned, or the
                session log cannot be opened
        """
        log_dir = self.session.log_dir
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LogSinkError(f"Cannot create log directory {log_dir}: {e}") from e

        # Pruning happens once, before anything is appended this session
        try:
            self.removed = prune_files(
                log_dir,
                RETENTION_PATTERNS,
                self.retention_days,
                now=now.timestamp() if now else None,
            )
        except OSError as e:
            raise LogSinkError(f"Cannot prune expired files in {log_dir}: {e}") from e

        try:
            self._file = open(self.session.log_path, "a")
        except OSError as e:
            raise LogSinkError(f"Cannot open session log {self.session.log_path}: {e}") from e

        self._saved = (sys.stdout, sys.stderr)
        sys.stdout = Tee(sys.stdout, self._file)
        sys.stderr = Tee(sys.stderr, self._file)

        started = (now or datetime.now()).isoformat(sep=" ", timespec="seconds")
        print(f"=== hostkeeper maintenance started at {started} ===")
        print(f"Log file: {self.session.log_path}")
        if self.removed:
            print(f"Removed {len(self.removed)} log/report file(s) older than {self.retention_days} days")
        return self

    def close(self) -> None:
        """Restore the original streams and close the log file."""
        if self._saved is not None:
            sys.stdout.flush()
            sys.stderr.flush()
            sys.stdout, sys.stderr = self._saved
            self._saved = None
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "LogSink":
        """Context manager entry."""
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
