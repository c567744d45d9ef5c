"""Privilege elevation and sudo credential refresh."""

import logging
import sys
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hostkeeper.core.context import Context

logger = logging.getLogger(__name__)

REFRESH_COMMAND = ["sudo", "-n", "-v"]


class PrivilegeError(Exception):
    """Elevated privileges are unavailable."""

    pass


def ensure_elevated(argv: list[str], context: "Context") -> None:
    """
    Make sure the session runs as root.

    Returns immediately when already root. Otherwise the process image is
    replaced by `sudo <python> -m hostkeeper <argv...>`; the elevated copy
    becomes the session and this call never returns.

    Args:
        argv: Command-line arguments to forward
        context: Execution context

    Raises:
        PrivilegeError: If sudo is missing or cannot be executed
    """
    if context.geteuid() == 0:
        return

    if not context.check_tool("sudo"):
        raise PrivilegeError("Root privileges required and sudo is not available")

    cmd = ["sudo", sys.executable, "-m", "hostkeeper", *argv]
    try:
        context.execvp("sudo", cmd)
    except OSError as e:
        raise PrivilegeError(f"Failed to re-run with sudo: {e}") from e


class TokenKeeper:
    """
    Keeps the sudo timestamp fresh while the pipeline runs.

    The refresh thread is bound to the `with` block: leaving it stops and
    joins the thread, so the keeper cannot outlive the session.
    """

    def __init__(self, context: "Context", interval: float = 60.0):
        """
        Initialize keeper.

        Args:
            context: Execution context used for the refresh command
            interval: Seconds between refreshes
        """
        self.context = context
        self.interval = interval
        self.refreshes = 0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def _loop(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                result = self.context.run(REFRESH_COMMAND)
            except OSError as e:
                logger.debug("sudo refresh failed: %s", e)
                continue
            self.refreshes += 1
            if result.returncode != 0:
                logger.debug("sudo refresh exited with %d", result.returncode)

    def start(self) -> None:
        """Start the refresh thread."""
        self._thread = threading.Thread(
            target=self._loop,
            name="hostkeeper-token-keeper",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop the refresh thread and wait for it to exit."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self) -> "TokenKeeper":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.stop()
