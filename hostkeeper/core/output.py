"""Console status lines for maintenance steps."""

import sys

COLORS = {
    "INFO": "\033[34m",
    "OK": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "STEP": "\033[1;36m",
}
RESET = "\033[0m"


class Console:
    """
    Tagged status output.

    Lines go to whatever sys.stdout is at call time, so the session log
    tee captures them. Colour is applied only when the real terminal is
    a TTY; the tee strips escape codes before they reach the log.
    """

    def __init__(self, color: bool | None = None):
        if color is None:
            color = sys.__stdout__ is not None and sys.__stdout__.isatty()
        self.color = color
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def _emit(self, tag: str, message: str) -> None:
        label = f"[{tag}]"
        if self.color:
            label = f"{COLORS[tag]}{label}{RESET}"
        print(f"{label} {message}", flush=True)

    def step(self, message: str) -> None:
        """Announce the start of a pipeline step."""
        self._emit("STEP", message)

    def info(self, message: str) -> None:
        self._emit("INFO", message)

    def ok(self, message: str) -> None:
        self._emit("OK", message)

    def warning(self, message: str) -> None:
        """Record and print a warning."""
        self.warnings.append(message)
        self._emit("WARNING", message)

    def error(self, message: str) -> None:
        """Record and print an error."""
        self.errors.append(message)
        self._emit("ERROR", message)

    @property
    def summary(self) -> str:
        """One-line outcome of the session so far."""
        if self.errors:
            return f"{len(self.errors)} error(s), {len(self.warnings)} warning(s)"
        if self.warnings:
            return f"{len(self.warnings)} warning(s)"
        return "ok"
