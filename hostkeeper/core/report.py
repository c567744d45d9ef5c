"""Audit report accumulation and final report aggregation."""

import sys
from pathlib import Path

from hostkeeper.core.session import Session

LOG_HEADER = "=== SESSION LOG ===\n"
AUDIT_HEADER = "\n=== AUDIT REPORT ===\n"


def section_header(title: str) -> str:
    """Header line that opens an audit report section."""
    return f"===== {title} ====="


class AuditReport:
    """
    Append-only audit report for one session.

    Sections land in the file in the order they are appended.
    """

    def __init__(self, path: Path):
        self.path = path

    def append_line(self, line: str) -> None:
        """Append a single line."""
        with open(self.path, "a") as f:
            f.write(line.rstrip("\n") + "\n")

    def append_section(self, title: str, body: str) -> None:
        """
        Append a titled section.

        Args:
            title: Section title, rendered as a header line
            body: Verbatim section text
        """
        with open(self.path, "a") as f:
            f.write(f"\n{section_header(title)}\n")
            if body:
                f.write(body if body.endswith("\n") else body + "\n")

    def read(self) -> str:
        """Return the report content so far."""
        if not self.path.exists():
            return ""
        return self.path.read_text()


def _read_or_empty(path: Path) -> str:
    if not path.exists():
        return ""
    return path.read_text(errors="replace")


def _unused_path(path: Path) -> Path:
    """Return path, or a numbered sibling if it already exists."""
    candidate = path
    n = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.stem}_{n}{path.suffix}")
        n += 1
    return candidate


def finalize(session: Session) -> Path:
    """
    Concatenate the session log and audit report into the final report.

    Sources are only read. Every call writes a new file; an existing final
    report is never overwritten.

    Args:
        session: Session whose files are aggregated

    Returns:
        Path of the written final report
    """
    sys.stdout.flush()
    sys.stderr.flush()

    log_text = _read_or_empty(session.log_path)
    audit_text = _read_or_empty(session.audit_path)

    target = _unused_path(session.final_report_path)
    with open(target, "x") as f:
        f.write(LOG_HEADER)
        f.write(log_text)
        f.write(AUDIT_HEADER)
        f.write(audit_text)

    return target
