"""Recommendations derived from the session log and disk usage."""

import re
from collections import Counter
from pathlib import Path
from typing import TYPE_CHECKING

from hostkeeper.core.logging import strip_ansi

if TYPE_CHECKING:
    from hostkeeper.core.context import Context
    from hostkeeper.core.report import AuditReport

SEVERITY_PATTERN = re.compile(r"error|warning|fail", re.IGNORECASE)

# Virtual filesystems left out of the disk usage table
EXCLUDED_FS_TYPES = ["tmpfs", "devtmpfs", "squashfs", "overlay", "efivarfs"]

DF_COMMAND = ["df", "-hT"] + [arg for fs in EXCLUDED_FS_TYPES for arg in ("-x", fs)]

FLAG = "!! "
NO_FLAG = "   "


def scan_log(log_path: Path) -> list[tuple[int, str]]:
    """
    Count distinct severity lines in a log.

    Args:
        log_path: Session log to scan

    Returns:
        (count, line) pairs, most frequent first, ties by line text
    """
    if not log_path.exists():
        return []

    counts: Counter[str] = Counter()
    with open(log_path, errors="replace") as f:
        for raw in f:
            line = strip_ansi(raw).strip()
            if line and SEVERITY_PATTERN.search(line):
                counts[line] += 1

    return sorted(((n, line) for line, n in counts.items()), key=lambda item: (-item[0], item[1]))


def _usage_percent(row: str) -> int | None:
    # Filesystem Type Size Used Avail Use% Mounted on
    parts = row.split(None, 6)
    if len(parts) < 7 or not parts[5].endswith("%"):
        return None
    try:
        return int(parts[5].rstrip("%"))
    except ValueError:
        return None


def disk_usage_table(context: "Context", threshold: int = 80) -> list[str]:
    """
    Render df output with filesystems at or above threshold flagged.

    Args:
        context: Execution context
        threshold: Use% at which a row is flagged

    Returns:
        Table lines
    """
    result = context.run(DF_COMMAND)
    lines = [line for line in (result.stdout or "").splitlines() if line.strip()]
    if not lines:
        return ["Disk usage unavailable"]

    table = [NO_FLAG + lines[0]]
    for row in lines[1:]:
        usage = _usage_percent(row)
        flagged = usage is not None and usage >= threshold
        table.append((FLAG if flagged else NO_FLAG) + row)
    return table


def generate(
    log_path: Path,
    report: "AuditReport",
    context: "Context",
    threshold: int = 80,
) -> None:
    """
    Append the recommendations section to the audit report.

    The session log is only read.
    """
    findings = scan_log(log_path)
    lines = []
    if findings:
        lines.append("Errors and warnings seen during this session:")
        lines.extend(f"  {count}x {line}" for count, line in findings)
    else:
        lines.append("No errors or warnings found in session log.")

    lines.append("")
    lines.append(f"Disk usage (filesystems at or above {threshold}% marked with !!):")
    lines.extend(disk_usage_table(context, threshold))

    report.append_section("Recommendations", "\n".join(lines))
