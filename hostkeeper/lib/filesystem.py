"""Filesystem utilities for maintenance steps."""

import logging
import shutil
import time
from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hostkeeper.core.context import Context

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


class FileError(Exception):
    """Error accessing a file."""

    pass


def read_file(
    path: str,
    context: "Context | None" = None,
    default: str | None = None,
) -> str:
    """
    Read file contents.

    Args:
        path: Path to file
        context: Execution context (for testing)
        default: Default value if file doesn't exist

    Returns:
        File contents

    Raises:
        FileError: If file doesn't exist and no default provided
    """
    if context is None:
        from hostkeeper.core.context import Context
        context = Context()

    try:
        return context.read_file(path)
    except FileNotFoundError:
        if default is not None:
            return default
        raise FileError(f"File not found: {path}")


def prune_files(
    directory: Path,
    patterns: list[str],
    max_age_days: int,
    now: float | None = None,
) -> list[Path]:
    """
    Delete old regular files matching any of the patterns.

    Only the top level of the directory is considered; subdirectories and
    non-matching files are left alone.

    Args:
        directory: Directory to prune
        patterns: fnmatch patterns for eligible file names
        max_age_days: Files with an mtime older than this are removed
        now: Override for the current time (for testing)

    Returns:
        Paths that were removed
    """
    if now is None:
        now = time.time()
    cutoff = now - max_age_days * SECONDS_PER_DAY

    removed = []
    for path in sorted(directory.iterdir()):
        if not path.is_file() or path.is_symlink():
            continue
        if not any(fnmatch(path.name, pattern) for pattern in patterns):
            continue
        if path.stat().st_mtime < cutoff:
            path.unlink()
            logger.debug("Removed expired file %s", path)
            removed.append(path)

    return removed


def backup_files(paths: list[str], dest: Path) -> tuple[list[Path], list[str]]:
    """
    Copy files into a backup directory, keeping their absolute layout.

    /etc/fstab is copied to <dest>/etc/fstab.

    Args:
        paths: Absolute paths to back up
        dest: Backup directory (created if needed)

    Returns:
        Tuple of (copied destination paths, source paths that were missing)
    """
    dest.mkdir(parents=True, exist_ok=True)
    copied = []
    missing = []

    for source in paths:
        src = Path(source)
        if not src.is_file():
            missing.append(source)
            continue
        target = dest / src.relative_to(src.anchor)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, target)
        copied.append(target)

    return copied, missing
