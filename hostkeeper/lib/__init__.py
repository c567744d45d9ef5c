"""Shared utility library for hostkeeper steps."""

from hostkeeper.lib.filesystem import FileError, backup_files, prune_files, read_file
from hostkeeper.lib.process import CommandError, check_tool, run_command, stream_command

__all__ = [
    "CommandError",
    "FileError",
    "backup_files",
    "check_tool",
    "prune_files",
    "read_file",
    "run_command",
    "stream_command",
]
