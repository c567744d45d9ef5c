"""Tests for filesystem utilities."""

import os
import time

import pytest

from hostkeeper.lib.filesystem import FileError, backup_files, prune_files, read_file


class TestReadFile:
    """Tests for read_file function."""

    def test_reads_mocked_file(self, mock_context):
        ctx = mock_context(file_contents={"/proc/cpuinfo": "vendor_id : GenuineIntel"})

        assert read_file("/proc/cpuinfo", context=ctx) == "vendor_id : GenuineIntel"

    def test_default_for_missing(self, mock_context):
        assert read_file("/missing", context=mock_context(), default="") == ""

    def test_raises_for_missing(self, mock_context):
        with pytest.raises(FileError, match="File not found"):
            read_file("/missing", context=mock_context())


class TestPruneFiles:
    """Tests for prune_files function."""

    def test_removes_only_old_matching_files(self, tmp_path):
        now = time.time()
        old_log = tmp_path / "maintenance_old.log"
        new_log = tmp_path / "maintenance_new.log"
        other = tmp_path / "other.log"
        for path in (old_log, new_log, other):
            path.write_text("x")
        os.utime(old_log, (now - 40 * 86400, now - 40 * 86400))
        os.utime(other, (now - 40 * 86400, now - 40 * 86400))

        removed = prune_files(tmp_path, ["maintenance_*.log"], 30, now=now)

        assert removed == [old_log]
        assert new_log.exists()
        assert other.exists()

    def test_skips_directories(self, tmp_path):
        now = time.time()
        directory = tmp_path / "maintenance_dir.log"
        directory.mkdir()
        os.utime(directory, (now - 40 * 86400, now - 40 * 86400))

        assert prune_files(tmp_path, ["maintenance_*.log"], 30, now=now) == []
        assert directory.is_dir()


class TestBackupFiles:
    """Tests for backup_files function."""

    def test_copies_preserving_layout(self, tmp_path):
        source = tmp_path / "etc" / "fstab"
        source.parent.mkdir()
        source.write_text("UUID=abc / btrfs defaults 0 0\n")
        dest = tmp_path / "backups"

        copied, missing = backup_files([str(source), str(tmp_path / "absent.conf")], dest)

        expected = dest / source.relative_to(source.anchor)
        assert copied == [expected]
        assert expected.read_text() == source.read_text()
        assert missing == [str(tmp_path / "absent.conf")]

    def test_creates_destination(self, tmp_path):
        dest = tmp_path / "backups_20250115_103000"

        backup_files([], dest)

        assert dest.is_dir()
