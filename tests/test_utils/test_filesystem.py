from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from lockkeeper.exceptions import FileOperationError
from lockkeeper.utils.filesystem import (
    create_timestamped_backup,
    find_lockfile,
    read_json_file,
    safe_read_file,
    safe_write_file,
)


@pytest.mark.unit
class TestSafeReadFile:
    """Tests for safe_read_file."""

    def test_reads_content(self, tmp_path: Path) -> None:
        """Test plain text is returned as stored."""
        path = tmp_path / "yarn.lock"
        path.write_text("a@^1:\n  version \"1.0.0\"\n", encoding="utf-8")

        assert safe_read_file(path) == 'a@^1:\n  version "1.0.0"\n'

    def test_line_endings_are_kept(self, tmp_path: Path) -> None:
        """Test CRLF line endings survive reading."""
        path = tmp_path / "yarn.lock"
        path.write_bytes(b"a@^1:\r\n  version 1.0.0\r\n")

        assert safe_read_file(path) == "a@^1:\r\n  version 1.0.0\r\n"

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises FileOperationError."""
        with pytest.raises(FileOperationError, match="File not found") as exc_info:
            safe_read_file(tmp_path / "missing.lock")

        assert exc_info.value.operation == "read"

    def test_directory(self, tmp_path: Path) -> None:
        """Test a directory is not read."""
        with pytest.raises(FileOperationError, match="Not a file"):
            safe_read_file(tmp_path)

    def test_size_limit(self, tmp_path: Path) -> None:
        """Test files above max_size are rejected."""
        path = tmp_path / "big.lock"
        path.write_text("x" * 100, encoding="utf-8")

        with pytest.raises(FileOperationError, match="File too large"):
            safe_read_file(path, max_size=10)

        assert len(safe_read_file(path, max_size=None)) == 100

    def test_invalid_encoding(self, tmp_path: Path) -> None:
        """Test undecodable bytes are reported as a read failure."""
        path = tmp_path / "binary.lock"
        path.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(FileOperationError, match="Failed to read file"):
            safe_read_file(path)


@pytest.mark.unit
class TestSafeWriteFile:
    """Tests for safe_write_file."""

    def test_writes_and_creates_parents(self, tmp_path: Path) -> None:
        """Test missing parent directories are created."""
        path = tmp_path / "nested" / "dir" / "yarn.lock"

        assert safe_write_file(path, "content\n") is None
        assert path.read_text(encoding="utf-8") == "content\n"

    def test_line_endings_are_written_verbatim(self, tmp_path: Path) -> None:
        """Test CRLF content is not translated."""
        path = tmp_path / "yarn.lock"

        safe_write_file(path, "a\r\nb\n")

        assert path.read_bytes() == b"a\r\nb\n"

    def test_backup(self, tmp_path: Path) -> None:
        """Test the previous content is kept in a timestamped backup."""
        path = tmp_path / "yarn.lock"
        path.write_text("old\n", encoding="utf-8")

        backup = safe_write_file(path, "new\n", create_backup=True)

        assert backup is not None
        assert backup.name.startswith("yarn.lock.")
        assert backup.name.endswith(".backup")
        assert backup.read_text(encoding="utf-8") == "old\n"
        assert path.read_text(encoding="utf-8") == "new\n"

    def test_backup_skipped_for_new_file(self, tmp_path: Path) -> None:
        """Test nothing is backed up when the file does not exist yet."""
        path = tmp_path / "yarn.lock"

        assert safe_write_file(path, "new\n", create_backup=True) is None

    def test_failed_write_leaves_no_temp_file(self, tmp_path: Path) -> None:
        """Test a failing replace cleans up and raises FileOperationError."""
        path = tmp_path / "yarn.lock"
        path.write_text("old\n", encoding="utf-8")

        with patch.object(Path, "replace", side_effect=OSError("disk full")):
            with pytest.raises(FileOperationError, match="Atomic write failed"):
                safe_write_file(path, "new\n")

        assert path.read_text(encoding="utf-8") == "old\n"
        assert [p.name for p in tmp_path.iterdir()] == ["yarn.lock"]


@pytest.mark.unit
class TestCreateTimestampedBackup:
    """Tests for create_timestamped_backup."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file cannot be backed up."""
        with pytest.raises(FileOperationError, match="Cannot backup"):
            create_timestamped_backup(tmp_path / "missing.lock")

    def test_backup_next_to_file(self, tmp_path: Path) -> None:
        """Test the backup is a copy in the same directory."""
        path = tmp_path / "yarn.lock"
        path.write_text("data\n", encoding="utf-8")

        backup = create_timestamped_backup(path)

        assert backup.parent == tmp_path
        assert backup.read_text(encoding="utf-8") == "data\n"


@pytest.mark.unit
class TestFindLockfile:
    """Tests for find_lockfile."""

    def test_in_directory(self, tmp_path: Path) -> None:
        """Test a lockfile in the start directory is found."""
        (tmp_path / "yarn.lock").write_text("", encoding="utf-8")

        assert find_lockfile(tmp_path) == (tmp_path / "yarn.lock").resolve()

    def test_in_parent(self, tmp_path: Path) -> None:
        """Test parents are searched."""
        (tmp_path / "yarn.lock").write_text("", encoding="utf-8")
        child = tmp_path / "packages" / "app"
        child.mkdir(parents=True)

        assert find_lockfile(child) == (tmp_path / "yarn.lock").resolve()

    def test_custom_name(self, tmp_path: Path) -> None:
        """Test a different lockfile name can be searched for."""
        (tmp_path / "custom.lock").write_text("", encoding="utf-8")

        assert find_lockfile(tmp_path, name="custom.lock") is not None
        assert find_lockfile(tmp_path, name="other-unlikely-name.lock") is None


@pytest.mark.unit
class TestReadJsonFile:
    """Tests for read_json_file."""

    def test_object(self, tmp_path: Path) -> None:
        """Test a JSON object is returned."""
        path = tmp_path / "package.json"
        path.write_text(json.dumps({"name": "a"}), encoding="utf-8")

        assert read_json_file(path) == {"name": "a"}

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test malformed JSON raises FileOperationError."""
        path = tmp_path / "package.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(FileOperationError, match="Invalid JSON"):
            read_json_file(path)

    def test_non_object(self, tmp_path: Path) -> None:
        """Test a JSON array is rejected."""
        path = tmp_path / "package.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(FileOperationError, match="Expected a JSON object"):
            read_json_file(path)
