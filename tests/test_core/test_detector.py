from __future__ import annotations

import pytest

from lockkeeper.core.detector import detect_format
from lockkeeper.exceptions import FormatError
from lockkeeper.models import LockfileKind


@pytest.mark.unit
class TestDetectFormat:
    """Tests for detect_format."""

    def test_classic_marker(self) -> None:
        """Test the yarn v1 comment marks a classic lockfile."""
        text = "# THIS IS AN AUTOGENERATED FILE.\n# yarn lockfile v1\n\n"

        assert detect_format(text) is LockfileKind.CLASSIC

    def test_modern_metadata(self) -> None:
        """Test a __metadata block marks a modern lockfile."""
        text = "# generated\n\n__metadata:\n  version: 6\n"

        assert detect_format(text) is LockfileKind.MODERN

    def test_classic_marker_after_entries_is_ignored(self) -> None:
        """Test the marker only counts in the leading comment block."""
        text = 'a@^1:\n  version "1.0.0"\n# yarn lockfile v1\n'

        with pytest.raises(FormatError):
            detect_format(text)

    def test_unknown_format_raises_with_path(self) -> None:
        """Test FormatError carries the file path."""
        with pytest.raises(FormatError) as exc_info:
            detect_format("{}\n", file_path="package-lock.json")

        assert exc_info.value.file_path == "package-lock.json"
        assert "package-lock.json" in str(exc_info.value)
