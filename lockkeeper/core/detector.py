"""Lockfile grammar detection."""

from __future__ import annotations

from typing import Optional

from lockkeeper.models.entry import LockfileKind
from lockkeeper.exceptions import FormatError
from lockkeeper.constants import CLASSIC_LOCKFILE_MARKER, MODERN_METADATA_KEY


def detect_format(text: str, *, file_path: Optional[str] = None) -> LockfileKind:
    """Classify lockfile text as classic or modern.

    The classic marker must appear in the comment preamble; the modern
    ``__metadata:`` key must start a line.

    Raises:
        FormatError: Neither marker was found.
    """
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if not stripped.startswith("#"):
            break
        if stripped == CLASSIC_LOCKFILE_MARKER:
            return LockfileKind.CLASSIC

    for line in text.splitlines():
        if line.rstrip() == f"{MODERN_METADATA_KEY}:":
            return LockfileKind.MODERN

    raise FormatError(
        "Unrecognized lockfile format: expected a yarn v1 header "
        f"or a {MODERN_METADATA_KEY} block",
        file_path=file_path,
    )
