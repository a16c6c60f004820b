"""
Filesystem utilities for lockkeeper.

This module provides safe helpers for reading and atomically rewriting
lockfiles, backing them up, locating them, and reading ``package.json``
manifests. All filesystem errors are normalized to ``FileOperationError``.
"""

from __future__ import annotations

import os
import json
import shutil
import tempfile
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, Optional, Union

from lockkeeper.utils.logger import get_logger
from lockkeeper.exceptions import FileOperationError
from lockkeeper.constants import DEFAULT_LOCKFILE_NAME, MAX_FILE_SIZE


logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _validated_file(path: Path, *, must_exist: bool = True) -> Path:
    """Validate and resolve a file path."""
    if must_exist:
        if not path.exists():
            raise FileOperationError(
                f"File not found: {path}",
                file_path=str(path),
                operation="read",
            )
        if not path.is_file():
            raise FileOperationError(
                f"Not a file: {path}",
                file_path=str(path),
                operation="read",
            )
    return path.resolve()


def _atomic_write(target: Path, content: str) -> None:
    """Atomically write text to a file using a temporary file + replace."""
    target.parent.mkdir(parents=True, exist_ok=True)
    temp_path: Optional[Path] = None

    try:
        # newline="" keeps the line endings already present in ``content``
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="",
            dir=str(target.parent),
            delete=False,
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())

        temp_path.replace(target)

    except Exception as exc:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
                logger.debug("Cleaned up temporary file: %s", temp_path)
            except OSError as cleanup_exc:
                logger.warning(
                    "Failed to clean up temporary file %s: %s",
                    temp_path,
                    cleanup_exc,
                )

        raise FileOperationError(
            f"Atomic write failed: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Read a text file exactly as stored, with optional size limits.

    Line endings are not translated so that a lockfile can be written
    back byte for byte.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.
    """
    path = _validated_file(Path(file_path))
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        with open(path, "r", encoding=encoding, newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def safe_write_file(
    file_path: PathLike,
    content: str,
    *,
    create_backup: bool = False,
) -> Optional[Path]:
    """Write text to a file using atomic replacement.

    Args:
        file_path: Destination path.
        content: Text content to write.
        create_backup: Whether to create a timestamped backup first.

    Returns:
        Path to the created backup, if any.
    """
    path = Path(file_path)
    backup: Optional[Path] = None

    if create_backup and path.is_file():
        backup = create_timestamped_backup(path)

    _atomic_write(path, content)
    logger.debug("Wrote %d characters to %s", len(content), path)

    return backup


def create_timestamped_backup(file_path: PathLike) -> Path:
    """Create a timestamped backup with format:
    ``{name}.{timestamp}.backup``.
    """
    path = Path(file_path)

    if not path.is_file():
        raise FileOperationError(
            f"Cannot backup invalid file: {path}",
            file_path=str(path),
            operation="backup",
        )

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    backup_path = path.parent / f"{path.name}.{timestamp}.backup"

    try:
        shutil.copy2(path, backup_path)
        logger.debug("Created timestamped backup: %s", backup_path)
        return backup_path
    except OSError as exc:
        raise FileOperationError(
            f"Failed to create backup: {exc}",
            file_path=str(path),
            operation="backup",
            original_error=exc,
        ) from exc


def find_lockfile(
    directory: PathLike = ".",
    *,
    name: str = DEFAULT_LOCKFILE_NAME,
) -> Optional[Path]:
    """Search ``directory`` and its parents for a lockfile.

    Returns:
        Path of the nearest lockfile, or ``None`` when none exists.
    """
    current = Path(directory).resolve()
    for candidate_dir in (current, *current.parents):
        candidate = candidate_dir / name
        if candidate.is_file():
            logger.debug("Found lockfile: %s", candidate)
            return candidate
    return None


def read_json_file(file_path: PathLike) -> Dict[str, Any]:
    """Read a JSON object from disk (used for ``package.json`` files)."""
    path = Path(file_path)
    content = safe_read_file(path)

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise FileOperationError(
            f"Invalid JSON: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc

    if not isinstance(data, dict):
        raise FileOperationError(
            "Expected a JSON object",
            file_path=str(path),
            operation="read",
        )
    return data
