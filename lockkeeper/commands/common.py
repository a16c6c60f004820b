"""Helpers shared by the lockkeeper subcommands."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from lockkeeper.context import LockKeeperContext
from lockkeeper.exceptions import FileOperationError
from lockkeeper.utils.filesystem import find_lockfile

#: Shared ``--format`` choices.
OUTPUT_FORMATS = ["table", "json"]


def resolve_lockfile(ctx: LockKeeperContext, lockfile: Optional[Path]) -> Path:
    """Return the lockfile a command should work on.

    An explicit argument wins; otherwise the configured lockfile name is
    looked up in the working directory and its parents.

    Raises:
        FileOperationError: No lockfile was found.
    """
    if lockfile is not None:
        return lockfile

    name = ctx.config.lockfile
    found = find_lockfile(Path.cwd(), name=name)
    if found is None:
        raise FileOperationError(
            f"No {name} found in {Path.cwd()} or its parents",
            file_path=name,
            operation="find",
        )
    return found
