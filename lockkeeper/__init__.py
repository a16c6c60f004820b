"""
lockkeeper: yarn lockfile inspection and deduplication.

lockkeeper reads both yarn lockfile grammars (the classic ``yarn lockfile v1``
format and the YAML-based format written by newer yarn releases), keeps
every byte it does not need to change, and offers:

    • Queries of the ranges and versions locked for a package
    • Detection of duplicate resolutions that can share a version
    • In-place deduplication that keeps the grammar's layout
    • Structural diffs between two lockfiles
    • A name-level dependency graph

Example:
    >>> import asyncio
    >>> from lockkeeper import Lockfile
    >>> lockfile = asyncio.run(Lockfile.load("yarn.lock"))
    >>> lockfile.get("react")
"""

from __future__ import annotations

from lockkeeper.__version__ import __version__
from lockkeeper.core.lockfile import Lockfile
from lockkeeper.exceptions import (
    FormatError,
    LockKeeperError,
    ParseError,
    RangeError,
)

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "lockkeeper Contributors"
__license__ = "Apache-2.0"
__description__ = "Inspect, diff and deduplicate yarn lockfiles."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "__version__",
    "Lockfile",
    "LockKeeperError",
    "FormatError",
    "ParseError",
    "RangeError",
]
