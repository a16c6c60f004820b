"""
Centralized constants for lockkeeper.

This module defines immutable configuration values used across lockkeeper,
including lockfile grammar markers, file names, configuration defaults
and logging formats. All values are intended to be treated as read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Lockfile grammar markers
# ---------------------------------------------------------------------------

#: Comment marker written at the top of every classic (v1) lockfile.
CLASSIC_LOCKFILE_MARKER: Final[str] = "# yarn lockfile v1"

#: Top-level key holding the metadata block of a modern lockfile.
MODERN_METADATA_KEY: Final[str] = "__metadata"

#: Version recorded for packages that resolve to a workspace member.
USE_LOCAL_VERSION: Final[str] = "0.0.0-use.local"

#: Descriptor protocols stripped from ranges for semver comparisons.
STRIPPED_PROTOCOLS: Final[Sequence[str]] = ("npm", "workspace")

#: Protocol marking a link to a workspace member.
WORKSPACE_PROTOCOL: Final[str] = "workspace"

#: Entry fields holding dependency maps.
DEPENDENCY_FIELDS: Final[Sequence[str]] = (
    "dependencies",
    "optionalDependencies",
    "peerDependencies",
)

#: Entry fields compared as checksums when diffing (classic, modern).
CHECKSUM_FIELDS: Final[Sequence[str]] = ("integrity", "checksum")

# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

#: Default lockfile name.
DEFAULT_LOCKFILE_NAME: Final[str] = "yarn.lock"

#: Manifest file name of a JavaScript package.
PACKAGE_JSON_NAME: Final[str] = "package.json"

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Create a timestamped backup before rewriting a lockfile.
DEFAULT_BACKUP: Final[bool] = False

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading lockfiles.
MAX_FILE_SIZE: Final[int] = 64 * 1024 * 1024  # 64 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
