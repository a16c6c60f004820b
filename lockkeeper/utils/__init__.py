"""
Utility helpers for lockkeeper.

This package provides reusable utilities used across lockkeeper, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers
- Semantic version helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from lockkeeper.utils.filesystem import (
    create_timestamped_backup,
    find_lockfile,
    read_json_file,
    safe_read_file,
    safe_write_file,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from lockkeeper.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
    verbosity_to_level,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from lockkeeper.utils.console import (
    colorize_change,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from lockkeeper.utils.version_utils import (
    compare_versions,
    is_valid_range,
    min_version,
    satisfies,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "reconfigure_console",
    "colorize_change",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    "verbosity_to_level",
    # Filesystem
    "safe_read_file",
    "safe_write_file",
    "find_lockfile",
    "read_json_file",
    "create_timestamped_backup",
    # Versions
    "is_valid_range",
    "satisfies",
    "compare_versions",
    "min_version",
]
