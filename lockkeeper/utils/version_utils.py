"""
Version and range helpers for lockkeeper.

Thin wrappers over ``node-semver`` so that range parsing, satisfaction
and ordering follow npm's rules (``^1``, ``2.0.x``, ``1 || 2``, ``*``).
The rest of the code base never imports ``nodesemver`` directly.
"""

from __future__ import annotations

import re
from typing import Optional

import nodesemver

from lockkeeper.exceptions import RangeError


def is_valid_range(range_spec: str) -> bool:
    """Return True if ``range_spec`` parses as an npm semver range.

    Examples:
        >>> is_valid_range("^1.2.0")
        True
        >>> is_valid_range("workspace:packages/a")
        False
    """
    try:
        return nodesemver.valid_range(range_spec, loose=False) is not None
    except (ValueError, TypeError):
        return False


def satisfies(version: str, range_spec: str) -> bool:
    """Return True if ``version`` is accepted by ``range_spec``.

    Invalid versions or ranges never satisfy anything.
    """
    try:
        return bool(nodesemver.satisfies(version, range_spec, loose=False))
    except (ValueError, TypeError):
        return False


def compare_versions(left: str, right: str) -> int:
    """Compare two versions, returning -1, 0 or 1 like ``cmp``."""
    return nodesemver.compare(left, right, loose=False)


_COMPARATOR = re.compile(
    r"^(?P<op><=|>=|<|>|=)?v?(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?$"
)


def _comparator_floor(token: str) -> Optional[str]:
    """Lowest version a single normalized comparator lets through."""
    match = _COMPARATOR.match(token)
    if not match or match.group("op") in ("<", "<="):
        return None

    major, minor, patch = match.group("major", "minor", "patch")
    pre = match.group("pre")
    if match.group("op") == ">":
        if pre is None:
            return f"{major}.{minor}.{int(patch) + 1}"
        return f"{major}.{minor}.{patch}-{pre}.0"
    return f"{major}.{minor}.{patch}" + (f"-{pre}" if pre else "")


def min_version(range_spec: str) -> Optional[str]:
    """Return the lowest version accepted by ``range_spec``.

    Follows npm's ``minVersion``: ``0.0.0`` when the range accepts it,
    otherwise the greatest lower bound of each ``||`` alternative, the
    lowest of those winning.

    Examples:
        >>> min_version("^2.0.x")
        '2.0.0'
        >>> min_version("*")
        '0.0.0'

    Raises:
        RangeError: ``range_spec`` is not a valid range.
    """
    if not is_valid_range(range_spec):
        raise RangeError(
            f"Invalid version range: {range_spec!r}", range_spec=range_spec
        )

    for candidate in ("0.0.0", "0.0.0-0"):
        if satisfies(candidate, range_spec):
            return candidate

    normalized = nodesemver.valid_range(range_spec, loose=False)
    lowest: Optional[str] = None
    for alternative in normalized.split("||"):
        floor: Optional[str] = None
        for token in alternative.split():
            bound = _comparator_floor(token)
            if bound is None:
                continue
            if floor is None or compare_versions(bound, floor) > 0:
                floor = bound
        if floor is None:
            continue
        if lowest is None or compare_versions(lowest, floor) > 0:
            lowest = floor

    if lowest is not None and satisfies(lowest, range_spec):
        return lowest
    return None
