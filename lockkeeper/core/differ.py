"""Structural comparison of two lockfiles.

Entries are compared per ``(name, range)`` pair, never by text, so a
classic lockfile and a modern lockfile with the same resolutions compare
equal.
"""

from __future__ import annotations

from typing import Dict, Iterable, Tuple

from lockkeeper.utils.logger import get_logger
from lockkeeper.models.results import DiffItem, DiffResult
from lockkeeper.models.entry import LockfileEntry

logger = get_logger("core.differ")

__all__ = ["diff_entries", "index_pairs", "resolution_changed"]

PairIndex = Dict[Tuple[str, str], LockfileEntry]


def index_pairs(entries: Iterable[LockfileEntry]) -> PairIndex:
    """Map every ``(name, range)`` pair to the entry that resolves it."""
    index: PairIndex = {}
    for entry in entries:
        for descriptor in entry.descriptors:
            index[descriptor.key] = entry
    return index


def resolution_changed(current: LockfileEntry, baseline: LockfileEntry) -> bool:
    """Return True if two entries resolve to different content.

    The version and checksum are always compared; the ``resolved`` URL only
    when both entries record one, since modern lockfiles usually do not.
    """
    if current.version != baseline.version:
        return True
    if current.checksum != baseline.checksum:
        return True
    if current.resolved and baseline.resolved:
        return current.resolved != baseline.resolved
    return False


def diff_entries(
    current: Iterable[LockfileEntry],
    baseline: Iterable[LockfileEntry],
) -> DiffResult:
    """Compare ``current`` against ``baseline``.

    Returns:
        :class:`DiffResult` where ``added`` holds pairs only in ``current``,
        ``removed`` pairs only in ``baseline`` and ``changed`` pairs in both
        with a different resolution; each list sorted by name then range.
    """
    current_index = index_pairs(current)
    baseline_index = index_pairs(baseline)
    result = DiffResult()

    for key, entry in current_index.items():
        other = baseline_index.get(key)
        if other is None:
            result.added.append(DiffItem(*key))
        elif resolution_changed(entry, other):
            result.changed.append(DiffItem(*key))

    for key in baseline_index:
        if key not in current_index:
            result.removed.append(DiffItem(*key))

    result.added.sort()
    result.changed.sort()
    result.removed.sort()

    logger.debug(
        "Diff: %d added, %d changed, %d removed",
        len(result.added),
        len(result.changed),
        len(result.removed),
    )
    return result
