"""
Result models produced by lockfile queries, analysis and diffing.

Every record here is a plain value: none of them hold references to
lockfile entries, so an :class:`AnalyzeResult` can be printed, stored as
JSON, and later applied to a freshly loaded lockfile.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class LockfileQuery:
    """One ``(range, version)`` record returned by ``Lockfile.get``."""

    range: str
    version: str
    data_key: str

    def to_json(self) -> Dict[str, str]:
        return {"range": self.range, "version": self.version, "dataKey": self.data_key}


@dataclass(frozen=True)
class NewVersion:
    """Proposal to resolve ``name@range`` to a different existing version."""

    name: str
    range: str
    old_version: str
    new_version: str

    def to_json(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "range": self.range,
            "oldVersion": self.old_version,
            "newVersion": self.new_version,
        }


@dataclass(frozen=True)
class NewRange:
    """Proposal to move ``name@old_range`` onto the entry of ``new_range``."""

    name: str
    old_range: str
    new_range: str
    old_version: str
    new_version: str

    def to_json(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "oldRange": self.old_range,
            "newRange": self.new_range,
            "oldVersion": self.old_version,
            "newVersion": self.new_version,
        }


@dataclass(frozen=True)
class InvalidRange:
    """A range that is malformed or that no locked version satisfies."""

    name: str
    range: str

    def to_json(self) -> Dict[str, str]:
        return {"name": self.name, "range": self.range}


@dataclass
class AnalyzeResult:
    """Outcome of a deduplication analysis.

    Attributes:
        new_versions: Ranges that can move to a higher locked version.
        new_ranges: Ranges that cannot accept the target version and would
            have to be moved onto the target range.
        invalid_ranges: Ranges excluded from the analysis.
    """

    new_versions: List[NewVersion] = field(default_factory=list)
    new_ranges: List[NewRange] = field(default_factory=list)
    invalid_ranges: List[InvalidRange] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Return True when there is nothing to report."""
        return not (self.new_versions or self.new_ranges or self.invalid_ranges)

    def to_json(self) -> Dict[str, Any]:
        return {
            "newVersions": [item.to_json() for item in self.new_versions],
            "newRanges": [item.to_json() for item in self.new_ranges],
            "invalidRanges": [item.to_json() for item in self.invalid_ranges],
        }


@dataclass(frozen=True, order=True)
class DiffItem:
    """A ``(name, range)`` pair reported by a diff."""

    name: str
    range: str

    def to_json(self) -> Dict[str, str]:
        return {"name": self.name, "range": self.range}


@dataclass
class DiffResult:
    """Structural difference between two lockfiles, sorted by name then range."""

    added: List[DiffItem] = field(default_factory=list)
    changed: List[DiffItem] = field(default_factory=list)
    removed: List[DiffItem] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.added or self.changed or self.removed)

    def to_json(self) -> Dict[str, Any]:
        return {
            "added": [item.to_json() for item in self.added],
            "changed": [item.to_json() for item in self.changed],
            "removed": [item.to_json() for item in self.removed],
        }
