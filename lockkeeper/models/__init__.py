"""
Unified data model exports for lockkeeper.

This module re-exports all core data models to provide a stable and
convenient public API. Users can import models directly from
``lockkeeper.models`` instead of individual submodules.

Example:
    >>> from lockkeeper.models import LockfileEntry, AnalyzeResult
"""

from __future__ import annotations

from lockkeeper.models.entry import Descriptor, LockfileEntry, LockfileKind
from lockkeeper.models.results import (
    AnalyzeResult,
    DiffItem,
    DiffResult,
    InvalidRange,
    LockfileQuery,
    NewRange,
    NewVersion,
)

__all__ = [
    "Descriptor",
    "LockfileEntry",
    "LockfileKind",
    "LockfileQuery",
    "AnalyzeResult",
    "NewVersion",
    "NewRange",
    "InvalidRange",
    "DiffItem",
    "DiffResult",
]
