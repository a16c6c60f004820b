"""
Core functionality exports for lockkeeper.

    from lockkeeper.core import Lockfile, DependencyAnalyzer
"""

from __future__ import annotations

from lockkeeper.core.lockfile import Lockfile
from lockkeeper.core.detector import detect_format
from lockkeeper.core.differ import diff_entries
from lockkeeper.core.dependency_analyzer import DependencyAnalyzer
from lockkeeper.core.graph import build_dependency_graph, dependents_of
from lockkeeper.core.parser import LockfileParser, ParsedLockfile
from lockkeeper.core.workspace import LocalPackage, find_local_packages

__all__ = [
    "Lockfile",
    "LockfileParser",
    "ParsedLockfile",
    "DependencyAnalyzer",
    "LocalPackage",
    "find_local_packages",
    "detect_format",
    "diff_entries",
    "build_dependency_graph",
    "dependents_of",
]
