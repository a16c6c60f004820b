"""Name-level dependency graph derived from lockfile entries."""

from __future__ import annotations

from typing import Dict, Iterable, Set

from lockkeeper.models.entry import LockfileEntry


def build_dependency_graph(entries: Iterable[LockfileEntry]) -> Dict[str, Set[str]]:
    """Collapse range-level entries into a package name graph.

    Every package name that appears in an entry key becomes a node, in
    first-seen order. Its edges are the names listed under
    ``dependencies`` or ``peerDependencies`` of any entry for that name;
    ranges are discarded. Cycles are kept as they are.
    """
    graph: Dict[str, Set[str]] = {}
    for entry in entries:
        edges = set(entry.dependencies) | set(entry.peer_dependencies)
        for name in entry.names:
            graph.setdefault(name, set()).update(edges)
    return graph


def dependents_of(graph: Dict[str, Set[str]], name: str) -> Set[str]:
    """Return every node that reaches ``name`` through one or more edges."""
    reverse: Dict[str, Set[str]] = {}
    for node, edges in graph.items():
        for edge in edges:
            reverse.setdefault(edge, set()).add(node)

    found: Set[str] = set()
    pending = [name]
    while pending:
        for parent in reverse.get(pending.pop(), ()):
            if parent not in found:
                found.add(parent)
                pending.append(parent)
    found.discard(name)
    return found
