"""In-memory lockfile with queries, deduplication, diffing and rewriting.

:class:`Lockfile` is the public entry point of lockkeeper. It is built
from text (:meth:`Lockfile.parse`) or from disk (:meth:`Lockfile.load`),
answers queries over the locked versions, and can rewrite resolutions in
place while leaving every untouched byte of the file as it was.

Typical usage::

    import asyncio
    from lockkeeper import Lockfile

    async def dedupe(path):
        lockfile = await Lockfile.load(path)
        result = lockfile.analyze(local_packages={})
        lockfile.replace_versions(result.new_versions)
        await lockfile.save(path)

    asyncio.run(dedupe("yarn.lock"))
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Set,
    Tuple,
    Union,
)

from lockkeeper.utils.logger import get_logger
from lockkeeper.exceptions import LockKeeperError
from lockkeeper.core.graph import build_dependency_graph
from lockkeeper.core.differ import diff_entries
from lockkeeper.core.parser import LockfileParser, ParsedLockfile
from lockkeeper.core.dependency_analyzer import DependencyAnalyzer
from lockkeeper.utils.filesystem import safe_read_file, safe_write_file
from lockkeeper.models.entry import Descriptor, LockfileEntry, LockfileKind
from lockkeeper.models.results import (
    AnalyzeResult,
    DiffResult,
    LockfileQuery,
    NewRange,
    NewVersion,
)
from lockkeeper.core.serializer import (
    patch_version_line,
    render_key_line,
    render_lockfile,
    sort_descriptors,
)

logger = get_logger("core.lockfile")

PathLike = Union[str, Path]
Change = Union[NewVersion, NewRange]


class Lockfile:
    """A parsed lockfile of either grammar.

    Instances are only changed through :meth:`replace_versions`; a single
    instance must not be mutated from two call sites at once.

    Attributes:
        kind: Grammar the lockfile was read in.
    """

    def __init__(self, parsed: ParsedLockfile) -> None:
        self.kind: LockfileKind = parsed.kind
        self._header: List[str] = list(parsed.header)
        self._entries: List[LockfileEntry] = list(parsed.entries)
        self._trailer: List[str] = list(parsed.trailer)
        self._newline: str = parsed.newline
        self._packages: Dict[str, List[Tuple[Descriptor, LockfileEntry]]] = {}
        self._reindex()

    # ------------------------------------------------------------------
    # Construction and I/O
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str, *, file_path: Optional[str] = None) -> "Lockfile":
        """Parse lockfile text.

        Raises:
            FormatError: The text is neither a classic nor a modern lockfile.
            ParseError: The text is malformed.
        """
        return cls(LockfileParser(file_path=file_path).parse(text))

    @classmethod
    async def load(cls, path: PathLike) -> "Lockfile":
        """Read and parse the lockfile at ``path``.

        Raises:
            FileOperationError: The file cannot be read.
        """
        text = await asyncio.to_thread(safe_read_file, path)
        logger.debug("Loaded %s (%d characters)", path, len(text))
        return cls.parse(text, file_path=str(path))

    async def save(self, path: PathLike, *, backup: bool = False) -> Optional[Path]:
        """Write the lockfile to ``path``, replacing it atomically.

        Args:
            path: Destination path.
            backup: Keep a timestamped copy of the previous file.

        Returns:
            Path of the backup, if one was made.
        """
        backup_path = await asyncio.to_thread(
            safe_write_file, path, self.to_string(), create_backup=backup
        )
        logger.info("Saved lockfile to %s", path)
        return backup_path

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def entries(self) -> List[LockfileEntry]:
        """Entries in file order (a copy of the list)."""
        return list(self._entries)

    @property
    def names(self) -> List[str]:
        """Package names in first-seen order."""
        return list(self._packages)

    def get(self, name: str) -> List[LockfileQuery]:
        """Return one record per range locked for ``name``, in file order."""
        return [
            LockfileQuery(
                range=descriptor.range,
                version=entry.version,
                data_key=entry.data_key,
            )
            for descriptor, entry in self._packages.get(name, [])
        ]

    def to_string(self) -> str:
        """Render the lockfile; unmodified lockfiles render byte for byte."""
        return render_lockfile(self._header, self._entries, self._trailer)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Lockfile(kind={self.kind.value!r}, entries={len(self._entries)})"

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def analyze(
        self,
        local_packages: Optional[Mapping[str, Any]] = None,
        *,
        package_filter: Optional[Callable[[str], bool]] = None,
    ) -> AnalyzeResult:
        """Find ranges that can share an already locked version.

        See :class:`~lockkeeper.core.dependency_analyzer.DependencyAnalyzer`.
        """
        analyzer = DependencyAnalyzer(
            local_packages=local_packages, package_filter=package_filter
        )
        return analyzer.analyze(self.iter_resolutions())

    def iter_resolutions(self) -> Dict[str, List[Tuple[Descriptor, str]]]:
        """Map each package name to its ``(descriptor, version)`` pairs."""
        return {
            name: [(descriptor, entry.version) for descriptor, entry in pairs]
            for name, pairs in self._packages.items()
        }

    def diff(self, other: "Lockfile") -> DiffResult:
        """Compare this lockfile against ``other`` as the baseline.

        ``added`` lists pairs only present here, ``removed`` pairs only
        present in ``other``.
        """
        return diff_entries(self._entries, other._entries)

    def create_simplified_dependency_graph(self) -> Dict[str, Set[str]]:
        """Return package name to the names it depends on or peers with."""
        return build_dependency_graph(self._entries)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def replace_versions(self, changes: Iterable[Change]) -> None:
        """Apply analysis results to the lockfile in place.

        ``NewVersion`` changes move a range onto the entry already locked at
        the new version; ``NewRange`` changes move a range onto the entry
        holding the new range. Classic lockfiles merge the range into that
        entry's key; modern lockfiles give the range its own entry with a
        copy of that entry's resolution.

        Raises:
            LockKeeperError: A change refers to a range that is not in the
                lockfile or that is no longer locked at ``old_version``.
        """
        changed = False
        for change in changes:
            if isinstance(change, NewRange):
                applied = self._apply_new_range(change)
            else:
                applied = self._apply_new_version(change)
            if applied:
                changed = True
                self._reindex()

        if changed and self.kind is LockfileKind.CLASSIC:
            self._sort_entries()
            self._reindex()

    def _apply_new_version(self, change: NewVersion) -> bool:
        entry, descriptor = self._locate(change.name, change.range, change.old_version)
        if entry.version == change.new_version:
            return False

        target = next(
            (
                candidate
                for _, candidate in self._packages.get(change.name, [])
                if candidate is not entry and candidate.version == change.new_version
            ),
            None,
        )
        logger.debug(
            "Moving %s@%s from %s to %s",
            change.name,
            change.range,
            change.old_version,
            change.new_version,
        )
        self._relocate(entry, descriptor, target, change.new_version)
        return True

    def _apply_new_range(self, change: NewRange) -> bool:
        entry, descriptor = self._locate(
            change.name, change.old_range, change.old_version
        )
        target, _ = self._locate(change.name, change.new_range, change.new_version)
        if target is entry:
            return False

        logger.debug(
            "Moving %s@%s onto the entry of %s@%s",
            change.name,
            change.old_range,
            change.name,
            change.new_range,
        )
        self._relocate(entry, descriptor, target, change.new_version)
        return True

    def _locate(
        self, name: str, range_spec: str, version: str
    ) -> Tuple[LockfileEntry, Descriptor]:
        for descriptor, entry in self._packages.get(name, []):
            if descriptor.range != range_spec:
                continue
            if entry.version != version:
                raise LockKeeperError(
                    f"Existing lockfile entry for {name}@{range_spec} is at "
                    f"version {entry.version}, expected {version}",
                    {"package": name, "range": range_spec},
                )
            return entry, descriptor

        raise LockKeeperError(
            f"Failed to find lockfile entry for {name}@{range_spec}",
            {"package": name, "range": range_spec},
        )

    def _relocate(
        self,
        source: LockfileEntry,
        descriptor: Descriptor,
        target: Optional[LockfileEntry],
        new_version: str,
    ) -> None:
        """Move ``descriptor`` out of ``source`` so it resolves to ``new_version``."""
        if target is not None and self.kind is LockfileKind.CLASSIC:
            self._detach(source, descriptor)
            target.descriptors = sort_descriptors([*target.descriptors, descriptor])
            target.lines = [self._key_line(target.descriptors), *target.lines[1:]]
            return

        if target is None:
            body_source = source
            body = patch_version_line(self.kind, source.lines, new_version)[1:]
        else:
            body_source = target
            body = list(target.lines[1:])

        key_line = (
            source.lines[0]
            if len(source.descriptors) == 1
            else self._key_line([descriptor])
        )
        moved = LockfileEntry(
            descriptors=[descriptor],
            version=new_version,
            fields={**body_source.fields, "version": new_version},
            dependencies=dict(body_source.dependencies),
            optional_dependencies=dict(body_source.optional_dependencies),
            peer_dependencies=dict(body_source.peer_dependencies),
            lines=[key_line, *body],
        )

        index, leading = self._detach(source, descriptor, replaced=True)
        moved.leading = leading
        self._entries.insert(index, moved)

    def _detach(
        self,
        entry: LockfileEntry,
        descriptor: Descriptor,
        *,
        replaced: bool = False,
    ) -> Tuple[int, List[str]]:
        """Remove ``descriptor`` from ``entry``.

        ``replaced`` means the caller inserts a new entry at the returned
        index, so the entry that follows keeps its own leading lines.

        Returns:
            Where an entry replacing the descriptor should be inserted and
            the leading lines it should carry.
        """
        index = self._index_of(entry)

        if len(entry.descriptors) > 1:
            entry.descriptors = [d for d in entry.descriptors if d is not descriptor]
            entry.lines = [self._key_line(entry.descriptors), *entry.lines[1:]]
            return index + 1, [self._newline]

        del self._entries[index]
        if index == 0 and self._entries and not replaced:
            # The header already separates it from the first entry
            self._entries[0].leading = entry.leading
        return index, entry.leading

    def _sort_entries(self) -> None:
        """Order entries by their first descriptor, as the classic writer does.

        Separating lines stay at their position in the file.
        """
        leadings = [entry.leading for entry in self._entries]
        self._entries.sort(key=lambda entry: min(d.raw for d in entry.descriptors))
        for entry, leading in zip(self._entries, leadings):
            entry.leading = leading

    def _key_line(self, descriptors: List[Descriptor]) -> str:
        return render_key_line(self.kind, descriptors, self._newline)

    def _index_of(self, entry: LockfileEntry) -> int:
        for index, candidate in enumerate(self._entries):
            if candidate is entry:
                return index
        raise LockKeeperError("Lockfile entry is not part of this lockfile")

    def _reindex(self) -> None:
        packages: Dict[str, List[Tuple[Descriptor, LockfileEntry]]] = {}
        for entry in self._entries:
            for descriptor in entry.descriptors:
                packages.setdefault(descriptor.name, []).append((descriptor, entry))
        self._packages = packages
