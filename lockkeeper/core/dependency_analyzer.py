"""Duplicate resolution analysis for lockfiles.

A package often ends up locked at several versions because each range was
resolved at a different time. The analyzer finds, per package name, the
ranges that could share an already locked version:

1. **Version bumps**: every range moves to the highest locked version it
   accepts. Ranges whose accepted version differs from their current one
   are reported as :class:`~lockkeeper.models.results.NewVersion`.
2. **Range moves**: when the ranges still end up on more than one
   version, the greatest accepted version becomes the target and every
   range that does not accept it is reported as a
   :class:`~lockkeeper.models.results.NewRange` pointing at the most
   specific range that does.

Ranges that do not parse, or that no locked version satisfies, are
reported as invalid and left out of both lists. Workspace links are not
registry resolutions and are skipped entirely.

Typical usage::

    from lockkeeper.core.dependency_analyzer import DependencyAnalyzer

    analyzer = DependencyAnalyzer(local_packages=workspace_packages)
    result = analyzer.analyze(lockfile.iter_resolutions())
    for change in result.new_versions:
        print(change.name, change.range, change.old_version, change.new_version)
"""

from __future__ import annotations

from functools import cmp_to_key
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from lockkeeper.utils.logger import get_logger
from lockkeeper.exceptions import LockKeeperError
from lockkeeper.models.entry import Descriptor
from lockkeeper.constants import USE_LOCAL_VERSION, WORKSPACE_PROTOCOL
from lockkeeper.models.results import AnalyzeResult, InvalidRange, NewRange, NewVersion
from lockkeeper.utils.version_utils import (
    compare_versions,
    is_valid_range,
    min_version,
    satisfies,
)

logger = get_logger("core.dependency_analyzer")

# Public API
__all__ = [
    "DependencyAnalyzer",
    "LockedVersion",
]

#: ``(descriptor, locked version)`` pairs for one package name, in file order.
Resolutions = Sequence[Tuple[Descriptor, str]]


@dataclass(frozen=True)
class LockedVersion:
    """A version found in the lockfile and the version it stands for.

    Attributes:
        entry_version: Version string as written in the lockfile.
        actual_version: Version used for comparisons; differs from
            ``entry_version`` only for the use-local sentinel, which is
            replaced by the workspace package's own version.
    """

    entry_version: str
    actual_version: str


def _local_version(local_package: Any) -> Optional[str]:
    """Read ``package_json["version"]`` from a local package descriptor."""
    package_json = getattr(local_package, "package_json", None)
    if package_json is None and isinstance(local_package, Mapping):
        package_json = local_package.get("package_json") or local_package.get(
            "packageJson"
        )
    if not package_json:
        return None
    return package_json.get("version")


class DependencyAnalyzer:
    """Find duplicate resolutions that can collapse onto one locked version.

    Args:
        local_packages: Workspace packages by name. Required to compare the
            use-local sentinel with registry versions.
        package_filter: Optional predicate; names for which it returns
            ``False`` are not analyzed.

    Example::

        >>> analyzer = DependencyAnalyzer(local_packages={})
        >>> result = analyzer.analyze(resolutions)
        >>> result.new_versions
        [NewVersion(name='b', range='^2', old_version='2.0.0', new_version='2.0.1')]
    """

    def __init__(
        self,
        local_packages: Optional[Mapping[str, Any]] = None,
        package_filter: Optional[Callable[[str], bool]] = None,
    ) -> None:
        self.local_packages: Mapping[str, Any] = local_packages or {}
        self.package_filter = package_filter

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def analyze(self, resolutions: Mapping[str, Resolutions]) -> AnalyzeResult:
        """Analyze every package name in ``resolutions``.

        Args:
            resolutions: Package name to its ``(descriptor, version)``
                pairs, both in lockfile order.

        Returns:
            :class:`AnalyzeResult` with changes in lockfile order.

        Raises:
            LockKeeperError: A package is locked to the use-local sentinel
                but is missing from ``local_packages`` or has no version.
        """
        result = AnalyzeResult()

        for name, pairs in resolutions.items():
            if self.package_filter is not None and not self.package_filter(name):
                logger.debug("Skipping filtered package %s", name)
                continue
            self._analyze_package(name, pairs, result)

        logger.debug(
            "Analysis found %d version change(s), %d range change(s), "
            "%d invalid range(s)",
            len(result.new_versions),
            len(result.new_ranges),
            len(result.invalid_ranges),
        )
        return result

    # ------------------------------------------------------------------
    # Per package
    # ------------------------------------------------------------------

    def _analyze_package(
        self,
        name: str,
        pairs: Resolutions,
        result: AnalyzeResult,
    ) -> None:
        # Get rid of workspace links and invalid ranges upfront
        entries: List[Tuple[str, str]] = []
        for descriptor, version in pairs:
            if descriptor.protocol == WORKSPACE_PROTOCOL:
                continue
            if not is_valid_range(descriptor.range):
                result.invalid_ranges.append(InvalidRange(name, descriptor.range))
                continue
            entries.append((descriptor.range, version))

        # One locked version leaves nothing to merge, only ranges to check
        if len({version for _, version in entries}) < 2:
            self._check_single_version(name, entries, result)
            return

        versions = self._locked_versions(name, [version for _, version in entries])

        # Every range picks the highest locked version it accepts
        accepted_by_range: Dict[str, LockedVersion] = {}
        for range_spec, version in entries:
            accepted = next(
                (v for v in versions if satisfies(v.actual_version, range_spec)),
                None,
            )
            if accepted is None:
                logger.debug(
                    "No locked version of %s satisfies %s", name, range_spec
                )
                result.invalid_ranges.append(InvalidRange(name, range_spec))
                continue

            if accepted.entry_version != version:
                result.new_versions.append(
                    NewVersion(
                        name=name,
                        range=range_spec,
                        old_version=version,
                        new_version=accepted.entry_version,
                    )
                )
            accepted_by_range[range_spec] = accepted

        accepted_versions = {v.entry_version: v for v in accepted_by_range.values()}
        if len(accepted_versions) < 2:
            return

        # ``versions`` is sorted, so the first accepted one is the greatest
        target = next(v for v in versions if v.entry_version in accepted_versions)
        target_range = self._most_specific_range(
            [
                range_spec
                for range_spec in accepted_by_range
                if satisfies(target.actual_version, range_spec)
            ]
        )

        for range_spec, version in entries:
            if range_spec not in accepted_by_range:
                continue
            if satisfies(target.actual_version, range_spec):
                continue
            result.new_ranges.append(
                NewRange(
                    name=name,
                    old_range=range_spec,
                    new_range=target_range,
                    old_version=version,
                    new_version=target.entry_version,
                )
            )

    def _check_single_version(
        self,
        name: str,
        entries: List[Tuple[str, str]],
        result: AnalyzeResult,
    ) -> None:
        """Report ranges that the only locked version does not satisfy.

        A use-local version without a known local package is not checked.
        """
        for range_spec, version in entries:
            actual: Optional[str] = version
            if version == USE_LOCAL_VERSION:
                actual = _local_version(self.local_packages.get(name))
                if not actual:
                    continue
            if not satisfies(actual, range_spec):
                logger.debug(
                    "Locked version %s of %s does not satisfy %s",
                    version,
                    name,
                    range_spec,
                )
                result.invalid_ranges.append(InvalidRange(name, range_spec))

    def _locked_versions(self, name: str, versions: List[str]) -> List[LockedVersion]:
        """Distinct locked versions, greatest first."""
        locked: Dict[str, LockedVersion] = {}
        for version in versions:
            if version in locked:
                continue
            if version == USE_LOCAL_VERSION:
                if name not in self.local_packages:
                    raise LockKeeperError(
                        f"No local package found for {name}",
                        {"package": name},
                    )
                actual = _local_version(self.local_packages[name])
                if not actual:
                    raise LockKeeperError(
                        f"No version found for local package {name}",
                        {"package": name},
                    )
                locked[version] = LockedVersion(version, actual)
            else:
                locked[version] = LockedVersion(version, version)

        return sorted(
            locked.values(),
            key=cmp_to_key(
                lambda a, b: compare_versions(a.actual_version, b.actual_version)
            ),
            reverse=True,
        )

    @staticmethod
    def _most_specific_range(ranges: List[str]) -> str:
        """Pick the range with the highest minimum version.

        The first range wins ties, keeping the choice stable in file order.
        """
        best = ranges[0]
        best_min = min_version(best)
        for range_spec in ranges[1:]:
            candidate = min_version(range_spec)
            if best_min is None or (
                candidate is not None and compare_versions(candidate, best_min) > 0
            ):
                best, best_min = range_spec, candidate
        return best
