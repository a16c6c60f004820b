"""Discovery of workspace packages in a JavaScript monorepo.

Workspace members are resolved from local sources instead of a registry,
so the lockfile records them with the use-local sentinel version. The
analyzer needs their real ``package.json`` version to compare them with
registry resolutions of the same name.
"""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from lockkeeper.utils.logger import get_logger
from lockkeeper.constants import PACKAGE_JSON_NAME
from lockkeeper.utils.filesystem import read_json_file

logger = get_logger("core.workspace")


@dataclass
class LocalPackage:
    """A package that lives inside the workspace.

    Attributes:
        name: Package name from ``package.json``.
        directory: Directory holding the manifest.
        package_json: Parsed manifest.
    """

    name: str
    directory: Path
    package_json: Dict[str, Any] = field(default_factory=dict)

    @property
    def version(self) -> Optional[str]:
        return self.package_json.get("version")


def _workspace_patterns(manifest: Dict[str, Any]) -> List[str]:
    workspaces = manifest.get("workspaces") or []
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages") or []
    return [pattern for pattern in workspaces if isinstance(pattern, str)]


def find_local_packages(root: Union[str, Path]) -> Dict[str, LocalPackage]:
    """Return workspace packages declared by the root ``package.json``.

    Patterns listed under ``workspaces`` (or ``workspaces.packages``) are
    globbed relative to ``root``; every matching directory with a named
    manifest becomes a :class:`LocalPackage`. A root without a manifest
    yields an empty mapping.
    """
    root_path = Path(root).resolve()
    manifest_path = root_path / PACKAGE_JSON_NAME
    if not manifest_path.is_file():
        logger.debug("No %s in %s", PACKAGE_JSON_NAME, root_path)
        return {}

    manifest = read_json_file(manifest_path)
    packages: Dict[str, LocalPackage] = {}

    for pattern in _workspace_patterns(manifest):
        if pattern.startswith("!"):
            continue
        for directory in sorted(root_path.glob(pattern)):
            package_json_path = directory / PACKAGE_JSON_NAME
            if not package_json_path.is_file():
                continue
            package_json = read_json_file(package_json_path)
            name = package_json.get("name")
            if not isinstance(name, str):
                continue
            packages.setdefault(
                name,
                LocalPackage(name=name, directory=directory, package_json=package_json),
            )

    logger.debug("Found %d workspace package(s) in %s", len(packages), root_path)
    return packages
