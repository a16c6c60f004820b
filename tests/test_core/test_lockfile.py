from __future__ import annotations

from pathlib import Path
from typing import Dict, Set

import pytest

from lockkeeper.core.lockfile import Lockfile
from lockkeeper.core.workspace import LocalPackage
from lockkeeper.exceptions import FileOperationError, LockKeeperError
from lockkeeper.models import (
    AnalyzeResult,
    DiffItem,
    LockfileKind,
    LockfileQuery,
    NewRange,
    NewVersion,
)

LEGACY_HEADER = (
    "# THIS IS AN AUTOGENERATED FILE. DO NOT EDIT THIS FILE DIRECTLY.\n"
    "# yarn lockfile v1\n"
    "\n"
)

MODERN_HEADER = (
    '# This file is generated by running "yarn install" inside your project.\n'
    "# Manual changes might be lost - proceed with caution!\n"
    "\n"
    "__metadata:\n"
    "  version: 6\n"
    "  cacheKey: 8\n"
)

MOCK_A = (
    LEGACY_HEADER
    + """
a@^1:
  version "1.0.1"
  resolved "https://my-registry/a-1.0.01.tgz#abc123"
  integrity sha512-xyz
  dependencies:
    b "^2"

b@2.0.x:
  version "2.0.1"

b@^2:
  version "2.0.0"
"""
)

MOCK_A_DEDUP = (
    LEGACY_HEADER
    + """
a@^1:
  version "1.0.1"
  resolved "https://my-registry/a-1.0.01.tgz#abc123"
  integrity sha512-xyz
  dependencies:
    b "^2"

b@2.0.x, b@^2:
  version "2.0.1"
"""
)

MOCK_B = (
    LEGACY_HEADER
    + """
"@s/a@*", "@s/a@1 || 2", "@s/a@^1":
  version "1.0.1"

"@s/a@^2.0.x":
  version "2.0.0"
"""
)

MOCK_B_DEDUP = (
    LEGACY_HEADER
    + """
"@s/a@*", "@s/a@1 || 2", "@s/a@^2.0.x":
  version "2.0.0"

"@s/a@^1":
  version "1.0.1"
"""
)

MOCK_A_MODERN = (
    MODERN_HEADER
    + """
a@^1:
  version: 1.0.1
  dependencies:
    b: ^2
  integrity: sha512-xyz
  resolved: "https://my-registry/a-1.0.01.tgz#abc123"

"b@2.0.x, b@^2.0.1":
  version: 2.0.1

b@^2:
  version: 2.0.0
"""
)

MOCK_A_MODERN_DEDUP = (
    MODERN_HEADER
    + """
a@^1:
  version: 1.0.1
  dependencies:
    b: ^2
  integrity: sha512-xyz
  resolved: "https://my-registry/a-1.0.01.tgz#abc123"

"b@2.0.x, b@^2.0.1":
  version: 2.0.1

b@^2:
  version: 2.0.1
"""
)

MOCK_A_MODERN_LOCAL = (
    MODERN_HEADER
    + """
a@^1:
  version: 1.0.1
  dependencies:
    b: ^2
  integrity: sha512-xyz
  resolved: "https://my-registry/a-1.0.01.tgz#abc123"

"b@2.0.x, b@^2.0.1":
  version: 0.0.0-use.local

b@^2:
  version: 2.0.0
"""
)

MOCK_A_MODERN_LOCAL_DEDUP = (
    MODERN_HEADER
    + """
a@^1:
  version: 1.0.1
  dependencies:
    b: ^2
  integrity: sha512-xyz
  resolved: "https://my-registry/a-1.0.01.tgz#abc123"

"b@2.0.x, b@^2.0.1":
  version: 0.0.0-use.local

b@^2:
  version: 0.0.0-use.local
"""
)

LEGACY_A = (
    LEGACY_HEADER
    + """
a@^1:
  version "1.0.1"
  resolved "https://my-registry/a-1.0.01.tgz#abc123"
  integrity sha512-xyz
  dependencies:
    b "^2"

b@3:
  version "3.0.1"
  integrity sha512-abc1

b@2.0.x:
  version "2.0.1"
  integrity sha512-abc2

b@^2:
  version "2.0.0"
  integrity sha512-abc3

c@^1:
  version "1.0.1"
  integrity x
"""
)

LEGACY_B = (
    LEGACY_HEADER
    + """
a@^1:
  version "1.0.1"
  resolved "https://my-registry/a-1.0.01.tgz#abc123"
  integrity sha512-xyz-other
  dependencies:
    b "^2"

b@2.0.x, b@^2:
  version "2.0.0"
  integrity sha512-abc3

b@4:
  version "4.0.0"
  integrity sha512-abc

d@^1:
  version "1.0.1"
  integrity x
"""
)

MODERN_A = (
    MODERN_HEADER
    + """
"a@npm:^1":
  version: "1.0.1"
  resolved: "https://my-registry/a-1.0.01.tgz#abc123"
  checksum: sha512-xyz
  dependencies:
    b: "^2"

"b@npm:3":
  version: "3.0.1"
  checksum: sha512-abc1

"b@npm:2.0.x":
  version: "2.0.1"
  checksum: sha512-abc2

"b@npm:^2":
  version: "2.0.0"
  checksum: sha512-abc3

"c@npm:^1":
  version: "1.0.1"
  checksum: x
"""
)

MODERN_B = (
    MODERN_HEADER
    + """
"a@npm:^1":
  version: "1.0.1"
  resolution: "a@npm:1.0.1"
  checksum: sha512-xyz-other
  dependencies:
    b: "^2"

"b@npm:2.0.x, b@npm:^2":
  version: "2.0.0"
  checksum: sha512-abc3

"b@npm:4":
  version: "4.0.0"
  checksum: sha512-abc

"d@npm:^1":
  version: "1.0.1"
  checksum: x
"""
)

WORKSPACE_LOCKFILE = (
    MODERN_HEADER
    + """
"@backstage/app-defaults@workspace:^, @backstage/app-defaults@workspace:packages/app-defaults":
  version: 0.0.0-use.local
  resolution: "@backstage/app-defaults@workspace:packages/app-defaults"
  dependencies:
    "@backstage/cli": "workspace:^"
    "@backstage/core-app-api": "workspace:^"
    "@backstage/core-components": "workspace:^"
    "@backstage/core-plugin-api": "workspace:^"
    "@backstage/plugin-permission-react": "workspace:^"
    "@backstage/test-utils": "workspace:^"
    "@backstage/theme": "workspace:^"
    "@material-ui/core": ^4.12.2
    "@material-ui/icons": ^4.9.1
    "@testing-library/jest-dom": ^5.10.1
    "@testing-library/react": ^12.1.3
    "@types/node": ^16.11.26
    "@types/react": ^16.13.1 || ^17.0.0
  peerDependencies:
    react: ^16.13.1 || ^17.0.0
    react-dom: ^16.13.1 || ^17.0.0
    react-router-dom: 6.0.0-beta.0 || ^6.3.0
  languageName: unknown
  linkType: soft

"@backstage/backend-app-api@workspace:^, @backstage/backend-app-api@workspace:packages/backend-app-api":
  version: 0.0.0-use.local
  resolution: "@backstage/backend-app-api@workspace:packages/backend-app-api"
  dependencies:
    "@backstage/backend-common": "workspace:^"
    "@backstage/backend-plugin-api": "workspace:^"
    "@backstage/backend-tasks": "workspace:^"
    "@backstage/cli": "workspace:^"
    "@backstage/errors": "workspace:^"
    "@backstage/plugin-permission-node": "workspace:^"
    express: ^4.17.1
    express-promise-router: ^4.1.0
    winston: ^3.2.1
  languageName: unknown
  linkType: soft
"""
)


@pytest.fixture
def lockfile_path(tmp_path: Path):
    """Return a factory writing lockfile text to ``tmp_path/yarn.lock``."""

    def _write(content: str) -> Path:
        path = tmp_path / "yarn.lock"
        path.write_bytes(content.encode("utf-8"))
        return path

    return _write


@pytest.mark.unit
class TestClassicLockfile:
    """Loading, querying and deduplicating classic lockfiles."""

    @pytest.mark.asyncio
    async def test_load_and_serialize(self, lockfile_path) -> None:
        """Test get() records and byte-identical rendering after load."""
        lockfile = await Lockfile.load(lockfile_path(MOCK_A))

        assert lockfile.kind is LockfileKind.CLASSIC
        assert lockfile.get("a") == [LockfileQuery("^1", "1.0.1", "a@^1")]
        assert lockfile.get("b") == [
            LockfileQuery("2.0.x", "2.0.1", "b@2.0.x"),
            LockfileQuery("^2", "2.0.0", "b@^2"),
        ]
        assert lockfile.to_string() == MOCK_A
        assert str(lockfile) == MOCK_A

    def test_get_unknown_package_returns_empty_list(self) -> None:
        """Test get() of a name that is not locked."""
        assert Lockfile.parse(MOCK_A).get("missing") == []

    @pytest.mark.asyncio
    async def test_deduplicate_and_save(self, lockfile_path) -> None:
        """Test a range merges into the entry of the higher version."""
        path = lockfile_path(MOCK_A)
        lockfile = await Lockfile.load(path)

        result = lockfile.analyze({})

        assert result == AnalyzeResult(
            new_versions=[NewVersion("b", "^2", "2.0.0", "2.0.1")],
            new_ranges=[],
            invalid_ranges=[],
        )
        assert lockfile.to_string() == MOCK_A

        lockfile.replace_versions(result.new_versions)
        assert lockfile.to_string() == MOCK_A_DEDUP
        assert path.read_text(encoding="utf-8") == MOCK_A

        backup = await lockfile.save(path)

        assert backup is None
        assert path.read_text(encoding="utf-8") == MOCK_A_DEDUP

    def test_deduplicate_scoped_ranges(self) -> None:
        """Test scoped package ranges and key reordering after a merge."""
        lockfile = Lockfile.parse(MOCK_B)

        result = lockfile.analyze({})

        assert result.invalid_ranges == []
        assert result.new_ranges == [NewRange("@s/a", "^1", "^2.0.x", "1.0.1", "2.0.0")]
        assert result.new_versions == [
            NewVersion("@s/a", "*", "1.0.1", "2.0.0"),
            NewVersion("@s/a", "1 || 2", "1.0.1", "2.0.0"),
        ]
        assert lockfile.to_string() == MOCK_B

        lockfile.replace_versions(result.new_versions)

        assert lockfile.to_string() == MOCK_B_DEDUP
        assert lockfile.get("@s/a")[0] == LockfileQuery(
            "*", "2.0.0", "@s/a@*, @s/a@1 || 2, @s/a@^2.0.x"
        )

    def test_second_analysis_is_empty(self) -> None:
        """Test applying the version changes leaves nothing to report."""
        for text in (MOCK_A, MOCK_A_MODERN):
            lockfile = Lockfile.parse(text)
            lockfile.replace_versions(lockfile.analyze({}).new_versions)

            assert lockfile.analyze({}) == AnalyzeResult()

    def test_range_moves_remain_after_version_changes(self) -> None:
        """Test a range that rejects the target version is still reported."""
        lockfile = Lockfile.parse(MOCK_B)
        lockfile.replace_versions(lockfile.analyze({}).new_versions)

        result = lockfile.analyze({})

        assert result.new_versions == []
        assert result.invalid_ranges == []
        assert result.new_ranges == [
            NewRange("@s/a", "^1", "^2.0.x", "1.0.1", "2.0.0")
        ]

    def test_empty_change_list_keeps_text(self) -> None:
        """Test replace_versions([]) is a no-op."""
        lockfile = Lockfile.parse(MOCK_B)
        lockfile.replace_versions([])

        assert lockfile.to_string() == MOCK_B

    @pytest.mark.asyncio
    async def test_save_with_backup(self, lockfile_path) -> None:
        """Test save(backup=True) keeps the previous file contents."""
        path = lockfile_path(MOCK_A)
        lockfile = await Lockfile.load(path)
        lockfile.replace_versions(lockfile.analyze({}).new_versions)

        backup = await lockfile.save(path, backup=True)

        assert backup is not None
        assert backup.read_text(encoding="utf-8") == MOCK_A
        assert path.read_text(encoding="utf-8") == MOCK_A_DEDUP

    @pytest.mark.asyncio
    async def test_load_missing_file_raises(self, tmp_path: Path) -> None:
        """Test load() propagates filesystem errors."""
        with pytest.raises(FileOperationError):
            await Lockfile.load(tmp_path / "yarn.lock")

    def test_crlf_round_trip(self) -> None:
        """Test Windows line endings survive parse and a mutation."""
        text = MOCK_A.replace("\n", "\r\n")
        lockfile = Lockfile.parse(text)
        assert lockfile.to_string() == text

        lockfile.replace_versions(lockfile.analyze({}).new_versions)

        assert lockfile.to_string() == MOCK_A_DEDUP.replace("\n", "\r\n")


@pytest.mark.unit
class TestModernLockfile:
    """Loading, querying and deduplicating modern lockfiles."""

    @pytest.mark.asyncio
    async def test_load_and_serialize(self, lockfile_path) -> None:
        """Test get() over a shared key and byte-identical rendering."""
        lockfile = await Lockfile.load(lockfile_path(MOCK_A_MODERN))

        assert lockfile.kind is LockfileKind.MODERN
        assert lockfile.get("a") == [LockfileQuery("^1", "1.0.1", "a@^1")]
        assert lockfile.get("b") == [
            LockfileQuery("2.0.x", "2.0.1", "b@2.0.x, b@^2.0.1"),
            LockfileQuery("^2.0.1", "2.0.1", "b@2.0.x, b@^2.0.1"),
            LockfileQuery("^2", "2.0.0", "b@^2"),
        ]
        assert lockfile.to_string() == MOCK_A_MODERN

    @pytest.mark.asyncio
    async def test_deduplicate_and_save(self, lockfile_path) -> None:
        """Test the moved range keeps its own entry with the new resolution."""
        path = lockfile_path(MOCK_A_MODERN)
        lockfile = await Lockfile.load(path)

        result = lockfile.analyze({})

        assert result == AnalyzeResult(
            new_versions=[NewVersion("b", "^2", "2.0.0", "2.0.1")]
        )

        lockfile.replace_versions(result.new_versions)
        assert lockfile.to_string() == MOCK_A_MODERN_DEDUP

        await lockfile.save(path)
        assert path.read_text(encoding="utf-8") == MOCK_A_MODERN_DEDUP

    @pytest.mark.asyncio
    async def test_deduplicate_onto_local_package(self, lockfile_path) -> None:
        """Test the use-local sentinel compares as the workspace version."""
        path = lockfile_path(MOCK_A_MODERN_LOCAL)
        lockfile = await Lockfile.load(path)
        local_packages = {
            "b": LocalPackage(
                name="b",
                directory=path.parent / "b",
                package_json={"name": "b", "version": "2.0.1"},
            )
        }

        result = lockfile.analyze(local_packages)

        assert result == AnalyzeResult(
            new_versions=[NewVersion("b", "^2", "2.0.0", "0.0.0-use.local")]
        )

        lockfile.replace_versions(result.new_versions)
        assert lockfile.to_string() == MOCK_A_MODERN_LOCAL_DEDUP

        await lockfile.save(path)
        assert path.read_text(encoding="utf-8") == MOCK_A_MODERN_LOCAL_DEDUP

    def test_local_package_as_plain_mapping(self) -> None:
        """Test local packages given as dictionaries with package_json."""
        lockfile = Lockfile.parse(MOCK_A_MODERN_LOCAL)

        result = lockfile.analyze({"b": {"package_json": {"version": "2.0.1"}}})

        assert result.new_versions == [
            NewVersion("b", "^2", "2.0.0", "0.0.0-use.local")
        ]

    def test_missing_local_package_raises(self) -> None:
        """Test the sentinel version without a matching local package."""
        lockfile = Lockfile.parse(MOCK_A_MODERN_LOCAL)

        with pytest.raises(LockKeeperError, match="No local package found for b"):
            lockfile.analyze({})

    def test_workspace_lockfile_has_nothing_to_deduplicate(self) -> None:
        """Test workspace ranges are left out of the analysis."""
        lockfile = Lockfile.parse(WORKSPACE_LOCKFILE)

        assert lockfile.analyze({}).is_empty()
        assert lockfile.to_string() == WORKSPACE_LOCKFILE

    def test_split_from_shared_entry_when_no_target(self) -> None:
        """Test a range moved to a version with no entry gets its own block."""
        lockfile = Lockfile.parse(MOCK_A_MODERN)

        lockfile.replace_versions([NewVersion("b", "^2.0.1", "2.0.1", "2.0.2")])

        assert lockfile.get("b") == [
            LockfileQuery("2.0.x", "2.0.1", "b@2.0.x"),
            LockfileQuery("^2.0.1", "2.0.2", "b@^2.0.1"),
            LockfileQuery("^2", "2.0.0", "b@^2"),
        ]
        assert 'b@2.0.x:\n  version: 2.0.1\n\nb@^2.0.1:\n  version: 2.0.2\n' in (
            lockfile.to_string()
        )

    def test_first_entry_move_keeps_separator(self) -> None:
        """Test rewriting the first entry keeps the blank line after it."""
        text = (
            MODERN_HEADER
            + "\n"
            + '"b@npm:^2":\n  version: 2.0.0\n'
            + "\n"
            + '"b@npm:2.0.x":\n  version: 2.0.1\n'
        )
        lockfile = Lockfile.parse(text)

        lockfile.replace_versions(lockfile.analyze({}).new_versions)

        assert lockfile.to_string() == (
            MODERN_HEADER
            + "\n"
            + '"b@npm:^2":\n  version: 2.0.1\n'
            + "\n"
            + '"b@npm:2.0.x":\n  version: 2.0.1\n'
        )
        assert lockfile.get("b") == [
            LockfileQuery("^2", "2.0.1", "b@npm:^2"),
            LockfileQuery("2.0.x", "2.0.1", "b@npm:2.0.x"),
        ]


@pytest.mark.unit
class TestReplaceVersionsErrors:
    """Validation of changes passed to replace_versions."""

    def test_unknown_range_raises(self) -> None:
        """Test a change for a range that is not locked."""
        lockfile = Lockfile.parse(MOCK_A)

        with pytest.raises(LockKeeperError, match="Failed to find lockfile entry"):
            lockfile.replace_versions([NewVersion("b", "^9", "9.0.0", "9.0.1")])

    def test_stale_version_raises(self) -> None:
        """Test a change whose old version no longer matches the entry."""
        lockfile = Lockfile.parse(MOCK_A)

        with pytest.raises(LockKeeperError, match="expected 1.9.9"):
            lockfile.replace_versions([NewVersion("b", "^2", "1.9.9", "2.0.1")])

    def test_new_range_moves_descriptor(self) -> None:
        """Test a NewRange change moves the range onto the target entry."""
        lockfile = Lockfile.parse(MOCK_B)

        lockfile.replace_versions(
            [NewRange("@s/a", "^1", "^2.0.x", "1.0.1", "2.0.0")]
        )

        assert [record.range for record in lockfile.get("@s/a")] == [
            "*",
            "1 || 2",
            "^1",
            "^2.0.x",
        ]
        assert {record.version for record in lockfile.get("@s/a")} == {
            "1.0.1",
            "2.0.0",
        }
        assert lockfile.get("@s/a")[2].version == "2.0.0"


DIFF_FORWARD = {
    "added": [DiffItem("b", "3"), DiffItem("c", "^1")],
    "changed": [DiffItem("a", "^1"), DiffItem("b", "2.0.x")],
    "removed": [DiffItem("b", "4"), DiffItem("d", "^1")],
}

DIFF_BACKWARD = {
    "added": [DiffItem("b", "4"), DiffItem("d", "^1")],
    "changed": [DiffItem("a", "^1"), DiffItem("b", "2.0.x")],
    "removed": [DiffItem("b", "3"), DiffItem("c", "^1")],
}


@pytest.mark.unit
class TestLockfileDiff:
    """Structural diffs within and across grammars."""

    @pytest.mark.parametrize(
        "first, second",
        [
            (LEGACY_A, LEGACY_B),
            (MODERN_A, MODERN_B),
            (LEGACY_A, MODERN_B),
            (MODERN_A, LEGACY_B),
        ],
        ids=["legacy", "modern", "legacy-modern", "modern-legacy"],
    )
    def test_diff_both_directions(self, first: str, second: str) -> None:
        """Test added/changed/removed and their mirror image."""
        a = Lockfile.parse(first)
        b = Lockfile.parse(second)

        forward = a.diff(b)
        backward = b.diff(a)

        assert forward.added == DIFF_FORWARD["added"]
        assert forward.changed == DIFF_FORWARD["changed"]
        assert forward.removed == DIFF_FORWARD["removed"]
        assert backward.added == DIFF_BACKWARD["added"]
        assert backward.changed == DIFF_BACKWARD["changed"]
        assert backward.removed == DIFF_BACKWARD["removed"]

    def test_workspace_ranges_diff_against_themselves(self) -> None:
        """Test a lockfile with workspace ranges has an empty self diff."""
        a = Lockfile.parse(WORKSPACE_LOCKFILE)
        b = Lockfile.parse(WORKSPACE_LOCKFILE)

        assert a.diff(b).is_empty()

    def test_diff_to_json(self) -> None:
        """Test the JSON form of a diff."""
        result = Lockfile.parse(LEGACY_A).diff(Lockfile.parse(LEGACY_B))

        assert result.to_json()["added"] == [
            {"name": "b", "range": "3"},
            {"name": "c", "range": "^1"},
        ]


@pytest.mark.unit
class TestDependencyGraph:
    """Name-level dependency graphs."""

    def test_workspace_lockfile(self) -> None:
        """Test dependencies and peer dependencies of workspace packages."""
        graph = Lockfile.parse(WORKSPACE_LOCKFILE).create_simplified_dependency_graph()

        assert list(graph) == ["@backstage/app-defaults", "@backstage/backend-app-api"]
        assert graph["@backstage/app-defaults"] == {
            "@backstage/cli",
            "@backstage/core-app-api",
            "@backstage/core-components",
            "@backstage/core-plugin-api",
            "@backstage/plugin-permission-react",
            "@backstage/test-utils",
            "@backstage/theme",
            "@material-ui/core",
            "@material-ui/icons",
            "@testing-library/jest-dom",
            "@testing-library/react",
            "@types/node",
            "@types/react",
            "react",
            "react-dom",
            "react-router-dom",
        }
        assert graph["@backstage/backend-app-api"] == {
            "@backstage/backend-common",
            "@backstage/backend-plugin-api",
            "@backstage/backend-tasks",
            "@backstage/cli",
            "@backstage/errors",
            "@backstage/plugin-permission-node",
            "express",
            "express-promise-router",
            "winston",
        }

    def test_lockfile_without_dependencies(self) -> None:
        """Test every package becomes a node even without edges."""
        text = (
            MODERN_HEADER
            + """
"a@npm:^1":
  version: "1.0.1"

"b@npm:3":
  version: "3.0.1"

"b@npm:2.0.x":
  version: "2.0.1"
  checksum: sha512-abc2
"""
        )

        graph = Lockfile.parse(text).create_simplified_dependency_graph()

        assert graph == {"a": set(), "b": set()}

    def test_modern_lockfile_with_dependencies(self) -> None:
        """Test edges from every entry of a name are merged."""
        text = (
            MODERN_HEADER
            + """
"a@npm:^1":
  version: "1.0.1"
  dependencies:
    b: "^2"

"b@npm:3":
  version: "3.0.1"
  checksum: sha512-abc1

"b@npm:2.0.x":
  version: "2.0.1"
  checksum: sha512-abc2
  dependencies:
    c: "^1"

"b@npm:^2":
  version: "2.0.0"
  checksum: sha512-abc3
  peerDependencies:
    d: "^1"

"c@npm:^1":
  version: "1.0.1"

"d@npm:^1":
  version: "1.0.2"
"""
        )

        graph = Lockfile.parse(text).create_simplified_dependency_graph()

        assert graph == {"a": {"b"}, "b": {"c", "d"}, "c": set(), "d": set()}

    def test_legacy_lockfile(self) -> None:
        """Test the classic grammar yields the same graph shape."""
        text = (
            LEGACY_HEADER
            + """
a@^1:
  version "1.0.1"
  dependencies:
    b "^2"

b@3:
  version "3.0.1"
  integrity sha512-abc1

b@2.0.x:
  version "2.0.1"
  integrity sha512-abc2
  dependencies:
    c "^1"

b@^2:
  version "2.0.0"
  integrity sha512-abc3
  dependencies:
    d "^1"

c@^1:
  version "1.0.1"
  integrity x

d@^1:
  version "1.0.1"
  integrity x
"""
        )

        graph: Dict[str, Set[str]] = Lockfile.parse(
            text
        ).create_simplified_dependency_graph()

        assert list(graph) == ["a", "b", "c", "d"]
        assert graph == {"a": {"b"}, "b": {"c", "d"}, "c": set(), "d": set()}

    def test_every_dependency_name_is_a_node(self) -> None:
        """Test edges of a complete lockfile only point at known nodes."""
        graph = Lockfile.parse(LEGACY_A).create_simplified_dependency_graph()

        for edges in graph.values():
            assert edges <= set(graph)
