"""Text rendering for lockfile entries.

Lockfiles are never pretty-printed from scratch. Untouched blocks are
written from their raw lines; the helpers below regenerate only the
pieces a mutation touches (a key line, a ``version`` line) using the
quoting conventions of the grammar the file was read in.
"""

from __future__ import annotations

import re
import json
from typing import Iterable, List, Sequence

from lockkeeper.exceptions import LockKeeperError
from lockkeeper.models.entry import Descriptor, LockfileEntry, LockfileKind

# Characters that force quoting of a classic key (yarn v1 writer rules)
_CLASSIC_UNSAFE = re.compile(r'[:\s\\",\[\]]')

# Plain YAML scalars accepted unquoted by the modern writer
_MODERN_PLAIN = re.compile(
    r"^(?![-?:,\][{}#&*!|>'\"%@` \t\r\n])"
    r"([ \t]*(?![,\][{}:# \t\r\n]).)*$"
)

_CLASSIC_VERSION_LINE = re.compile(
    r'^(?P<indent>[ \t]+)version(?P<sep>[ \t]+)'
    r'(?:"(?P<quoted>[^"]*)"|(?P<bare>\S+))(?P<tail>[ \t]*)(?P<eol>\r?\n?)$'
)

_MODERN_VERSION_LINE = re.compile(
    r"^(?P<indent>[ \t]+)version:(?P<sep>[ \t]+)"
    r"(?:\"(?P<quoted>[^\"]*)\"|'(?P<single>[^']*)'|(?P<bare>\S+))"
    r"(?P<tail>[ \t]*)(?P<eol>\r?\n?)$"
)


def _classic_needs_quotes(text: str) -> bool:
    return (
        text.startswith("true")
        or text.startswith("false")
        or bool(_CLASSIC_UNSAFE.search(text))
        or text[:1].isdigit()
        or not text[:1].isalpha()
    )


def _json_string(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def sort_descriptors(descriptors: Iterable[Descriptor]) -> List[Descriptor]:
    """Order descriptors the way lockfile writers do (by raw text)."""
    return sorted(descriptors, key=lambda d: d.raw)


def render_key(kind: LockfileKind, descriptors: Sequence[Descriptor]) -> str:
    """Render the key of an entry, without the trailing colon.

    Classic keys quote each descriptor on its own; modern keys join the
    descriptors and quote the joined string when it is not plain YAML.

    Example::

        >>> render_key(LockfileKind.CLASSIC, [Descriptor.parse("b@2.0.x"),
        ...                                   Descriptor.parse("b@^2")])
        'b@2.0.x, b@^2'
    """
    if kind is LockfileKind.CLASSIC:
        return ", ".join(
            _json_string(d.raw) if _classic_needs_quotes(d.raw) else d.raw
            for d in descriptors
        )

    joined = ", ".join(d.raw for d in descriptors)
    return joined if _MODERN_PLAIN.match(joined) else _json_string(joined)


def render_key_line(
    kind: LockfileKind,
    descriptors: Sequence[Descriptor],
    newline: str = "\n",
) -> str:
    """Render a complete key line, colon and line terminator included."""
    return f"{render_key(kind, descriptors)}:{newline}"


def patch_version_line(
    kind: LockfileKind,
    lines: Sequence[str],
    new_version: str,
) -> List[str]:
    """Return a copy of block ``lines`` with the ``version`` field replaced.

    Only the first-level ``version`` field is touched; indentation, the
    separator, the quoting style and the line terminator are preserved.

    Raises:
        LockKeeperError: The block has no first-level ``version`` line.
    """
    classic = kind is LockfileKind.CLASSIC
    pattern = _CLASSIC_VERSION_LINE if classic else _MODERN_VERSION_LINE
    patched = list(lines)
    base_indent = None

    for index, line in enumerate(patched[1:], start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        indent = len(line) - len(line.lstrip(" \t"))
        if base_indent is None:
            base_indent = indent
        if indent != base_indent:
            continue

        match = pattern.match(line)
        if not match:
            continue

        if match.group("quoted") is not None:
            value = _json_string(new_version) if classic else f'"{new_version}"'
        elif not classic and match.group("single") is not None:
            value = f"'{new_version}'"
        else:
            value = new_version

        sep = match.group("sep")
        keyword = "version" if classic else "version:"
        patched[index] = (
            f"{match.group('indent')}{keyword}{sep}{value}"
            f"{match.group('tail')}{match.group('eol')}"
        )
        return patched

    raise LockKeeperError(
        "Lockfile entry has no version line to update",
        {"key": lines[0].rstrip() if lines else ""},
    )


def render_lockfile(
    header: Sequence[str],
    entries: Sequence[LockfileEntry],
    trailer: Sequence[str],
) -> str:
    """Concatenate header, entry blocks and trailer into lockfile text."""
    parts: List[str] = list(header)
    for entry in entries:
        parts.extend(entry.leading)
        parts.extend(entry.lines)
    parts.extend(trailer)
    return "".join(parts)
