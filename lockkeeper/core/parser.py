"""Lockfile parser for the classic (yarn v1) and modern (yarn berry) grammars.

Both grammars share the same block structure: a non-indented key line
listing one or more descriptors and ending in ``:``, followed by indented
field lines, with blocks separated by blank lines. The parser keeps the
raw text of every block next to its parsed fields so that the lockfile
can be written back byte for byte.

- **Classic** blocks are parsed line by line: ``key value`` or
  ``key "quoted value"`` fields, and ``dependencies:`` style section
  markers followed by deeper indented ``name "range"`` pairs.
- **Modern** blocks are YAML; each block is loaded with PyYAML's
  ``BaseLoader`` so every scalar stays a string (``1.10`` remains
  ``"1.10"``). The ``__metadata`` block is kept in the header.

Typical usage::

    from lockkeeper.core.parser import LockfileParser

    parsed = LockfileParser().parse(text)
    for entry in parsed.entries:
        print(entry.data_key, entry.version)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

import yaml

from lockkeeper.utils.logger import get_logger
from lockkeeper.exceptions import ParseError
from lockkeeper.core.detector import detect_format
from lockkeeper.constants import DEPENDENCY_FIELDS, MODERN_METADATA_KEY
from lockkeeper.models.entry import Descriptor, LockfileEntry, LockfileKind

logger = get_logger("core.parser")


@dataclass
class RawBlock:
    """A block of lockfile text before field parsing."""

    lines: List[str]
    leading: List[str]
    line_number: int

    @property
    def key_line(self) -> str:
        return self.lines[0].rstrip("\r\n")


@dataclass
class ParsedLockfile:
    """Output of :meth:`LockfileParser.parse`."""

    kind: LockfileKind
    header: List[str]
    entries: List[LockfileEntry]
    trailer: List[str] = field(default_factory=list)
    newline: str = "\n"


def split_descriptor_key(
    key_text: str,
    *,
    line_number: Optional[int] = None,
    file_path: Optional[str] = None,
) -> List[Descriptor]:
    """Split an entry key into descriptors.

    Commas inside double quotes do not separate descriptors. Each quoted
    part is unquoted and split again, which covers modern keys where the
    whole list is quoted as one string.

    Raises:
        ParseError: Unbalanced quotes, an empty descriptor, or a descriptor
            without a ``name@range`` shape.
    """
    parts: List[str] = []
    buffer: List[str] = []
    in_quotes = False
    escaped = False

    for char in key_text:
        if in_quotes:
            buffer.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_quotes = False
        elif char == '"':
            in_quotes = True
            buffer.append(char)
        elif char == ",":
            parts.append("".join(buffer))
            buffer = []
        else:
            buffer.append(char)

    if in_quotes:
        raise ParseError(
            "Unterminated quote in entry key",
            line_number=line_number,
            line_content=key_text,
            file_path=file_path,
        )
    parts.append("".join(buffer))

    descriptors: List[Descriptor] = []
    for part in parts:
        part = part.strip()
        if part.startswith('"'):
            try:
                part = json.loads(part)
            except ValueError as exc:
                raise ParseError(
                    f"Invalid quoted descriptor {part}",
                    line_number=line_number,
                    line_content=key_text,
                    file_path=file_path,
                ) from exc
        for piece in part.split(","):
            piece = piece.strip()
            descriptor = Descriptor.parse(piece) if piece else None
            if descriptor is None:
                raise ParseError(
                    f"Failed to parse lockfile entry '{piece or key_text}'",
                    line_number=line_number,
                    line_content=key_text,
                    file_path=file_path,
                )
            descriptors.append(descriptor)

    return descriptors


def _tokenize_classic(content: str) -> List[str]:
    """Split a classic body line into bare or double-quoted tokens."""
    tokens: List[str] = []
    index = 0
    length = len(content)

    while index < length:
        char = content[index]
        if char.isspace():
            index += 1
            continue
        if char == '"':
            end = index + 1
            while end < length:
                if content[end] == "\\":
                    end += 2
                    continue
                if content[end] == '"':
                    break
                end += 1
            if end >= length:
                raise ValueError(f"unterminated string in {content!r}")
            tokens.append(json.loads(content[index : end + 1]))
            index = end + 1
        else:
            end = index
            while end < length and not content[end].isspace():
                end += 1
            tokens.append(content[index:end])
            index = end

    return tokens


class LockfileParser:
    """Parser turning lockfile text into entries with their raw text.

    Example::

        >>> parsed = LockfileParser().parse(text)
        >>> parsed.kind
        <LockfileKind.CLASSIC: 'classic'>
    """

    def __init__(self, file_path: Optional[str] = None) -> None:
        self.file_path = file_path

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, text: str) -> ParsedLockfile:
        """Parse ``text`` into a :class:`ParsedLockfile`.

        Raises:
            FormatError: The grammar cannot be detected.
            ParseError: A block or descriptor is malformed, or two entries
                claim the same ``(name, range)``.
        """
        kind = detect_format(text, file_path=self.file_path)
        lines = text.splitlines(keepends=True)
        blocks, trailer = self._split_blocks(lines)

        header: List[str] = []
        entries: List[LockfileEntry] = []

        for block in blocks:
            if not entries and self._is_header_block(kind, block):
                header.extend(block.leading)
                header.extend(block.lines)
                continue

            if not entries:
                # Everything before the first entry belongs to the header
                header.extend(block.leading)
                block.leading = []

            if kind is LockfileKind.CLASSIC:
                entries.append(self._parse_classic_block(block))
            else:
                entries.append(self._parse_modern_block(block))

        if not entries:
            # Only a preamble: keep everything verbatim in the header
            header.extend(trailer)
            trailer = []

        self._check_unique(entries)

        logger.debug(
            "Parsed %d %s lockfile entr%s",
            len(entries),
            kind.value,
            "y" if len(entries) == 1 else "ies",
        )
        return ParsedLockfile(
            kind=kind,
            header=header,
            entries=entries,
            trailer=trailer,
            newline=_detect_newline(lines),
        )

    # ------------------------------------------------------------------
    # Block splitting
    # ------------------------------------------------------------------

    def _split_blocks(self, lines: List[str]) -> Tuple[List[RawBlock], List[str]]:
        """Group lines into blocks, attaching blank/comment lines to the next block."""
        blocks: List[RawBlock] = []
        pending: List[str] = []
        current: Optional[RawBlock] = None

        for number, line in enumerate(lines, start=1):
            content = line.rstrip("\r\n")
            stripped = content.strip()

            if not stripped:
                current = None
                pending.append(line)
                continue

            if content[0] in " \t":
                if current is None:
                    raise ParseError(
                        "Indented line outside of an entry",
                        line_number=number,
                        line_content=content,
                        file_path=self.file_path,
                    )
                current.lines.append(line)
                continue

            if stripped.startswith("#"):
                current = None
                pending.append(line)
                continue

            if not content.rstrip().endswith(":"):
                raise ParseError(
                    "Expected entry key ending with ':'",
                    line_number=number,
                    line_content=content,
                    file_path=self.file_path,
                )

            current = RawBlock(lines=[line], leading=pending, line_number=number)
            blocks.append(current)
            pending = []

        return blocks, pending

    @staticmethod
    def _is_header_block(kind: LockfileKind, block: RawBlock) -> bool:
        return (
            kind is LockfileKind.MODERN
            and block.key_line.rstrip() == f"{MODERN_METADATA_KEY}:"
        )

    # ------------------------------------------------------------------
    # Classic grammar
    # ------------------------------------------------------------------

    def _parse_classic_block(self, block: RawBlock) -> LockfileEntry:
        key_text = block.key_line.rstrip()[:-1]
        descriptors = split_descriptor_key(
            key_text, line_number=block.line_number, file_path=self.file_path
        )

        fields: Dict[str, str] = {}
        sections: Dict[str, Dict[str, str]] = {}
        base_indent: Optional[int] = None
        section: Optional[Dict[str, str]] = None

        for offset, line in enumerate(block.lines[1:], start=1):
            content = line.rstrip("\r\n")
            stripped = content.strip()
            if stripped.startswith("#"):
                continue

            indent = len(content) - len(content.lstrip())
            if base_indent is None:
                base_indent = indent
            line_number = block.line_number + offset

            try:
                if stripped.endswith(":") and " " not in stripped.rstrip(":"):
                    marker = _tokenize_classic(stripped[:-1])
                    section = sections.setdefault(marker[0], {})
                    continue
                tokens = _tokenize_classic(stripped)
            except (ValueError, IndexError) as exc:
                raise ParseError(
                    f"Malformed lockfile line: {exc}",
                    line_number=line_number,
                    line_content=content,
                    file_path=self.file_path,
                ) from exc

            if len(tokens) != 2:
                raise ParseError(
                    "Expected a 'key value' pair",
                    line_number=line_number,
                    line_content=content,
                    file_path=self.file_path,
                )

            key, value = tokens
            if indent > base_indent and section is not None:
                section[key] = value
            else:
                section = None
                fields[key] = value

        return self._build_entry(block, descriptors, fields, sections)

    # ------------------------------------------------------------------
    # Modern grammar
    # ------------------------------------------------------------------

    def _parse_modern_block(self, block: RawBlock) -> LockfileEntry:
        try:
            data = yaml.load("".join(block.lines), Loader=yaml.BaseLoader)
        except yaml.YAMLError as exc:
            raise ParseError(
                f"Invalid YAML in lockfile entry: {exc}",
                line_number=block.line_number,
                line_content=block.key_line,
                file_path=self.file_path,
            ) from exc

        if not isinstance(data, dict) or len(data) != 1:
            raise ParseError(
                "Expected a single mapping per lockfile entry",
                line_number=block.line_number,
                line_content=block.key_line,
                file_path=self.file_path,
            )

        key_text, body = next(iter(data.items()))
        descriptors = split_descriptor_key(
            key_text, line_number=block.line_number, file_path=self.file_path
        )
        if not isinstance(body, dict):
            body = {}

        fields: Dict[str, str] = {}
        sections: Dict[str, Dict[str, str]] = {}
        for key, value in body.items():
            if isinstance(value, dict):
                sections[key] = _string_map(value)
            elif isinstance(value, str):
                fields[key] = value

        return self._build_entry(block, descriptors, fields, sections)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _build_entry(
        self,
        block: RawBlock,
        descriptors: List[Descriptor],
        fields: Dict[str, str],
        sections: Dict[str, Dict[str, Any]],
    ) -> LockfileEntry:
        version = fields.get("version")
        if version is None:
            raise ParseError(
                "Lockfile entry has no version",
                line_number=block.line_number,
                line_content=block.key_line,
                file_path=self.file_path,
            )

        dependencies, optional, peer = (
            dict(sections.get(name, {})) for name in DEPENDENCY_FIELDS
        )
        return LockfileEntry(
            descriptors=descriptors,
            version=version,
            fields=fields,
            dependencies=dependencies,
            optional_dependencies=optional,
            peer_dependencies=peer,
            lines=block.lines,
            leading=block.leading,
            line_number=block.line_number,
        )

    def _check_unique(self, entries: List[LockfileEntry]) -> None:
        """Reject lockfiles where two descriptors share a ``(name, range)``."""
        seen: Set[Tuple[str, str]] = set()
        for entry in entries:
            for descriptor in entry.descriptors:
                if descriptor.key in seen:
                    raise ParseError(
                        f"Duplicate lockfile entry for "
                        f"'{descriptor.name}@{descriptor.range}'",
                        line_number=entry.line_number,
                        line_content=entry.lines[0].rstrip("\r\n"),
                        file_path=self.file_path,
                    )
                seen.add(descriptor.key)


def _string_map(value: Dict[Any, Any]) -> Dict[str, str]:
    """Keep the string-valued items of a YAML mapping."""
    return {str(k): v for k, v in value.items() if isinstance(v, str)}


def _detect_newline(lines: List[str]) -> str:
    for line in lines:
        if line.endswith("\r\n"):
            return "\r\n"
        if line.endswith("\n"):
            return "\n"
    return "\n"
