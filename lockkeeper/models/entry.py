"""
Lockfile entry data models for lockkeeper.

An entry is one block of a lockfile: one or more descriptors that share a
single resolution, the parsed fields of that resolution, and the raw text
lines the block was read from so it can be written back unchanged.
"""

from __future__ import annotations

import re
from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from lockkeeper.constants import CHECKSUM_FIELDS, STRIPPED_PROTOCOLS

# name is either ``pkg`` or ``@scope/pkg``; the protocol prefix is optional
DESCRIPTOR_PATTERN = re.compile(
    r"^(?P<name>(?:@[^/]+/)?[^@/]+)@"
    r"(?:(?P<protocol>" + "|".join(STRIPPED_PROTOCOLS) + r"):)?"
    r"(?P<range>.+)$"
)


class LockfileKind(Enum):
    """The two lockfile grammars."""

    CLASSIC = "classic"  # yarn v1, line oriented
    MODERN = "modern"  # yarn berry, YAML flavored


@dataclass(frozen=True)
class Descriptor:
    """A single ``name@range`` requirement from an entry key.

    Attributes:
        name: Package name, including the scope for scoped packages.
        range: Version range with any ``npm:``/``workspace:`` prefix removed.
        protocol: The stripped protocol, or ``None``.
        raw: Unquoted descriptor text as written in the lockfile.
    """

    name: str
    range: str
    protocol: Optional[str]
    raw: str

    @classmethod
    def parse(cls, text: str) -> Optional["Descriptor"]:
        """Parse descriptor text, returning ``None`` when it is malformed.

        Example::

            >>> Descriptor.parse("@s/a@npm:^1")
            Descriptor(name='@s/a', range='^1', protocol='npm', raw='@s/a@npm:^1')
        """
        match = DESCRIPTOR_PATTERN.match(text)
        if not match:
            return None
        return cls(
            name=match.group("name"),
            range=match.group("range"),
            protocol=match.group("protocol"),
            raw=text,
        )

    @property
    def key(self) -> tuple:
        """Identity of the descriptor within a lockfile."""
        return (self.name, self.range)


@dataclass
class LockfileEntry:
    """One resolution block of a lockfile.

    Attributes:
        descriptors: Descriptors sharing this resolution, in key order.
        version: Resolved version (may be the use-local sentinel).
        fields: Scalar fields of the block (``resolved``, ``integrity``,
            ``checksum``, ``resolution``...), ``version`` included.
        dependencies: Dependency name to range.
        optional_dependencies: Optional dependency name to range.
        peer_dependencies: Peer dependency name to range.
        lines: Raw text lines of the block, key line first.
        leading: Raw blank or comment lines preceding the block.
        line_number: 1-based line number of the key line in the source.
    """

    descriptors: List[Descriptor]
    version: str
    fields: Dict[str, str] = field(default_factory=dict)
    dependencies: Dict[str, str] = field(default_factory=dict)
    optional_dependencies: Dict[str, str] = field(default_factory=dict)
    peer_dependencies: Dict[str, str] = field(default_factory=dict)
    lines: List[str] = field(default_factory=list, repr=False)
    leading: List[str] = field(default_factory=list, repr=False)
    line_number: Optional[int] = field(default=None, compare=False)

    @property
    def data_key(self) -> str:
        """The grouping key of the entry, e.g. ``"b@2.0.x, b@^2"``."""
        return ", ".join(d.raw for d in self.descriptors)

    @property
    def names(self) -> List[str]:
        """Distinct package names referenced by the key, in order."""
        seen: Dict[str, None] = {}
        for descriptor in self.descriptors:
            seen.setdefault(descriptor.name, None)
        return list(seen)

    @property
    def checksum(self) -> Optional[str]:
        """``integrity`` (classic) or ``checksum`` (modern) of the entry."""
        for name in CHECKSUM_FIELDS:
            if self.fields.get(name):
                return self.fields[name]
        return None

    @property
    def resolved(self) -> Optional[str]:
        return self.fields.get("resolved")
