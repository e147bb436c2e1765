"""Minimal copybook parser for record layouts.

Supports elementary items with:
- PIC X(n) / A(n)
- PIC 9(n), S9(n)V9(m) display numerics (zoned, trailing overpunch when signed)
- COMP-3 (packed decimal), with or without the USAGE keyword
- COMP/COMP-4/COMP-5/BINARY (big-endian binary)
- OCCURS n
Group items only contribute their OCCURS count: children of a group that
occurs n times are repeated n times with a `_i` suffix. REDEFINES items and
everything nested under them are skipped, as are level 66 and 88 entries.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field, replace

from cobolfield.copybook.geometry import FieldGeometry

PIC_RE = re.compile(r"PIC(?:TURE)?\s+(?:IS\s+)?([XAS9VPZ\(\)0-9]+)", re.IGNORECASE)
USAGE_RE = re.compile(
    r"\b(?:USAGE\s+(?:IS\s+)?)?(COMP(?:UTATIONAL)?(?:-[345])?|BINARY|PACKED-DECIMAL|DISPLAY)\b",
    re.IGNORECASE,
)
NAME_RE = re.compile(r"^\s*(\d{1,2})\s+([A-Z0-9_-]+)", re.IGNORECASE)
OCCURS_RE = re.compile(r"OCCURS\s+(\d+)", re.IGNORECASE)
REDEFINES_RE = re.compile(r"\bREDEFINES\b", re.IGNORECASE)
SKIPPED_LEVELS = frozenset({66, 88})

USAGE_ALIASES = {
    "COMPUTATIONAL": "COMP",
    "COMPUTATIONAL-3": "COMP-3",
    "COMPUTATIONAL-4": "COMP-4",
    "COMPUTATIONAL-5": "COMP-5",
    "PACKED-DECIMAL": "COMP-3",
}


@dataclass
class CopybookField:
    name: str
    pic: str
    usage: str | None
    occurs: int = 1

    @property
    def geometry(self) -> FieldGeometry:
        return FieldGeometry.from_picture(self.pic)

    @property
    def storage_length(self) -> int:
        return self.geometry.storage_length(self.usage)


@dataclass
class _Group:
    level: int
    occurs: int = 1
    items: list[CopybookField | _Group] = field(default_factory=list)


def _flatten(items: list[CopybookField | _Group], suffix: str = "") -> Iterator[CopybookField]:
    for item in items:
        if isinstance(item, CopybookField):
            yield replace(item, name=item.name + suffix)
            continue
        for index in range(item.occurs):
            yield from _flatten(item.items, suffix + (f"_{index}" if item.occurs > 1 else ""))


def parse_copybook(text: str) -> list[CopybookField]:
    root = _Group(level=0)
    stack = [root]
    redefined_level: int | None = None
    for line in text.splitlines():
        if not line.strip() or line.strip().startswith("*"):
            continue
        name_match = NAME_RE.search(line)
        if not name_match:
            continue
        level = int(name_match.group(1))
        if level in SKIPPED_LEVELS:
            continue
        if level == 77:
            level = 1
        if redefined_level is not None:
            if level > redefined_level:
                continue
            redefined_level = None
        if REDEFINES_RE.search(line):
            # overlays and their children do not add storage
            redefined_level = level
            continue

        while len(stack) > 1 and stack[-1].level >= level:
            stack.pop()
        occurs_match = OCCURS_RE.search(line)
        occurs = int(occurs_match.group(1)) if occurs_match else 1
        pic_match = PIC_RE.search(line)
        if not pic_match:
            group = _Group(level=level, occurs=occurs)
            stack[-1].items.append(group)
            stack.append(group)
            continue

        name = name_match.group(2).upper()
        pic = pic_match.group(1).upper()
        usage_match = USAGE_RE.search(line[pic_match.end() :])
        usage = usage_match.group(1).upper() if usage_match else None
        usage = USAGE_ALIASES.get(usage, usage) if usage else None
        stack[-1].items.append(CopybookField(name=name, pic=pic, usage=usage, occurs=occurs))
    return list(_flatten(root.items))
