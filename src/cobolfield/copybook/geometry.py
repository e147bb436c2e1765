"""Field geometry derived from COBOL PIC clauses.

Handles the display subset used by the codecs:
- X(n) / A(n): alphanumeric, n characters
- 9(n), S9(n), S9(n)V9(m), V99 style numerics (P scaling positions are ignored)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from cobolfield.errors import PictureError
from cobolfield.numeric.packed import packed_length

REPEAT_RE = re.compile(r"(.)\((\d+)\)")
PIC_PREFIX_RE = re.compile(r"^PIC(?:TURE)?\s+(?:IS\s+)?", re.IGNORECASE)
NUMERIC_SYMBOLS = frozenset("9SVPZ")


class FieldKind(str, Enum):
    ALPHANUMERIC = "alphanumeric"
    NUMERIC = "numeric"


def expand_picture(pic: str) -> str:
    """Expand repeat counts: ``S9(3)V9(2)`` -> ``S999V99``."""
    expanded = REPEAT_RE.sub(lambda m: m.group(1) * int(m.group(2)), pic)
    if "(" in expanded or ")" in expanded:
        raise PictureError(f"Unbalanced repeat count in picture {pic!r}")
    return expanded


@dataclass(frozen=True)
class FieldGeometry:
    kind: FieldKind
    length: int
    signed: bool = False
    integer_digits: int = 0
    fraction_digits: int = 0

    @property
    def total_digits(self) -> int:
        return self.integer_digits + self.fraction_digits

    @property
    def scale(self) -> int:
        return self.fraction_digits

    @staticmethod
    def from_picture(pic: str) -> FieldGeometry:
        text = expand_picture(PIC_PREFIX_RE.sub("", pic.strip()).upper())
        if not text:
            raise PictureError("Empty PIC clause")
        if "X" in text or "A" in text:
            return FieldGeometry(kind=FieldKind.ALPHANUMERIC, length=len(text))

        unknown = set(text) - NUMERIC_SYMBOLS
        if unknown:
            raise PictureError(f"Unsupported symbols {sorted(unknown)} in numeric picture {pic!r}")
        if text.count("V") > 1:
            raise PictureError(f"More than one implied point in {pic!r}")
        signed = text.startswith("S")
        if "S" in text[1:]:
            raise PictureError(f"Sign must lead the picture {pic!r}")
        whole, _, fraction = text.lstrip("S").partition("V")
        integer_digits = sum(1 for ch in whole if ch in "9Z")
        fraction_digits = sum(1 for ch in fraction if ch in "9Z")
        return FieldGeometry(
            kind=FieldKind.NUMERIC,
            length=integer_digits + fraction_digits,
            signed=signed,
            integer_digits=integer_digits,
            fraction_digits=fraction_digits,
        )

    def storage_length(self, usage: str | None = None) -> int:
        """Bytes occupied in a record for the given USAGE."""
        if self.kind is FieldKind.ALPHANUMERIC or not usage or usage.upper() == "DISPLAY":
            return self.length
        if is_packed_usage(usage):
            return packed_length(self.total_digits)
        if is_binary_usage(usage):
            return binary_length(self.total_digits)
        raise PictureError(f"Unsupported USAGE {usage!r}")


def is_packed_usage(usage: str | None) -> bool:
    return bool(usage) and usage.upper() in {"COMP-3", "PACKED-DECIMAL"}


def is_binary_usage(usage: str | None) -> bool:
    return bool(usage) and usage.upper() in {"COMP", "COMP-4", "COMP-5", "BINARY"}


def binary_length(total_digits: int) -> int:
    """Halfword up to 4 digits, fullword up to 9, doubleword up to 18."""
    if total_digits <= 4:
        return 2
    if total_digits <= 9:
        return 4
    if total_digits <= 18:
        return 8
    raise PictureError(f"Binary fields hold at most 18 digits, got {total_digits}")
