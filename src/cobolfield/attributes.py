"""BMS ATTRB codes as a closed enumeration.

``DFHMDF ATTRB=(FSET,IC,NORM,UNPROT)`` style lists parse into a frozenset of
``FieldAttribute`` members; ``FieldBehaviour`` folds them into the flags the
validators need.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class FieldAttribute(str, Enum):
    ASKIP = "ASKIP"
    PROT = "PROT"
    UNPROT = "UNPROT"
    NUM = "NUM"
    BRT = "BRT"
    NORM = "NORM"
    DRK = "DRK"
    IC = "IC"
    FSET = "FSET"


def parse_attributes(codes: str | Iterable[str] | None) -> frozenset[FieldAttribute]:
    """Parse ``"ASKIP,BRT"``, ``"(FSET,IC)"`` or a list of codes."""
    if codes is None:
        return frozenset()
    if isinstance(codes, str):
        codes = codes.strip().strip("()").split(",")
    parsed = set()
    for code in codes:
        code = code.strip().upper()
        if not code:
            continue
        try:
            parsed.add(FieldAttribute(code))
        except ValueError:
            raise ValueError(f"Unrecognized BMS attribute {code!r}") from None
    return frozenset(parsed)


@dataclass(frozen=True)
class FieldBehaviour:
    protected: bool = False
    numeric: bool = False
    hidden: bool = False
    bright: bool = False
    initial_cursor: bool = False
    modified: bool = False

    @staticmethod
    def from_attributes(attributes: Iterable[FieldAttribute]) -> FieldBehaviour:
        flags = {
            "protected": False,
            "numeric": False,
            "hidden": False,
            "bright": False,
            "initial_cursor": False,
            "modified": False,
        }
        for attribute in attributes:
            match attribute:
                case FieldAttribute.ASKIP | FieldAttribute.PROT:
                    flags["protected"] = True
                case FieldAttribute.UNPROT:
                    pass
                case FieldAttribute.NUM:
                    flags["numeric"] = True
                case FieldAttribute.BRT:
                    flags["bright"] = True
                case FieldAttribute.NORM:
                    flags["bright"] = False
                case FieldAttribute.DRK:
                    flags["hidden"] = True
                case FieldAttribute.IC:
                    flags["initial_cursor"] = True
                case FieldAttribute.FSET:
                    flags["modified"] = True
        return FieldBehaviour(**flags)
