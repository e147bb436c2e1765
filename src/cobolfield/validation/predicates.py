"""Reusable cross-field predicate factories.

These only combine values with the codecs and picture matcher; concrete
business tables (which states own which ZIP ranges and so on) belong to the
caller.
"""

from __future__ import annotations

from cobolfield.errors import CobolFieldError
from cobolfield.numeric.value import DecimalValue
from cobolfield.picture.matcher import compile_picture
from cobolfield.validation.engine import Predicate, is_blank


def all_or_none() -> Predicate:
    """Fail when only some of the fields are filled."""

    def check(*values: str | None) -> bool | str:
        if any(is_blank(value) for value in values):
            return "All fields in this group are required when any is provided"
        return True

    return check


def same_value(*, ignore_case: bool = False) -> Predicate:
    def check(*values: str | None) -> bool:
        normalised = {
            (value or "").strip().upper() if ignore_case else (value or "").strip()
            for value in values
        }
        return len(normalised) == 1

    return check


def decimal_order(*, strict: bool = False) -> Predicate:
    """First value <= second (``<`` when strict), compared exactly.

    Blank values pass; pair with ``all_or_none`` when both are required.
    """

    def check(low: str | None, high: str | None) -> bool | str:
        if is_blank(low) or is_blank(high):
            return True
        try:
            left = DecimalValue.parse(low or "")
            right = DecimalValue.parse(high or "")
        except CobolFieldError as exc:
            return str(exc)
        return left < right if strict else left <= right

    return check


def matches_picture(picture: str) -> Predicate:
    """Every non-blank value must match ``picture``."""
    clause = compile_picture(picture)

    def check(*values: str | None) -> bool | str:
        for value in values:
            if not is_blank(value) and not clause.matches(value or ""):
                return f"Invalid format. Expected: {picture}"
        return True

    return check


PREDICATES = {
    "all_or_none": all_or_none,
    "same_value": same_value,
    "decimal_order": decimal_order,
    "matches_picture": matches_picture,
}
