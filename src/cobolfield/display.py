"""Fixed-width display formatting for PIC X, PIC 9 and PIC S9(n)V9(m) fields.

Formatters are total: size mismatches follow an explicit pad/truncate policy
instead of raising, except signed numerics whose integer part does not fit.
Parsers take an exact-width slice and validate character classes first.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from cobolfield.config.logging import get_logger
from cobolfield.copybook.geometry import FieldGeometry, FieldKind
from cobolfield.errors import (
    DecodeError,
    DigitOverflow,
    FormatError,
    InvalidDigitCharacter,
    InvalidFieldWidth,
)
from cobolfield.numeric.value import DecimalContext, DecimalValue, Rounding
from cobolfield.numeric.zoned import decode_zoned

logger = get_logger(__name__)

Pad = Literal["right", "left"]
Numeric = DecimalValue | str | int | float | Decimal
DIGITS = "0123456789"


def _check_pad(pad: str) -> None:
    if pad not in ("right", "left"):
        raise ValueError(f"pad must be 'right' or 'left', got {pad!r}")


def format_pic_x(value: str | None, length: int, pad: Pad = "right") -> str:
    """Truncate to ``length`` or pad with spaces on the ``pad`` side."""
    _check_pad(pad)
    if length < 0:
        raise ValueError("length must be non-negative")
    text = value or ""
    if len(text) >= length:
        return text[:length]
    return text.ljust(length) if pad == "right" else text.rjust(length)


def format_pic_9(value: str | int | None, length: int, *, strict: bool = False) -> str:
    """Keep only digits, zero-pad on the left, drop leading digits that do not fit."""
    if length < 0:
        raise ValueError("length must be non-negative")
    digits = "".join(ch for ch in str(value) if ch in DIGITS) if value is not None else ""
    overflow = len(digits) - length
    if overflow > 0:
        if strict:
            raise DigitOverflow(len(digits), length)
        logger.debug("pic9_truncated", length=length, dropped=digits[:overflow])
        digits = digits[overflow:]
    return digits.rjust(length, "0")


def format_pic_s9v9(
    value: Numeric,
    integer_digits: int,
    fraction_digits: int,
    *,
    rounding: Rounding = Rounding.HALF_UP,
) -> str:
    """Render ``[-]III.FF`` with a leading minus only for negative values."""
    if integer_digits < 0 or fraction_digits < 0:
        raise ValueError("digit counts must be non-negative")
    number = DecimalValue.coerce(value)
    context = DecimalContext(precision=number.digit_count + fraction_digits + 1, rounding=rounding)
    rounded = number.rescale(fraction_digits, context)
    if rounded.integer_digits > integer_digits:
        raise DigitOverflow(rounded.integer_digits, integer_digits)

    digits = rounded.digits(integer_digits + fraction_digits)
    text = digits[:integer_digits]
    if fraction_digits:
        text += "." + digits[integer_digits:]
    return f"-{text}" if rounded.negative else text


def _check_digits(text: str, offset: int = 0) -> None:
    for position, char in enumerate(text, start=offset):
        if char not in DIGITS:
            raise InvalidDigitCharacter(char, position)


def parse_pic_x(text: str, length: int, pad: Pad = "right") -> str:
    _check_pad(pad)
    if len(text) != length:
        raise InvalidFieldWidth(length, len(text))
    return text.rstrip(" ") if pad == "right" else text.lstrip(" ")


def parse_pic_9(text: str, length: int, scale: int = 0) -> DecimalValue:
    if len(text) != length:
        raise InvalidFieldWidth(length, len(text))
    return decode_zoned(text, scale, signed=False)


def parse_pic_s9v9(text: str, integer_digits: int, fraction_digits: int) -> DecimalValue:
    """Inverse of ``format_pic_s9v9``."""
    negative = text.startswith("-")
    offset = 1 if negative else 0
    body = text[offset:]
    width = integer_digits + fraction_digits + (1 if fraction_digits else 0)
    if len(body) != width:
        raise InvalidFieldWidth(width + offset, len(text))

    whole = body[:integer_digits]
    _check_digits(whole, offset)
    fraction = ""
    if fraction_digits:
        point = body[integer_digits]
        if point != ".":
            raise InvalidDigitCharacter(point, offset + integer_digits)
        fraction = body[integer_digits + 1 :]
        _check_digits(fraction, offset + integer_digits + 1)
    return DecimalValue.from_digits(whole + fraction, negative, fraction_digits)


def format_field(
    value: Numeric | None,
    geometry: FieldGeometry,
    *,
    rounding: Rounding = Rounding.HALF_UP,
) -> str:
    """Format ``value`` according to a geometry derived from a PIC clause."""
    if geometry.kind is FieldKind.ALPHANUMERIC:
        return format_pic_x(None if value is None else str(value), geometry.length)
    if not geometry.signed and not geometry.fraction_digits and not isinstance(value, DecimalValue):
        if value is None or isinstance(value, str):
            return format_pic_9(value, geometry.length)
    if value is None:
        raise FormatError("A numeric field needs a value")
    number = DecimalValue.coerce(value)
    if number.negative and not geometry.signed:
        raise FormatError("Negative value for an unsigned field")
    return format_pic_s9v9(
        number, geometry.integer_digits, geometry.fraction_digits, rounding=rounding
    )


def parse_field(text: str, geometry: FieldGeometry) -> str | DecimalValue:
    if geometry.kind is FieldKind.ALPHANUMERIC:
        return parse_pic_x(text, geometry.length)
    if not geometry.signed and not geometry.fraction_digits:
        return parse_pic_9(text, geometry.length)
    value = parse_pic_s9v9(text, geometry.integer_digits, geometry.fraction_digits)
    if value.negative and not geometry.signed:
        raise DecodeError("Negative value in an unsigned field")
    return value
