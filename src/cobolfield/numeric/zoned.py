"""Zoned decimal codec with trailing overpunched sign.

Text form uses the ASCII rendering of the EBCDIC zone nibbles: ``{`` and
``A``-``I`` for positive 0-9, ``}`` and ``J``-``R`` for negative 0-9. Raw
EBCDIC bytes go through a codepage first; cp037 maps 0xC0-0xC9 and 0xD0-0xD9
onto exactly these characters.
"""

from __future__ import annotations

from cobolfield.errors import (
    DecodeError,
    EncodeError,
    InvalidDigitCharacter,
    InvalidOverpunchCharacter,
    NumericOverflow,
)
from cobolfield.numeric.value import DecimalValue

DEFAULT_CODEPAGE = "cp037"
DIGITS = frozenset("0123456789")

OVERPUNCH_POSITIVE = {
    "0": "{",
    "1": "A",
    "2": "B",
    "3": "C",
    "4": "D",
    "5": "E",
    "6": "F",
    "7": "G",
    "8": "H",
    "9": "I",
}
OVERPUNCH_NEGATIVE = {
    "0": "}",
    "1": "J",
    "2": "K",
    "3": "L",
    "4": "M",
    "5": "N",
    "6": "O",
    "7": "P",
    "8": "Q",
    "9": "R",
}
# character -> (digit, negative)
OVERPUNCH_DECODE: dict[str, tuple[str, bool]] = {
    **{char: (digit, False) for digit, char in OVERPUNCH_POSITIVE.items()},
    **{char: (digit, True) for digit, char in OVERPUNCH_NEGATIVE.items()},
}


def _check_digits(text: str) -> None:
    for position, char in enumerate(text):
        if char not in DIGITS:
            raise InvalidDigitCharacter(char, position)


def decode_zoned(text: str, scale: int = 0, *, signed: bool = True) -> DecimalValue:
    """Decode zoned text; ``signed=False`` reads a plain PIC 9 display field."""
    if scale < 0:
        raise ValueError("scale must be non-negative")
    if not text:
        raise DecodeError("Zoned field is empty")
    if not signed:
        _check_digits(text)
        return DecimalValue.from_digits(text, False, scale)

    _check_digits(text[:-1])
    try:
        last_digit, negative = OVERPUNCH_DECODE[text[-1]]
    except KeyError:
        raise InvalidOverpunchCharacter(text[-1]) from None
    return DecimalValue.from_digits(text[:-1] + last_digit, negative, scale)


def encode_zoned(value: DecimalValue, total_digits: int, *, signed: bool = True) -> str:
    if total_digits < 1:
        raise ValueError("total_digits must be at least 1")
    if value.digit_count > total_digits:
        raise NumericOverflow(value.digit_count, total_digits)
    digits = value.digits(total_digits)
    if not signed:
        if value.negative:
            raise EncodeError("Cannot encode a negative value into an unsigned zoned field")
        return digits
    table = OVERPUNCH_NEGATIVE if value.negative else OVERPUNCH_POSITIVE
    return digits[:-1] + table[digits[-1]]


def decode_zoned_bytes(
    data: bytes, scale: int = 0, *, codepage: str = DEFAULT_CODEPAGE, signed: bool = True
) -> DecimalValue:
    return decode_zoned(data.decode(codepage), scale, signed=signed)


def encode_zoned_bytes(
    value: DecimalValue,
    total_digits: int,
    *,
    codepage: str = DEFAULT_CODEPAGE,
    signed: bool = True,
) -> bytes:
    return encode_zoned(value, total_digits, signed=signed).encode(codepage)
