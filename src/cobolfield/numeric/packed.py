"""Packed decimal (COMP-3) codec.

Two digits per byte, most significant nibble first; the low nibble of the
last byte carries the sign: C or F positive, D negative. An even digit count
leaves a leading zero nibble so the field is a whole number of bytes.
"""

from __future__ import annotations

from cobolfield.errors import (
    DecodeError,
    EncodeError,
    InvalidDigitNibble,
    InvalidSignNibble,
    NumericOverflow,
)
from cobolfield.numeric.value import DecimalValue

POSITIVE_SIGNS = frozenset({0x0C, 0x0F})
NEGATIVE_SIGNS = frozenset({0x0D})
SIGN_POSITIVE = 0x0C
SIGN_NEGATIVE = 0x0D
SIGN_UNSIGNED = 0x0F


def packed_length(total_digits: int) -> int:
    """Bytes needed to hold ``total_digits`` digits plus the sign nibble."""
    return total_digits // 2 + 1


def decode_packed(data: bytes, scale: int = 0) -> DecimalValue:
    """Decode a COMP-3 field, peeling ``scale`` fractional digits off the low end."""
    if scale < 0:
        raise ValueError("scale must be non-negative")
    if not data:
        raise DecodeError("Packed field is empty")

    sign = data[-1] & 0x0F
    if sign in NEGATIVE_SIGNS:
        negative = True
    elif sign in POSITIVE_SIGNS:
        negative = False
    else:
        raise InvalidSignNibble(sign)

    digits: list[str] = []
    for offset, byte in enumerate(data):
        high, low = byte >> 4, byte & 0x0F
        if high > 9:
            raise InvalidDigitNibble(high, offset)
        digits.append(str(high))
        if offset == len(data) - 1:
            break  # low nibble of the last byte is the sign
        if low > 9:
            raise InvalidDigitNibble(low, offset)
        digits.append(str(low))
    return DecimalValue.from_digits("".join(digits), negative, scale)


def encode_packed(value: DecimalValue, total_digits: int, *, unsigned: bool = False) -> bytes:
    """Encode ``value``'s unscaled magnitude into ``total_digits`` packed digits.

    The value's scale is implied by the field definition and is not stored;
    rescale first if the field's scale differs.
    """
    if total_digits < 1:
        raise ValueError("total_digits must be at least 1")
    if value.digit_count > total_digits:
        raise NumericOverflow(value.digit_count, total_digits)
    if unsigned and value.negative:
        raise EncodeError("Cannot encode a negative value into an unsigned packed field")

    if unsigned:
        sign_nibble = SIGN_UNSIGNED
    else:
        sign_nibble = SIGN_NEGATIVE if value.negative else SIGN_POSITIVE
    nibbles = [int(ch) for ch in value.digits(total_digits)] + [sign_nibble]
    if len(nibbles) % 2:
        nibbles.insert(0, 0)
    packed = bytearray()
    for hi, lo in zip(nibbles[0::2], nibbles[1::2], strict=True):
        packed.append((hi << 4) | lo)
    return bytes(packed)
