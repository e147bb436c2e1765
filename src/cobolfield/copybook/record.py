"""Decode and encode fixed-layout records described by a copybook."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence

from cobolfield.copybook.geometry import FieldKind, is_binary_usage, is_packed_usage
from cobolfield.copybook.parser import CopybookField
from cobolfield.display import format_pic_x
from cobolfield.errors import DecodeError, EncodeError, NumericOverflow
from cobolfield.numeric.packed import decode_packed, encode_packed
from cobolfield.numeric.value import DecimalValue
from cobolfield.numeric.zoned import DEFAULT_CODEPAGE, decode_zoned_bytes, encode_zoned_bytes

FieldValue = str | DecimalValue


def _slots(fields: Sequence[CopybookField]) -> Iterator[tuple[str, CopybookField]]:
    for field in fields:
        for index in range(field.occurs):
            suffix = f"_{index}" if field.occurs > 1 else ""
            yield field.name + suffix, field


def record_length(fields: Sequence[CopybookField]) -> int:
    return sum(field.storage_length * field.occurs for field in fields)


def _decode_slot(field: CopybookField, raw: bytes, codepage: str) -> FieldValue:
    geometry = field.geometry
    if geometry.kind is FieldKind.ALPHANUMERIC:
        return raw.decode(codepage).rstrip(" ")
    if is_packed_usage(field.usage):
        return decode_packed(raw, geometry.scale)
    if is_binary_usage(field.usage):
        number = int.from_bytes(raw, "big", signed=geometry.signed)
        return DecimalValue(abs(number), number < 0, geometry.scale)
    return decode_zoned_bytes(raw, geometry.scale, codepage=codepage, signed=geometry.signed)


def decode_record(
    fields: Sequence[CopybookField], body: bytes, codepage: str = DEFAULT_CODEPAGE
) -> dict[str, FieldValue]:
    """Slice ``body`` per the layout and decode each slot; OCCURS slots get ``_n`` suffixes."""
    expected = record_length(fields)
    if len(body) < expected:
        raise DecodeError(f"Record has {len(body)} bytes, layout needs {expected}")
    values: dict[str, FieldValue] = {}
    pos = 0
    for name, field in _slots(fields):
        width = field.storage_length
        values[name] = _decode_slot(field, body[pos : pos + width], codepage)
        pos += width
    return values


def _encode_slot(field: CopybookField, value: object, codepage: str) -> bytes:
    geometry = field.geometry
    if geometry.kind is FieldKind.ALPHANUMERIC:
        text = None if value is None else str(value)
        return format_pic_x(text, geometry.length).encode(codepage)
    if value is None:
        raise EncodeError(f"Numeric field {field.name} has no value")
    number = DecimalValue.coerce(value, geometry.scale)  # type: ignore[arg-type]
    if is_packed_usage(field.usage):
        return encode_packed(number, geometry.total_digits, unsigned=not geometry.signed)
    if is_binary_usage(field.usage):
        if number.negative and not geometry.signed:
            raise EncodeError(f"Negative value for unsigned binary field {field.name}")
        if number.digit_count > geometry.total_digits:
            raise NumericOverflow(number.digit_count, geometry.total_digits)
        signed_value = -number.unscaled if number.negative else number.unscaled
        return signed_value.to_bytes(field.storage_length, "big", signed=geometry.signed)
    return encode_zoned_bytes(
        number, geometry.total_digits, codepage=codepage, signed=geometry.signed
    )


def encode_record(
    fields: Sequence[CopybookField],
    values: Mapping[str, object],
    codepage: str = DEFAULT_CODEPAGE,
) -> bytes:
    return b"".join(
        _encode_slot(field, values.get(name), codepage) for name, field in _slots(fields)
    )


def iter_fixed_records(data: bytes, length: int) -> Iterable[bytes]:
    """Split a fixed-length (RECFM=F) dataset into record bodies; a short tail is dropped."""
    if length <= 0:
        raise ValueError("record length must be positive")
    for start in range(0, len(data) - length + 1, length):
        yield data[start : start + length]
