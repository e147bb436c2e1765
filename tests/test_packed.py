import pytest

from cobolfield.copybook.geometry import FieldGeometry
from cobolfield.data.generator import generate_values
from cobolfield.errors import (
    DecodeError,
    EncodeError,
    InvalidDigitNibble,
    InvalidSignNibble,
    NumericOverflow,
)
from cobolfield.numeric.packed import decode_packed, encode_packed, packed_length
from cobolfield.numeric.value import DecimalValue


def test_decode_packed_with_scale():
    assert decode_packed(bytes([0x12, 0x3C]), scale=1) == DecimalValue.parse("12.3")


def test_decode_packed_sign_nibbles():
    assert decode_packed(bytes([0x12, 0x3D]), scale=1) == DecimalValue.parse("-12.3")
    assert decode_packed(bytes([0x12, 0x3F])) == DecimalValue(123)
    with pytest.raises(InvalidSignNibble) as excinfo:
        decode_packed(bytes([0x12, 0x3A]))
    assert excinfo.value.nibble == 0x0A


def test_decode_packed_rejects_bad_digit_nibbles():
    with pytest.raises(InvalidDigitNibble) as excinfo:
        decode_packed(bytes([0x1A, 0x3C]))
    assert excinfo.value.offset == 0
    with pytest.raises(InvalidDigitNibble):
        decode_packed(bytes([0x00, 0xB3, 0x4C]))


def test_decode_packed_empty_and_negative_zero():
    with pytest.raises(DecodeError):
        decode_packed(b"")
    zero = decode_packed(bytes([0x00, 0x0D]), scale=2)
    assert zero.is_zero
    assert zero.negative is False
    assert str(zero) == "0.00"


def test_encode_packed_pads_and_signs():
    assert encode_packed(DecimalValue.parse("12.3"), 3) == bytes([0x12, 0x3C])
    assert encode_packed(DecimalValue.parse("-12.3"), 5) == bytes([0x00, 0x12, 0x3D])
    # even digit counts carry a leading zero nibble
    assert encode_packed(DecimalValue(1234), 4) == bytes([0x01, 0x23, 0x4C])
    assert encode_packed(DecimalValue(7), 1, unsigned=True) == bytes([0x7F])
    assert len(encode_packed(DecimalValue(1), 9)) == packed_length(9) == 5


def test_encode_packed_overflow_and_sign_errors():
    with pytest.raises(NumericOverflow):
        encode_packed(DecimalValue(12345), 4)
    with pytest.raises(EncodeError):
        encode_packed(DecimalValue(5, True), 3, unsigned=True)
    with pytest.raises(ValueError):
        encode_packed(DecimalValue(5), 0)


def test_packed_round_trip_over_generated_values():
    geometry = FieldGeometry.from_picture("S9(7)V99")
    for value in generate_values(geometry, count=200, seed=7):
        encoded = encode_packed(value, geometry.total_digits)
        assert len(encoded) == packed_length(geometry.total_digits)
        assert decode_packed(encoded, value.scale) == value
