import pytest

from cobolfield.copybook.geometry import FieldGeometry
from cobolfield.display import (
    format_field,
    format_pic_9,
    format_pic_s9v9,
    format_pic_x,
    parse_field,
    parse_pic_9,
    parse_pic_s9v9,
    parse_pic_x,
)
from cobolfield.errors import (
    DigitOverflow,
    FormatError,
    InvalidDigitCharacter,
    InvalidFieldWidth,
)
from cobolfield.numeric.value import DecimalValue, Rounding


def test_format_pic_x_pads_and_truncates():
    assert format_pic_x("AB", 4) == "AB  "
    assert format_pic_x("AB", 4, pad="left") == "  AB"
    assert format_pic_x("ABCDEF", 4) == "ABCD"
    assert format_pic_x(None, 3) == "   "
    assert format_pic_x(" a.b", 4) == " a.b"
    with pytest.raises(ValueError):
        format_pic_x("AB", 4, pad="center")  # type: ignore[arg-type]


@pytest.mark.parametrize("value", ["", "AB", "ABCDEFG", "  x  "])
def test_format_pic_x_is_idempotent(value: str) -> None:
    once = format_pic_x(value, 5)
    assert format_pic_x(once, 5) == once


def test_format_pic_9_boundaries():
    assert format_pic_9("12345", 3) == "345"
    assert format_pic_9("", 5) == "00000"
    assert format_pic_9(None, 2) == "00"
    assert format_pic_9("(555) 123-4567", 10) == "5551234567"
    assert format_pic_9(42, 4) == "0042"
    assert format_pic_9("123", 0) == ""


def test_format_pic_9_strict_signals_overflow():
    with pytest.raises(DigitOverflow):
        format_pic_9("12345", 3, strict=True)
    assert format_pic_9("345", 3, strict=True) == "345"


def test_format_pic_s9v9():
    assert format_pic_s9v9(-12.5, 3, 2) == "-012.50"
    assert format_pic_s9v9(DecimalValue.parse("7.125"), 2, 2) == "07.13"
    assert format_pic_s9v9("7.125", 2, 2, rounding=Rounding.HALF_EVEN) == "07.12"
    assert format_pic_s9v9(42, 5, 0) == "00042"
    assert format_pic_s9v9("-0.004", 1, 2) == "0.00"
    assert format_pic_s9v9("0.5", 0, 1) == ".5"


def test_format_pic_s9v9_overflow():
    with pytest.raises(DigitOverflow) as excinfo:
        format_pic_s9v9("1234.5", 3, 2)
    assert excinfo.value.capacity == 3
    # rounding can carry into a new integer digit
    with pytest.raises(DigitOverflow):
        format_pic_s9v9("999.995", 3, 2)


def test_parse_pic_x():
    assert parse_pic_x("AB  ", 4) == "AB"
    assert parse_pic_x("  AB", 4, pad="left") == "AB"
    with pytest.raises(InvalidFieldWidth):
        parse_pic_x("AB", 4)


def test_parse_pic_9():
    assert parse_pic_9("00042", 5) == DecimalValue(42)
    assert parse_pic_9("01250", 5, scale=2) == DecimalValue.parse("12.50")
    with pytest.raises(InvalidFieldWidth):
        parse_pic_9("42", 5)
    with pytest.raises(InvalidDigitCharacter):
        parse_pic_9("00 42", 5)


def test_parse_pic_s9v9_inverts_format():
    assert parse_pic_s9v9("-012.50", 3, 2) == DecimalValue.parse("-12.5")
    assert parse_pic_s9v9("00042", 5, 0) == DecimalValue(42)
    for text in ("-012.50", "999.99", "000.00"):
        assert format_pic_s9v9(parse_pic_s9v9(text, 3, 2), 3, 2) == text


def test_parse_pic_s9v9_rejects_bad_slices():
    with pytest.raises(InvalidFieldWidth):
        parse_pic_s9v9("12.50", 3, 2)
    with pytest.raises(InvalidDigitCharacter) as excinfo:
        parse_pic_s9v9("012,50", 3, 2)
    assert excinfo.value.position == 3
    with pytest.raises(InvalidDigitCharacter):
        parse_pic_s9v9("-01a.50", 3, 2)


def test_format_field_dispatches_on_geometry():
    assert format_field("NAME", FieldGeometry.from_picture("X(6)")) == "NAME  "
    assert format_field("123-45", FieldGeometry.from_picture("9(7)")) == "0012345"
    assert format_field(DecimalValue(15), FieldGeometry.from_picture("9(3)")) == "015"
    assert format_field("-3.456", FieldGeometry.from_picture("S9(3)V99")) == "-003.46"
    with pytest.raises(FormatError):
        format_field("-3", FieldGeometry.from_picture("9(3)V99"))
    with pytest.raises(FormatError):
        format_field(None, FieldGeometry.from_picture("S9(3)"))


def test_parse_field_dispatches_on_geometry():
    assert parse_field("NAME  ", FieldGeometry.from_picture("X(6)")) == "NAME"
    assert parse_field("0012345", FieldGeometry.from_picture("9(7)")) == DecimalValue(12345)
    assert parse_field("-003.46", FieldGeometry.from_picture("S9(3)V99")) == DecimalValue.parse(
        "-3.46"
    )
