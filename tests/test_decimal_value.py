from decimal import Decimal

import pytest

from cobolfield.errors import InvalidNumericLiteral, NumericOverflow
from cobolfield.numeric.value import DecimalContext, DecimalValue, Rounding


def test_parse_keeps_literal_scale():
    value = DecimalValue.parse("-12.50")
    assert value.unscaled == 1250
    assert value.negative is True
    assert value.scale == 2
    assert str(value) == "-12.50"


def test_parse_with_explicit_scale_rounds_half_up():
    assert str(DecimalValue.parse("2.345", scale=2)) == "2.35"
    assert str(DecimalValue.parse("-2.345", scale=2)) == "-2.35"
    assert str(DecimalValue.parse("7", scale=3)) == "7.000"


@pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3", "--1", "1e5", "+", ".", "12 34"])
def test_parse_rejects_malformed_literals(text: str) -> None:
    with pytest.raises(InvalidNumericLiteral):
        DecimalValue.parse(text)


def test_parse_accepts_whitespace_and_bare_fractions():
    assert DecimalValue.parse("  +.5 ") == DecimalValue(5, False, 1)
    assert DecimalValue.parse("3.") == DecimalValue(3)


def test_negative_zero_is_normalised():
    assert DecimalValue(0, True, 2).negative is False
    assert DecimalValue.parse("-0.00").negative is False
    assert str(DecimalValue.parse("-0.004", scale=2)) == "0.00"


def test_to_fixed_string_rounding_modes():
    value = DecimalValue.parse("2.345")
    assert value.to_fixed_string(2) == "2.35"
    assert value.to_fixed_string(2, Rounding.HALF_EVEN) == "2.34"
    assert DecimalValue.parse("2.355").to_fixed_string(2, Rounding.HALF_EVEN) == "2.36"
    assert value.to_fixed_string(2, Rounding.DOWN) == "2.34"
    assert value.to_fixed_string(5) == "2.34500"
    assert DecimalValue.parse("0.5").to_fixed_string(0) == "1"


def test_rescale_uses_explicit_context():
    context = DecimalContext(rounding=Rounding.HALF_EVEN)
    assert str(DecimalValue.parse("0.125").rescale(2, context)) == "0.12"
    assert str(DecimalValue.parse("0.125").rescale(2)) == "0.13"


def test_rescale_overflow_beyond_precision():
    context = DecimalContext(precision=5)
    with pytest.raises(NumericOverflow):
        DecimalValue.parse("123.456").rescale(3, context)
    with pytest.raises(NumericOverflow):
        DecimalValue.parse("12345.6").rescale(1, context)


def test_from_number_avoids_binary_float_artifacts():
    assert str(DecimalValue.from_number(0.1)) == "0.1"
    assert str(DecimalValue.from_number(-12.5, scale=2)) == "-12.50"
    assert DecimalValue.from_number(1e20) == DecimalValue(10**20)
    assert DecimalValue.from_number(Decimal("1.10")).scale == 2
    assert DecimalValue.from_number(-7) == DecimalValue(7, True)


@pytest.mark.parametrize("bad", [True, float("nan"), float("inf"), Decimal("NaN"), [1]])
def test_from_number_rejects_non_numbers(bad: object) -> None:
    with pytest.raises(InvalidNumericLiteral):
        DecimalValue.from_number(bad)  # type: ignore[arg-type]


def test_equality_and_ordering_align_scales():
    assert DecimalValue.parse("1.0") == DecimalValue.parse("1.00")
    assert hash(DecimalValue.parse("1.0")) == hash(DecimalValue.parse("1.00"))
    assert DecimalValue.parse("-1.5") < DecimalValue.parse("-1.49")
    assert DecimalValue.parse("10") > DecimalValue.parse("9.99")
    assert len({DecimalValue.parse("2"), DecimalValue.parse("2.000")}) == 1


def test_exact_arithmetic():
    a = DecimalValue.parse("0.1")
    b = DecimalValue.parse("0.2")
    assert a + b == DecimalValue.parse("0.3")
    assert str(a - b) == "-0.1"
    assert str(DecimalValue.parse("1.5") * DecimalValue.parse("-0.25")) == "-0.375"
    assert str(-DecimalValue.parse("4.00")) == "-4.00"
    assert abs(DecimalValue.parse("-4")) == DecimalValue(4)


def test_integer_digits_and_digit_padding():
    value = DecimalValue.parse("123.45")
    assert value.integer_digits == 3
    assert DecimalValue.parse("0.45").integer_digits == 0
    assert value.digits(7) == "0012345"


def test_invalid_construction():
    with pytest.raises(ValueError):
        DecimalValue(-1)
    with pytest.raises(ValueError):
        DecimalValue(1, False, -1)


def test_rounding_from_name():
    assert Rounding.from_name("half-even") is Rounding.HALF_EVEN
    assert Rounding.from_name("HALF_UP") is Rounding.HALF_UP
    with pytest.raises(ValueError):
        Rounding.from_name("ceiling-ish")


def test_non_finite_decimals_are_rejected_internally():
    with pytest.raises(InvalidNumericLiteral):
        DecimalValue._from_decimal(Decimal("Infinity"))
