"""Exact scaled fixed-point numbers shared by every codec and formatter.

A ``DecimalValue`` is an unscaled integer magnitude, a sign flag and a scale
(the count of implied fractional digits). Rounding goes through
``decimal.Decimal`` with an explicit ``DecimalContext`` handed in by the
caller, so no call depends on process-wide decimal settings.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import ROUND_DOWN, ROUND_HALF_EVEN, ROUND_HALF_UP, Context, Decimal, InvalidOperation
from enum import Enum
from functools import total_ordering

from cobolfield.errors import InvalidNumericLiteral, NumericOverflow

LITERAL_RE = re.compile(r"^([+-]?)([0-9]*)(?:\.([0-9]*))?$")

# COBOL ARITH(EXTEND) maximum
MAX_PRECISION = 31


class Rounding(str, Enum):
    HALF_UP = ROUND_HALF_UP
    HALF_EVEN = ROUND_HALF_EVEN
    DOWN = ROUND_DOWN

    @classmethod
    def from_name(cls, name: str) -> Rounding:
        """Accept ``half-up``, ``HALF_EVEN``, ``down`` and similar spellings."""
        key = name.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown rounding mode {name!r}") from None


@dataclass(frozen=True)
class DecimalContext:
    precision: int = MAX_PRECISION
    rounding: Rounding = Rounding.HALF_UP

    def decimal_context(self) -> Context:
        return Context(prec=self.precision, rounding=self.rounding.value)


DEFAULT_CONTEXT = DecimalContext()


@total_ordering
@dataclass(frozen=True, eq=False)
class DecimalValue:
    unscaled: int
    negative: bool = False
    scale: int = 0

    def __post_init__(self) -> None:
        if self.unscaled < 0:
            raise ValueError("unscaled magnitude must be non-negative")
        if self.scale < 0:
            raise ValueError("scale must be non-negative")
        if self.unscaled == 0 and self.negative:
            object.__setattr__(self, "negative", False)

    # -- construction -------------------------------------------------------

    @classmethod
    def parse(
        cls, text: str, scale: int | None = None, context: DecimalContext = DEFAULT_CONTEXT
    ) -> DecimalValue:
        """Parse ``[+-]digits[.digits]``; ``scale=None`` keeps the literal's own scale."""
        if not isinstance(text, str):
            raise InvalidNumericLiteral(text, "expected a string")
        match = LITERAL_RE.match(text.strip())
        if match is None:
            raise InvalidNumericLiteral(text)
        sign, whole, fraction = match.groups()
        fraction = fraction or ""
        if not whole and not fraction:
            raise InvalidNumericLiteral(text, "no digits")
        value = cls(int(whole + fraction), sign == "-", len(fraction))
        return value if scale is None else value.rescale(scale, context)

    @classmethod
    def from_number(
        cls,
        value: int | float | Decimal,
        scale: int | None = None,
        context: DecimalContext = DEFAULT_CONTEXT,
    ) -> DecimalValue:
        if isinstance(value, bool):
            raise InvalidNumericLiteral(value, "booleans are not numbers here")
        if isinstance(value, int):
            result = cls(abs(value), value < 0, 0)
        elif isinstance(value, float):
            if not math.isfinite(value):
                raise InvalidNumericLiteral(value, "not finite")
            # repr is the shortest string that round-trips the float
            result = cls._from_decimal(Decimal(repr(value)))
        elif isinstance(value, Decimal):
            if not value.is_finite():
                raise InvalidNumericLiteral(value, "not finite")
            result = cls._from_decimal(value)
        else:
            raise InvalidNumericLiteral(value, f"unsupported type {type(value).__name__}")
        return result if scale is None else result.rescale(scale, context)

    @classmethod
    def from_digits(cls, digits: str, negative: bool = False, scale: int = 0) -> DecimalValue:
        """Build from a decoded digit string (codec path)."""
        if not digits:
            return cls(0, False, scale)
        return cls(int(digits), negative, scale)

    @classmethod
    def coerce(
        cls,
        value: DecimalValue | str | int | float | Decimal,
        scale: int | None = None,
        context: DecimalContext = DEFAULT_CONTEXT,
    ) -> DecimalValue:
        if isinstance(value, DecimalValue):
            return value if scale is None else value.rescale(scale, context)
        if isinstance(value, str):
            return cls.parse(value, scale, context)
        return cls.from_number(value, scale, context)

    @classmethod
    def _from_decimal(cls, value: Decimal) -> DecimalValue:
        sign, digits, exponent = value.as_tuple()
        if not isinstance(exponent, int):
            raise InvalidNumericLiteral(value, "not finite")
        unscaled = int("".join(str(d) for d in digits) or "0")
        if exponent > 0:
            return cls(unscaled * 10**exponent, bool(sign), 0)
        return cls(unscaled, bool(sign), -exponent)

    @classmethod
    def _from_signed(cls, signed: int, scale: int) -> DecimalValue:
        return cls(abs(signed), signed < 0, scale)

    # -- conversion ---------------------------------------------------------

    def to_decimal(self) -> Decimal:
        digits = tuple(int(ch) for ch in str(self.unscaled))
        return Decimal((1 if self.negative else 0, digits, -self.scale))

    def rescale(self, scale: int, context: DecimalContext = DEFAULT_CONTEXT) -> DecimalValue:
        """Return the same value at ``scale``, rounding per ``context`` when shrinking."""
        if scale < 0:
            raise ValueError("scale must be non-negative")
        if scale >= self.scale:
            result = DecimalValue(self.unscaled * 10 ** (scale - self.scale), self.negative, scale)
        else:
            try:
                quantized = self.to_decimal().quantize(
                    Decimal(1).scaleb(-scale), context=context.decimal_context()
                )
            except InvalidOperation as exc:
                raise NumericOverflow(self.digit_count, context.precision) from exc
            result = DecimalValue._from_decimal(quantized)
        if result.digit_count > context.precision:
            raise NumericOverflow(result.digit_count, context.precision)
        return result

    def to_fixed_string(self, places: int, rounding: Rounding = Rounding.HALF_UP) -> str:
        """Render with exactly ``places`` fractional digits."""
        context = DecimalContext(precision=self.digit_count + places + 1, rounding=rounding)
        return str(self.rescale(places, context))

    def digits(self, width: int | None = None) -> str:
        """Magnitude digits, optionally left zero-padded to ``width``."""
        text = str(self.unscaled)
        return text.rjust(width, "0") if width else text

    @property
    def digit_count(self) -> int:
        return len(str(self.unscaled))

    @property
    def integer_digits(self) -> int:
        """Significant digits left of the implied point (0 for pure fractions)."""
        whole = self.unscaled // 10**self.scale
        return len(str(whole)) if whole else 0

    @property
    def is_zero(self) -> bool:
        return self.unscaled == 0

    def __str__(self) -> str:
        text = self.digits(self.scale + 1)
        if self.scale:
            text = f"{text[: -self.scale]}.{text[-self.scale :]}"
        return f"-{text}" if self.negative else text

    def __repr__(self) -> str:
        return f"DecimalValue('{self}')"

    # -- comparison and arithmetic -----------------------------------------

    def _signed(self) -> int:
        return -self.unscaled if self.negative else self.unscaled

    def _align(self, other: DecimalValue) -> tuple[int, int, int]:
        scale = max(self.scale, other.scale)
        left = self._signed() * 10 ** (scale - self.scale)
        right = other._signed() * 10 ** (scale - other.scale)
        return left, right, scale

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecimalValue):
            return NotImplemented
        left, right, _scale = self._align(other)
        return left == right

    def __lt__(self, other: DecimalValue) -> bool:
        if not isinstance(other, DecimalValue):
            return NotImplemented
        left, right, _scale = self._align(other)
        return left < right

    def __hash__(self) -> int:
        # Decimal hashing is value-based, so 1.0 and 1.00 collide as they should
        return hash(self.to_decimal())

    def __add__(self, other: DecimalValue) -> DecimalValue:
        if not isinstance(other, DecimalValue):
            return NotImplemented
        left, right, scale = self._align(other)
        return DecimalValue._from_signed(left + right, scale)

    def __sub__(self, other: DecimalValue) -> DecimalValue:
        if not isinstance(other, DecimalValue):
            return NotImplemented
        left, right, scale = self._align(other)
        return DecimalValue._from_signed(left - right, scale)

    def __mul__(self, other: DecimalValue) -> DecimalValue:
        if not isinstance(other, DecimalValue):
            return NotImplemented
        return DecimalValue._from_signed(self._signed() * other._signed(), self.scale + other.scale)

    def __neg__(self) -> DecimalValue:
        return DecimalValue(self.unscaled, not self.negative, self.scale)

    def __abs__(self) -> DecimalValue:
        return DecimalValue(self.unscaled, False, self.scale)
