"""Typed errors raised by the codecs, formatters and picture compiler.

Every error is a ``ValueError`` so callers that only care about "bad input"
can catch one thing. Business-rule failures are not exceptions; see
``cobolfield.validation.engine.ValidationFailure``.
"""

from __future__ import annotations


class CobolFieldError(ValueError):
    """Base class for all codec/format/picture errors."""


class DecodeError(CobolFieldError):
    """Raw text or bytes could not be turned into a value."""


class InvalidNumericLiteral(DecodeError):
    def __init__(self, text: object, reason: str = "not a decimal literal") -> None:
        self.text = text
        super().__init__(f"Invalid numeric literal {text!r}: {reason}")


class InvalidSignNibble(DecodeError):
    def __init__(self, nibble: int) -> None:
        self.nibble = nibble
        super().__init__(f"Invalid packed sign nibble 0x{nibble:X}")


class InvalidDigitNibble(DecodeError):
    def __init__(self, nibble: int, offset: int) -> None:
        self.nibble = nibble
        self.offset = offset
        super().__init__(f"Invalid packed digit nibble 0x{nibble:X} in byte {offset}")


class InvalidOverpunchCharacter(DecodeError):
    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(f"Invalid overpunch character {char!r}")


class InvalidDigitCharacter(DecodeError):
    def __init__(self, char: str, position: int) -> None:
        self.char = char
        self.position = position
        super().__init__(f"Invalid digit character {char!r} at position {position}")


class InvalidFieldWidth(DecodeError):
    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected a {expected}-character field, got {actual}")


class EncodeError(CobolFieldError):
    """A value does not fit the target field geometry."""


class NumericOverflow(EncodeError):
    def __init__(self, digits: int, capacity: int) -> None:
        self.digits = digits
        self.capacity = capacity
        super().__init__(f"Value needs {digits} digits but the field holds {capacity}")


class FormatError(CobolFieldError):
    """A value cannot be rendered into a display field."""


class DigitOverflow(FormatError):
    def __init__(self, digits: int, capacity: int) -> None:
        self.digits = digits
        self.capacity = capacity
        super().__init__(f"Integer part has {digits} digits, field allows {capacity}")


class PictureError(CobolFieldError):
    """A picture clause cannot be compiled."""


class UnrecognizedToken(PictureError):
    def __init__(self, char: str, position: int) -> None:
        self.char = char
        self.position = position
        super().__init__(f"Unrecognized picture token {char!r} at position {position}")
