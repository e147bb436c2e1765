"""Compile BMS PICIN / COBOL picture strings into exact-match validators.

A picture compiles to a fixed tuple of tokens, one per symbol. Category
symbols accept a character class, V and P occupy no position, and every other
printable character must appear literally. Matching walks positions directly;
there is no regular expression underneath, so characters such as ``.``,
``(`` or ``$`` in a picture are always plain literals.
"""

from __future__ import annotations

import string
import unicodedata
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache

from cobolfield.config.logging import get_logger
from cobolfield.copybook.geometry import expand_picture
from cobolfield.errors import UnrecognizedToken

logger = get_logger(__name__)


class Category(str, Enum):
    DIGIT = "9"
    ALPHANUMERIC = "X"
    ALPHABETIC = "A"
    NUMERIC_OR_SPACE = "Z"
    SIGN = "S"
    IMPLIED_POINT = "V"
    SCALE_FACTOR = "P"
    LITERAL = "literal"


CATEGORY_BY_SYMBOL = {
    category.value: category for category in Category if category is not Category.LITERAL
}
ZERO_WIDTH = frozenset({Category.IMPLIED_POINT, Category.SCALE_FACTOR})

_LETTERS = frozenset(string.ascii_letters)
_DIGITS = frozenset(string.digits)
CHARACTER_CLASSES: dict[Category, frozenset[str]] = {
    Category.DIGIT: _DIGITS,
    Category.ALPHANUMERIC: _LETTERS | _DIGITS,
    Category.ALPHABETIC: _LETTERS,
    Category.NUMERIC_OR_SPACE: _DIGITS | {" "},
    Category.SIGN: frozenset("+-"),
}


@dataclass(frozen=True)
class Token:
    category: Category
    literal: str | None = None

    @property
    def width(self) -> int:
        return 0 if self.category in ZERO_WIDTH else 1

    def accepts(self, char: str) -> bool:
        if self.category is Category.LITERAL:
            return char == self.literal
        return char in CHARACTER_CLASSES[self.category]


@dataclass(frozen=True)
class PictureClause:
    picture: str
    tokens: tuple[Token, ...]
    positions: tuple[Token, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", tuple(t for t in self.tokens if t.width))

    @property
    def width(self) -> int:
        return len(self.positions)

    @property
    def zero_width_only(self) -> bool:
        """True for pictures like ``V`` or ``PPV``: valid, but they only match ''."""
        return bool(self.tokens) and not self.positions

    def first_mismatch(self, text: str) -> int | None:
        """Index of the first position that fails, or None when ``text`` matches."""
        if len(text) != self.width:
            return min(len(text), self.width)
        for index, (token, char) in enumerate(zip(self.positions, text, strict=True)):
            if not token.accepts(char):
                return index
        return None

    def matches(self, text: str) -> bool:
        return self.first_mismatch(text) is None


@lru_cache(maxsize=512)
def compile_picture(picture: str, *, expand_repeats: bool = False) -> PictureClause:
    """Compile ``picture``; ``expand_repeats`` turns ``9(3)`` into ``999`` first."""
    source = expand_picture(picture) if expand_repeats else picture
    tokens: list[Token] = []
    for position, char in enumerate(source):
        category = CATEGORY_BY_SYMBOL.get(char)
        if category is not None:
            tokens.append(Token(category))
        elif unicodedata.category(char) == "Cc":
            raise UnrecognizedToken(char, position)
        else:
            tokens.append(Token(Category.LITERAL, char))

    clause = PictureClause(picture=picture, tokens=tuple(tokens))
    if clause.zero_width_only:
        logger.warning("picture_zero_width_only", picture=picture)
    return clause
