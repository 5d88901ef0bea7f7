"""
Tokens - Token kinds and source locations produced by the tokenizer.
"""

from dataclasses import dataclass
from enum import Enum


class Token(Enum):
    """Kinds of JSON tokens, in the order a pull tokenizer reports them."""

    START_OBJECT = "{"
    END_OBJECT = "}"
    START_ARRAY = "["
    END_ARRAY = "]"
    FIELD_NAME = "name"
    VALUE_STRING = "string"
    VALUE_NUMBER_INT = "int"
    VALUE_NUMBER_FLOAT = "float"
    VALUE_TRUE = "true"
    VALUE_FALSE = "false"
    VALUE_NULL = "null"

    @property
    def is_start(self) -> bool:
        return self in (Token.START_OBJECT, Token.START_ARRAY)

    @property
    def is_end(self) -> bool:
        return self in (Token.END_OBJECT, Token.END_ARRAY)

    @property
    def is_scalar(self) -> bool:
        return self in _SCALARS


_SCALARS = frozenset([
    Token.VALUE_STRING,
    Token.VALUE_NUMBER_INT,
    Token.VALUE_NUMBER_FLOAT,
    Token.VALUE_TRUE,
    Token.VALUE_FALSE,
    Token.VALUE_NULL,
])


@dataclass(frozen=True)
class Location:
    """
    A position in the input.

    byte_offset is 0-based; line and column are 1-based. Columns count
    bytes, not characters.
    """

    byte_offset: int
    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column} (byte {self.byte_offset})"


@dataclass(frozen=True)
class TokenEvent:
    """One token as emitted by the lexer."""

    token: Token
    name: object
    text: str
    value: object
    start: Location
    end: Location
