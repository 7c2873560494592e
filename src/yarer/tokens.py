"""Token types, data structures, operator table and character helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType


class TokenType(Enum):
    # Lexer output
    NUMBER = auto()  # 12, 3.14, 4., .5
    IDENTIFIER = auto()  # variable, constant or function name
    OPERATOR = auto()  # + - * / ^ ! =
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    COMMA = auto()  # ,

    # Converter output only
    FUNCTION = auto()  # call of a named function, argc set
    NEGATE = auto()  # unary minus

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single token with its value and original source text.

    ``argc`` is only meaningful for FUNCTION tokens emitted by the converter.
    """

    type: TokenType
    value: str
    raw: str
    span: Span
    argc: int = 0


class Assoc(Enum):
    LEFT = auto()
    RIGHT = auto()


class Fixity(Enum):
    PREFIX = auto()
    INFIX = auto()
    POSTFIX = auto()


@dataclass(frozen=True, slots=True)
class OperatorDef:
    """Static precedence, associativity and arity of one operator."""

    symbol: str
    precedence: int
    assoc: Assoc
    arity: int
    fixity: Fixity


# Keys are operator symbols; "neg" is the unary minus the converter derives
# from "-" in operand position.
OPERATORS: MappingProxyType[str, OperatorDef] = MappingProxyType(
    {
        "=": OperatorDef("=", 0, Assoc.RIGHT, 2, Fixity.INFIX),
        "+": OperatorDef("+", 1, Assoc.LEFT, 2, Fixity.INFIX),
        "-": OperatorDef("-", 1, Assoc.LEFT, 2, Fixity.INFIX),
        "*": OperatorDef("*", 2, Assoc.LEFT, 2, Fixity.INFIX),
        "/": OperatorDef("/", 2, Assoc.LEFT, 2, Fixity.INFIX),
        "neg": OperatorDef("-", 3, Assoc.RIGHT, 1, Fixity.PREFIX),
        "^": OperatorDef("^", 4, Assoc.RIGHT, 2, Fixity.INFIX),
        "!": OperatorDef("!", 5, Assoc.LEFT, 1, Fixity.POSTFIX),
    }
)

# Alternate spellings accepted by the lexer
OPERATOR_ALIASES: dict[str, str] = {
    "×": "*",
    "÷": "/",
}

OPERATOR_CHARS = frozenset("+-*/^!=") | frozenset(OPERATOR_ALIASES)


def is_ident_start(ch: str) -> bool:
    """Return True if ch may begin an identifier."""
    return ch.isalpha()


def is_ident_char(ch: str) -> bool:
    """Return True if ch may continue an identifier."""
    return ch.isalpha() or is_digit(ch) or ch == "_"


def is_digit(ch: str) -> bool:
    # ASCII only; str.isdigit() also accepts superscripts
    return len(ch) == 1 and ch in "0123456789"
