"""--debug token and postfix dumps to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from yarer.tokens import Token, TokenType


def format_postfix(postfix: tuple[Token, ...] | list[Token]) -> str:
    """Render postfix tokens on one line, e.g. ``2 3 neg ^ max/2``."""
    return " ".join(_postfix_word(tok) for tok in postfix)


def _postfix_word(tok: Token) -> str:
    if tok.type == TokenType.FUNCTION:
        return f"{tok.value}/{tok.argc}"
    return tok.value


def dump_tokens(tokens: list[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one line per token to *file*: type, value and column."""
    file.write("Tokens\n")
    for tok in tokens:
        if tok.type == TokenType.EOF:
            continue
        file.write(f"  {tok.type.name:<10} {tok.value!r} @{tok.span.start.column}\n")


def dump_postfix(postfix: tuple[Token, ...], *, file: TextIO = sys.stderr) -> None:
    file.write(f"Postfix\n  {format_postfix(postfix)}\n")
