"""Expression lexer: converts source text into a flat token stream."""

from __future__ import annotations

import logging

from yarer.errors import LexError
from yarer.tokens import (
    OPERATOR_ALIASES,
    OPERATOR_CHARS,
    Position,
    Span,
    Token,
    TokenType,
    is_digit,
    is_ident_char,
    is_ident_start,
)

logger = logging.getLogger(__name__)

_PUNCTUATION: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
}


class Lexer:
    """Tokenize an expression into Token objects.

    The lexer is context free: it does not know whether an identifier is a
    variable or a function, nor whether '-' is unary. Whitespace separates
    tokens and produces none.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list, ending in EOF."""
        while self._pos < len(self._source):
            ch = self._peek()

            if ch.isspace():
                self._advance()
            elif is_digit(ch) or (ch == "." and is_digit(self._peek(1))):
                self._lex_number()
            elif is_ident_start(ch):
                self._lex_identifier()
            elif ch in OPERATOR_CHARS:
                start = self._current_pos()
                self._advance()
                self._emit(TokenType.OPERATOR, OPERATOR_ALIASES.get(ch, ch), ch, start)
            elif ch in _PUNCTUATION:
                start = self._current_pos()
                self._advance()
                self._emit(_PUNCTUATION[ch], ch, ch, start)
            else:
                raise self._error(f"unexpected character {ch!r}")

        self._emit(TokenType.EOF, "", "")
        logger.debug("lexed %d tokens from %r", len(self._tokens) - 1, self._source)
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, tt: TokenType, value: str, raw: str, start: Position | None = None) -> Token:
        end = self._current_pos()
        if start is None:
            start = end
        tok = Token(tt, value, raw, Span(start, end))
        self._tokens.append(tok)
        return tok

    def _error(self, message: str, pos: Position | None = None) -> LexError:
        if pos is None:
            pos = self._current_pos()
        return LexError(message, pos, self._source)

    # ------------------------------------------------------------------
    # Literals and names
    # ------------------------------------------------------------------

    def _lex_number(self) -> None:
        start = self._current_pos()
        chars = []
        seen_point = False
        while self._pos < len(self._source):
            ch = self._peek()
            if is_digit(ch):
                chars.append(self._advance())
            elif ch == ".":
                if seen_point:
                    raise self._error("malformed number: second decimal point")
                seen_point = True
                chars.append(self._advance())
            else:
                break
        if is_ident_start(self._peek()):
            raise self._error(f"malformed number: unexpected {self._peek()!r} after digits")
        text = "".join(chars)
        self._emit(TokenType.NUMBER, text, text, start)

    def _lex_identifier(self) -> None:
        start = self._current_pos()
        chars = []
        while self._pos < len(self._source) and is_ident_char(self._peek()):
            chars.append(self._advance())
        text = "".join(chars)
        self._emit(TokenType.IDENTIFIER, text, text, start)


def tokenize(source: str) -> list[Token]:
    """Convenience function: tokenize source and return the token list."""
    return Lexer(source).tokenize()
