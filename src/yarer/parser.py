"""Shunting-yard converter: infix token stream to postfix (RPN) form."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from yarer.errors import ParseError, UnbalancedParenError
from yarer.lexer import tokenize
from yarer.tokens import OPERATORS, Assoc, Span, Token, TokenType

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Expression:
    """A converted expression: postfix tokens plus an optional assignment target."""

    source: str
    postfix: tuple[Token, ...]
    target: Token | None = None


@dataclass(slots=True)
class _Frame:
    """An open parenthesis; ``func`` is set when it opens a call's argument list."""

    func: Token | None
    commas: int = 0


def _op_key(tok: Token) -> str:
    return "neg" if tok.type == TokenType.NEGATE else tok.value


class Converter:
    """Convert a token list to postfix order with one operator stack.

    Besides ordering, the converter tracks whether an operand or an operator
    is expected next, which is how it tells unary from binary minus and how
    it reports missing operands or operators.
    """

    def __init__(self, tokens: list[Token], source: str) -> None:
        self._tokens = tokens
        self._source = source
        self._pos = 0
        self._output: list[Token] = []
        self._stack: list[Token] = []
        self._frames: list[_Frame] = []
        self._expect_operand = True

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        idx = self._pos + offset
        if idx < len(self._tokens):
            return self._tokens[idx]
        return self._tokens[-1]  # EOF

    def _at_eof(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.type != TokenType.EOF:
            self._pos += 1
        return tok

    def _error(self, message: str, span: Span) -> ParseError:
        return ParseError(message, span, self._source)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def convert(self) -> Expression:
        target = self._parse_target()

        if self._at_eof():
            if target is not None:
                raise self._error(f"missing expression after '{target.value} ='", self._peek().span)
            raise self._error("empty expression", self._peek().span)

        while not self._at_eof():
            tok = self._advance()
            match tok.type:
                case TokenType.NUMBER:
                    self._operand(tok)
                case TokenType.IDENTIFIER:
                    if self._peek().type == TokenType.LPAREN:
                        self._function(tok)
                    else:
                        self._operand(tok)
                case TokenType.OPERATOR:
                    self._operator(tok)
                case TokenType.LPAREN:
                    self._lparen(tok)
                case TokenType.RPAREN:
                    self._rparen(tok)
                case TokenType.COMMA:
                    self._comma(tok)
                case _:
                    raise self._error(f"unexpected token {tok.raw!r}", tok.span)

        if self._expect_operand:
            raise self._error("unexpected end of expression: missing operand", self._peek().span)

        while self._stack:
            top = self._stack.pop()
            if top.type == TokenType.LPAREN:
                raise UnbalancedParenError("unclosed '('", top.span, self._source)
            self._output.append(top)

        postfix = tuple(self._output)
        logger.debug("postfix for %r: %s", self._source, " ".join(t.value for t in postfix))
        return Expression(self._source, postfix, target)

    def _parse_target(self) -> Token | None:
        """Consume a leading ``name =`` and return the name token."""
        first, second = self._peek(), self._peek(1)
        if (
            first.type == TokenType.IDENTIFIER
            and second.type == TokenType.OPERATOR
            and second.value == "="
        ):
            self._advance()
            self._advance()
            return first
        return None

    # ------------------------------------------------------------------
    # Token handlers
    # ------------------------------------------------------------------

    def _operand(self, tok: Token) -> None:
        if not self._expect_operand:
            raise self._error(f"missing operator before {tok.raw!r}", tok.span)
        self._output.append(tok)
        self._expect_operand = False

    def _function(self, tok: Token) -> None:
        if not self._expect_operand:
            raise self._error(f"missing operator before {tok.raw!r}", tok.span)
        lparen = self._advance()
        self._stack.append(tok)
        self._stack.append(lparen)
        self._frames.append(_Frame(func=tok))

    def _lparen(self, tok: Token) -> None:
        if not self._expect_operand:
            raise self._error("missing operator before '('", tok.span)
        self._stack.append(tok)
        self._frames.append(_Frame(func=None))

    def _operator(self, tok: Token) -> None:
        symbol = tok.value

        if symbol == "=":
            raise self._error("assignment is only allowed as 'name = expression'", tok.span)

        if symbol == "!":
            if self._expect_operand:
                raise self._error("'!' needs a left operand", tok.span)
            # Highest precedence postfix: applies to the operand just emitted
            self._output.append(tok)
            return

        if self._expect_operand:
            if symbol == "-":
                self._stack.append(Token(TokenType.NEGATE, "neg", tok.raw, tok.span))
                return
            if symbol == "+":
                return
            raise self._error(f"missing left operand for '{tok.raw}'", tok.span)

        current = OPERATORS[symbol]
        while self._stack and self._stack[-1].type in (TokenType.OPERATOR, TokenType.NEGATE):
            top = OPERATORS[_op_key(self._stack[-1])]
            if top.precedence > current.precedence or (
                top.precedence == current.precedence and current.assoc == Assoc.LEFT
            ):
                self._output.append(self._stack.pop())
            else:
                break
        self._stack.append(tok)
        self._expect_operand = True

    def _rparen(self, tok: Token) -> None:
        if not self._frames:
            raise UnbalancedParenError("unmatched ')'", tok.span, self._source)
        frame = self._frames[-1]

        if self._expect_operand:
            empty_call = frame.func is not None and frame.commas == 0
            if not empty_call or self._stack[-1].type != TokenType.LPAREN:
                raise self._error("missing operand before ')'", tok.span)
            argc = 0
        else:
            argc = frame.commas + 1

        self._pop_until_lparen()
        self._stack.pop()
        self._frames.pop()

        if frame.func is not None:
            self._stack.pop()
            span = Span(frame.func.span.start, tok.span.end)
            self._output.append(
                Token(TokenType.FUNCTION, frame.func.value, frame.func.raw, span, argc)
            )
        self._expect_operand = False

    def _comma(self, tok: Token) -> None:
        if not self._frames or self._frames[-1].func is None:
            raise self._error("',' outside function arguments", tok.span)
        if self._expect_operand:
            raise self._error("missing argument before ','", tok.span)
        self._pop_until_lparen()
        self._frames[-1].commas += 1
        self._expect_operand = True

    def _pop_until_lparen(self) -> None:
        while self._stack[-1].type != TokenType.LPAREN:
            self._output.append(self._stack.pop())


def parse(source: str) -> Expression:
    """Tokenize and convert source, returning the postfix Expression."""
    return Converter(tokenize(source), source).convert()
