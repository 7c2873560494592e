"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from yarer.debug import format_postfix
from yarer.lexer import tokenize
from yarer.number import Kind, Number
from yarer.parser import parse
from yarer.session import Session
from yarer.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def rpn():
    """Return a helper that converts source and renders the postfix form."""

    def _rpn(source: str) -> str:
        return format_postfix(parse(source).postfix)

    return _rpn


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def calc(session: Session):
    """Return a helper that resolves source in the shared test session."""

    def _calc(source: str) -> Number:
        return session.resolve(source)

    return _calc


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_number(value: Number, kind: Kind, expected: object) -> None:
    """Assert a result's variant and numeric value."""
    assert isinstance(value, Number), f"Expected Number, got {type(value).__name__}"
    assert value.kind == kind, f"Expected {kind.name}, got {value.kind.name} ({value})"
    assert value == expected, f"Expected {expected}, got {value}"
