"""Yarer: arbitrary-precision expression resolver built on the shunting-yard algorithm."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from yarer.number import Number
    from yarer.session import Session

__version__ = "0.2.0"


def create_session(precision: int | None = None) -> Session:
    """Return a new, empty Session."""
    from yarer.session import DEFAULT_PRECISION, Session

    return Session(precision=precision if precision is not None else DEFAULT_PRECISION)


def resolve(expression: str) -> Number:
    """Parse and evaluate a standalone expression in a throwaway session."""
    return create_session().resolve(expression)
