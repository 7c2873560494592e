"""Whole-pipeline laws checked over small generated inputs."""

from __future__ import annotations

import itertools
import operator

import pytest

from yarer.number import Number
from yarer.session import Session

OPERANDS = ["2", "3", "0.5", "7"]
OPERATORS = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
    "^": operator.pow,
}


def _resolve(source: str) -> Number:
    return Session().resolve(source)


class TestBinaryOperators:
    @pytest.mark.parametrize(
        ("a", "op", "b"), list(itertools.product(OPERANDS, OPERATORS, OPERANDS))
    )
    def test_matches_direct_computation(self, a: str, op: str, b: str) -> None:
        expected = OPERATORS[op](Number.parse(a), Number.parse(b))
        result = _resolve(f"{a} {op} {b}")
        assert result == expected
        assert result.kind == expected.kind


class TestParenthesization:
    @pytest.mark.parametrize(
        "source",
        ["1 + 2 * 3", "2 ^ 3 ^ 2", "8 - 3 - 2", "-2 ^ 2", "3! + 4 * 0.5", "max(1, 2) * 3"],
    )
    def test_redundant_parentheses(self, source: str) -> None:
        assert _resolve(f"({source})") == _resolve(source)
        assert _resolve(f"((({source})))") == _resolve(source)

    def test_explicit_grouping_matches_precedence(self) -> None:
        assert _resolve("1 + 2 * 3") == _resolve("1 + (2 * 3)")
        assert _resolve("2 ^ 3 ^ 2") == _resolve("2 ^ (3 ^ 2)")
        assert _resolve("8 - 3 - 2") == _resolve("(8 - 3) - 2")
        assert _resolve("-2 ^ 2") == _resolve("-(2 ^ 2)")


class TestDeterminism:
    @pytest.mark.parametrize("source", ["1/3", "sin(1) * pi", "2^100 / 3", "0.1 * 0.7"])
    def test_same_input_same_output(self, source: str) -> None:
        first = _resolve(source)
        for _ in range(3):
            again = _resolve(source)
            assert again == first
            assert again.kind == first.kind
            assert str(again) == str(first)

    def test_whitespace_is_insignificant(self) -> None:
        assert _resolve("1+2*3") == _resolve("  1 +\t2 * 3  ")


class TestNegationAndFactorial:
    @pytest.mark.parametrize("n", range(0, 12))
    def test_factorial_recurrence(self, n: int) -> None:
        session = Session({"n": n + 1})
        assert session.resolve("n! / n") == session.resolve("(n - 1)!")

    @pytest.mark.parametrize("source", ["2", "0.5", "3!", "2 ^ 3"])
    def test_double_negation(self, source: str) -> None:
        assert _resolve(f"--({source})") == _resolve(source)
