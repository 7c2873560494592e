"""Tests for converter error messages and positions."""

from __future__ import annotations

import pytest

from yarer.errors import ParseError, UnbalancedParenError
from yarer.parser import parse


class TestEmpty:
    def test_empty_source(self):
        with pytest.raises(ParseError, match="empty expression"):
            parse("")

    def test_whitespace_only(self):
        with pytest.raises(ParseError, match="empty expression"):
            parse("   ")


class TestParentheses:
    def test_unclosed(self):
        with pytest.raises(UnbalancedParenError, match="unclosed"):
            parse("(1+2")

    def test_unmatched_close(self):
        with pytest.raises(UnbalancedParenError, match="unmatched"):
            parse("1+2)")

    def test_empty_group(self):
        with pytest.raises(ParseError, match="missing operand before '\\)'"):
            parse("()")

    def test_unclosed_call(self):
        with pytest.raises(UnbalancedParenError):
            parse("max(1, 2")


class TestMissingParts:
    def test_two_numbers(self):
        with pytest.raises(ParseError, match="missing operator"):
            parse("1 2")

    def test_two_identifiers(self):
        with pytest.raises(ParseError, match="missing operator"):
            parse("x y")

    def test_implicit_multiplication(self):
        with pytest.raises(ParseError, match="missing operator before '\\('"):
            parse("2(3)")

    def test_leading_binary_operator(self):
        with pytest.raises(ParseError, match="missing left operand for '\\*'"):
            parse("*2")

    def test_trailing_operator(self):
        with pytest.raises(ParseError, match="missing operand"):
            parse("2*")

    def test_leading_factorial(self):
        with pytest.raises(ParseError, match="'!' needs a left operand"):
            parse("!3")

    def test_operator_position(self):
        with pytest.raises(ParseError) as exc_info:
            parse("1 + * 2")
        assert exc_info.value.span.start.column == 5


class TestCommas:
    def test_top_level_comma(self):
        with pytest.raises(ParseError, match="outside function arguments"):
            parse("1, 2")

    def test_comma_in_group(self):
        with pytest.raises(ParseError, match="outside function arguments"):
            parse("(1, 2)")

    def test_trailing_comma(self):
        with pytest.raises(ParseError, match="missing operand before '\\)'"):
            parse("max(1,)")

    def test_leading_comma(self):
        with pytest.raises(ParseError, match="missing argument before ','"):
            parse("max(,1)")


class TestAssignmentErrors:
    def test_equals_inside_expression(self):
        with pytest.raises(ParseError, match="assignment is only allowed"):
            parse("1 = 2")

    def test_chained_assignment(self):
        with pytest.raises(ParseError, match="assignment is only allowed"):
            parse("x = y = 2")

    def test_missing_right_hand_side(self):
        with pytest.raises(ParseError, match="missing expression after 'x ='"):
            parse("x = ")
