"""Shunting-yard conversion tests: postfix order and assignment detection."""

from __future__ import annotations

from yarer.parser import parse
from yarer.tokens import TokenType


class TestPrecedence:
    def test_single_operator(self, rpn) -> None:
        assert rpn("1+2") == "1 2 +"

    def test_multiplication_binds_tighter(self, rpn) -> None:
        assert rpn("2+3*4") == "2 3 4 * +"

    def test_parentheses_override(self, rpn) -> None:
        assert rpn("(2+3)*4") == "2 3 + 4 *"

    def test_nested_parentheses(self, rpn) -> None:
        assert rpn("((1))") == "1"


class TestAssociativity:
    def test_power_is_right_associative(self, rpn) -> None:
        assert rpn("2^3^2") == "2 3 2 ^ ^"

    def test_subtraction_is_left_associative(self, rpn) -> None:
        assert rpn("8-3-2") == "8 3 - 2 -"

    def test_division_is_left_associative(self, rpn) -> None:
        assert rpn("8/4/2") == "8 4 / 2 /"


class TestUnaryOperators:
    def test_unary_minus_below_power(self, rpn) -> None:
        assert rpn("-2^2") == "2 2 ^ neg"

    def test_unary_after_binary(self, rpn) -> None:
        assert rpn("3--2") == "3 2 neg -"

    def test_unary_in_exponent(self, rpn) -> None:
        assert rpn("2^-3") == "2 3 neg ^"

    def test_unary_after_paren_and_comma(self, rpn) -> None:
        assert rpn("max(-1, -2)") == "1 neg 2 neg max/2"

    def test_unary_binds_before_addition(self, rpn) -> None:
        assert rpn("-2+3") == "2 neg 3 +"

    def test_unary_plus_ignored(self, rpn) -> None:
        assert rpn("+5") == "5"
        assert rpn("2*+3") == "2 3 *"

    def test_double_negation(self, rpn) -> None:
        assert rpn("--2") == "2 neg neg"


class TestFactorial:
    def test_postfix(self, rpn) -> None:
        assert rpn("3!") == "3 !"

    def test_binds_tighter_than_power(self, rpn) -> None:
        assert rpn("2^3!") == "2 3 ! ^"

    def test_binds_tighter_than_negation(self, rpn) -> None:
        assert rpn("-3!") == "3 ! neg"

    def test_after_group(self, rpn) -> None:
        assert rpn("(1+2)!") == "1 2 + !"


class TestFunctions:
    def test_single_argument(self, rpn) -> None:
        assert rpn("sin(x)") == "x sin/1"

    def test_two_arguments(self, rpn) -> None:
        assert rpn("max(1, 2)") == "1 2 max/2"

    def test_argument_expressions(self, rpn) -> None:
        assert rpn("max(1+2, 3*4)") == "1 2 + 3 4 * max/2"

    def test_nested_calls(self, rpn) -> None:
        assert rpn("max(sin(1), 2)") == "1 sin/1 2 max/2"

    def test_empty_call(self, rpn) -> None:
        assert rpn("f()") == "f/0"

    def test_too_many_arguments_are_counted(self, rpn) -> None:
        assert rpn("sin(1, 2)") == "1 2 sin/2"

    def test_function_token_span_covers_call(self) -> None:
        tok = parse("max(1, 2)").postfix[-1]
        assert tok.type == TokenType.FUNCTION
        assert tok.argc == 2
        assert tok.span.start.column == 1
        assert tok.span.end.column == 10

    def test_bare_identifier_is_operand(self) -> None:
        tok = parse("pi").postfix[0]
        assert tok.type == TokenType.IDENTIFIER


class TestAssignment:
    def test_target_detected(self, rpn) -> None:
        expr = parse("x = 1 + 2")
        assert expr.target is not None
        assert expr.target.value == "x"
        assert rpn("x = 1 + 2") == "1 2 +"

    def test_no_target(self) -> None:
        assert parse("x + 1").target is None

    def test_source_kept(self) -> None:
        assert parse("x = 2").source == "x = 2"
