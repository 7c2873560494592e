"""Postfix evaluator: runs a converted expression against variable bindings."""

from __future__ import annotations

import logging
import operator
from collections.abc import Callable, Mapping

from yarer.errors import ArityError, EvalError, InternalError, UndefinedError
from yarer.number import Number
from yarer.parser import Expression
from yarer.registry import lookup_constant, lookup_function
from yarer.tokens import Token, TokenType

logger = logging.getLogger(__name__)

_BINARY: dict[str, Callable[[Number, Number], Number]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
    "^": operator.pow,
}


def evaluate(expr: Expression, variables: Mapping[str, Number] | None = None) -> Number:
    """Evaluate the postfix form of *expr* and return the single result.

    Identifiers resolve against *variables* first, then the registry
    constants. Errors from the numeric layer are re-raised with the span of
    the token that caused them.
    """
    bindings = variables if variables is not None else {}
    stack: list[Number] = []

    for tok in expr.postfix:
        try:
            _step(tok, stack, bindings, expr.source)
        except EvalError as exc:
            raise exc.with_span(tok.span, expr.source)

    if len(stack) != 1:
        raise InternalError(f"expected one value on the stack, found {len(stack)}")
    result = stack[0]
    logger.debug("%r evaluated to %r", expr.source, result)
    return result


def _step(tok: Token, stack: list[Number], bindings: Mapping[str, Number], source: str) -> None:
    match tok.type:
        case TokenType.NUMBER:
            stack.append(Number.parse(tok.value))
        case TokenType.IDENTIFIER:
            stack.append(_lookup(tok, bindings, source))
        case TokenType.NEGATE:
            (x,) = _pop(stack, 1, tok)
            stack.append(-x)
        case TokenType.OPERATOR if tok.value == "!":
            (x,) = _pop(stack, 1, tok)
            stack.append(x.factorial())
        case TokenType.OPERATOR:
            fn = _BINARY.get(tok.value)
            if fn is None:
                raise InternalError(f"operator {tok.value!r} in postfix output")
            a, b = _pop(stack, 2, tok)
            stack.append(fn(a, b))
        case TokenType.FUNCTION:
            func = lookup_function(tok.value)
            if func is None:
                raise UndefinedError(tok.value, "function", tok.span, source)
            if tok.argc != func.arity:
                raise ArityError(tok.value, func.arity, tok.argc, tok.span, source)
            stack.append(func(*_pop(stack, tok.argc, tok)))
        case _:
            raise InternalError(f"unexpected {tok.type.name} token in postfix output")


def _lookup(tok: Token, bindings: Mapping[str, Number], source: str) -> Number:
    value = bindings.get(tok.value)
    if value is None:
        value = lookup_constant(tok.value)
    if value is None:
        raise UndefinedError(tok.value, "variable", tok.span, source)
    return value


def _pop(stack: list[Number], count: int, tok: Token) -> list[Number]:
    """Pop *count* operands, returned in the order they were pushed."""
    if len(stack) < count:
        raise InternalError(
            f"{tok.raw!r} needs {count} operand(s), stack holds {len(stack)}"
        )
    if count == 0:
        return []
    args = stack[-count:]
    del stack[-count:]
    return args
