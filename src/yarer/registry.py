"""Built-in function and constant registry.

Both tables are built once at import time and exposed as read-only
mappings; nothing writes to them afterwards.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from fractions import Fraction
from types import MappingProxyType

from yarer.errors import ArityError, DomainError, NumericRangeError
from yarer.number import Kind, Number


@dataclass(frozen=True, slots=True)
class FunctionDef:
    """Definition of a built-in function."""

    name: str
    arity: int
    impl: Callable[..., Number]

    def __call__(self, *args: Number) -> Number:
        if len(args) != self.arity:
            raise ArityError(self.name, self.arity, len(args))
        try:
            return self.impl(*args)
        except ValueError:
            raise DomainError(
                f"{self.name}({', '.join(str(a) for a in args)}) is undefined"
            ) from None
        except OverflowError:
            raise NumericRangeError(f"{self.name}() result is too large") from None


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------


def _float_fn(fn: Callable[[float], float]) -> Callable[[Number], Number]:
    def apply(x: Number) -> Number:
        return Number.floating(fn(_real(x)))

    return apply


def _real(x: Number) -> float:
    f = x.to_float()
    if math.isinf(f):
        raise NumericRangeError(f"{x} is too large for a float")
    return f


def _unit_interval(name: str, fn: Callable[[float], float]) -> Callable[[Number], Number]:
    def apply(x: Number) -> Number:
        if not -1 <= x <= 1:
            raise DomainError(f"{name}({x}) is undefined outside [-1, 1]")
        return Number.floating(fn(_real(x)))

    return apply


def _positive(name: str, fn: Callable[[float], float]) -> Callable[[Number], Number]:
    def apply(x: Number) -> Number:
        if x <= 0:
            raise DomainError(f"{name}({x}) is undefined for non-positive values")
        if x.kind == Kind.NATURAL:
            # math.log accepts ints beyond the float range
            return Number.floating(fn(x.value))
        return Number.floating(fn(_real(x)))

    return apply


def _sqrt(x: Number) -> Number:
    if x.is_negative():
        raise DomainError(f"sqrt({x}) has no real result")
    frac = x.as_fraction()
    if x.kind != Kind.FLOAT:
        num = math.isqrt(frac.numerator)
        den = math.isqrt(frac.denominator)
        if num * num == frac.numerator and den * den == frac.denominator:
            root = Number.from_fraction(Fraction(num, den))
            if x.kind == Kind.DECIMAL and root.kind == Kind.NATURAL:
                return Number.decimal(root.value)
            return root
    return Number.floating(math.sqrt(_real(x)))


def _floor(x: Number) -> Number:
    if x.kind == Kind.NATURAL:
        return x
    return Number.natural(math.floor(x.value))


def _ceil(x: Number) -> Number:
    if x.kind == Kind.NATURAL:
        return x
    return Number.natural(math.ceil(x.value))


def _round(x: Number) -> Number:
    """Round half away from zero."""
    if x.kind == Kind.NATURAL:
        return x
    frac = abs(x.as_fraction())
    n = math.floor(frac + Fraction(1, 2))
    return Number.natural(-n if x.is_negative() else n)


def _max(a: Number, b: Number) -> Number:
    return b if b > a else a


def _min(a: Number, b: Number) -> Number:
    return b if b < a else a


def _atan2(y: Number, x: Number) -> Number:
    return Number.floating(math.atan2(_real(y), _real(x)))


def _make_functions() -> dict[str, FunctionDef]:
    defs: dict[str, FunctionDef] = {}

    def d(name: str, arity: int, impl: Callable[..., Number]) -> None:
        defs[name] = FunctionDef(name, arity, impl)

    # Trigonometric
    d("sin", 1, _float_fn(math.sin))
    d("cos", 1, _float_fn(math.cos))
    d("tan", 1, _float_fn(math.tan))
    d("asin", 1, _unit_interval("asin", math.asin))
    d("acos", 1, _unit_interval("acos", math.acos))
    d("atan", 1, _float_fn(math.atan))
    d("atan2", 2, _atan2)

    # Hyperbolic
    d("sinh", 1, _float_fn(math.sinh))
    d("cosh", 1, _float_fn(math.cosh))
    d("tanh", 1, _float_fn(math.tanh))

    # Exponential and logarithmic
    d("exp", 1, _float_fn(math.exp))
    d("ln", 1, _positive("ln", math.log))
    d("log", 1, _positive("log", math.log10))
    d("log10", 1, _positive("log10", math.log10))
    d("log2", 1, _positive("log2", math.log2))
    d("sqrt", 1, _sqrt)
    d("pow", 2, lambda a, b: a**b)

    # Exactness-preserving
    d("abs", 1, abs)
    d("floor", 1, _floor)
    d("ceil", 1, _ceil)
    d("round", 1, _round)
    d("max", 2, _max)
    d("min", 2, _min)

    return defs


FUNCTIONS: MappingProxyType[str, FunctionDef] = MappingProxyType(_make_functions())

CONSTANTS: MappingProxyType[str, Number] = MappingProxyType(
    {
        "pi": Number.floating(math.pi),
        "e": Number.floating(math.e),
        "tau": Number.floating(math.tau),
        "phi": Number.floating((1 + math.sqrt(5)) / 2),
        "gamma": Number.floating(0.5772156649015329),
    }
)


def lookup_function(name: str) -> FunctionDef | None:
    return FUNCTIONS.get(name)


def lookup_constant(name: str) -> Number | None:
    return CONSTANTS.get(name)
