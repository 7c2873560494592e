"""Numeric value model: exact naturals and decimals with a float fallback.

A :class:`Number` is a tagged union over three representations:

* ``NATURAL``: an arbitrary-precision Python ``int``.
* ``DECIMAL``: a ``decimal.Decimal``; sums, differences and products are exact.
* ``FLOAT``: an IEEE double, used where no exact result exists.

Binary operations promote both operands to the wider of the two kinds
(NATURAL < DECIMAL < FLOAT) and dispatch on the resulting kind. Division
that does not terminate in base 10 is rounded to the precision of the
active ``decimal`` context.
"""

from __future__ import annotations

import decimal
import math
from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum
from fractions import Fraction
from functools import total_ordering

from yarer.errors import DomainError, NumericRangeError

# Exact integer results (powers, factorials) larger than this are refused.
MAX_RESULT_BITS = 1 << 24

_LOG2_10 = math.log2(10)

# Integers this short convert to and from str directly, well inside the
# interpreter's 640-digit floor for the int/str conversion limit.
_SHORT_DIGITS = 600
_SHORT_BITS = 1900

# Never rounds: add/subtract/multiply of finite decimals
_EXACT = decimal.Context(
    prec=decimal.MAX_PREC,
    Emax=decimal.MAX_EMAX,
    Emin=decimal.MIN_EMIN,
    traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
)


class Kind(IntEnum):
    """Variant tag; the integer order is the promotion order."""

    NATURAL = 0
    DECIMAL = 1
    FLOAT = 2


@total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class Number:
    """An immutable numeric value. Build with the classmethod constructors."""

    kind: Kind
    value: int | Decimal | float

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def natural(cls, value: int) -> Number:
        return cls(Kind.NATURAL, int(value))

    @classmethod
    def decimal(cls, value: Decimal | str | int) -> Number:
        d = value if isinstance(value, Decimal) else Decimal(value)
        if not d.is_finite():
            raise DomainError(f"not a finite decimal: {value}")
        return cls(Kind.DECIMAL, d)

    @classmethod
    def floating(cls, value: float) -> Number:
        f = float(value)
        if math.isnan(f):
            raise DomainError("result is not a number")
        if math.isinf(f):
            raise NumericRangeError("floating point overflow")
        return cls(Kind.FLOAT, f)

    @classmethod
    def parse(cls, text: str) -> Number:
        """Build a value from a numeric literal such as ``12``, ``-3.5`` or ``.5``."""
        body = text[1:] if text[:1] in "+-" else text
        if not body or body == "." or body.count(".") > 1:
            raise ValueError(f"malformed number: {text!r}")
        if not all(ch in "0123456789." for ch in body):
            raise ValueError(f"malformed number: {text!r}")
        if "." in body:
            return cls.decimal(Decimal(text))
        return cls.natural(_int_from_digits(text))

    @classmethod
    def from_fraction(cls, value: Fraction) -> Number:
        """Exact when the fraction terminates in base 10, else rounded decimal."""
        if value.denominator == 1:
            return cls.natural(value.numerator)
        return cls.decimal(_fraction_to_decimal(value))

    @classmethod
    def coerce(cls, value: object) -> Number:
        """Normalize a host value (int, float, Decimal, Fraction, str) to a Number."""
        match value:
            case Number():
                return value
            case bool():
                raise TypeError("cannot use a bool as a number")
            case int():
                return cls.natural(value)
            case float():
                return cls.floating(value)
            case Decimal():
                return cls.decimal(value)
            case Fraction():
                if _terminates(value.denominator):
                    return cls.from_fraction(value)
                return cls.floating(float(value))
            case str():
                return cls.parse(value.strip())
            case _:
                raise TypeError(f"cannot convert {type(value).__name__} to a number")

    # ------------------------------------------------------------------
    # Inspection and conversion
    # ------------------------------------------------------------------

    def is_zero(self) -> bool:
        return self.value == 0

    def is_negative(self) -> bool:
        return self.value < 0

    def integral_value(self) -> int | None:
        """The exact integer this value equals, or None."""
        match self.kind:
            case Kind.NATURAL:
                return self.value
            case Kind.DECIMAL:
                if self.value == self.value.to_integral_value():
                    return int(self.value)
                return None
            case Kind.FLOAT:
                if self.value.is_integer():
                    return int(self.value)
                return None

    def as_fraction(self) -> Fraction:
        return Fraction(self.value)

    def to_int(self, bits: int = 64) -> int:
        """Convert to a signed integer of the given width.

        Raises DomainError when the value is not integral and
        NumericRangeError when it does not fit.
        """
        n = self.integral_value()
        if n is None:
            raise DomainError(f"{self} is not an integer")
        limit = 1 << (bits - 1)
        if not -limit <= n < limit:
            raise NumericRangeError(f"{self} does not fit in a {bits}-bit integer")
        return n

    def to_float(self) -> float:
        """Convert to a double. Naturals beyond the float range become +/-inf."""
        if self.kind == Kind.NATURAL:
            try:
                return float(self.value)
            except OverflowError:
                return math.inf if self.value > 0 else -math.inf
        return float(self.value)

    def __float__(self) -> float:
        return self.to_float()

    def __int__(self) -> int:
        """Truncate toward zero, as ``int()`` does for float and Decimal.

        Use :meth:`to_int` for a checked, width-bounded conversion.
        """
        return int(self.value)

    def __bool__(self) -> bool:
        return not self.is_zero()

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __add__(self, other: object) -> Number:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        kind, a, b = _promote(self, rhs)
        match kind:
            case Kind.NATURAL:
                return Number.natural(a + b)
            case Kind.DECIMAL:
                return Number.decimal(_EXACT.add(a, b))
            case Kind.FLOAT:
                return Number.floating(a + b)

    def __sub__(self, other: object) -> Number:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        kind, a, b = _promote(self, rhs)
        match kind:
            case Kind.NATURAL:
                return Number.natural(a - b)
            case Kind.DECIMAL:
                return Number.decimal(_EXACT.subtract(a, b))
            case Kind.FLOAT:
                return Number.floating(a - b)

    def __mul__(self, other: object) -> Number:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        kind, a, b = _promote(self, rhs)
        match kind:
            case Kind.NATURAL:
                return Number.natural(a * b)
            case Kind.DECIMAL:
                return Number.decimal(_EXACT.multiply(a, b))
            case Kind.FLOAT:
                return Number.floating(a * b)

    def __truediv__(self, other: object) -> Number:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        if rhs.is_zero():
            raise DomainError("division by zero")
        kind, a, b = _promote(self, rhs)
        match kind:
            case Kind.NATURAL:
                q, r = divmod(a, b)
                if r == 0:
                    return Number.natural(q)
                return Number.decimal(_fraction_to_decimal(Fraction(a, b)))
            case Kind.DECIMAL:
                return Number.decimal(_fraction_to_decimal(Fraction(a) / Fraction(b)))
            case Kind.FLOAT:
                return Number.floating(a / b)

    def __pow__(self, other: object) -> Number:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        # Exact only for a non-negative integral exponent on an exact base
        n = rhs.integral_value() if rhs.kind != Kind.FLOAT else None
        if n is not None and n >= 0:
            match self.kind:
                case Kind.NATURAL:
                    _check_power_size(abs(self.value).bit_length(), n)
                    power = self.value**n
                    if rhs.kind == Kind.DECIMAL:
                        return Number.decimal(Decimal(power))
                    return Number.natural(power)
                case Kind.DECIMAL:
                    digits = len(self.value.as_tuple().digits)
                    _check_power_size(math.ceil(digits * _LOG2_10), n)
                    return Number.decimal(_fraction_to_decimal(Fraction(self.value) ** n))
                case Kind.FLOAT:
                    pass
        base = _to_float(self)
        exponent = _to_float(rhs)
        try:
            return Number.floating(math.pow(base, exponent))
        except ValueError:
            raise DomainError(f"{self} ^ {rhs} is undefined") from None
        except OverflowError:
            raise NumericRangeError(f"{self} ^ {rhs} is too large") from None

    def __neg__(self) -> Number:
        match self.kind:
            case Kind.NATURAL:
                return Number.natural(-self.value)
            case Kind.DECIMAL:
                return Number.decimal(_EXACT.minus(self.value))
            case Kind.FLOAT:
                return Number.floating(-self.value)

    def __pos__(self) -> Number:
        return self

    def __abs__(self) -> Number:
        match self.kind:
            case Kind.NATURAL:
                return Number.natural(abs(self.value))
            case Kind.DECIMAL:
                return Number.decimal(_EXACT.abs(self.value))
            case Kind.FLOAT:
                return Number.floating(abs(self.value))

    def factorial(self) -> Number:
        n = self.integral_value()
        if n is None or n < 0:
            raise DomainError(f"factorial requires a non-negative integer, got {self}")
        # lgamma needs a float argument; anything wider than 64 bits is far too large
        if n > 2 and (n.bit_length() > 64 or math.lgamma(n + 1) / math.log(2) > MAX_RESULT_BITS):
            raise NumericRangeError(f"{_int_to_digits(n)}! is too large")
        return Number.natural(math.factorial(n))

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    # int, Decimal, float and Fraction compare and hash consistently by
    # numeric value, so the raw payloads can be compared directly.

    def __eq__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return self.value == rhs.value

    def __lt__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return self.value < rhs.value

    def __hash__(self) -> int:
        return hash(self.value)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        match self.kind:
            case Kind.NATURAL:
                return _int_to_digits(self.value)
            case Kind.DECIMAL:
                return format(self.value, "f")
            case Kind.FLOAT:
                return repr(self.value)

    def __repr__(self) -> str:
        return f"Number({self.kind.name}, {self})"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _operand(other: object) -> Number | None:
    if isinstance(other, Number):
        return other
    if isinstance(other, (int, float, Decimal, Fraction)) and not isinstance(other, bool):
        return Number.coerce(other)
    return None


def _promote(a: Number, b: Number) -> tuple[Kind, object, object]:
    kind = max(a.kind, b.kind)
    match kind:
        case Kind.NATURAL:
            return kind, a.value, b.value
        case Kind.DECIMAL:
            return kind, _to_decimal(a), _to_decimal(b)
        case Kind.FLOAT:
            return kind, _to_float(a), _to_float(b)


def _int_from_digits(text: str) -> int:
    """Parse a signed digit string of any length.

    ``int(str)`` refuses inputs beyond ``sys.get_int_max_str_digits()``;
    the Decimal constructor and ``int(Decimal)`` have no such limit.
    """
    if len(text) <= _SHORT_DIGITS:
        return int(text)
    return int(Decimal(text))


def _int_to_digits(n: int) -> str:
    if abs(n).bit_length() <= _SHORT_BITS:
        return str(n)
    return format(Decimal(n), "f")


def _to_decimal(n: Number) -> Decimal:
    if n.kind == Kind.NATURAL:
        return Decimal(n.value)
    return n.value


def _to_float(n: Number) -> float:
    try:
        f = float(n.value)
    except OverflowError:
        raise NumericRangeError(f"{n} is too large for a float") from None
    if math.isinf(f):
        raise NumericRangeError(f"{n} is too large for a float")
    return f


def _check_power_size(base_bits: int, exponent: int) -> None:
    if base_bits > 1 and (base_bits - 1) * exponent > MAX_RESULT_BITS:
        raise NumericRangeError("power result is too large")


def _terminates(denominator: int) -> bool:
    """True if 1/denominator has a finite decimal expansion."""
    for p in (2, 5):
        while denominator % p == 0:
            denominator //= p
    return denominator == 1


def _fraction_to_decimal(value: Fraction) -> Decimal:
    den = value.denominator
    twos = fives = 0
    while den % 2 == 0:
        den //= 2
        twos += 1
    while den % 5 == 0:
        den //= 5
        fives += 1
    if den == 1:
        scale = max(twos, fives)
        coefficient = value.numerator * 10**scale // value.denominator
        return Decimal(coefficient).scaleb(-scale, _EXACT)
    # Non-terminating: round to the active context precision
    return Decimal(value.numerator) / Decimal(value.denominator)
