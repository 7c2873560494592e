"""Sessions own the variable namespace; resolvers re-evaluate one parsed expression."""

from __future__ import annotations

import decimal
import logging
from collections.abc import Mapping
from types import MappingProxyType

from yarer.debug import format_postfix
from yarer.eval import evaluate
from yarer.number import Number
from yarer.parser import Expression, parse
from yarer.tokens import Token, is_ident_char, is_ident_start

logger = logging.getLogger(__name__)

# Significant digits kept when a division does not terminate
DEFAULT_PRECISION = 28


class Session:
    """A mutable, case-sensitive mapping of variable names to values.

    Any number of resolvers may share one session; every ``set`` is seen by
    all of them on their next ``resolve``. A session is not synchronized:
    callers sharing one across threads must serialize access themselves.
    """

    def __init__(
        self,
        variables: Mapping[str, object] | None = None,
        *,
        precision: int = DEFAULT_PRECISION,
    ) -> None:
        if precision < 1:
            raise ValueError(f"precision must be positive, got {precision}")
        self.precision = precision
        self._variables: dict[str, Number] = {}
        if variables:
            for name, value in variables.items():
                self.set(name, value)

    @property
    def variables(self) -> Mapping[str, Number]:
        """Read-only live view of the current bindings."""
        return MappingProxyType(self._variables)

    def set(self, name: str, value: object) -> Number:
        """Bind *name* to *value* (int, float, Decimal, Fraction, str or Number)."""
        if not _is_name(name):
            raise ValueError(f"invalid variable name: {name!r}")
        number = Number.coerce(value)
        self._variables[name] = number
        logger.debug("set %s = %r", name, number)
        return number

    def get(self, name: str) -> Number | None:
        return self._variables.get(name)

    def unset(self, name: str) -> None:
        """Remove a binding. Raises KeyError if *name* is not bound."""
        del self._variables[name]
        logger.debug("unset %s", name)

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def process(self, expression: str) -> Resolver:
        """Tokenize and convert *expression* once, returning its Resolver."""
        return Resolver(self, expression)

    def resolve(self, expression: str) -> Number:
        """Process and resolve *expression* in one step."""
        return self.process(expression).resolve()


class Resolver:
    """One parsed expression bound to a Session.

    Parsing happens once, in the constructor. Each :meth:`resolve` re-runs
    the evaluator against the session's current bindings; results are never
    cached.
    """

    def __init__(self, session: Session, source: str) -> None:
        self._session = session
        self._expr: Expression = parse(source)

    @property
    def session(self) -> Session:
        return self._session

    @property
    def source(self) -> str:
        return self._expr.source

    @property
    def postfix(self) -> tuple[Token, ...]:
        return self._expr.postfix

    @property
    def target(self) -> str | None:
        """Name assigned by a ``name = expression`` line, else None."""
        if self._expr.target is None:
            return None
        return self._expr.target.value

    def resolve(self) -> Number:
        with decimal.localcontext(prec=self._session.precision):
            value = evaluate(self._expr, self._session.variables)
        if self._expr.target is not None:
            self._session.set(self._expr.target.value, value)
        return value

    def __repr__(self) -> str:
        return f"Resolver({self.source!r}, postfix={format_postfix(self.postfix)!r})"


def _is_name(name: str) -> bool:
    return bool(name) and is_ident_start(name[0]) and all(is_ident_char(c) for c in name)
