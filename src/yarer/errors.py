"""Error types with formatted source context."""

from __future__ import annotations

from yarer.tokens import Position, Span


class YarerError(Exception):
    """Base class for every error raised while processing an expression."""

    message: str


def _render(message: str, filename: str, source: str, start: Position, end: Position) -> str:
    lines = source.splitlines(keepends=True)
    line_idx = start.line - 1
    col = start.column

    # Build the source line (strip trailing newline for display)
    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    # Underline the full span when on one line, otherwise to end of line
    if end.line == start.line:
        underline_len = max(1, end.column - col)
    else:
        underline_len = max(1, len(source_line) - col + 1)

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{start.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class LexError(YarerError):
    """Raised on the first lexing error, with position and source context."""

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "<expr>") -> str:
        end = Position(self.position.line, self.position.column + 1, self.position.offset + 1)
        return _render(self.message, filename, self.source, self.position, end)


class ParseError(YarerError):
    """Raised on the first syntax error, with span and source context."""

    def __init__(self, message: str, span: Span, source: str) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "<expr>") -> str:
        return _render(self.message, filename, self.source, self.span.start, self.span.end)


class UnbalancedParenError(ParseError):
    """A ')' without a matching '(' or a '(' that is never closed."""


class EvalError(YarerError):
    """Raised when a parsed expression cannot be evaluated.

    Errors raised by the numeric layer carry no span; the evaluator attaches
    the span of the offending token with :meth:`with_span` before re-raising.
    """

    def __init__(self, message: str, span: Span | None = None, source: str = "") -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def with_span(self, span: Span, source: str) -> EvalError:
        """Attach source context in place and return self for re-raising."""
        if self.span is None:
            self.span = span
            self.source = source
            self.args = (self.format(),)
        return self

    def format(self, filename: str = "<expr>") -> str:
        if self.span is None:
            return f"error: {self.message}"
        return _render(self.message, filename, self.source, self.span.start, self.span.end)


class UndefinedError(EvalError):
    """An identifier bound neither in the session nor in the registry."""

    def __init__(
        self,
        name: str,
        kind: str = "variable",
        span: Span | None = None,
        source: str = "",
    ) -> None:
        self.name = name
        self.kind = kind
        super().__init__(f"undefined {kind} '{name}'", span, source)


class ArityError(EvalError):
    """A built-in function called with the wrong number of arguments."""

    def __init__(
        self,
        name: str,
        expected: int,
        got: int,
        span: Span | None = None,
        source: str = "",
    ) -> None:
        self.name = name
        self.expected = expected
        self.got = got
        plural = "" if expected == 1 else "s"
        super().__init__(
            f"function '{name}' expects {expected} argument{plural}, got {got}", span, source
        )


class DomainError(EvalError):
    """An operation that is undefined for the given operand."""


class NumericRangeError(EvalError):
    """A value that does not fit the requested representation."""


class InternalError(YarerError):
    """The operand stack reached a state the converter should never produce.

    Not an EvalError: no user input can produce it.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"internal error: {message}")
