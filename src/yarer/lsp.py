"""Minimal LSP server for Yarer expression files: diagnostics only.

A document holds one expression or ``name = expression`` per line. Lines
are evaluated in order against one session, so later lines see earlier
assignments. Blank lines and lines starting with ``#`` are skipped.
"""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from yarer import __version__
from yarer.errors import EvalError, InternalError, LexError, ParseError
from yarer.session import Session
from yarer.tokens import Span

server = LanguageServer("yarer-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)


def _span_range(line: int, span: Span) -> Range:
    """Map a 1-based span within a single line to an LSP range on *line*."""
    return Range(
        start=Position(line=line, character=span.start.column - 1),
        end=Position(line=line, character=max(span.end.column - 1, span.start.column)),
    )


def _line_range(line: int, text: str) -> Range:
    return Range(
        start=Position(line=line, character=0),
        end=Position(line=line, character=len(text)),
    )


def check_source(source: str) -> list[Diagnostic]:
    """Evaluate every line of *source* and collect diagnostics."""
    session = Session()
    diagnostics: list[Diagnostic] = []

    for line_no, text in enumerate(source.splitlines()):
        stripped = text.strip()
        if not stripped or stripped.startswith("#"):
            continue
        # Keep columns aligned with the editor: evaluate the raw line
        try:
            resolver = session.process(text)
        except LexError as exc:
            col = exc.position.column - 1
            diagnostics.append(
                Diagnostic(
                    range=Range(
                        start=Position(line=line_no, character=col),
                        end=Position(line=line_no, character=col + 1),
                    ),
                    message=exc.message,
                    severity=DiagnosticSeverity.Error,
                    source="yarer",
                )
            )
            continue
        except ParseError as exc:
            diagnostics.append(
                Diagnostic(
                    range=_span_range(line_no, exc.span),
                    message=exc.message,
                    severity=DiagnosticSeverity.Error,
                    source="yarer",
                )
            )
            continue

        try:
            resolver.resolve()
        except EvalError as exc:
            rng = _span_range(line_no, exc.span) if exc.span else _line_range(line_no, text)
            diagnostics.append(
                Diagnostic(
                    range=rng,
                    message=exc.message,
                    severity=DiagnosticSeverity.Warning,
                    source="yarer",
                )
            )
        except InternalError as exc:
            diagnostics.append(
                Diagnostic(
                    range=_line_range(line_no, text),
                    message=exc.message,
                    severity=DiagnosticSeverity.Error,
                    source="yarer",
                )
            )

    return diagnostics


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the Yarer pipeline and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics = check_source(doc.source)
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
