"""Diagnostic computation for Starlark documents.

Runs the parser on source text and converts syntax errors into LSP
Diagnostic objects.
"""

import os
from dataclasses import dataclass, field
from urllib.parse import urlparse, unquote

from lsprotocol import types as lsp

from starcomplete.syntax.parser import parse, ParseError


@dataclass
class AnalysisResult:
    """Diagnostics for one version of a document."""

    uri: str
    diagnostics: list[lsp.Diagnostic] = field(default_factory=list)


def uri_to_path(uri: str) -> str:
    """Convert file:// URI to filesystem path."""
    parsed = urlparse(uri)
    return unquote(parsed.path)


def _make_diagnostic(
    line: int,
    col: int,
    message: str,
    severity: lsp.DiagnosticSeverity = lsp.DiagnosticSeverity.Error,
    source: str = "starlark",
) -> lsp.Diagnostic:
    """Create an LSP Diagnostic.

    The parser uses 1-based line/col; LSP uses 0-based.
    """
    line_0 = max(0, line - 1)
    col_0 = max(0, col - 1)
    return lsp.Diagnostic(
        range=lsp.Range(
            start=lsp.Position(line=line_0, character=col_0),
            end=lsp.Position(line=line_0, character=col_0 + 1),
        ),
        message=message,
        severity=severity,
        source=source,
    )


def compute_diagnostics(uri: str, source: str) -> AnalysisResult:
    """Parse the document and return diagnostics."""
    result = AnalysisResult(uri=uri)
    filename = os.path.basename(uri_to_path(uri))

    try:
        parse(filename, source)
    except ParseError as e:
        result.diagnostics.append(_make_diagnostic(e.line, e.col, e.message))

    return result
