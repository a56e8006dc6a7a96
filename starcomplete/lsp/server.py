#!/usr/bin/env python3
"""Starlark Language Server.

Provides diagnostics and load-statement completion for Starlark files.
The module catalog comes from the client's ``initializationOptions``::

    {"modules": [{"name": "net/http", "documentation": "...",
                  "defaultImportSymbol": "http"}]}
"""

import sys
import logging
from typing import Any, Mapping, Optional

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from starcomplete import __version__
from starcomplete.lsp.catalog import CatalogError, module_infos_from_options
from starcomplete.lsp.completion import (
    ModuleInfo,
    StatementNotFoundError,
    completions,
)
from starcomplete.lsp.diagnostics import compute_diagnostics, uri_to_path
from starcomplete.lsp.utils import from_lsp_position, to_lsp_completion_item

logger = logging.getLogger("starcomplete-lsp")

server = LanguageServer("starcomplete", __version__)

# Host-supplied catalogs; replaced wholesale on initialize, never mutated.
_modules: list[ModuleInfo] = []
_predeclared: Mapping[str, Any] = {}


def configure(modules: list[ModuleInfo], predeclared: Optional[Mapping[str, Any]] = None):
    global _modules, _predeclared
    _modules = list(modules)
    _predeclared = dict(predeclared or {})


def _validate_document(uri: str, source: str):
    """Parse the document and publish diagnostics."""
    result = compute_diagnostics(uri, source)
    server.text_document_publish_diagnostics(
        lsp.PublishDiagnosticsParams(uri=uri, diagnostics=result.diagnostics)
    )


def complete_source(uri: str, source: str, position: lsp.Position) -> list[lsp.CompletionItem]:
    """Compute LSP completion items for a buffer at a 0-based position."""
    try:
        items = completions(
            uri_to_path(uri),
            source,
            from_lsp_position(position),
            _predeclared,
            _modules,
        )
    except StatementNotFoundError:
        # Cursor between statements: nothing to offer.
        return []
    return [to_lsp_completion_item(item) for item in items]


@server.feature(lsp.INITIALIZE)
def initialize(params: lsp.InitializeParams):
    try:
        configure(module_infos_from_options(params.initialization_options))
    except CatalogError as e:
        logger.error("Ignoring module catalog: %s", e)
        configure([])
    logger.info("Module catalog has %d entries", len(_modules))


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: lsp.DidOpenTextDocumentParams):
    _validate_document(
        params.text_document.uri,
        params.text_document.text,
    )


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: lsp.DidChangeTextDocumentParams):
    doc = server.workspace.get_text_document(params.text_document.uri)
    _validate_document(params.text_document.uri, doc.source)


@server.feature(lsp.TEXT_DOCUMENT_DID_SAVE)
def did_save(params: lsp.DidSaveTextDocumentParams):
    doc = server.workspace.get_text_document(params.text_document.uri)
    _validate_document(params.text_document.uri, doc.source)


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: lsp.DidCloseTextDocumentParams):
    uri = params.text_document.uri
    server.text_document_publish_diagnostics(
        lsp.PublishDiagnosticsParams(uri=uri, diagnostics=[])
    )


@server.feature(
    lsp.TEXT_DOCUMENT_COMPLETION,
    lsp.CompletionOptions(trigger_characters=['(', '"'])
)
def completion(params: lsp.CompletionParams):
    doc = server.workspace.get_text_document(params.text_document.uri)
    return complete_source(params.text_document.uri, doc.source, params.position)


def main():
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    server.start_io()


if __name__ == "__main__":
    main()
