"""Conversions between the 1-based completion model and LSP types.

The completion core speaks 1-based (line, column) like embedded editor
widgets do; LSP positions are 0-based.
"""

from __future__ import annotations

from lsprotocol import types as lsp

from starcomplete.lsp.completion import (
    Completion,
    CompletionItemKind,
    Position,
    Range,
)


# Kinds LSP has no member for, by name.
_LSP_KIND_FALLBACK = {
    CompletionItemKind.Customcolor: lsp.CompletionItemKind.Color,
}


def from_lsp_position(position: lsp.Position) -> Position:
    return Position(line_number=position.line + 1, column=position.character + 1)


def to_lsp_position(position: Position) -> lsp.Position:
    return lsp.Position(
        line=max(0, position.line_number - 1),
        character=max(0, position.column - 1),
    )


def to_lsp_range(r: Range) -> lsp.Range:
    return lsp.Range(start=to_lsp_position(r.start), end=to_lsp_position(r.end))


def to_lsp_kind(kind: CompletionItemKind) -> lsp.CompletionItemKind:
    if kind in _LSP_KIND_FALLBACK:
        return _LSP_KIND_FALLBACK[kind]
    return lsp.CompletionItemKind[kind.name]


def to_lsp_completion_item(item: Completion) -> lsp.CompletionItem:
    return lsp.CompletionItem(
        label=item.label,
        kind=to_lsp_kind(item.kind),
        detail=item.detail,
        documentation=item.documentation or None,
        text_edit=lsp.TextEdit(range=to_lsp_range(item.range), new_text=item.insert_text),
    )
