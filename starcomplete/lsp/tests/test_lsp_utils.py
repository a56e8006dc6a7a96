"""Tests for LSP conversions."""

import pytest
from lsprotocol import types as lsp

from starcomplete.lsp.completion import (
    CompletionItemKind,
    ModuleInfo,
    Position,
    Range,
)
from starcomplete.lsp.utils import (
    from_lsp_position,
    to_lsp_completion_item,
    to_lsp_kind,
    to_lsp_position,
    to_lsp_range,
)


def test_from_lsp_position():
    assert from_lsp_position(lsp.Position(line=0, character=4)) == Position(1, 5)


def test_to_lsp_position():
    assert to_lsp_position(Position(1, 5)) == lsp.Position(line=0, character=4)


def test_to_lsp_range():
    r = to_lsp_range(Range(1, 2, 3, 4))
    assert r.start == lsp.Position(line=0, character=1)
    assert r.end == lsp.Position(line=2, character=3)


@pytest.mark.parametrize("kind", list(CompletionItemKind), ids=str)
def test_every_kind_maps(kind):
    assert isinstance(to_lsp_kind(kind), lsp.CompletionItemKind)


def test_kind_mapping_by_name():
    assert to_lsp_kind(CompletionItemKind.Folder) == lsp.CompletionItemKind.Folder
    assert to_lsp_kind(CompletionItemKind.Method) == lsp.CompletionItemKind.Method
    assert to_lsp_kind(CompletionItemKind.Customcolor) == lsp.CompletionItemKind.Color


def test_to_lsp_completion_item():
    mi = ModuleInfo("net/http", "make network requests", "http")
    item = to_lsp_completion_item(mi.completion(Position(1, 5)))
    assert item.label == "net/http"
    assert item.kind == lsp.CompletionItemKind.Folder
    assert item.detail == "module"
    assert item.documentation == "make network requests"
    assert item.text_edit.new_text == 'load("net/http","http")'
    assert item.text_edit.range.start == lsp.Position(line=0, character=4)
    assert item.text_edit.range.end == lsp.Position(line=0, character=4)


def test_empty_documentation_is_omitted():
    item = to_lsp_completion_item(ModuleInfo("time").completion(Position(1, 1)))
    assert item.documentation is None
