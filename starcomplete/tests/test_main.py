"""Tests for the starcomplete command line."""

import json

import pytest
from starcomplete.main import main


@pytest.fixture
def catalog(tmp_path):
    path = tmp_path / "modules.json"
    path.write_text(json.dumps([
        {"name": "net/http", "documentation": "make network requests",
         "defaultImportSymbol": "http"},
    ]), encoding="utf-8")
    return path


def write_source(tmp_path, text):
    path = tmp_path / "BUILD.star"
    path.write_text(text, encoding="utf-8")
    return path


def test_prints_completions(tmp_path, catalog, capsys):
    src = write_source(tmp_path, 'load("","")\n')
    main([str(src), "1", "5", "--modules", str(catalog)])
    out = json.loads(capsys.readouterr().out)
    assert out == [{
        "insertText": 'load("net/http","http")',
        "detail": "module",
        "kind": 23,
        "label": "net/http",
        "documentation": "make network requests",
        "range": {"startLineNumber": 1, "startColumn": 5, "endLineNumber": 1, "endColumn": 5},
    }]


def test_no_catalog(tmp_path, capsys):
    src = write_source(tmp_path, 'load("","")\n')
    main([str(src), "1", "5"])
    assert json.loads(capsys.readouterr().out) == []


def test_syntax_error_prints_empty_list(tmp_path, catalog, capsys):
    src = write_source(tmp_path, 'load(\n')
    main([str(src), "1", "3", "--modules", str(catalog)])
    assert json.loads(capsys.readouterr().out) == []


def test_cursor_outside_statements(tmp_path, catalog, capsys):
    src = write_source(tmp_path, 'x = 1\n')
    with pytest.raises(SystemExit) as exc:
        main([str(src), "4", "1", "--modules", str(catalog)])
    assert exc.value.code == 1
    assert "token not found" in capsys.readouterr().err


def test_missing_input(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "missing.star"), "1", "1"])
    assert exc.value.code == 1
    assert "not found" in capsys.readouterr().err


def test_bad_catalog(tmp_path, capsys):
    src = write_source(tmp_path, 'load("","")\n')
    bad = tmp_path / "bad.json"
    bad.write_text('{"name": "m"}', encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main([str(src), "1", "5", "--modules", str(bad)])
    assert exc.value.code == 1
    assert "expected a list" in capsys.readouterr().err


def test_emit_ast(tmp_path, capsys):
    src = write_source(tmp_path, 'x = 1\nload("m", "s")\n')
    main([str(src), "--emit-ast"])
    assert capsys.readouterr().out.splitlines() == [
        "1:1-1:6 AssignStmt",
        "2:1-2:15 LoadStmt",
    ]
