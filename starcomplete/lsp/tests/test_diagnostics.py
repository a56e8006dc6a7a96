"""Tests for diagnostic computation."""

from lsprotocol import types as lsp

from starcomplete.lsp.diagnostics import AnalysisResult, compute_diagnostics, uri_to_path


class TestComputeDiagnostics:
    def test_valid_source(self):
        result = compute_diagnostics("file:///work/BUILD.star", 'load("m", "x")\n')
        assert result == AnalysisResult(uri="file:///work/BUILD.star", diagnostics=[])

    def test_syntax_error(self):
        result = compute_diagnostics("file:///work/BUILD.star", 'x = 1\nimport os\n')
        assert len(result.diagnostics) == 1
        diag = result.diagnostics[0]
        assert diag.message == "import statement is not supported"
        assert diag.severity == lsp.DiagnosticSeverity.Error
        assert diag.source == "starlark"
        assert diag.range.start == lsp.Position(line=1, character=0)
        assert diag.range.end == lsp.Position(line=1, character=1)

    def test_starlark_only_restrictions_are_reported(self):
        result = compute_diagnostics("file:///work/BUILD.star", 'x = 1 < 2 < 3\n')
        assert [d.message for d in result.diagnostics] == [
            "chained comparison is not supported",
        ]

    def test_keeps_uri(self):
        result = compute_diagnostics("file:///work/BUILD.star", "load(")
        assert result.uri == "file:///work/BUILD.star"
        assert len(result.diagnostics) == 1


def test_uri_to_path():
    assert uri_to_path("file:///work/my%20dir/BUILD.star") == "/work/my dir/BUILD.star"
