"""Command-line entry point: print completions for a cursor position."""

import argparse
import json
import sys

from starcomplete.lsp.catalog import CatalogError, load_module_catalog
from starcomplete.lsp.completion import (
    Position,
    StatementNotFoundError,
    completions,
    completions_to_dicts,
)
from starcomplete.syntax.parser import parse, ParseError


def _emit_ast(filename: str, source: bytes):
    try:
        file = parse(filename, source)
    except ParseError as e:
        print(f"{filename}:{e.line}:{e.col}: error: {e.message}", file=sys.stderr)
        sys.exit(1)
    for stmt in file.stmts:
        (line, col), (end_line, end_col) = stmt.span()
        print(f"{line}:{col}-{end_line}:{end_col} {type(stmt).__name__}")


def main(argv=None):
    argparser = argparse.ArgumentParser(description="Starlark code completion")
    argparser.add_argument("input", help="Input Starlark file")
    argparser.add_argument("line", type=int, nargs="?", default=1,
                           help="1-based cursor line")
    argparser.add_argument("column", type=int, nargs="?", default=1,
                           help="1-based cursor column")
    argparser.add_argument("-m", "--modules", help="JSON module catalog")
    argparser.add_argument("--emit-ast", action="store_true",
                           help="Print top-level statements and their spans")

    args = argparser.parse_args(argv)

    # Read input
    try:
        with open(args.input, "rb") as f:
            source = f.read()
    except FileNotFoundError:
        print(f"Error: File '{args.input}' not found", file=sys.stderr)
        sys.exit(1)

    if args.emit_ast:
        _emit_ast(args.input, source)
        return

    modules = []
    if args.modules:
        try:
            modules = load_module_catalog(args.modules)
        except (OSError, CatalogError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

    try:
        items = completions(args.input, source, Position(args.line, args.column), {}, modules)
    except StatementNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    json.dump(completions_to_dicts(items), sys.stdout, indent=2)
    print()


if __name__ == "__main__":
    main()
