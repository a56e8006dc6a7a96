"""Code completion for Starlark.

Parses the buffer, finds the top-level statement under the cursor and
dispatches on its kind. Load statements complete to one ``load(...)``
suggestion per known module; every other statement kind currently yields
nothing.

Positions here are 1-based (line, column), matching the editor hosts that
consume the ``to_dict`` mapping. Conversions to 0-based LSP types live in
``starcomplete.lsp.utils``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Iterable, Mapping, Optional, Sequence

from starcomplete.syntax.parser import parse, ParseError
from starcomplete.syntax.ast_nodes import (
    AssignStmt,
    BranchStmt,
    DefStmt,
    ExprStmt,
    ForStmt,
    IfStmt,
    LoadStmt,
    ReturnStmt,
    WhileStmt,
    stmt,
)

logger = logging.getLogger(__name__)


class StatementNotFoundError(LookupError):
    """The cursor is not inside any top-level statement."""

    def __init__(self, position: Position):
        self.position = position
        super().__init__(
            f"token not found at {position.line_number}:{position.column}"
        )


# ---------------------------------------------------------------------------
# Position model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Position:
    line_number: int
    column: int


@dataclass(frozen=True)
class Range:
    start_line_number: int
    start_column: int
    end_line_number: int
    end_column: int

    def __post_init__(self):
        if (self.start_line_number, self.start_column) > (
            self.end_line_number,
            self.end_column,
        ):
            raise ValueError(
                f"range start {self.start_line_number}:{self.start_column} is after "
                f"end {self.end_line_number}:{self.end_column}"
            )

    @classmethod
    def between(cls, start: Position, end: Position) -> Range:
        return cls(start.line_number, start.column, end.line_number, end.column)

    @property
    def start(self) -> Position:
        return Position(self.start_line_number, self.start_column)

    @property
    def end(self) -> Position:
        return Position(self.end_line_number, self.end_column)

    def is_empty(self) -> bool:
        return self.start == self.end

    def to_dict(self) -> dict[str, int]:
        return {
            "startLineNumber": self.start_line_number,
            "startColumn": self.start_column,
            "endLineNumber": self.end_line_number,
            "endColumn": self.end_column,
        }


# ---------------------------------------------------------------------------
# Completion item model
# ---------------------------------------------------------------------------


class CompletionItemKind(IntEnum):
    """Display category of a completion; the ordinal is the wire value."""

    Method = 0
    Function = 1
    Constructor = 2
    Field = 3
    Variable = 4
    Class = 5
    Struct = 6
    Interface = 7
    Module = 8
    Property = 9
    Event = 10
    Operator = 11
    Unit = 12
    Value = 13
    Constant = 14
    Enum = 15
    EnumMember = 16
    Keyword = 17
    Text = 18
    Color = 19
    File = 20
    Reference = 21
    Customcolor = 22
    Folder = 23
    TypeParameter = 24
    Snippet = 25

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Completion:
    insert_text: str
    detail: str
    kind: CompletionItemKind
    label: str
    documentation: str
    range: Range

    def to_dict(self) -> dict[str, Any]:
        return {
            "insertText": self.insert_text,
            "detail": self.detail,
            "kind": int(self.kind),
            "label": self.label,
            "documentation": self.documentation,
            "range": self.range.to_dict(),
        }


def completions_to_dicts(items: Iterable[Completion]) -> list[dict[str, Any]]:
    return [item.to_dict() for item in items]


# ---------------------------------------------------------------------------
# Module catalog entries
# ---------------------------------------------------------------------------


def _quote(s: str) -> str:
    # Double-quoted with backslash escapes; valid as a Starlark string literal.
    return json.dumps(s, ensure_ascii=False)


@dataclass(frozen=True)
class ModuleInfo:
    name: str
    documentation: str = ""
    default_import_symbol: str = ""

    def load_string(self) -> str:
        """Return the ``load(...)`` statement that imports this module."""
        if self.default_import_symbol:
            return f"load({_quote(self.name)},{_quote(self.default_import_symbol)})"
        return f"load({_quote(self.name)})"

    def completion(self, position: Position) -> Completion:
        return Completion(
            insert_text=self.load_string(),
            detail="module",
            kind=CompletionItemKind.Folder,
            label=self.name,
            documentation=self.documentation,
            range=Range.between(position, position),
        )


# ---------------------------------------------------------------------------
# Main completion entry point
# ---------------------------------------------------------------------------


def completions(
    filename: str,
    src,
    position: Position,
    predeclared: Optional[Mapping[str, Any]] = None,
    modules: Sequence[ModuleInfo] = (),
) -> list[Completion]:
    """Compute completion items for ``position`` in a Starlark buffer.

    Buffers that do not parse yield no completions. A cursor outside every
    top-level statement raises ``StatementNotFoundError``; parser failures
    other than syntax errors propagate.
    """
    try:
        file = parse(filename, src)
    except ParseError as e:
        # Half-typed programs are the normal case while editing.
        logger.debug("ignoring syntax error in %r: %s", filename, e)
        return []

    found = statement_at_position(file.stmts, position)
    return completions_for_statement(found, position, predeclared or {}, modules)


def statement_at_position(stmts: Sequence[stmt], position: Position) -> stmt:
    """Find the statement whose last line contains the cursor.

    Statements must be in ascending source order; the scan stops at the
    first statement ending below the cursor line. Interior lines of
    multi-line statements never match.
    """
    for s in stmts:
        (_, start_col), (end_line, end_col) = s.span()
        if end_line == position.line_number and start_col <= position.column <= end_col:
            return s
        elif end_line > position.line_number:
            break
    raise StatementNotFoundError(position)


def completions_for_statement(
    s: stmt,
    position: Position,
    predeclared: Mapping[str, Any],
    modules: Sequence[ModuleInfo],
) -> list[Completion]:
    logger.debug("statement: %r", s)
    if isinstance(s, AssignStmt):
        return []
    elif isinstance(s, BranchStmt):
        return []
    elif isinstance(s, DefStmt):
        return []
    elif isinstance(s, ExprStmt):
        return []
    elif isinstance(s, ForStmt):
        return []
    elif isinstance(s, WhileStmt):
        return []
    elif isinstance(s, IfStmt):
        return []
    elif isinstance(s, LoadStmt):
        return module_completions(modules, position)
    elif isinstance(s, ReturnStmt):
        return []
    raise TypeError(f"unhandled statement kind: {type(s).__name__}")


def module_completions(modules: Sequence[ModuleInfo], position: Position) -> list[Completion]:
    return [mi.completion(position) for mi in modules]
