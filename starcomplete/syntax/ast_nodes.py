"""Statement nodes for Starlark source files.

Only statements are modelled; expressions are kept as the ``ast.expr``
nodes produced by the underlying grammar.
"""

from __future__ import annotations
import ast
from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass
class Node:
    line: int = 0
    col: int = 0
    end_line: int = 0
    end_col: int = 0

    def span(self) -> tuple[tuple[int, int], tuple[int, int]]:
        """Return ``((line, col), (end_line, end_col))``, 1-based.

        The end position points just past the last character of the node.
        """
        return (self.line, self.col), (self.end_line, self.end_col)


@dataclass
class File:
    path: str = ""
    stmts: list[stmt] = field(default_factory=list)

@dataclass
class AssignStmt(Node):
    op: str = "="
    lhs: Optional[ast.expr] = None
    rhs: Optional[ast.expr] = None

@dataclass
class BranchStmt(Node):
    token: str = ""

@dataclass
class DefStmt(Node):
    name: str = ""
    params: list[str] = field(default_factory=list)
    body: list[stmt] = field(default_factory=list)

@dataclass
class ExprStmt(Node):
    x: Optional[ast.expr] = None

@dataclass
class ForStmt(Node):
    vars: Optional[ast.expr] = None
    x: Optional[ast.expr] = None
    body: list[stmt] = field(default_factory=list)

@dataclass
class WhileStmt(Node):
    cond: Optional[ast.expr] = None
    body: list[stmt] = field(default_factory=list)

@dataclass
class IfStmt(Node):
    cond: Optional[ast.expr] = None
    body: list[stmt] = field(default_factory=list)
    else_body: list[stmt] = field(default_factory=list)

@dataclass
class LoadStmt(Node):
    module: str = ""
    symbols: list[tuple[str, str]] = field(default_factory=list)

@dataclass
class ReturnStmt(Node):
    result: Optional[ast.expr] = None


stmt = Union[AssignStmt, BranchStmt, DefStmt, ExprStmt, ForStmt, WhileStmt, IfStmt, LoadStmt, ReturnStmt]

STMT_KINDS: tuple[type, ...] = (
    AssignStmt,
    BranchStmt,
    DefStmt,
    ExprStmt,
    ForStmt,
    WhileStmt,
    IfStmt,
    LoadStmt,
    ReturnStmt,
)
