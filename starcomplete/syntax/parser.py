"""Parser adapter: Starlark source text -> File of statements.

Starlark is a syntactic subset of Python, so the heavy lifting is done by
the standard-library ``ast`` grammar. This module restricts the result to
the Starlark subset, turns ``load(...)`` calls into load statements and
rewrites spans into 1-based, character-counted positions.
"""

from __future__ import annotations
import ast
import re

from .ast_nodes import (
    AssignStmt,
    BranchStmt,
    DefStmt,
    ExprStmt,
    File,
    ForStmt,
    IfStmt,
    LoadStmt,
    Node,
    ReturnStmt,
    WhileStmt,
)


class ParseError(Exception):
    def __init__(self, message: str, line: int, col: int):
        self.message = message
        self.line = line
        self.col = col
        super().__init__(f"{message} at {line}:{col}")


# Python constructs with no Starlark counterpart. Looked up by name since
# some only exist on newer interpreters.
_UNSUPPORTED_NODES = {
    "ClassDef": "class definition",
    "Import": "import statement",
    "ImportFrom": "import statement",
    "Try": "try statement",
    "TryStar": "try statement",
    "With": "with statement",
    "Raise": "raise statement",
    "Global": "global statement",
    "Nonlocal": "nonlocal statement",
    "Delete": "del statement",
    "Assert": "assert statement",
    "AsyncFunctionDef": "async function",
    "AsyncFor": "async for",
    "AsyncWith": "async with",
    "AnnAssign": "annotated assignment",
    "Match": "match statement",
    "TypeAlias": "type alias",
    "Yield": "yield expression",
    "YieldFrom": "yield expression",
    "Await": "await expression",
    "NamedExpr": "assignment expression",
    "Set": "set literal",
    "SetComp": "set comprehension",
    "JoinedStr": "f-string",
    "GeneratorExp": "generator expression",
}

# Line terminators as the tokenizer sees them.
_LINE_BREAK = re.compile(r"\r\n|\r|\n")

_UNSUPPORTED_BINOPS = {
    ast.Pow: "**",
    ast.MatMult: "@",
}

_BRANCH_TOKENS = {
    ast.Break: "break",
    ast.Continue: "continue",
    ast.Pass: "pass",
}

_AUG_OPS = {
    ast.Add: "+=",
    ast.Sub: "-=",
    ast.Mult: "*=",
    ast.Div: "/=",
    ast.FloorDiv: "//=",
    ast.Mod: "%=",
    ast.BitAnd: "&=",
    ast.BitOr: "|=",
    ast.BitXor: "^=",
    ast.LShift: "<<=",
    ast.RShift: ">>=",
}


def parse(filename: str, src=None) -> File:
    """Parse a Starlark file into its top-level statements.

    ``src`` may be a ``str``, UTF-8 ``bytes``, a readable file object, or
    ``None`` to read ``filename`` from disk. Syntax errors raise
    ``ParseError``; any other failure (I/O, internal parser faults) is
    propagated unchanged.
    """
    source = _read_source(filename, src)
    try:
        tree = ast.parse(source, filename=filename or "<input>")
    except SyntaxError as e:
        raise ParseError(e.msg, e.lineno or 1, e.offset or 1) from e
    return _Converter(source).convert(tree, filename)


def _read_source(filename: str, src) -> str:
    if isinstance(src, str):
        return src
    if src is None:
        with open(filename, "rb") as f:
            data = f.read()
    elif isinstance(src, (bytes, bytearray)):
        data = bytes(src)
    elif hasattr(src, "read"):
        data = src.read()
        if isinstance(data, str):
            return data
    else:
        raise TypeError(f"invalid source type: {type(src).__name__}")

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        line = data.count(b"\n", 0, e.start) + 1
        raise ParseError("invalid UTF-8 encoding", line, 1) from e


class _Converter:
    def __init__(self, source: str):
        self._lines = [line.encode("utf-8") for line in _LINE_BREAK.split(source)]

    def convert(self, tree: ast.Module, filename: str) -> File:
        return File(path=filename, stmts=self._block(tree.body, top_level=True))

    # ---- Positions ----

    def _col(self, lineno: int, byte_offset: int) -> int:
        """Map a 0-based UTF-8 byte offset to a 1-based character column."""
        if 0 < lineno <= len(self._lines):
            prefix = self._lines[lineno - 1][:byte_offset]
            return len(prefix.decode("utf-8", errors="ignore")) + 1
        return byte_offset + 1

    def _place(self, stmt: Node, node: ast.AST) -> Node:
        stmt.line = node.lineno
        stmt.col = self._col(node.lineno, node.col_offset)
        stmt.end_line = node.end_lineno
        stmt.end_col = self._col(node.end_lineno, node.end_col_offset)
        return stmt

    def _error(self, msg: str, node: ast.AST) -> ParseError:
        return ParseError(msg, node.lineno, self._col(node.lineno, node.col_offset))

    # ---- Validation ----

    def _check_unsupported(self, node: ast.AST):
        what = _UNSUPPORTED_NODES.get(type(node).__name__)
        if what:
            raise self._error(f"{what} is not supported", node)

    def _check_exprs(self, *exprs):
        for expr in exprs:
            if expr is None:
                continue
            for node in ast.walk(expr):
                self._check_unsupported(node)
                if isinstance(node, ast.Name) and node.id == "load":
                    raise self._error("load is a reserved word", node)
                if isinstance(node, ast.BinOp) and type(node.op) in _UNSUPPORTED_BINOPS:
                    op = _UNSUPPORTED_BINOPS[type(node.op)]
                    raise self._error(f"{op} operator is not supported", node)
                if isinstance(node, ast.Compare):
                    if len(node.ops) > 1:
                        raise self._error("chained comparison is not supported", node)
                    if isinstance(node.ops[0], (ast.Is, ast.IsNot)):
                        raise self._error("is operator is not supported", node)

    # ---- Statements ----

    def _block(self, body: list[ast.stmt], top_level: bool = False) -> list:
        return [self._stmt(node, top_level) for node in body]

    def _stmt(self, node: ast.stmt, top_level: bool):
        self._check_unsupported(node)

        if isinstance(node, ast.Assign):
            if len(node.targets) != 1:
                raise self._error("chained assignment is not supported", node)
            self._check_exprs(node.targets[0], node.value)
            return self._place(AssignStmt(op="=", lhs=node.targets[0], rhs=node.value), node)
        elif isinstance(node, ast.AugAssign):
            self._check_exprs(node.target, node.value)
            op = _AUG_OPS.get(type(node.op))
            if op is None:
                raise self._error("unsupported augmented assignment", node)
            return self._place(AssignStmt(op=op, lhs=node.target, rhs=node.value), node)
        elif type(node) in _BRANCH_TOKENS:
            return self._place(BranchStmt(token=_BRANCH_TOKENS[type(node)]), node)
        elif isinstance(node, ast.FunctionDef):
            return self._place(self._def(node), node)
        elif isinstance(node, ast.Expr):
            call = node.value
            if (isinstance(call, ast.Call) and isinstance(call.func, ast.Name)
                    and call.func.id == "load"):
                if not top_level:
                    raise self._error("load statement within a function or block", node)
                return self._place(self._load(call), node)
            self._check_exprs(node.value)
            return self._place(ExprStmt(x=node.value), node)
        elif isinstance(node, ast.For):
            if node.orelse:
                raise self._error("for loop cannot have an else clause", node)
            self._check_exprs(node.target, node.iter)
            return self._place(
                ForStmt(vars=node.target, x=node.iter, body=self._block(node.body)), node
            )
        elif isinstance(node, ast.While):
            if node.orelse:
                raise self._error("while loop cannot have an else clause", node)
            self._check_exprs(node.test)
            return self._place(WhileStmt(cond=node.test, body=self._block(node.body)), node)
        elif isinstance(node, ast.If):
            self._check_exprs(node.test)
            return self._place(
                IfStmt(
                    cond=node.test,
                    body=self._block(node.body),
                    else_body=self._block(node.orelse),
                ),
                node,
            )
        elif isinstance(node, ast.Return):
            self._check_exprs(node.value)
            return self._place(ReturnStmt(result=node.value), node)

        raise self._error(f"unexpected {type(node).__name__} statement", node)

    def _def(self, node: ast.FunctionDef) -> DefStmt:
        if node.decorator_list:
            raise self._error("decorators are not supported", node.decorator_list[0])
        args = node.args
        if node.returns is not None:
            raise self._error("type annotations are not supported", node.returns)
        params = []
        for arg in [*args.posonlyargs, *args.args, args.vararg, *args.kwonlyargs, args.kwarg]:
            if arg is None:
                continue
            if arg.annotation is not None:
                raise self._error("type annotations are not supported", arg.annotation)
            params.append(arg.arg)
        self._check_exprs(*args.defaults, *args.kw_defaults)
        return DefStmt(name=node.name, params=params, body=self._block(node.body))

    def _load(self, call: ast.Call) -> LoadStmt:
        operands = []
        for arg in call.args:
            operands.append(self._string_operand(arg))
        if not operands:
            raise self._error("load statement requires a module name", call)

        symbols = [(name, name) for name in operands[1:]]
        for kw in call.keywords:
            if kw.arg is None:
                raise self._error("load operand must be a string literal", kw.value)
            symbols.append((kw.arg, self._string_operand(kw.value)))
        if not symbols:
            raise self._error("load statement must import at least 1 symbol", call)
        return LoadStmt(module=operands[0], symbols=symbols)

    def _string_operand(self, node: ast.expr) -> str:
        if isinstance(node, ast.Constant) and isinstance(node.value, str):
            return node.value
        raise self._error("load operand must be a string literal", node)
