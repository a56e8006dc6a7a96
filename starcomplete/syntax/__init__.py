"""Starlark parser adapter."""

from .parser import parse as parse, ParseError as ParseError
from .ast_nodes import File as File
