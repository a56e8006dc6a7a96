"""starcomplete: code completion for Starlark."""

__version__ = "0.1.0"
