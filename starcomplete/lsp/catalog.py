"""Module catalog loading.

A catalog is a JSON array of objects::

    [{"name": "net/http", "documentation": "make network requests",
      "defaultImportSymbol": "http"}]

The CLI reads it from a file; the language server takes the same array
from ``initializationOptions.modules``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from starcomplete.lsp.completion import ModuleInfo

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    pass


def load_module_catalog(path: str | Path) -> list[ModuleInfo]:
    """Read a module catalog from a JSON file."""
    path = Path(path)
    try:
        entries = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise CatalogError(f"{path}: invalid JSON: {e}") from e
    modules = parse_module_catalog(entries, source=str(path))
    logger.info("Loaded %d modules from %s", len(modules), path)
    return modules


def module_infos_from_options(options: Optional[Any]) -> list[ModuleInfo]:
    """Build the catalog from LSP initialization options."""
    if not options:
        return []
    if not isinstance(options, dict):
        raise CatalogError("initializationOptions must be an object")
    return parse_module_catalog(options.get("modules") or [], source="initializationOptions")


def parse_module_catalog(entries: Any, source: str = "catalog") -> list[ModuleInfo]:
    if not isinstance(entries, list):
        raise CatalogError(f"{source}: expected a list of modules")
    return [_module_info(entry, i, source) for i, entry in enumerate(entries)]


def _module_info(entry: Any, index: int, source: str) -> ModuleInfo:
    if not isinstance(entry, dict):
        raise CatalogError(f"{source}[{index}]: expected an object")
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise CatalogError(f"{source}[{index}]: missing module name")

    alias = entry.get("defaultImportSymbol", entry.get("default_import_symbol", ""))
    documentation = entry.get("documentation", "")
    for key, value in (("documentation", documentation), ("defaultImportSymbol", alias)):
        if not isinstance(value, str):
            raise CatalogError(f"{source}[{index}]: {key} must be a string")

    return ModuleInfo(name=name, documentation=documentation, default_import_symbol=alias)
