"""Dependency probing utilities."""
from __future__ import annotations

import importlib.util
import shutil


def missing_modules(*modules: str) -> list[str]:
    """Return the import names in ``modules`` that cannot be found.

    Only the module spec is looked up, nothing is imported, so heavy
    optional libraries are not loaded just to check for them.

    Example:
        >>> missing_modules("json", "not_a_real_module")
        ['not_a_real_module']
    """
    missing = []
    for module in modules:
        name = module.replace("-", "_")
        try:
            found = importlib.util.find_spec(name) is not None
        except (ImportError, ValueError):
            found = False
        if not found:
            missing.append(module)
    return missing


def find_executable(name: str) -> str | None:
    """Resolve an executable on PATH (or an absolute path) to its location."""
    return shutil.which(name)
