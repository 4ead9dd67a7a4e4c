"""Base provider interface."""
from __future__ import annotations

from abc import ABC
from typing import ClassVar

from anyconvert.exceptions import ProviderUnavailableError
from anyconvert.utils.deps import missing_modules


class BaseProvider(ABC):
    """An external library wrapped behind one narrow capability.

    Providers are optional: a provider whose ``requires`` modules are not
    importable reports ``is_available() == False`` instead of failing at
    import time. The check runs once per instance.
    """

    name: ClassVar[str]

    # Import names the provider needs
    requires: ClassVar[tuple[str, ...]] = ()

    def __init__(self) -> None:
        self._missing: list[str] | None = None

    def missing(self) -> list[str]:
        """Dependencies that could not be found (cached)."""
        if self._missing is None:
            self._missing = self._probe()
        return self._missing

    def _probe(self) -> list[str]:
        return missing_modules(*self.requires)

    def is_available(self, *modules: str) -> bool:
        """True if ``modules`` (default: all of ``requires``) can be imported."""
        return not self._missing_of(modules)

    def ensure_available(self, *modules: str) -> None:
        """Raise :class:`ProviderUnavailableError` if dependencies are missing.

        ``modules`` narrows the check to the subset of ``requires`` one
        operation actually needs.
        """
        missing = self._missing_of(modules)
        if missing:
            raise ProviderUnavailableError(self.name, missing)

    def _missing_of(self, modules: tuple[str, ...]) -> list[str]:
        missing = self.missing()
        if not modules:
            return missing
        return [m for m in missing if m in modules]

    def describe(self) -> dict:
        """Availability summary for diagnostics."""
        return {
            "name": self.name,
            "requires": list(self.requires),
            "available": self.is_available(),
            "missing": self.missing(),
        }
