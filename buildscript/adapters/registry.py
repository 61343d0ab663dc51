"""
Adapter registry — map ``language:`` values to language adapters.

The compile use case never picks an adapter itself: it always asks
the registry, which knows every name and alias.
"""

from __future__ import annotations

import logging

from buildscript.adapters.base import GENERIC, LanguageAdapter

logger = logging.getLogger(__name__)


class UnknownLanguageError(KeyError):
    """Raised when no adapter handles a language."""

    def __str__(self) -> str:
        return f"No adapter for language {self.args[0]!r}"


class AdapterRegistry:
    """Central registry of language adapters.

    Features:
        - Register adapters under their name and aliases
        - Case-insensitive lookup
        - Optional fallback adapter for unknown languages
    """

    def __init__(self, fallback: LanguageAdapter | None = None):
        self._adapters: dict[str, LanguageAdapter] = {}
        self._names: dict[str, str] = {}
        self._fallback = fallback

    def register(self, adapter: LanguageAdapter) -> None:
        """Register an adapter under its name and aliases."""
        if adapter.name in self._adapters:
            logger.warning("Overwriting existing adapter: %s", adapter.name)
        self._adapters[adapter.name] = adapter
        for key in (adapter.name, *adapter.aliases):
            self._names[key.lower()] = adapter.name
        logger.debug("Registered adapter: %s", adapter.name)

    def unregister(self, name: str) -> None:
        """Remove an adapter and its aliases."""
        self._adapters.pop(name, None)
        self._names = {k: v for k, v in self._names.items() if v != name}

    def get(self, language: str) -> LanguageAdapter:
        """Resolve a language to its adapter.

        Raises:
            UnknownLanguageError: If nothing matches and there is no fallback.
        """
        name = self._names.get((language or "").lower())
        if name is not None:
            return self._adapters[name]
        if self._fallback is not None:
            logger.info("No adapter for %r, using %s", language, self._fallback.name)
            return self._fallback
        raise UnknownLanguageError(language)

    def list_adapters(self) -> list[str]:
        """List all registered adapter names."""
        return list(self._adapters.keys())

    def aliases(self, name: str) -> list[str]:
        return sorted(k for k, v in self._names.items() if v == name and k != name)


def default_registry() -> AdapterRegistry:
    """Registry with every built-in adapter."""
    from buildscript.adapters.languages import NODE_JS

    registry = AdapterRegistry()
    registry.register(GENERIC)
    registry.register(NODE_JS)
    return registry
