"""Adapters — language override records and their registry."""

from buildscript.adapters.base import GENERIC, LanguageAdapter
from buildscript.adapters.registry import (
    AdapterRegistry,
    UnknownLanguageError,
    default_registry,
)

__all__ = [
    "GENERIC",
    "AdapterRegistry",
    "LanguageAdapter",
    "UnknownLanguageError",
    "default_registry",
]
