"""
Compile use case — config file + overrides → compiled script.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from buildscript.adapters.base import LanguageAdapter
from buildscript.adapters.registry import (
    AdapterRegistry,
    UnknownLanguageError,
    default_registry,
)
from buildscript.core.config.loader import ConfigError, load_build_config
from buildscript.core.lifecycle import compile_script
from buildscript.core.models.build_config import BuildConfig
from buildscript.core.models.script import CompiledScript


@dataclass
class CompileResult:
    """Outcome of a compile (or slug-only) request."""

    config: BuildConfig | None = None
    adapter: LanguageAdapter | None = None
    script: CompiledScript | None = None
    cache_slug: str = ""
    error: str | None = None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        if self.error:
            return {"error": self.error}
        if self.script:
            return {"adapter": self.script.language, **self.script.to_dict()}
        return {
            "adapter": self.adapter.name if self.adapter else "",
            "version": self.config.version if self.config else None,
            "cache_slug": self.cache_slug,
        }


def _resolve(
    config_path: Path | None,
    registry: AdapterRegistry | None,
    overrides: dict[str, Any],
) -> CompileResult:
    """Load the config and pick its adapter; errors land on the result."""
    result = CompileResult()
    try:
        config = load_build_config(config_path, **overrides)
        adapter = (registry or default_registry()).get(config.language)
    except (ConfigError, UnknownLanguageError) as e:
        result.error = str(e)
        return result

    result.config = config
    result.adapter = adapter
    result.cache_slug = adapter.slug(config)
    return result


def run_compile(
    config_path: Path | None = None,
    registry: AdapterRegistry | None = None,
    **overrides: Any,
) -> CompileResult:
    """Load config, resolve the adapter and compile the script.

    Builder misuse is a bug in an adapter and propagates as
    ``BuilderError``; only config and lookup errors are captured.

    Args:
        config_path: Optional explicit path to .build.yml.
        registry: Adapter registry (default: all built-in adapters).
        overrides: BuildConfig fields overriding the file (None = unset).

    Returns:
        CompileResult with the script, or an error message.
    """
    result = _resolve(config_path, registry, overrides)
    if result.error:
        return result

    assert result.config is not None and result.adapter is not None
    result.script = compile_script(result.config, result.adapter)
    return result


def run_slug(
    config_path: Path | None = None,
    registry: AdapterRegistry | None = None,
    **overrides: Any,
) -> CompileResult:
    """Compute only the cache slug; nothing is compiled."""
    return _resolve(config_path, registry, overrides)
