"""
Build config model — the declarative description of one build.

Loaded from .build.yml (or assembled by the CLI), this is the
read-only input every lifecycle phase consults. It is frozen: no
phase may mutate it once the build starts.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Keys older configs use for the node version
_LEGACY_VERSION_KEYS = ("node_js", "nodejs")


class BuildConfig(BaseModel):
    """Immutable build configuration, supplied once per build.

    Attributes:
        language:  Language identifier (``node_js``, ``node``, ``generic``...).
        version:   Requested toolchain version, or None when not given.
        cache:     Enabled cache names (``npm``, ``yarn``...).
        npm_args:  Extra arguments for ``npm install``.
        env:       ``NAME=VALUE`` strings exported at the start of the build.
        install:   Commands replacing the adapter's install phase.
        script:    Commands replacing the adapter's script phase.
        hosts:     Internal hosts (e.g. ``npm_cache``) available to the worker.
        app_host:  File-hosting endpoint for tool self-updates. Resolved
                   once at the entry point, never read from the environment
                   by the compiler itself.
    """

    model_config = ConfigDict(frozen=True)

    language: str = "generic"
    version: str | None = None
    cache: tuple[str, ...] = ()
    npm_args: str = ""
    env: tuple[str, ...] = ()
    install: tuple[str, ...] | None = None
    script: tuple[str, ...] | None = None
    hosts: dict[str, str] = Field(default_factory=dict)
    app_host: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _convert_legacy_keys(cls, data: Any) -> Any:
        """Map ``node_js`` / ``nodejs`` onto ``version``."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        legacy = {k: data.pop(k) for k in _LEGACY_VERSION_KEYS if k in data}
        if data.get("version") is None:
            for key in _LEGACY_VERSION_KEYS:
                if legacy.get(key) is not None:
                    data["version"] = legacy[key]
                    break
        return data

    @field_validator("version", mode="before")
    @classmethod
    def _normalize_version(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if value is None:
            return None
        # YAML reads "0.10" as the float 0.1
        if isinstance(value, float) and value == 0.1:
            return "0.10"
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("cache", mode="before")
    @classmethod
    def _normalize_cache(cls, value: Any) -> Any:
        # `cache: false` switches caching off; `true` names no cache
        if value is None or isinstance(value, bool):
            return ()
        if isinstance(value, str):
            return (value,)
        if isinstance(value, dict):
            return tuple(name for name, enabled in value.items() if enabled)
        return value

    @field_validator("env", "install", "script", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> Any:
        if isinstance(value, str):
            return (value,)
        return value

    @property
    def version_given(self) -> bool:
        """Whether a toolchain version was actually configured."""
        return self.version is not None and self.version != ""

    def cache_enabled(self, name: str) -> bool:
        """Check if a named cache is switched on."""
        return name in self.cache
