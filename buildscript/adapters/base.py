"""
Adapter base — the override record every language provides.

An adapter is not a subclass of anything: it is a record naming the
language, the phase hooks that differ from the defaults, and how the
language discriminates its cache. Whatever it leaves out falls back
to ``buildscript.core.lifecycle.DEFAULT_HOOKS``.

To add a language:
    1. Write hook functions ``(sh, config) -> None`` for the phases that differ
    2. Build a ``LanguageAdapter`` record with those hooks
    3. Register it in the ``AdapterRegistry``
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from buildscript.core import cache
from buildscript.core.lifecycle import DEFAULT_HOOKS, Hook, Phase
from buildscript.core.models.build_config import BuildConfig


def _nothing(config: BuildConfig) -> Iterable[str]:
    return ()


@dataclass(frozen=True)
class LanguageAdapter:
    """Override record for one language.

    Attributes:
        name:            Adapter identifier, also the cache slug language id.
        aliases:         Other ``language:`` values that select this adapter.
        hooks:           Phase overrides; missing phases use the defaults.
        default_version: Version assumed for the cache slug when none is given.
        slug_extra:      Extra cache slug fields derived from the config.
        directories:     Directories the cache store should persist.
    """

    name: str
    aliases: tuple[str, ...] = ()
    hooks: Mapping[Phase, Hook] = field(default_factory=dict)
    default_version: str | None = None
    slug_extra: Callable[[BuildConfig], Iterable[str]] = _nothing
    directories: Callable[[BuildConfig], Iterable[str]] = _nothing

    def hook(self, phase: Phase) -> Hook:
        """The adapter's hook for a phase, or the default."""
        return self.hooks.get(phase, DEFAULT_HOOKS[phase])

    def overrides(self, phase: Phase) -> bool:
        return phase in self.hooks

    def slug(self, config: BuildConfig) -> str:
        """Cache key for this build. Pure; needs no compilation."""
        version = config.version if config.version_given else self.default_version
        return cache.slug(self.name, version, self.slug_extra(config))

    def cache_directories(self, config: BuildConfig) -> list[str]:
        return list(self.directories(config))

    def __repr__(self) -> str:
        return f"<LanguageAdapter name={self.name!r} overrides={[p.value for p in self.hooks]}>"


GENERIC = LanguageAdapter(name="generic", aliases=("shell", "minimal"))
