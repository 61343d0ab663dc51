"""
Cache key builder — name the dependency cache for a build.

Pure and deterministic: the same language, version and extras always
produce the same slug. The cache store treats it as an opaque key.
"""

from __future__ import annotations

from collections.abc import Iterable

SLUG_PREFIX = "cache"
SLUG_SEPARATOR = "--"


def slug(language_id: str, version: str | None, extra: Iterable[str] = ()) -> str:
    """Build a cache slug.

    Args:
        language_id: Adapter identity, e.g. ``"node_js"``.
        version: Resolved toolchain version.
        extra: Adapter-specific discriminators (empty values are dropped).

    Returns:
        e.g. ``"cache--node_js--6--yarn"``.
    """
    parts = [SLUG_PREFIX, language_id, str(version or "")]
    parts.extend(str(e) for e in extra if e)
    return SLUG_SEPARATOR.join(p for p in parts if p)
