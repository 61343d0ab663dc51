"""
Compiled script model — the single output of a compilation.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CompiledScript(BaseModel):
    """The final, flattened shell script for one build.

    Attributes:
        text:              Full POSIX shell source.
        language:          Adapter name the script was compiled with.
        version:           Configured toolchain version (None = pin file/default).
        cache_slug:        Key naming the dependency cache for this build.
        cache_directories: Directories the cache store should persist.
        phases:            Lifecycle phases, in the order they ran.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    language: str
    version: str | None = None
    cache_slug: str = ""
    cache_directories: tuple[str, ...] = ()
    phases: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "language": self.language,
            "version": self.version,
            "cache_slug": self.cache_slug,
            "cache_directories": list(self.cache_directories),
            "phases": list(self.phases),
            "script": self.text,
        }
