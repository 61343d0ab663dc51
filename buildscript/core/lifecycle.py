"""
Lifecycle template — the fixed phase order every build script follows.

    export → setup → announce → install → script

Each phase is a hook ``(sh, config) -> None`` that appends directives
to the builder. Adapters supply override records for the phases that
differ for their language; every other phase runs the default hook
below. The cache key is not a phase of the script: it is the pure
``LanguageAdapter.slug(config)`` and can be computed without compiling.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import TYPE_CHECKING

from buildscript.core.models.build_config import BuildConfig
from buildscript.core.models.script import CompiledScript
from buildscript.core.shell.builder import ShellBuilder
from buildscript.core.shell.prelude import PRELUDE

if TYPE_CHECKING:
    from buildscript.adapters.base import LanguageAdapter

logger = logging.getLogger(__name__)

Hook = Callable[[ShellBuilder, BuildConfig], None]

# Used by the default script phase when nothing else is configured
GENERIC_SCRIPT = "make test"


class Phase(StrEnum):
    """Lifecycle phases, in execution order."""

    EXPORT = "export"
    SETUP = "setup"
    ANNOUNCE = "announce"
    INSTALL = "install"
    SCRIPT = "script"


PHASES: tuple[Phase, ...] = tuple(Phase)


# ── Default hooks ───────────────────────────────────────────────


def default_export(sh: ShellBuilder, config: BuildConfig) -> None:
    """Export the build language and the configured ``env`` entries."""
    sh.export("BUILD_LANGUAGE", config.language, echo=False)
    for entry in config.env:
        name, sep, value = entry.partition("=")
        if not sep:
            logger.debug("Ignoring env entry without '=': %r", entry)
            continue
        sh.export(name.strip(), value)


def default_setup(sh: ShellBuilder, config: BuildConfig) -> None:
    pass


def default_announce(sh: ShellBuilder, config: BuildConfig) -> None:
    pass


def default_install(sh: ShellBuilder, config: BuildConfig) -> None:
    """Run user-supplied install commands, if any."""
    commands = config.install or ()
    for i, command in enumerate(commands, start=1):
        fold = "install" if len(commands) == 1 else f"install.{i}"
        sh.cmd(command, fold=fold)


def default_script(sh: ShellBuilder, config: BuildConfig) -> None:
    """Run user-supplied script commands, or the generic fallback."""
    for command in config.script or (GENERIC_SCRIPT,):
        sh.cmd(command)


DEFAULT_HOOKS: dict[Phase, Hook] = {
    Phase.EXPORT: default_export,
    Phase.SETUP: default_setup,
    Phase.ANNOUNCE: default_announce,
    Phase.INSTALL: default_install,
    Phase.SCRIPT: default_script,
}


def resolve_hook(adapter: LanguageAdapter, phase: Phase, config: BuildConfig) -> Hook:
    """Pick the hook for a phase.

    Explicit ``install`` / ``script`` commands in the config win over
    the adapter; otherwise the adapter's override, else the default.
    """
    if phase is Phase.INSTALL and config.install is not None:
        return default_install
    if phase is Phase.SCRIPT and config.script is not None:
        return default_script
    return adapter.hook(phase)


def run_phases(sh: ShellBuilder, adapter: LanguageAdapter, config: BuildConfig) -> list[str]:
    """Run every phase in order against one builder."""
    ran: list[str] = []
    for phase in PHASES:
        hook = resolve_hook(adapter, phase, config)
        logger.debug("Phase %s → %s", phase.value, getattr(hook, "__name__", hook))
        sh.raw(f"# {phase.value}")
        hook(sh, config)
        ran.append(phase.value)
    return ran


def compile_script(config: BuildConfig, adapter: LanguageAdapter) -> CompiledScript:
    """Compile a full build script.

    Args:
        config: The build configuration.
        adapter: Language override record driving the phases.

    Returns:
        The immutable compiled script with its cache metadata.

    Raises:
        BuilderError: If a hook leaves the builder in a bad state.
    """
    sh = ShellBuilder()
    ran = run_phases(sh, adapter, config)
    body = sh.compile()

    script = CompiledScript(
        text=f"{PRELUDE}\n{body}",
        language=adapter.name,
        version=config.version,
        cache_slug=adapter.slug(config),
        cache_directories=tuple(adapter.cache_directories(config)),
        phases=tuple(ran),
    )
    logger.info(
        "Compiled %s script (%d lines, cache %s)",
        adapter.name,
        script.text.count("\n"),
        script.cache_slug,
    )
    return script
