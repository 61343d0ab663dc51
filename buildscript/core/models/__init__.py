"""
Domain models — Pydantic types and directive records.

All models are re-exported here for convenient access:

    from buildscript.core.models import BuildConfig, CommandOptions, CompiledScript
"""

from buildscript.core.models.build_config import BuildConfig
from buildscript.core.models.directive import (
    Ansi,
    Command,
    CommandOptions,
    Directive,
    Echo,
    Export,
    Raw,
)
from buildscript.core.models.script import CompiledScript

__all__ = [
    # directive.py
    "Ansi",
    # build_config.py
    "BuildConfig",
    "Command",
    "CommandOptions",
    # script.py
    "CompiledScript",
    "Directive",
    "Echo",
    "Export",
    "Raw",
]
