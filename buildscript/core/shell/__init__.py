"""Shell directive compiler — emitter, policy wrapper and block builder."""

from buildscript.core.shell.builder import Block, BuilderError, ShellBuilder
from buildscript.core.shell.prelude import PRELUDE, RESULT_VAR, RETRY_ATTEMPTS

__all__ = [
    "PRELUDE",
    "RESULT_VAR",
    "RETRY_ATTEMPTS",
    "Block",
    "BuilderError",
    "ShellBuilder",
]
