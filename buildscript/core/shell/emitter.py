"""
Directive emitter — turn single directives into shell lines.

The emitter guarantees structural correctness only: it quotes the
syntax it adds itself (the echoed command display, the retry
argument, fold names) but inserts caller-supplied values as-is.
Configuration is trusted; callers escape what they need escaped.
"""

from __future__ import annotations

import logging
import shlex

from buildscript.core.models.directive import (
    Ansi,
    Command,
    Directive,
    Echo,
    Export,
    Raw,
)
from buildscript.core.shell.policy import wrap

logger = logging.getLogger(__name__)

# Prefix printed before an echoed command
_PROMPT_COLOR = Ansi.YELLOW


def render_echo(directive: Echo) -> list[str]:
    """Print a message; unknown colour tags print uncoloured."""
    color = Ansi.lookup(directive.ansi)
    if color is None:
        return [f'printf \'%s\\n\' "{directive.message}"']
    return [
        f'printf \'\\033[{color.code}m%s\\033[0m\\n\' "{directive.message}"'
    ]


def render_prompt(command: str) -> str:
    """Display ``$ <command>`` before it runs."""
    return (
        f"printf '\\033[{_PROMPT_COLOR.code}m$\\033[0m %s\\n' "
        f"{shlex.quote(command)}"
    )


def render_export(directive: Export) -> list[str]:
    if not directive.name:
        logger.debug("Skipping export with no name (value=%r)", directive.value)
        return []
    line = f"export {directive.name}={directive.value}"
    if directive.echo:
        return [render_prompt(line), line]
    return [line]


def render_command(directive: Command, timer_id: int) -> list[str]:
    lines = wrap(directive.command, directive.options, timer_id)
    if directive.options.echo:
        # The prompt sits inside the fold so the section shows what ran
        at = 1 if directive.options.fold else 0
        lines.insert(at, render_prompt(directive.command))
    return lines


def render_raw(directive: Raw) -> list[str]:
    return directive.text.splitlines() or [""]


def render(directive: Directive, timer_id: int = 0) -> list[str]:
    """Render any directive into shell lines."""
    if isinstance(directive, Command):
        return render_command(directive, timer_id)
    if isinstance(directive, Export):
        return render_export(directive)
    if isinstance(directive, Echo):
        return render_echo(directive)
    if isinstance(directive, Raw):
        return render_raw(directive)
    raise TypeError(f"Not a directive: {directive!r}")
