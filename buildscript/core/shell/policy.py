"""
Command policy wrapper — assertion, retry and fold around one command.

Nesting, outermost first:

    fold  ⊃  timing  ⊃  retry  ⊃  status capture,  then assertion

Retries run inside the fold and the timer, so every attempt is
grouped and timed with the command. Intermediate failures are
swallowed by ``build_retry``; the assertion only ever sees the
status of the last attempt. The retry budget is fixed for the
whole script (see ``prelude.RETRY_ATTEMPTS``).
"""

from __future__ import annotations

import shlex

from buildscript.core.models.directive import CommandOptions
from buildscript.core.shell.prelude import RESULT_VAR


def fold_begin(name: str) -> str:
    return f"build_fold begin {shlex.quote(name)}"


def fold_end(name: str) -> str:
    return f"build_fold end {shlex.quote(name)}"


def wrap(command: str, options: CommandOptions, timer_id: int = 0) -> list[str]:
    """Wrap a raw command according to its policy.

    Args:
        command: Shell command text, inserted as-is.
        options: Resolved command options.
        timer_id: Identifier for the timing markers.

    Returns:
        Shell lines. The exit status is always left in ``$build_result``
        so callers can branch on it when assertion is off.
    """
    if options.retry:
        lines = [f"build_retry {shlex.quote(command)}"]
    else:
        lines = command.splitlines() or [":"]
    lines.append(f"{RESULT_VAR}=$?")

    if options.timing:
        lines = [f"build_time_start {timer_id}", *lines, "build_time_finish"]

    if options.assert_:
        lines.append(f"build_assert {shlex.quote(command)}")

    if options.fold:
        lines = [fold_begin(options.fold), *lines, fold_end(options.fold)]

    return lines
