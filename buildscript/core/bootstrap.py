"""
Toolchain bootstrap — install-or-fallback for a version manager.

States:
    INSTALLING → Network install of the requested version.
    FALLBACK   → Install failed; select an already-present version.
    RESOLVED   → A usable toolchain exists.
    FAILED     → Nothing usable; the build must stop.

Transitions:
    INSTALLING → RESOLVED:  install succeeds
    INSTALLING → FALLBACK:  install fails
    FALLBACK → RESOLVED:    local selection succeeds
    FALLBACK → FAILED:      local selection fails

The machine is pure. ``emit_bootstrap`` drives one along its failure
path: every step it advances to is emitted inside the failure branch
of the previous one, so the script and the machine can never disagree
about what happens after a failure.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from buildscript.core.shell.builder import ShellBuilder

logger = logging.getLogger(__name__)


class BootstrapError(RuntimeError):
    """Raised on an illegal bootstrap transition."""


class BootstrapState(StrEnum):
    """Bootstrap states."""

    INSTALLING = "installing"
    FALLBACK = "fallback"
    FAILED = "failed"
    RESOLVED = "resolved"


# state → (next on success, next on failure)
TRANSITIONS: dict[BootstrapState, tuple[BootstrapState, BootstrapState]] = {
    BootstrapState.INSTALLING: (BootstrapState.RESOLVED, BootstrapState.FALLBACK),
    BootstrapState.FALLBACK: (BootstrapState.RESOLVED, BootstrapState.FAILED),
}

TERMINAL = frozenset({BootstrapState.RESOLVED, BootstrapState.FAILED})

# Warnings printed on entering a state; {version} is substituted
WARNINGS: dict[BootstrapState, tuple[tuple[str, str | None], ...]] = {
    BootstrapState.FALLBACK: (
        ("Failed to install {version}. Remote repository may not be reachable.", "red"),
        ("Using locally available version {version}, if applicable.", None),
    ),
    BootstrapState.FAILED: (
        ("Unable to use {version}", "red"),
    ),
}


@dataclass
class BootstrapMachine:
    """Tracks one bootstrap attempt through its states."""

    state: BootstrapState = BootstrapState.INSTALLING
    history: list[BootstrapState] = field(
        default_factory=lambda: [BootstrapState.INSTALLING]
    )

    @property
    def done(self) -> bool:
        return self.state in TERMINAL

    def advance(self, succeeded: bool) -> BootstrapState:
        """Record the outcome of the current step and move on.

        Raises:
            BootstrapError: If the machine is already in a terminal state.
        """
        if self.done:
            raise BootstrapError(f"Bootstrap already {self.state.value}")
        on_success, on_failure = TRANSITIONS[self.state]
        self.state = on_success if succeeded else on_failure
        self.history.append(self.state)
        return self.state

    @classmethod
    def simulate(cls, outcomes: Iterable[bool]) -> BootstrapMachine:
        """Replay step outcomes until the machine stops."""
        machine = cls()
        for ok in outcomes:
            if machine.done:
                break
            machine.advance(ok)
        return machine


@dataclass(frozen=True)
class Toolchain:
    """How to install and select versions of one tool.

    Attributes:
        name:            Display name (``node``).
        install:         Install command template, ``{version}`` substituted.
        select:          Select command template for an installed version.
        env_var:         Variable exporting the resolved version.
        pin_file:        Project-local version pin file, if the tool has one.
        default_version: Used when nothing is requested or pinned.
    """

    name: str
    install: str
    select: str
    env_var: str
    default_version: str
    pin_file: str | None = None

    def step_command(self, state: BootstrapState, version: str) -> str:
        if state is BootstrapState.INSTALLING:
            return self.install.format(version=version)
        if state is BootstrapState.FALLBACK:
            return self.select.format(version=version)
        raise BootstrapError(f"No command for terminal state {state.value}")


def emit_bootstrap(sh: ShellBuilder, toolchain: Toolchain, version: str) -> None:
    """Emit install → select → fail for a requested version."""
    logger.debug("Bootstrapping %s %s", toolchain.name, version)
    _emit_step(sh, toolchain, version, BootstrapMachine())
    sh.export(toolchain.env_var, version, echo=False)


def _emit_step(
    sh: ShellBuilder,
    toolchain: Toolchain,
    version: str,
    machine: BootstrapMachine,
) -> None:
    state = machine.state
    command = toolchain.step_command(state, version)
    # Both tiers are non-fatal; the status is branched on below
    sh.cmd(command, assert_=False, timing=state is BootstrapState.INSTALLING)

    with sh.if_(sh.failed()):
        on_failure = machine.advance(False)
        for message, ansi in WARNINGS[on_failure]:
            sh.echo(message.format(version=version), ansi=ansi)
        if machine.done:
            sh.cmd("false", echo=False, timing=False)
        else:
            _emit_step(sh, toolchain, version, machine)


def install_toolchain(
    sh: ShellBuilder,
    toolchain: Toolchain,
    version: str | None = None,
) -> None:
    """Bootstrap the requested version, else the pin file, else the default."""
    if version:
        emit_bootstrap(sh, toolchain, version)
        return

    if not toolchain.pin_file:
        emit_bootstrap(sh, toolchain, toolchain.default_version)
        return

    pin = toolchain.pin_file
    with sh.if_(f"[ -f {pin} ]"):
        sh.echo(f"Using {toolchain.name} version from {pin}", ansi="yellow")
        emit_bootstrap(sh, toolchain, f"$(cat {pin})")
    with sh.else_():
        emit_bootstrap(sh, toolchain, toolchain.default_version)
