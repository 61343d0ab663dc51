"""
Directive models — units of intended shell behavior.

A directive is what an adapter asks for; the emitter decides what
shell text it becomes. Options are resolved when the directive is
created and frozen from then on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Ansi(StrEnum):
    """Colour palette for echo output."""

    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"

    @property
    def code(self) -> str:
        return _ANSI_CODES[self]

    @classmethod
    def lookup(cls, name: str | None) -> Ansi | None:
        """Resolve a colour tag; unknown tags mean no colour."""
        if not name:
            return None
        try:
            return cls(str(name).lower())
        except ValueError:
            return None


_ANSI_CODES = {
    Ansi.RED: "31;1",
    Ansi.GREEN: "32;1",
    Ansi.YELLOW: "33;1",
    Ansi.BLUE: "34;1",
    Ansi.MAGENTA: "35;1",
    Ansi.CYAN: "36;1",
}


class CommandOptions(BaseModel):
    """Per-command policy: echo, assertion, retry, timing, fold.

    ``assert`` is a keyword, so the field is ``assert_`` and the
    alias ``assert`` is accepted on construction.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    echo: bool = True
    assert_: bool = Field(default=True, alias="assert")
    retry: bool = False
    timing: bool = True
    fold: str | None = None


@dataclass(frozen=True)
class Command:
    """Run a command under a policy."""

    command: str
    options: CommandOptions = field(default_factory=CommandOptions)


@dataclass(frozen=True)
class Export:
    """``export NAME=VALUE``; a missing name makes this a no-op."""

    name: str | None
    value: str
    echo: bool = True


@dataclass(frozen=True)
class Echo:
    """Print a message, optionally coloured."""

    message: str
    ansi: str | None = None


@dataclass(frozen=True)
class Raw:
    """Shell text inserted verbatim."""

    text: str


Directive = Command | Export | Echo | Raw
