"""
Control-flow builder — nested if/else and fold blocks over the emitter.

Blocks are tracked on an explicit stack. Whatever is emitted goes
into the innermost open block; closing a block renders it and hands
the result to its parent. Usage::

    sh = ShellBuilder()
    with sh.if_("[ -f package.json ]"):
        sh.cmd("npm test")
    with sh.else_():
        sh.cmd("make test")
    body = sh.compile()

Misuse (an ``else`` without its ``if``, appending to a closed block,
compiling with blocks still open) raises ``BuilderError`` immediately:
it is a bug in the calling adapter, never a build-time condition.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from buildscript.core.models.directive import (
    Command,
    CommandOptions,
    Directive,
    Echo,
    Export,
    Raw,
)
from buildscript.core.shell import emitter
from buildscript.core.shell.policy import fold_begin, fold_end
from buildscript.core.shell.prelude import RESULT_VAR

logger = logging.getLogger(__name__)

_INDENT = "  "


class BuilderError(RuntimeError):
    """Raised when the builder is used incorrectly."""


def _indent(lines: list[str]) -> list[str]:
    return [f"{_INDENT}{line}" if line else line for line in lines]


@dataclass
class Conditional:
    """A closed ``if`` with an optional ``else`` branch."""

    test: str
    body: list[str]
    orelse: list[str] | None = None
    else_opened: bool = False

    def render(self) -> list[str]:
        lines = [f"if {self.test}; then", *_indent(self.body or [":"])]
        if self.orelse is not None:
            lines += ["else", *_indent(self.orelse or [":"])]
        lines.append("fi")
        return lines


@dataclass
class Block:
    """A nesting frame; immutable once closed."""

    kind: str                       # "root", "if", "else" or "fold"
    header: str = ""                # condition or fold name
    nodes: list[str | Conditional] = field(default_factory=list)
    closed: bool = False

    def append(self, node: str | Conditional) -> None:
        if self.closed:
            raise BuilderError(f"Cannot append to closed {self.kind} block {self.header!r}")
        self.nodes.append(node)

    def close(self) -> None:
        if self.closed:
            raise BuilderError(f"{self.kind} block {self.header!r} is already closed")
        self.closed = True

    @property
    def last(self) -> str | Conditional | None:
        return self.nodes[-1] if self.nodes else None

    def lines(self) -> list[str]:
        out: list[str] = []
        for node in self.nodes:
            if isinstance(node, Conditional):
                out.extend(node.render())
            else:
                out.append(node)
        return out


class ShellBuilder:
    """Stateful script builder with an explicit block stack."""

    def __init__(self) -> None:
        self._stack: list[Block] = [Block("root")]
        self._timers = 0

    @property
    def current(self) -> Block:
        """The innermost open block."""
        return self._stack[-1]

    @property
    def depth(self) -> int:
        return len(self._stack) - 1

    # ── Directives ──────────────────────────────────────────────

    def emit(self, directive: Directive) -> None:
        """Render a directive into the innermost open block."""
        timer_id = 0
        if isinstance(directive, Command) and directive.options.timing:
            self._timers += 1
            timer_id = self._timers
        for line in emitter.render(directive, timer_id):
            self.current.append(line)

    def cmd(
        self,
        command: str,
        *,
        echo: bool = True,
        assert_: bool = True,
        retry: bool = False,
        timing: bool = True,
        fold: str | None = None,
    ) -> None:
        """Run a command under the given policy."""
        options = CommandOptions(
            echo=echo, assert_=assert_, retry=retry, timing=timing, fold=fold,
        )
        self.emit(Command(command, options))

    def export(self, name: str | None, value: str, *, echo: bool = True) -> None:
        self.emit(Export(name, value, echo=echo))

    def echo(self, message: str = "", *, ansi: str | None = None) -> None:
        self.emit(Echo(message, ansi=ansi))

    def raw(self, text: str) -> None:
        self.emit(Raw(text))

    def failed(self) -> str:
        """Shell test that is true when the last command failed."""
        return f'[ "${RESULT_VAR}" -ne 0 ]'

    def prepend_path(self, path: str) -> None:
        """Prepend to PATH unless the segment is already there."""
        guard = f'[ -n "$(printf \'%s\' ":$PATH:" | grep -vF ":{path}:")" ]'
        with self.if_(guard):
            self.export("PATH", f"{path}:$PATH")

    # ── Blocks ──────────────────────────────────────────────────

    @contextmanager
    def if_(self, test: str) -> Iterator[Block]:
        block = self._open(Block("if", header=test))
        yield block
        self._close(block)
        self.current.append(Conditional(test, block.lines()))

    @contextmanager
    def else_(self) -> Iterator[Block]:
        conditional = self.current.last
        if not isinstance(conditional, Conditional) or conditional.else_opened:
            raise BuilderError("else must immediately follow its if at the same depth")
        conditional.else_opened = True
        block = self._open(Block("else", header=conditional.test))
        yield block
        self._close(block)
        conditional.orelse = block.lines()

    @contextmanager
    def fold(self, name: str) -> Iterator[Block]:
        if not name:
            raise BuilderError("fold requires a name")
        block = self._open(Block("fold", header=name))
        yield block
        self._close(block)
        for line in [fold_begin(name), *block.lines(), fold_end(name)]:
            self.current.append(line)

    def _open(self, block: Block) -> Block:
        # Opening inside a closed root fails here, not at compile time
        if self.current.closed:
            raise BuilderError("Cannot open a block after compile()")
        self._stack.append(block)
        logger.debug("open %s %r at depth %d", block.kind, block.header, self.depth)
        return block

    def _close(self, block: Block) -> None:
        if self.current is not block:
            raise BuilderError(
                f"Malformed nesting: closing {block.kind} {block.header!r} "
                f"while {self.current.kind} {self.current.header!r} is open"
            )
        block.close()
        self._stack.pop()
        logger.debug("close %s %r", block.kind, block.header)

    # ── Output ──────────────────────────────────────────────────

    def compile(self) -> str:
        """Close the root block and return the script body.

        Raises:
            BuilderError: If blocks are still open or compile() ran before.
        """
        if self.depth:
            still_open = ", ".join(f"{b.kind} {b.header!r}" for b in self._stack[1:])
            raise BuilderError(f"Unclosed block(s): {still_open}")
        root = self.current
        root.close()
        return "\n".join(root.lines()) + "\n"
