"""
Shared test fixtures and configuration.
"""

import os
import stat
import subprocess
from pathlib import Path

import pytest

from buildscript.core.shell.builder import ShellBuilder
from buildscript.core.shell.prelude import PRELUDE


@pytest.fixture
def sh() -> ShellBuilder:
    """A fresh builder."""
    return ShellBuilder()


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Empty project checkout the script runs in."""
    work = tmp_path / "work"
    work.mkdir()
    return work


@pytest.fixture
def stub_bin(tmp_path: Path):
    """Factory writing stub executables that log their arguments.

    Each stub appends ``<name> <args>`` to $STUB_LOG, then runs the
    optional shell ``body`` (default: ``exit 0``).
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    def make(name: str, body: str = "exit 0") -> Path:
        path = bin_dir / name
        path.write_text(f'#!/bin/sh\necho "{name} $*" >> "$STUB_LOG"\n{body}\n')
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    make.dir = bin_dir
    return make


@pytest.fixture
def node_stubs(stub_bin):
    """Stubs for everything a node build script calls."""
    stub_bin(
        "nvm",
        'case "$1" in\n'
        '  install) exit "${NVM_INSTALL_STATUS:-0}" ;;\n'
        '  use) exit "${NVM_USE_STATUS:-0}" ;;\n'
        "  --version) echo 0.32.0 ;;\n"
        "esac\n"
        "exit 0",
    )
    stub_bin("node", 'if [ "$1" = "--version" ]; then echo v6.9.1; fi\nexit 0')
    stub_bin("npm", 'if [ "$1" = "--version" ]; then echo 3.10.8; fi\nexit 0')
    stub_bin("make")
    return stub_bin


@pytest.fixture
def run_script(tmp_path: Path, stub_bin):
    """Run a script body (or full script) with /bin/sh.

    Returns (completed_process, stub_log_lines).
    """

    def run(text: str, cwd: Path, env: dict | None = None):
        if not text.startswith("#!"):
            text = f"{PRELUDE}\n{text}"
        script = tmp_path / "build.sh"
        script.write_text(text)
        log = tmp_path / "stub.log"
        log.write_text("")
        run_env = {
            "PATH": f"{stub_bin.dir}{os.pathsep}{os.environ.get('PATH', '')}",
            "HOME": str(tmp_path),
            "STUB_LOG": str(log),
            "BUILD_RETRY_SLEEP": "0",
        }
        run_env.update(env or {})
        proc = subprocess.run(
            ["sh", str(script)],
            cwd=cwd,
            env=run_env,
            capture_output=True,
            text=True,
            timeout=60,
        )
        return proc, log.read_text().splitlines()

    return run
