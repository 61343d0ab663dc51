"""
Node.js adapter — nvm bootstrap, npm/yarn installs, npm test.

Overrides every script phase:
    export   — NODE_VERSION, only when a version was configured
    setup    — PATH, nvm self-update, node bootstrap, npm tuning, caches
    announce — C++11 probe (node >= 3), tool versions
    install  — yarn when yarn.lock is present and node is new enough, else npm
    script   — npm test, or ``make test`` without a package.json
"""

from __future__ import annotations

import logging

from buildscript.adapters.base import LanguageAdapter
from buildscript.core.bootstrap import Toolchain, install_toolchain
from buildscript.core.lifecycle import (
    GENERIC_SCRIPT,
    Phase,
    default_export,
    default_setup,
)
from buildscript.core.models.build_config import BuildConfig
from buildscript.core.shell.builder import ShellBuilder

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "0.10"

# Matches the nvm.sh served from <app_host>/files/
NVM_VERSION = "0.32.0"

YARN_REQUIRED_NODE_VERSION = "4"

YARN_CACHE_DIR = "$HOME/.yarn-cache"

NVM = Toolchain(
    name="nodejs",
    install="nvm install {version}",
    select="nvm use {version}",
    env_var="NODE_VERSION",
    default_version=DEFAULT_VERSION,
    pin_file=".nvmrc",
)

CXX11_WARNING = (
    "Starting with io.js 3 and Node.js 4, building native extensions requires "
    "C++11-compatible compiler, which seems unavailable on this VM. Please read "
    "https://docs.travis-ci.com/user/languages/javascript-with-nodejs"
    "#Node.js-v4-(or-io.js-v3)-compiler-requirements."
)

_CXX11_PROBE = "/tmp/foo-$$.cpp"


# ── Phases ──────────────────────────────────────────────────────


def export(sh: ShellBuilder, config: BuildConfig) -> None:
    default_export(sh, config)
    if config.version_given:
        sh.export(NVM.env_var, config.version, echo=False)


def setup(sh: ShellBuilder, config: BuildConfig) -> None:
    default_setup(sh, config)
    sh.prepend_path("./node_modules/.bin")
    _update_nvm(sh, config)
    install_toolchain(sh, NVM, config.version if config.version_given else None)
    _npm_disable_prefix(sh)
    sh.cmd("npm config set spin false", echo=False, timing=False)
    sh.cmd("npm config set progress false", echo=False, timing=False)
    if not _npm_strict_ssl(config):
        _npm_disable_strict_ssl(sh)
    if config.cache_enabled("npm"):
        _setup_npm_cache(sh, config)
    if config.cache_enabled("yarn"):
        with sh.fold("cache.yarn"):
            sh.echo(f"Caching {YARN_CACHE_DIR}")


def announce(sh: ShellBuilder, config: BuildConfig) -> None:
    if _iojs_3_plus(config):
        sh.cmd(
            "printf '%s\\n' '#include <array>' "
            "'std::array<int, 1> arr = {0}; int main() {return 0;}' "
            f"> {_CXX11_PROBE}",
            echo=False,
        )
        with sh.if_(
            f"! (${{CXX:-c++}} -std=c++11 -o /dev/null {_CXX11_PROBE} >/dev/null 2>&1 "
            f"|| g++ -std=c++11 -o /dev/null {_CXX11_PROBE} >/dev/null 2>&1)"
        ):
            sh.echo(CXX11_WARNING, ansi="yellow")
        sh.cmd(f"rm -f {_CXX11_PROBE}", echo=False)
    sh.cmd("node --version")
    sh.cmd("npm --version")
    sh.cmd("nvm --version")


def install(sh: ShellBuilder, config: BuildConfig) -> None:
    with sh.if_("[ -f package.json ]"):
        with sh.if_("[ -f yarn.lock ]"):
            with sh.if_(
                "[ \"$(build_vers2int \"$(node --version | tr -d 'v')\")\" "
                f"-lt \"$(build_vers2int {YARN_REQUIRED_NODE_VERSION})\" ]"
            ):
                sh.echo(
                    "Node.js version $(node --version) does not meet requirement "
                    f"for yarn. Please use Node.js {YARN_REQUIRED_NODE_VERSION} or later.",
                    ansi="red",
                )
                _npm_install(sh, config.npm_args)
            with sh.else_():
                with sh.if_('[ -z "$(command -v yarn)" ]'):
                    _install_yarn(sh)
                sh.cmd("yarn", retry=True, fold="install")
        with sh.else_():
            _npm_install(sh, config.npm_args)
    with sh.else_():
        sh.echo("No package.json found, skipping dependency installation")


def script(sh: ShellBuilder, config: BuildConfig) -> None:
    with sh.if_("[ -f package.json ]"):
        sh.cmd("npm test")
    with sh.else_():
        sh.cmd(GENERIC_SCRIPT)


def slug_extra(config: BuildConfig) -> tuple[str, ...]:
    return ("yarn",) if config.cache_enabled("yarn") else ()


def cache_directories(config: BuildConfig) -> tuple[str, ...]:
    return (YARN_CACHE_DIR,) if config.cache_enabled("yarn") else ()


# ── Helpers ─────────────────────────────────────────────────────


def _major(config: BuildConfig) -> int | None:
    head = (config.version or "").split(".")[0]
    return int(head) if head.isdigit() else None


def _iojs_3_plus(config: BuildConfig) -> bool:
    major = _major(config)
    return major is not None and major >= 3


def _npm_strict_ssl(config: BuildConfig) -> bool:
    """node 0.6 ships an npm that cannot verify the registry certificate."""
    return (config.version or "").split(".")[:2] != ["0", "6"]


def _update_nvm(sh: ShellBuilder, config: BuildConfig) -> None:
    if not config.app_host:
        logger.debug("No app host configured; skipping nvm self-update")
        return
    location = "$HOME/.nvm/nvm.sh"
    with sh.if_(
        f'[ "$(build_vers2int "$(nvm --version)")" -lt "$(build_vers2int {NVM_VERSION})" ]'
    ):
        sh.echo(f"Updating nvm to v{NVM_VERSION}", ansi="yellow")
        sh.raw("mkdir -p $HOME/.nvm")
        sh.raw(f"curl -s -o {location} https://{config.app_host}/files/nvm.sh")
        sh.raw(f". {location}")


def _npm_disable_prefix(sh: ShellBuilder) -> None:
    with sh.if_('[ -n "$(command -v sw_vers)" ] && [ -f "$HOME/.npmrc" ]'):
        sh.cmd("npm config delete prefix")


def _npm_disable_strict_ssl(sh: ShellBuilder) -> None:
    sh.echo("### Disabling strict SSL ###", ansi="red")
    sh.cmd("npm conf set strict-ssl false")


def _setup_npm_cache(sh: ShellBuilder, config: BuildConfig) -> None:
    proxy = config.hosts.get("npm_cache")
    if not proxy:
        return
    sh.cmd("npm config set registry http://registry.npmjs.org/", timing=False)
    sh.cmd(f"npm config set proxy {proxy}", timing=False)


def _npm_install(sh: ShellBuilder, args: str) -> None:
    sh.cmd(f"npm install {args}".rstrip(), retry=True, fold="install")


def _install_yarn(sh: ShellBuilder) -> None:
    with sh.if_('[ -z "$(command -v gpg)" ]'):
        sh.export("YARN_GPG", "no")
    sh.echo("Installing yarn", ansi="green")
    sh.cmd("curl -o- -L https://yarnpkg.com/install.sh | bash")
    sh.echo("Setting up \\$PATH", ansi="green")
    sh.export("PATH", "$HOME/.yarn/bin:$PATH")


NODE_JS = LanguageAdapter(
    name="node_js",
    aliases=("node", "nodejs", "javascript"),
    hooks={
        Phase.EXPORT: export,
        Phase.SETUP: setup,
        Phase.ANNOUNCE: announce,
        Phase.INSTALL: install,
        Phase.SCRIPT: script,
    },
    default_version=DEFAULT_VERSION,
    slug_extra=slug_extra,
    directories=cache_directories,
)
