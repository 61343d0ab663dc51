"""
Tests for the Node.js adapter — compiled script content per phase.
"""

import pytest

from buildscript.adapters.languages import node
from buildscript.adapters.languages.node import NODE_JS
from buildscript.core.lifecycle import Phase, compile_script
from buildscript.core.models.build_config import BuildConfig
from buildscript.core.shell.builder import ShellBuilder


def _phase(phase: Phase, **config) -> str:
    sh = ShellBuilder()
    NODE_JS.hook(phase)(sh, BuildConfig(language="node_js", **config))
    return sh.compile()


# ═══════════════════════════════════════════════════════════════════
#  export
# ═══════════════════════════════════════════════════════════════════


class TestExport:
    def test_version_exported_when_given(self):
        body = _phase(Phase.EXPORT, version="6")
        assert "export NODE_VERSION=6" in body
        assert "export BUILD_LANGUAGE=node_js" in body

    def test_no_placeholder_when_unset(self):
        assert "NODE_VERSION" not in _phase(Phase.EXPORT)


# ═══════════════════════════════════════════════════════════════════
#  setup
# ═══════════════════════════════════════════════════════════════════


class TestSetup:
    def test_path_prepended_first(self):
        body = _phase(Phase.SETUP, version="6")
        assert body.index("./node_modules/.bin") < body.index("nvm install 6")

    def test_configured_version_bootstrapped(self):
        body = _phase(Phase.SETUP, version="6")
        assert "nvm install 6" in body
        assert "nvm use 6" in body
        assert ".nvmrc" not in body

    def test_unset_version_reads_nvmrc(self):
        body = _phase(Phase.SETUP)
        assert "if [ -f .nvmrc ]; then" in body
        assert "nvm install $(cat .nvmrc)" in body
        assert f"nvm install {node.DEFAULT_VERSION}" in body

    def test_npm_tuning(self):
        body = _phase(Phase.SETUP, version="6")
        assert "npm config set spin false" in body
        assert "npm config set progress false" in body
        assert 'command -v sw_vers' in body

    def test_no_nvm_update_without_app_host(self):
        assert "Updating nvm" not in _phase(Phase.SETUP, version="6")

    def test_nvm_update_with_app_host(self):
        body = _phase(Phase.SETUP, version="6", app_host="files.example.test")
        assert f"Updating nvm to v{node.NVM_VERSION}" in body
        assert "https://files.example.test/files/nvm.sh" in body
        assert body.index("Updating nvm") < body.index("nvm install 6")

    @pytest.mark.parametrize("version, disabled", [("0.6", True), ("0.6.21", True), ("0.8", False), ("6", False)])
    def test_strict_ssl(self, version, disabled):
        body = _phase(Phase.SETUP, version=version)
        assert ("npm conf set strict-ssl false" in body) is disabled

    def test_npm_cache_proxy(self):
        body = _phase(Phase.SETUP, version="6", cache=["npm"], hosts={"npm_cache": "http://proxy:3128"})
        assert "npm config set proxy http://proxy:3128" in body

    def test_npm_cache_without_host(self):
        body = _phase(Phase.SETUP, version="6", cache=["npm"])
        assert "npm config set proxy" not in body

    def test_yarn_cache_fold(self):
        body = _phase(Phase.SETUP, version="6", cache=["yarn"])
        assert "build_fold begin cache.yarn" in body
        assert "build_fold end cache.yarn" in body


# ═══════════════════════════════════════════════════════════════════
#  announce
# ═══════════════════════════════════════════════════════════════════


class TestAnnounce:
    def test_versions(self):
        body = _phase(Phase.ANNOUNCE, version="0.10")
        for tool in ("node", "npm", "nvm"):
            assert f"\n{tool} --version\n" in body

    def test_cxx11_probe_for_new_node(self):
        body = _phase(Phase.ANNOUNCE, version="6")
        assert "-std=c++11" in body
        assert node.CXX11_WARNING in body
        assert "rm -f /tmp/foo-$$.cpp" in body

    def test_probe_only_warns(self):
        lines = _phase(Phase.ANNOUNCE, version="6").splitlines()
        start = next(i for i, line in enumerate(lines) if "-std=c++11" in line)
        end = lines.index("fi", start)
        assert not any("build_assert" in line for line in lines[start:end])

    @pytest.mark.parametrize("version", ["0.10", "0.12", "lts/*", None])
    def test_no_probe_for_old_or_symbolic(self, version):
        assert "-std=c++11" not in _phase(Phase.ANNOUNCE, version=version)


# ═══════════════════════════════════════════════════════════════════
#  install / script
# ═══════════════════════════════════════════════════════════════════


class TestInstall:
    def test_branches_on_manifest_and_lockfile(self):
        body = _phase(Phase.INSTALL)
        assert body.startswith("if [ -f package.json ]; then\n  if [ -f yarn.lock ]; then")

    def test_npm_install_retried_in_fold(self):
        body = _phase(Phase.INSTALL, npm_args="--production")
        assert "build_retry 'npm install --production'" in body
        assert "build_fold begin install" in body

    def test_npm_install_without_args(self):
        assert "build_retry 'npm install'" in _phase(Phase.INSTALL)

    def test_yarn_retried(self):
        assert "build_retry yarn" in _phase(Phase.INSTALL)

    def test_yarn_requirement_check(self):
        body = _phase(Phase.INSTALL)
        assert f"$(build_vers2int {node.YARN_REQUIRED_NODE_VERSION})" in body
        assert "does not meet requirement for yarn" in body

    def test_yarn_installed_when_missing(self):
        body = _phase(Phase.INSTALL)
        assert '[ -z "$(command -v yarn)" ]' in body
        assert "curl -o- -L https://yarnpkg.com/install.sh | bash" in body
        assert "export PATH=$HOME/.yarn/bin:$PATH" in body

    def test_no_manifest_branch_installs_nothing(self):
        lines = _phase(Phase.INSTALL).splitlines()
        else_at = lines.index("else")
        tail = "\n".join(lines[else_at:])
        assert "No package.json found" in tail
        assert "npm install" not in tail


class TestScript:
    def test_npm_test_or_make(self):
        body = _phase(Phase.SCRIPT)
        lines = body.splitlines()
        assert lines[0] == "if [ -f package.json ]; then"
        else_at = lines.index("else")
        assert "  npm test" in lines[:else_at]
        assert "  make test" in lines[else_at:]


# ═══════════════════════════════════════════════════════════════════
#  Whole script
# ═══════════════════════════════════════════════════════════════════


class TestCompileNode:
    def test_cache_metadata(self):
        script = compile_script(BuildConfig(language="node", version="6", cache=["yarn"]), NODE_JS)
        assert script.cache_slug == "cache--node_js--6--yarn"
        assert script.cache_directories == (node.YARN_CACHE_DIR,)

    def test_setup_precedes_install(self):
        text = compile_script(BuildConfig(language="node", version="6"), NODE_JS).text
        assert text.index("nvm install 6") < text.index("build_retry 'npm install'")
        assert text.index("build_retry 'npm install'") < text.index("npm test")
