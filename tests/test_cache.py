"""
Tests for the cache key builder.
"""

from buildscript.adapters.languages.node import NODE_JS
from buildscript.core.cache import slug
from buildscript.core.models.build_config import BuildConfig


class TestSlug:
    def test_format(self):
        assert slug("node_js", "6") == "cache--node_js--6"

    def test_extras(self):
        assert slug("node_js", "6", ["yarn"]) == "cache--node_js--6--yarn"

    def test_empty_extras_dropped(self):
        assert slug("node_js", "6", ["", "yarn"]) == "cache--node_js--6--yarn"

    def test_deterministic(self):
        assert slug("node_js", "6", ("yarn",)) == slug("node_js", "6", ("yarn",))

    def test_version_sensitive(self):
        for a, b in [("6", "7"), ("0.10", "0.1"), ("4.2", "4.2.1")]:
            assert slug("node_js", a, ("yarn",)) != slug("node_js", b, ("yarn",))

    def test_language_sensitive(self):
        assert slug("node_js", "6") != slug("generic", "6")


class TestAdapterSlug:
    def test_node_configured_version(self):
        assert NODE_JS.slug(BuildConfig(language="node", version="6")) == "cache--node_js--6"

    def test_node_default_version(self):
        assert NODE_JS.slug(BuildConfig(language="node")) == "cache--node_js--0.10"

    def test_node_yarn_extra(self):
        config = BuildConfig(language="node", version="6", cache=["yarn"])
        assert NODE_JS.slug(config) == "cache--node_js--6--yarn"

    def test_slug_without_compiling(self):
        # Pure: no builder involved, repeated calls agree
        config = BuildConfig(language="node", version="8")
        assert NODE_JS.slug(config) == NODE_JS.slug(config)
