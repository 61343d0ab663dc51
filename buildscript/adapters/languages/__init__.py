"""Language adapters — override records for the lifecycle template."""

from buildscript.adapters.languages.node import NODE_JS

__all__ = ["NODE_JS"]
