"""buildscript — compile CI build descriptions into POSIX shell scripts."""

__version__ = "0.1.0"
