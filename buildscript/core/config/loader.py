"""
Configuration loader — reads .build.yml into a BuildConfig.

This is the primary entry point for loading build configuration.
It reads YAML, validates against the Pydantic model, and returns a
frozen BuildConfig. Overrides (CLI flags, the app host resolved from
the environment) are merged here, once, before compilation starts.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from buildscript.core.models.build_config import BuildConfig

logger = logging.getLogger(__name__)

# Default config filename
BUILD_CONFIG_FILE = ".build.yml"


class ConfigError(Exception):
    """Raised when build configuration is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for .build.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to .build.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / BUILD_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def read_config_data(path: Path) -> dict[str, Any]:
    """Read the raw mapping from a config file.

    Raises:
        ConfigError: If the file is missing, unreadable, or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading build config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "build" key or be flat
    if isinstance(data.get("build"), dict):
        data = data["build"]
    return data


def build_config(data: dict[str, Any], **overrides: Any) -> BuildConfig:
    """Validate raw data plus overrides into a BuildConfig.

    Overrides whose value is None are ignored, so unset CLI flags
    never clobber file values.

    Raises:
        ConfigError: If validation fails.
    """
    merged = dict(data)
    for key, value in overrides.items():
        if value is not None:
            if key == "version":
                # An explicit version beats any legacy key in the file
                merged.pop("node_js", None)
                merged.pop("nodejs", None)
            merged[key] = value

    try:
        config = BuildConfig.model_validate(merged)
    except Exception as e:
        raise ConfigError(f"Invalid build configuration: {e}") from e

    logger.info(
        "Loaded build config: language=%s version=%s",
        config.language,
        config.version or "(unset)",
    )
    return config


def load_build_config(path: Path | None = None, **overrides: Any) -> BuildConfig:
    """Load and validate build configuration.

    Args:
        path: Explicit path to .build.yml. If None, searches upward;
            a missing file is only an error when no language override
            was given either.
        overrides: Field values taking precedence over the file.

    Returns:
        Validated, frozen BuildConfig.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        if overrides.get("language") is None:
            raise ConfigError(
                f"No {BUILD_CONFIG_FILE} found. "
                "Create one, specify --config, or pass --language."
            )
        return build_config({}, **overrides)

    return build_config(read_config_data(path), **overrides)
