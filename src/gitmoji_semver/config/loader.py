"""
Configuration loader for gitmoji_semver.

The tool reads an optional JSON configuration file named
``.gitmoji_semver.json`` located in the repository root. When the file
is absent the defaults are used. This loader validates the structure of
the configuration and returns a dictionary of settings.

If the configuration file is malformed, contains unknown keys, or has
fields of the wrong type, a :class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from gitmoji_semver.version_tag import DEFAULT_TAG_PREFIX


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings in environments where
# the root logger is not configured. Records propagate to the handlers the
# CLI installs.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONFIG_FILE_NAME = ".gitmoji_semver.json"

DEFAULTS: Dict[str, Any] = {
    "tag_prefix": DEFAULT_TAG_PREFIX,
    "no_merges": False,
}


class ConfigError(Exception):
    """Raised when the gitmoji_semver configuration file is invalid."""

    pass


def load_config(repo_root: Path) -> Dict[str, Any]:
    """Load the configuration from ``repo_root`` and return it.

    Args:
        repo_root: Root directory of the Git repository being inspected.

    Returns:
        A dictionary containing the validated configuration with keys:
        - tag_prefix (str): Prefix of version tags, ``"v"`` by default
        - no_merges (bool): Leave merge commits out of the history

    Raises:
        ConfigError: If the configuration file exists but is malformed or invalid.
    """
    config_path = repo_root / CONFIG_FILE_NAME
    config = dict(DEFAULTS)

    if not config_path.exists():
        logger.debug("No configuration file at %s; using defaults", config_path)
        return config

    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")

    unknown = sorted(key for key in data if key not in DEFAULTS)
    if unknown:
        logger.error("Configuration file has unknown keys: %s", unknown)
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    if "tag_prefix" in data and not isinstance(data["tag_prefix"], str):
        raise ConfigError("'tag_prefix' must be a string")
    if "no_merges" in data and not isinstance(data["no_merges"], bool):
        raise ConfigError("'no_merges' must be a boolean")

    config.update(data)
    logger.debug("Loaded configuration from: %s", config_path)
    logger.debug("Configuration data: %s", config)
    return config
