"""
Configuration loading for gitmoji_semver.

Provides a loader for the optional ``.gitmoji_semver.json`` file located
in the repository root. See :mod:`gitmoji_semver.config.loader` for
implementation details.
"""

from .loader import ConfigError, load_config  # noqa: F401
