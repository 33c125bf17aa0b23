"""
Top-level package for gitmoji_semver.

This package exposes the main CLI entry point via the
``gitmoji_semver.cli`` module, and the classification engine via
``gitmoji_semver.grouping``.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
