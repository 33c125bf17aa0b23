"""
Grouping logic for commit history.

This package classifies commit messages by their Gitmoji marker and
aggregates them into semantic-version categories. See
:mod:`gitmoji_semver.grouping.gitmoji` and
:mod:`gitmoji_semver.grouping.changes` for details.
"""

from .changes import Changes, SemanticVersionAction  # noqa: F401
from .gitmoji import Category, classify_message  # noqa: F401
