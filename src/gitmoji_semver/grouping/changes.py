"""
Aggregation of classified commits into semantic-version changes.

:class:`Changes` groups the commits made since the last version tag into
the four :class:`~gitmoji_semver.grouping.gitmoji.Category` buckets and
derives the :class:`SemanticVersionAction` they call for.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Tuple, TYPE_CHECKING

from gitmoji_semver.grouping.gitmoji import Category, classify_message
from gitmoji_semver.version_tag import DEFAULT_TAG_PREFIX, is_version_tag

if TYPE_CHECKING:
    from gitmoji_semver.vcs.git_client import Commit


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class SemanticVersionAction(Enum):
    """Recommended change to the semantic version."""

    INCREMENT_MAJOR = "increment major version"
    INCREMENT_MINOR = "increment minor version"
    INCREMENT_PATCH = "increment patch version"
    NO_ACTION = "keep version"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Changes:
    """Commit messages since the last version tag, grouped by category.

    Attributes
    ----------
    major, minor, patch, other : Tuple[str, ...]
        Commit messages of each category, in the order they were supplied
        (newest first when built from Git history).
    """

    major: Tuple[str, ...] = ()
    minor: Tuple[str, ...] = ()
    patch: Tuple[str, ...] = ()
    other: Tuple[str, ...] = ()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_commits(
        cls, commits: Iterable["Commit"], tag_prefix: str = DEFAULT_TAG_PREFIX
    ) -> "Changes":
        """Build the aggregate from commits ordered newest first.

        Iteration stops at the first commit carrying a version tag; that
        commit and everything older is left out. Messages without a known
        marker end up in ``other``.
        """
        buckets: Dict[Category, List[str]] = {category: [] for category in Category}
        for commit in commits:
            if any(is_version_tag(tag, tag_prefix) for tag in commit.tags):
                logger.debug("Reached version tag at commit %s", commit.hash)
                break
            category = classify_message(commit.message)
            logger.debug("Commit %s classified as %s", commit.hash, category.value)
            buckets[category].append(commit.message)
        return cls(
            major=tuple(buckets[Category.MAJOR]),
            minor=tuple(buckets[Category.MINOR]),
            patch=tuple(buckets[Category.PATCH]),
            other=tuple(buckets[Category.OTHER]),
        )

    @classmethod
    def from_messages(cls, messages: Iterable[str]) -> "Changes":
        """Build the aggregate from bare commit messages without tags."""
        from gitmoji_semver.vcs.git_client import Commit

        return cls.from_commits(Commit(hash="", message=message) for message in messages)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def for_category(self, category: Category) -> Tuple[str, ...]:
        return getattr(self, category.value)

    @property
    def commit_count(self) -> int:
        """Total number of commits across all categories."""
        return len(self.major) + len(self.minor) + len(self.patch) + len(self.other)

    def is_empty(self) -> bool:
        return self.commit_count == 0

    def recommended_action(self) -> SemanticVersionAction:
        """Return the semantic-version action these changes call for.

        Major changes take precedence over minor ones, and minor over
        patch. ``other`` commits never affect the result.
        """
        if self.major:
            return SemanticVersionAction.INCREMENT_MAJOR
        if self.minor:
            return SemanticVersionAction.INCREMENT_MINOR
        if self.patch:
            return SemanticVersionAction.INCREMENT_PATCH
        return SemanticVersionAction.NO_ACTION

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render(self) -> str:
        """Render the changes as an indented, category-labelled listing.

        Every label is printed, including those of empty categories.
        Only the first line of each message is shown.
        """
        lines: List[str] = []
        for category in Category:
            lines.append(f"{category.value}:")
            for message in self.for_category(category):
                summary = message.strip().splitlines()[0] if message.strip() else ""
                lines.append(f"\t{summary}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
