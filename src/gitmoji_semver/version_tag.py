"""
Version tag recognition for gitmoji_semver.

A version tag is a Git tag named ``{prefix}{major}.{minor}.{patch}``,
for example ``v1.4.2``. Tags are compared by their numeric version, so
the "latest" tag is the highest version rather than the most recent one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from gitmoji_semver.grouping.changes import SemanticVersionAction


DEFAULT_TAG_PREFIX = "v"

_REF_PREFIXES = ("tag: ", "refs/tags/")


def normalize_tag_name(ref: str) -> str:
    """Reduce a full reference or log decoration to the bare tag name.

    ``refs/tags/v1.0.0`` and ``tag: v1.0.0`` both become ``v1.0.0``.
    """
    name = ref.strip()
    for prefix in _REF_PREFIXES:
        if name.startswith(prefix):
            name = name[len(prefix):]
    return name


def _pattern(prefix: str) -> "re.Pattern[str]":
    return re.compile(rf"^{re.escape(prefix)}(\d+)\.(\d+)\.(\d+)$")


def is_version_tag(ref: str, prefix: str = DEFAULT_TAG_PREFIX) -> bool:
    """Return True if ``ref`` names a version tag with the given prefix."""
    return _pattern(prefix).match(normalize_tag_name(ref)) is not None


@dataclass(frozen=True, order=True)
class VersionTag:
    """A version tag and the commit it points to.

    Instances order by ``version`` only.
    """

    version: Tuple[int, int, int]
    name: str = field(compare=False)
    commit: str = field(default="", compare=False)
    prefix: str = field(default=DEFAULT_TAG_PREFIX, compare=False)

    @classmethod
    def parse(
        cls, ref: str, commit: str = "", prefix: str = DEFAULT_TAG_PREFIX
    ) -> Optional["VersionTag"]:
        """Parse ``ref`` into a :class:`VersionTag`.

        Returns ``None`` if the name is not a version tag.
        """
        name = normalize_tag_name(ref)
        match = _pattern(prefix).match(name)
        if match is None:
            return None
        major, minor, patch = (int(part) for part in match.groups())
        return cls(version=(major, minor, patch), name=name, commit=commit, prefix=prefix)

    @property
    def version_string(self) -> str:
        return "{}.{}.{}".format(*self.version)

    def bump(self, action: "SemanticVersionAction") -> str:
        """Return the tag name of the version that follows ``action``."""
        from gitmoji_semver.grouping.changes import SemanticVersionAction

        major, minor, patch = self.version
        if action is SemanticVersionAction.INCREMENT_MAJOR:
            major, minor, patch = major + 1, 0, 0
        elif action is SemanticVersionAction.INCREMENT_MINOR:
            minor, patch = minor + 1, 0
        elif action is SemanticVersionAction.INCREMENT_PATCH:
            patch += 1
        return f"{self.prefix}{major}.{minor}.{patch}"

    def __str__(self) -> str:
        return self.name


def latest_version_tag(tags: Iterable[VersionTag]) -> Optional[VersionTag]:
    """Return the highest version among ``tags`` or ``None`` if empty."""
    return max(tags, default=None)
