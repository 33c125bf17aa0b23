"""
Git client implementation for gitmoji_semver.

This module reads commit history and version tags from a Git repository
by invoking the ``git`` binary. It is intentionally minimal and only
implements the read-only subset of features needed by the CLI. All
subprocess calls go through :meth:`GitClient._run` so that unit tests can
mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

from gitmoji_semver.version_tag import (
    DEFAULT_TAG_PREFIX,
    VersionTag,
    is_version_tag,
    latest_version_tag,
    normalize_tag_name,
)


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# Separators used in the ``git log`` format; neither can appear in a message.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = f"--format=%H{_FIELD_SEP}%D{_FIELD_SEP}%B{_RECORD_SEP}"


@dataclass(frozen=True)
class Commit:
    """Representation of a single commit in the repository history."""

    hash: str
    message: str
    tags: Tuple[str, ...] = ()

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        stripped = self.message.strip()
        return stripped.splitlines()[0] if stripped else ""

    def __str__(self) -> str:
        return f"{self.summary} - {self.short_hash}"


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class CommitSource(Protocol):
    """Anything that can list the commits made since the last version tag."""

    def fetch_commits_since(self, latest: Optional[VersionTag]) -> List[Commit]:
        ...


def parse_decorations(decorations: str) -> Tuple[str, ...]:
    """Extract tag names from a ``%D`` decoration string.

    ``HEAD -> main, tag: v1.0.0, origin/main`` yields ``("v1.0.0",)``.
    """
    tags = []
    for ref in decorations.split(","):
        ref = ref.strip()
        if ref.startswith("tag: "):
            tags.append(normalize_tag_name(ref))
    return tuple(tags)


class GitClient:
    """Read-only client for the history of a Git repository."""

    def __init__(
        self,
        repo_root: Path,
        tag_prefix: str = DEFAULT_TAG_PREFIX,
        no_merges: bool = False,
    ) -> None:
        self.repo_root = repo_root
        self.tag_prefix = tag_prefix
        self.no_merges = no_merges

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def is_repo(path: Path) -> bool:
        """Return True if the given path is the root of a Git repository."""
        return (path / ".git").exists()

    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` directory is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                # reached filesystem root
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is True,
            or if the ``git`` executable cannot be found.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid characters instead of failing
            )
        except FileNotFoundError as e:
            logger.error("Git executable not found: %s", e)
            raise GitError("The 'git' executable was not found on PATH") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def has_commits(self) -> bool:
        """Return True if ``HEAD`` points to a commit."""
        result = self._run(["rev-parse", "--verify", "--quiet", "HEAD"], check=False)
        return result.returncode == 0

    def get_commits(self, revision_range: str = "HEAD") -> List[Commit]:
        """List the commits in ``revision_range``, newest first.

        Parameters
        ----------
        revision_range : str
            Any range accepted by ``git log``, e.g. ``HEAD`` or ``v1.0.0..HEAD``.

        Returns
        -------
        List[Commit]
            Commits with their messages and the tags decorating them.

        Raises
        ------
        GitError
            If the log command fails.
        """
        args = ["log", "--decorate=short", _LOG_FORMAT]
        if self.no_merges:
            args.append("--no-merges")
        args.append(revision_range)
        result = self._run(args, check=True)

        commits = []
        for record in result.stdout.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record.strip():
                continue
            parts = record.split(_FIELD_SEP, 2)
            if len(parts) != 3:
                logger.debug("Skipping malformed log record: %r", record)
                continue
            sha, decorations, message = parts
            commits.append(
                Commit(
                    hash=sha.strip(),
                    message=message.rstrip(),
                    tags=parse_decorations(decorations),
                )
            )
        logger.debug("Read %d commit(s) from %s", len(commits), revision_range)
        return commits

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------
    def get_version_tags(self) -> List[VersionTag]:
        """Return every version tag in the repository with its target commit.

        Both annotated and lightweight tags are resolved to the commit they
        point at.
        """
        result = self._run(["tag", "--list"], check=True)
        tags = []
        for line in result.stdout.splitlines():
            name = line.strip()
            if not name:
                continue
            parsed = VersionTag.parse(name, prefix=self.tag_prefix)
            if parsed is None:
                continue
            target = self._run(["rev-list", "-n", "1", name], check=True).stdout.strip()
            tags.append(replace(parsed, commit=target))
        return tags

    def get_latest_version_tag(self) -> Optional[VersionTag]:
        """Return the highest version tag, or ``None`` if there is none."""
        return latest_version_tag(self.get_version_tags())

    def fetch_commits_since(self, latest: Optional[VersionTag]) -> List[Commit]:
        """Return the commits reachable from ``HEAD`` but not from ``latest``.

        With ``latest`` set to ``None`` the whole history is returned. Inside
        the range, version-tag decorations are dropped: ``git log`` orders by
        date, so a merged branch may list an older release (a hotfix tag)
        before commits that are newer than ``latest``, and none of those
        commits marks the boundary.

        Raises
        ------
        GitError
            If the repository has no commits or a Git command fails.
        """
        if not self.has_commits():
            raise GitError("Repository has no commits")
        if latest is None:
            logger.debug("No version tag found; reading the full history")
            return self.get_commits("HEAD")
        logger.debug("Latest version tag is %s at %s", latest.name, latest.commit)
        return [
            replace(
                commit,
                tags=tuple(t for t in commit.tags if not is_version_tag(t, self.tag_prefix)),
            )
            for commit in self.get_commits(f"{latest.commit}..HEAD")
        ]

    def fetch_commits_since_last_version(self) -> List[Commit]:
        """Return the commits made after the latest version tag.

        If the repository has no version tag, the whole history reachable
        from ``HEAD`` is returned.
        """
        return self.fetch_commits_since(self.get_latest_version_tag())
