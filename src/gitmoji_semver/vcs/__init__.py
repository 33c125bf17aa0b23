"""
Version control system (VCS) integration.

This package contains the Git client used as the commit source: it reads
commit history and version tags from a repository so that the commits
made since the last release can be classified.
"""

from .git_client import Commit, CommitSource, GitClient, GitError  # noqa: F401
