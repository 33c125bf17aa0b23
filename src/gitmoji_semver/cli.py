"""
Command line interface for the gitmoji_semver tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``gitmoji-semver`` command. It locates the
repository, loads the configuration, reads the commits made since the
last version tag, classifies them and reports the recommended semantic
version action.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click

from gitmoji_semver import __version__
from gitmoji_semver.config.loader import ConfigError, load_config
from gitmoji_semver.grouping.changes import Changes, SemanticVersionAction
from gitmoji_semver.vcs.git_client import CommitSource, GitClient, GitError
from gitmoji_semver.version_tag import VersionTag

# Create a module-level logger. The null handler keeps it silent until the
# CLI configures the root logger; records propagate to the root from then on.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}", err=False)


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def print_report(
    changes: Changes,
    action: SemanticVersionAction,
    latest_tag: Optional[VersionTag],
) -> None:
    """Print the categorized changes and the recommended action."""
    click.echo(f"Latest version tag: {latest_tag.name if latest_tag else 'none'}")
    click.echo(f"Changes in the repository:\n{changes}")
    click.echo(f"Action for semantic version ➡️ {action}")
    if latest_tag is not None:
        click.echo(f"Next version ➡️ {latest_tag.bump(action)}")


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def detect_repo(start_dir: Path) -> Path:
    """Return the root of the Git repository containing ``start_dir``.

    Raises
    ------
    SystemExit
        With code EXIT_NO_REPO if no repository is found.
    """
    repo_root = GitClient.find_repo_root(start_dir)
    if repo_root is None:
        print_error(f"No Git repository found in {start_dir} or its parent directories.")
        raise SystemExit(EXIT_NO_REPO)
    logger.debug("Found Git repository at: %s", repo_root)
    return repo_root


def evaluate(
    source: CommitSource, latest_tag: Optional[VersionTag], tag_prefix: str
) -> Changes:
    """Fetch the commits made after ``latest_tag`` and aggregate them."""
    commits = source.fetch_commits_since(latest_tag)
    logger.debug("Classifying %d commit(s)", len(commits))
    return Changes.from_commits(commits, tag_prefix=tag_prefix)


@click.command()
@click.option(
    "--repo",
    "repo",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Repository to inspect (defaults to the current directory).",
)
@click.option("--tag-prefix", help="Prefix of version tags (default: 'v').")
@click.option("--no-merges", is_flag=True, help="Ignore merge commits.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="gitmoji-semver")
def main(
    repo: Optional[Path],
    tag_prefix: Optional[str],
    no_merges: bool,
    verbose: bool,
) -> None:
    """Recommend a semantic version bump from Gitmoji commit history.

    Commits made since the latest version tag are grouped into major,
    minor, patch and other changes according to their leading emoji.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    ctx = click.get_current_context(silent=True)

    try:
        path = repo if repo is not None else Path.cwd()
        click.echo(f"Current directory: {path}")

        try:
            repo_root = detect_repo(path)
        except SystemExit:
            raise click.exceptions.Exit(EXIT_NO_REPO)

        try:
            config = load_config(repo_root)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        if tag_prefix is None:
            tag_prefix = config["tag_prefix"]
        if not no_merges:
            no_merges = config["no_merges"]
        logger.debug("Using tag prefix %r, no_merges=%s", tag_prefix, no_merges)

        client = GitClient(repo_root, tag_prefix=tag_prefix, no_merges=no_merges)
        try:
            latest_tag = client.get_latest_version_tag()
            changes = evaluate(client, latest_tag, tag_prefix)
        except GitError as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        if changes.is_empty():
            print_info("No commits since the last version tag.")

        print_report(changes, changes.recommended_action(), latest_tag)
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
