import subprocess
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from gitmoji_semver.vcs.git_client import Commit, GitClient, GitError, parse_decorations


class DummyProc(SimpleNamespace):
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""


def log_output(*records):
    """Render ``(sha, decorations, message)`` tuples the way ``git log`` does."""
    return "\n".join(f"{sha}\x1f{deco}\x1f{message}\n\x1e" for sha, deco, message in records) + "\n"


SHA_A = "a" * 40
SHA_B = "b" * 40
SHA_C = "c" * 40


class TestGitClientHistory(unittest.TestCase):
    def test_get_commits_parses_log(self) -> None:
        output = log_output(
            (SHA_A, "HEAD -> main, origin/main", ":sparkles: add X\n\nbody line"),
            (SHA_B, "tag: v1.0.0, tag: nightly", "🐛 fix Y"),
            (SHA_C, "", "initial commit"),
        )
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            return DummyProc(returncode=0, stdout=output, stderr="")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            commits = GitClient(Path("/repo")).get_commits()

        self.assertEqual(
            commits,
            [
                Commit(hash=SHA_A, message=":sparkles: add X\n\nbody line"),
                Commit(hash=SHA_B, message="🐛 fix Y", tags=("v1.0.0", "nightly")),
                Commit(hash=SHA_C, message="initial commit"),
            ],
        )
        self.assertEqual(calls[0][0], "log")
        self.assertEqual(calls[0][-1], "HEAD")
        self.assertNotIn("--no-merges", calls[0])

    def test_get_commits_no_merges(self) -> None:
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            return DummyProc(returncode=0, stdout="", stderr="")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            commits = GitClient(Path("/repo"), no_merges=True).get_commits("v1.0.0..HEAD")

        self.assertEqual(commits, [])
        self.assertIn("--no-merges", calls[0])
        self.assertEqual(calls[0][-1], "v1.0.0..HEAD")

    def test_parse_decorations(self) -> None:
        self.assertEqual(parse_decorations(""), ())
        self.assertEqual(parse_decorations("HEAD -> main"), ())
        self.assertEqual(parse_decorations("HEAD -> main, tag: v0.2.0"), ("v0.2.0",))

    def test_commit_display(self) -> None:
        commit = Commit(hash=SHA_A, message="✨ add X\n\nbody")
        self.assertEqual(commit.summary, "✨ add X")
        self.assertEqual(commit.short_hash, "aaaaaaa")
        self.assertEqual(str(commit), "✨ add X - aaaaaaa")


class TestGitClientTags(unittest.TestCase):
    def _fake_git(self, tags, targets, has_head=True, log=""):
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            if args[0] == "rev-parse":
                return DummyProc(returncode=0 if has_head else 1, stdout="", stderr="")
            if args[0] == "tag":
                return DummyProc(returncode=0, stdout="\n".join(tags) + "\n", stderr="")
            if args[0] == "rev-list":
                return DummyProc(returncode=0, stdout=targets[args[-1]] + "\n", stderr="")
            if args[0] == "log":
                return DummyProc(returncode=0, stdout=log, stderr="")
            raise AssertionError(f"Unexpected git command: {args}")

        return fake_run, calls

    def test_get_version_tags_filters_and_resolves(self) -> None:
        fake_run, calls = self._fake_git(
            ["nightly", "v1.0.0", "v1.10.0", "v1.2.0"],
            {"v1.0.0": SHA_A, "v1.10.0": SHA_B, "v1.2.0": SHA_C},
        )
        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            client = GitClient(Path("/repo"))
            tags = client.get_version_tags()
            latest = client.get_latest_version_tag()

        self.assertEqual([t.name for t in tags], ["v1.0.0", "v1.10.0", "v1.2.0"])
        self.assertEqual(latest.name, "v1.10.0")
        self.assertEqual(latest.commit, SHA_B)
        self.assertNotIn(["rev-list", "-n", "1", "nightly"], calls)

    def test_fetch_since_last_version_uses_range(self) -> None:
        fake_run, calls = self._fake_git(["v0.1.0"], {"v0.1.0": SHA_C})
        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            GitClient(Path("/repo")).fetch_commits_since_last_version()

        log_call = [c for c in calls if c[0] == "log"][0]
        self.assertEqual(log_call[-1], f"{SHA_C}..HEAD")

    def test_fetch_drops_version_tags_inside_range(self) -> None:
        # A merged hotfix tag (v1.0.1) is listed before the breaking change.
        log = log_output(
            (SHA_A, "HEAD -> main", "🔀 merge maint"),
            (SHA_B, "tag: v1.0.1, tag: nightly", "🐛 hotfix"),
            (SHA_C, "", "💥 break API"),
        )
        fake_run, calls = self._fake_git(["v1.0.1", "v1.1.0"], {"v1.0.1": SHA_B, "v1.1.0": "d" * 40}, log=log)
        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            client = GitClient(Path("/repo"))
            latest = client.get_latest_version_tag()
            commits = client.fetch_commits_since(latest)

        self.assertEqual(latest.name, "v1.1.0")
        self.assertEqual([c.tags for c in commits], [(), ("nightly",), ()])
        self.assertEqual(len([c for c in calls if c[:2] == ["tag", "--list"]]), 1)
        self.assertEqual([c for c in calls if c[0] == "log"][0][-1], f"{'d' * 40}..HEAD")

    def test_fetch_without_version_tag_reads_full_history(self) -> None:
        log = log_output((SHA_A, "HEAD -> main", "🎉 initial commit"))
        fake_run, calls = self._fake_git([], {}, log=log)
        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            commits = GitClient(Path("/repo")).fetch_commits_since_last_version()

        self.assertEqual(commits, [Commit(hash=SHA_A, message="🎉 initial commit")])
        log_call = [c for c in calls if c[0] == "log"][0]
        self.assertEqual(log_call[-1], "HEAD")

    def test_fetch_from_empty_repository_raises(self) -> None:
        fake_run, _ = self._fake_git([], {}, has_head=False)
        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            with self.assertRaises(GitError):
                GitClient(Path("/repo")).fetch_commits_since_last_version()

    def test_custom_tag_prefix(self) -> None:
        fake_run, _ = self._fake_git(["v9.0.0", "release-1.0.0"], {"release-1.0.0": SHA_A})
        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            latest = GitClient(Path("/repo"), tag_prefix="release-").get_latest_version_tag()
        self.assertEqual(latest.name, "release-1.0.0")


class TestGitClientRun(unittest.TestCase):
    @patch("gitmoji_semver.vcs.git_client.subprocess.run")
    def test_run_raises_on_failure(self, mock_run) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            args=["git", "log"], returncode=128, stdout="", stderr="fatal: bad revision\n"
        )
        with self.assertRaises(GitError) as ctx:
            GitClient(Path("/repo"))._run(["log"])
        self.assertEqual(str(ctx.exception), "fatal: bad revision")

    @patch("gitmoji_semver.vcs.git_client.subprocess.run")
    def test_run_unchecked_returns_result(self, mock_run) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            args=["git", "rev-parse"], returncode=1, stdout="", stderr=""
        )
        result = GitClient(Path("/repo"))._run(["rev-parse"], check=False)
        self.assertEqual(result.returncode, 1)

    @patch("gitmoji_semver.vcs.git_client.subprocess.run", side_effect=FileNotFoundError("git"))
    def test_run_without_git_binary(self, _mock_run) -> None:
        with self.assertRaises(GitError):
            GitClient(Path("/repo"))._run(["status"])

    def test_find_repo_root(self) -> None:
        import tempfile

        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / ".git").mkdir()
            nested = root / "a" / "b"
            nested.mkdir(parents=True)
            self.assertEqual(GitClient.find_repo_root(nested), root)
            self.assertTrue(GitClient.is_repo(root))
            self.assertFalse(GitClient.is_repo(nested))


if __name__ == "__main__":
    unittest.main()
