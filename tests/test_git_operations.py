"""Tests for GitOperationsService with a mocked git subprocess.

Tests cover:
- Repository detection and error wrapping
- Diffs for two-pane sources
- Staged + unstaged merge for the staging view
- Conflicted path discovery and merge stage diffs
"""

import subprocess
import unittest
from unittest.mock import patch

from diffgrid.domain.diff_source import DiffSource, DiffSourceType
from diffgrid.services.git_operations import (
    FULL_CONTEXT,
    GitDiffError,
    GitOperationsService,
    GitRepositoryError,
)

STAGED_DIFF = "diff --git a/a.py b/a.py\n@@ -1 +1 @@\n-head\n+index\n"
UNSTAGED_DIFF = (
    "diff --git a/a.py b/a.py\n@@ -1 +1 @@\n-index\n+work\n"
    "diff --git a/b.py b/b.py\n@@ -3 +3 @@\n-x\n+y\n"
)
PORCELAIN_V2 = (
    "1 .M N... 100644 100644 100644 aaa bbb ok.py\n"
    "u UU N... 100644 100644 100644 100644 h1 h2 h3 conflict file.py\n"
)


def completed(args: list[str], stdout: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args, 0, stdout=stdout, stderr="")


class FakeGit:
    """Stands in for subprocess.run, answering by git subcommand."""

    def __init__(self, outputs: dict[tuple[str, ...], str]):
        self.outputs = outputs
        self.calls: list[list[str]] = []

    def __call__(self, args, **kwargs):
        self.calls.append(args)
        if args[1] == "rev-parse":
            return completed(args)
        for prefix, stdout in self.outputs.items():
            if tuple(args[1 : 1 + len(prefix)]) == prefix:
                return completed(args, stdout)
        raise subprocess.CalledProcessError(128, args, stderr="fatal: bad revision")


class TestGitOperationsService(unittest.TestCase):
    """Tests for GitOperationsService."""

    def setUp(self):
        self.service = GitOperationsService("/repo")

    @patch("diffgrid.services.git_operations.subprocess.run")
    def test_is_git_repository_false_on_error(self, mock_run):
        """Test that a failing rev-parse means not a repository."""
        mock_run.side_effect = subprocess.CalledProcessError(128, ["git"])

        self.assertFalse(self.service.is_git_repository())

    @patch("diffgrid.services.git_operations.subprocess.run")
    def test_run_git_outside_repository_raises(self, mock_run):
        """Test that commands refuse to run outside a repository."""
        mock_run.side_effect = subprocess.CalledProcessError(128, ["git"])

        with self.assertRaises(GitRepositoryError):
            self.service.run_git(["diff"])

    @patch("diffgrid.services.git_operations.subprocess.run")
    def test_run_git_wraps_failures(self, mock_run):
        """Test that a failing git command raises GitDiffError with stderr."""
        mock_run.side_effect = FakeGit({})

        with self.assertRaises(GitDiffError) as ctx:
            self.service.run_git(["show", "nope"])

        self.assertIn("bad revision", str(ctx.exception))

    @patch("diffgrid.services.git_operations.subprocess.run")
    def test_get_file_diffs_runs_source_command(self, mock_run):
        """Test that a two-pane source is diffed with its own arguments."""
        fake = FakeGit({("diff", "--cached"): STAGED_DIFF})
        mock_run.side_effect = fake

        files = self.service.get_file_diffs(DiffSource(DiffSourceType.STAGED))

        self.assertEqual([f.path for f in files], ["a.py"])
        self.assertEqual(fake.calls[-1], ["git", "diff", "--cached"])

    @patch("diffgrid.services.git_operations.subprocess.run")
    def test_three_way_files_merges_both_diffs(self, mock_run):
        """Test that staged and unstaged diffs are merged per path with full context."""
        fake = FakeGit({("diff", "--cached"): STAGED_DIFF, ("diff",): UNSTAGED_DIFF})
        mock_run.side_effect = fake

        files = self.service.three_way_files()

        self.assertEqual([f.path for f in files], ["a.py", "b.py"])
        self.assertEqual(len(files[0].staged_hunks), 1)
        self.assertEqual(len(files[0].unstaged_hunks), 1)
        self.assertEqual(files[1].staged_hunks, [])
        self.assertIn(f"-U{FULL_CONTEXT}", fake.calls[1])

    @patch("diffgrid.services.git_operations.subprocess.run")
    def test_conflicted_paths(self, mock_run):
        """Test that only unmerged entries are returned, with spaces kept."""
        mock_run.side_effect = FakeGit({("status",): PORCELAIN_V2})

        self.assertEqual(self.service.conflicted_paths(), ["conflict file.py"])

    @patch("diffgrid.services.git_operations.subprocess.run")
    def test_merge_file_diffs_stages_around_base(self, mock_run):
        """Test that OURS→BASE and BASE→THEIRS stage diffs become the two hunk lists."""
        fake = FakeGit({("diff",): "diff --git a/:2:m.py b/:1:m.py\n@@ -1 +1 @@\n-ours\n+base\n"})
        mock_run.side_effect = fake

        merged = self.service.merge_file("m.py")

        self.assertEqual(merged.path, "m.py")
        self.assertEqual(len(merged.staged_hunks), 1)
        self.assertEqual(len(merged.unstaged_hunks), 1)
        diff_calls = [c for c in fake.calls if c[1] == "diff"]
        self.assertEqual(diff_calls[0][-2:], [":2:m.py", ":1:m.py"])
        self.assertEqual(diff_calls[1][-2:], [":1:m.py", ":3:m.py"])

    @patch("diffgrid.services.git_operations.subprocess.run")
    def test_merge_file_without_base_stage(self, mock_run):
        """Test that an add/add conflict (no stage 1) yields empty hunk lists instead of failing."""
        fake = FakeGit({("status",): PORCELAIN_V2})

        def run(args, **kwargs):
            if args[1] == "diff" and any(a.startswith(":1:") for a in args):
                fake.calls.append(args)
                raise subprocess.CalledProcessError(
                    128, args, stderr="fatal: path 'conflict file.py' is in the index, but not at stage 1"
                )
            return fake(args, **kwargs)

        mock_run.side_effect = run

        files = self.service.merge_files()

        self.assertEqual([f.path for f in files], ["conflict file.py"])
        self.assertEqual(files[0].staged_hunks, [])
        self.assertEqual(files[0].unstaged_hunks, [])
        self.assertIsNone(files[0].status_staged)
        self.assertEqual(len([c for c in fake.calls if c[1] == "diff"]), 2)

    @patch("diffgrid.services.git_operations.subprocess.run")
    def test_source_files_dispatches_three_way(self, mock_run):
        """Test that a three-way source yields staging files."""
        mock_run.side_effect = FakeGit({("diff", "--cached"): STAGED_DIFF, ("diff",): ""})

        files = self.service.source_files(DiffSource(DiffSourceType.THREE_WAY))

        self.assertEqual([f.path for f in files], ["a.py"])


if __name__ == "__main__":
    unittest.main()
