"""Git operations service.

Encapsulates the subprocess calls to git that produce diffs and parses
their output into domain models.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from diffgrid.domain.aligned import ThreeWayFileDiff
from diffgrid.domain.diff import FileDiff
from diffgrid.domain.diff_source import DiffSource, DiffSourceType
from diffgrid.infrastructure.git.diff_parser import parse_unified_diff
from diffgrid.services.three_way import merge_file_lists

logger = logging.getLogger(__name__)

FULL_CONTEXT = 999999


class GitDiffError(Exception):
    """Raised when a git diff command fails."""

    pass


class GitRepositoryError(Exception):
    """Raised when directory is not a git repository."""

    pass


class GitOperationsService:
    """Runs git in one repository and returns parsed diffs.

    The three-pane producers request full context so that the staged and
    unstaged hunks of a file cover every INDEX line between them.
    """

    def __init__(self, repo_path: str = "."):
        """Initialize with repository path.

        Args:
            repo_path: Path to git repository (default: current directory)
        """
        self.repo_path = Path(repo_path)

    def is_git_repository(self) -> bool:
        try:
            subprocess.run(
                ["git", "rev-parse", "--git-dir"],
                cwd=self.repo_path,
                capture_output=True,
                check=True,
            )
            return True
        except (subprocess.CalledProcessError, FileNotFoundError):
            return False

    def run_git(self, args: list[str]) -> str:
        """Run a git command and return its stdout.

        Raises:
            GitRepositoryError: If repo_path is not a git repository
            GitDiffError: If the command fails
        """
        if not self.is_git_repository():
            raise GitRepositoryError(
                f"Not a git repository: {self.repo_path}\n"
                "Make sure you're running from within a git repository."
            )

        logger.debug("git %s", " ".join(args))
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise GitDiffError(f"git {' '.join(args)} failed: {e.stderr}") from e
        return result.stdout

    # --------------------------------------------------------
    # Two-pane diffs
    # --------------------------------------------------------

    def get_file_diffs(self, source: DiffSource) -> list[FileDiff]:
        """Parsed diff for a two-pane source.

        Raises:
            ValueError: If the source is a three-pane source or lacks a ref
            GitRepositoryError: If not in a git repository
            GitDiffError: If the diff command fails
        """
        return parse_unified_diff(self.run_git(source.git_args()))

    # --------------------------------------------------------
    # Three-pane diffs
    # --------------------------------------------------------

    def three_way_files(self, full_context: bool = True) -> list[ThreeWayFileDiff]:
        """Staged and unstaged changes merged per file."""
        context = [f"-U{FULL_CONTEXT}"] if full_context else []
        staged = parse_unified_diff(self.run_git(["diff", "--cached", *context]))
        unstaged = parse_unified_diff(self.run_git(["diff", *context]))
        logger.info("%d staged, %d unstaged files", len(staged), len(unstaged))
        return merge_file_lists(staged, unstaged)

    def conflicted_paths(self) -> list[str]:
        """Paths with unmerged index entries, in status order."""
        paths = []
        for line in self.run_git(["status", "--porcelain=v2"]).splitlines():
            if line.startswith("u "):
                fields = line.split(" ", 10)
                if len(fields) == 11:
                    paths.append(fields[10])
        return paths

    def merge_files(self) -> list[ThreeWayFileDiff]:
        """OURS | BASE | THEIRS view of every conflicted file.

        BASE is the shared middle pane: the OURS→BASE diff plays the staged
        role and the BASE→THEIRS diff the unstaged role. A side whose stage is
        missing (add/add, modify/delete) has no hunks.
        """
        return [self.merge_file(path) for path in self.conflicted_paths()]

    def merge_file(self, path: str) -> ThreeWayFileDiff:
        ours_to_base = self._stage_diff(path, 2, 1)
        base_to_theirs = self._stage_diff(path, 1, 3)
        return ThreeWayFileDiff(
            path=path,
            staged_hunks=ours_to_base.hunks if ours_to_base else [],
            unstaged_hunks=base_to_theirs.hunks if base_to_theirs else [],
            status_staged=ours_to_base.status if ours_to_base else None,
            status_unstaged=base_to_theirs.status if base_to_theirs else None,
            additions=sum(f.additions for f in (ours_to_base, base_to_theirs) if f),
            deletions=sum(f.deletions for f in (ours_to_base, base_to_theirs) if f),
        )

    def _stage_diff(self, path: str, old_stage: int, new_stage: int) -> FileDiff | None:
        """Diff between two conflict stages; None when either stage is absent."""
        try:
            output = self.run_git(
                ["diff", f"-U{FULL_CONTEXT}", f":{old_stage}:{path}", f":{new_stage}:{path}"]
            )
        except GitDiffError as e:
            # add/add has no stage 1, modify/delete lacks stage 2 or 3
            logger.debug("No stage %d->%d diff for %s: %s", old_stage, new_stage, path, e)
            return None
        files = parse_unified_diff(output)
        return files[0] if files else None

    def source_files(self, source: DiffSource) -> list[ThreeWayFileDiff] | list[FileDiff]:
        """Files for any source: three-pane sources yield ThreeWayFileDiffs."""
        if source.type == DiffSourceType.THREE_WAY:
            return self.three_way_files()
        if source.type == DiffSourceType.MERGE:
            return self.merge_files()
        return self.get_file_diffs(source)
