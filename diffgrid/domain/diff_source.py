"""Domain models for diff source selection.

A DiffSource says which snapshots a diff compares (staged changes, a single
commit, a range, a pull request, ...). It knows the git arguments that
produce the diff and the refs that each pane's content comes from.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from diffgrid.domain.diff import DiffSide

_RANGE_RE = re.compile(r"^(.+?)(\.{3}|\.{2})(.+)$")


class DiffSourceType(Enum):
    """Kind of diff being reviewed."""

    STAGED = "staged"
    UNSTAGED = "unstaged"
    WORKTREE = "worktree"
    COMMIT = "commit"
    RANGE = "range"
    STASH = "stash"
    PR = "pr"
    THREE_WAY = "three_way"
    MERGE = "merge"

    @classmethod
    def from_string(cls, value: str) -> DiffSourceType:
        """Parse DiffSourceType from string value.

        Dashes are accepted in place of underscores ("three-way").

        Raises:
            ValueError: If value is not a valid source type

        Examples:
            >>> DiffSourceType.from_string("staged")
            <DiffSourceType.STAGED: 'staged'>
            >>> DiffSourceType.from_string("Three-Way")
            <DiffSourceType.THREE_WAY: 'three_way'>
        """
        value_lower = value.lower().replace("-", "_")
        for member in cls:
            if member.value == value_lower:
                return member
        valid_values = [m.value for m in cls]
        raise ValueError(
            f"Invalid diff source: {value}. Must be one of: {', '.join(valid_values)}"
        )


@dataclass(frozen=True)
class PRCommit:
    oid: str
    short_oid: str
    message_headline: str = ""


@dataclass
class PRInfo:
    """The subset of pull request metadata needed to diff it locally."""

    number: int
    title: str
    base_ref: str = ""
    head_ref: str = ""
    base_oid: str = ""
    head_oid: str = ""
    commits: list[PRCommit] = field(default_factory=list)


@dataclass
class DiffSource:
    """Description of what a diff compares.

    Attributes:
        type: Source kind
        ref: Commit or stash ref (COMMIT and STASH sources)
        range: Range expression such as "main..HEAD" (RANGE sources)
        pr_info: Pull request metadata (PR sources)
        selected_commit: 0-based index into pr_info.commits, None for the full PR
    """

    type: DiffSourceType
    ref: str | None = None
    range: str | None = None
    pr_info: PRInfo | None = None
    selected_commit: int | None = None

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def is_three_way(self) -> bool:
        return self.type in (DiffSourceType.THREE_WAY, DiffSourceType.MERGE)

    def git_args(self) -> list[str]:
        """Git arguments (without the leading "git") that produce this diff.

        Raises:
            ValueError: If a required ref/range is missing, or the source is
                a three-pane source that is built from two diffs
        """
        if self.type == DiffSourceType.STAGED:
            return ["diff", "--cached"]
        if self.type == DiffSourceType.UNSTAGED:
            return ["diff"]
        if self.type == DiffSourceType.WORKTREE:
            return ["diff", "HEAD"]
        if self.type == DiffSourceType.COMMIT:
            return ["show", "--format=", self._require(self.ref, "commit source requires a ref")]
        if self.type == DiffSourceType.RANGE:
            return ["diff", self._require(self.range, "range source requires a range expression")]
        if self.type == DiffSourceType.STASH:
            return ["stash", "show", "-p", self._require(self.ref, "stash source requires a stash ref")]
        if self.type == DiffSourceType.PR:
            return self.pr_args()
        raise ValueError(f"{self.type.value} source is built from two diffs, not one")

    def pr_args(self) -> list[str]:
        """Git arguments for the full PR diff or one commit within it.

        The full PR uses a three-dot range (changes on head since the merge
        base). A single commit is diffed against its predecessor in the PR,
        or against the base for the first commit.

        Raises:
            ValueError: If there is no PR info or the commit index is invalid
        """
        pr = self.pr_info
        if pr is None:
            raise ValueError("pr source requires pr_info")
        if self.selected_commit is None:
            return ["diff", f"{pr.base_oid}...{pr.head_oid}"]

        index = self.selected_commit
        if not 0 <= index < len(pr.commits):
            raise ValueError(f"Invalid commit index: {index}")
        parent = pr.base_oid if index == 0 else pr.commits[index - 1].oid
        return ["diff", f"{parent}..{pr.commits[index].oid}"]

    def title(self, file_count: int) -> str:
        """Human-readable title such as "Diff staged (3 files)"."""
        suffix = format_file_count(file_count)

        if self.type == DiffSourceType.STAGED:
            return "Diff staged" + suffix
        if self.type == DiffSourceType.UNSTAGED:
            return "Diff unstaged" + suffix
        if self.type == DiffSourceType.WORKTREE:
            return "Diff worktree" + suffix
        if self.type == DiffSourceType.COMMIT:
            return f"Commit {(self.ref or 'unknown')[:7]}{suffix}"
        if self.type == DiffSourceType.RANGE:
            return f"Diff {self.range or 'unknown'}{suffix}"
        if self.type == DiffSourceType.STASH:
            return f"Stash {self.ref or 'unknown'}{suffix}"
        if self.type == DiffSourceType.THREE_WAY:
            return "3-way HEAD|INDEX|WORKTREE" + suffix
        if self.type == DiffSourceType.MERGE:
            return "3-way OURS|BASE|THEIRS" + suffix

        pr = self.pr_info
        if pr is None:
            return "PR" + suffix
        if self.selected_commit is not None and 0 <= self.selected_commit < len(pr.commits):
            commit = pr.commits[self.selected_commit]
            return f"PR #{pr.number}: {commit.message_headline} ({commit.short_oid}){suffix}"
        return f"PR #{pr.number} {pr.title}{suffix}"

    # --------------------------------------------------------
    # Private Helpers
    # --------------------------------------------------------

    @staticmethod
    def _require(value: str | None, message: str) -> str:
        if not value:
            raise ValueError(message)
        return value


def format_file_count(count: int) -> str:
    """Title suffix: " (empty)", " (1 file)" or " (N files)"."""
    if count == 0:
        return " (empty)"
    if count == 1:
        return " (1 file)"
    return f" ({count} files)"


def split_range(range_expr: str) -> tuple[str, str] | None:
    """Split "a..b" or "a...b" into its two refs, or None if it is not a range."""
    match = _RANGE_RE.match(range_expr)
    if not match:
        return None
    return match.group(1), match.group(3)


def ref_for_source(source: DiffSource, side: DiffSide) -> str:
    """Git ref whose file content belongs on the given pane.

    "INDEX" and "WORKTREE" are symbolic: the caller reads the index
    (`git show :0:<path>`) or the working tree file respectively.

    Args:
        source: The diff source
        side: LEFT or RIGHT, or MID for three-pane sources

    Returns:
        Ref string such as "HEAD", "abc123^", ":2:" (a merge stage) or "WORKTREE"
    """
    source_type = source.type
    left = side == DiffSide.LEFT

    if source_type == DiffSourceType.STAGED:
        return "HEAD" if left else "INDEX"
    if source_type == DiffSourceType.UNSTAGED:
        return "INDEX" if left else "WORKTREE"
    if source_type == DiffSourceType.WORKTREE:
        return "HEAD" if left else "WORKTREE"
    if source_type in (DiffSourceType.COMMIT, DiffSourceType.STASH):
        ref = source.ref or "HEAD"
        return f"{ref}^" if left else ref
    if source_type == DiffSourceType.RANGE:
        range_expr = source.range or ""
        refs = split_range(range_expr)
        if refs is not None:
            return refs[0] if left else refs[1]
        return f"{range_expr}^" if left else range_expr
    if source_type == DiffSourceType.PR and source.pr_info is not None:
        pr = source.pr_info
        if left:
            return pr.base_oid or pr.base_ref or "HEAD"
        return pr.head_oid or pr.head_ref or "HEAD"
    if source_type == DiffSourceType.THREE_WAY:
        if left:
            return "HEAD"
        return "INDEX" if side == DiffSide.MID else "WORKTREE"
    if source_type == DiffSourceType.MERGE:
        if left:
            return ":2:"
        return "WORKTREE" if side == DiffSide.MID else ":3:"

    return "HEAD^" if left else "HEAD"
