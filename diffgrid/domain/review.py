"""Domain models for pull request review threads.

Parse-once pattern: GitHub GraphQL `reviewThreads` nodes are parsed into
type-safe models at the boundary. The overlay and navigation services only
read these models; they never mutate them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from diffgrid.domain.diff import DiffSide


# ============================================================
# Domain Models
# ============================================================


@dataclass(frozen=True)
class ReviewComment:
    """A single comment inside a review thread."""

    author: str
    body: str
    created_at: str = ""
    id: str = ""
    database_id: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ReviewComment:
        """Parse a comment from a GraphQL `comments.nodes[]` entry."""
        author = data.get("author") or {}
        return cls(
            author=author.get("login", ""),
            body=data.get("body", ""),
            created_at=data.get("createdAt", ""),
            id=data.get("id", ""),
            database_id=data.get("databaseId"),
        )

    @property
    def body_lines(self) -> list[str]:
        return self.body.split("\n")


@dataclass(frozen=True)
class ReviewThread:
    """A review thread anchored to one line of one side of a file diff.

    Attributes:
        line: Current line number on diff_side, None when the thread no
            longer has a position in the current diff (outdated)
        original_line: Line number the thread was created on
        start_line: First line of a multi-line comment, if any
    """

    id: str
    path: str
    line: int | None
    diff_side: DiffSide = DiffSide.RIGHT
    original_line: int | None = None
    start_line: int | None = None
    is_resolved: bool = False
    is_outdated: bool = False
    comments: tuple[ReviewComment, ...] = ()

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict) -> ReviewThread:
        """Parse a thread from a GraphQL `reviewThreads.nodes[]` entry.

        Args:
            data: Raw node with isResolved, isOutdated, path, line,
                originalLine, startLine, diffSide and comments.nodes

        Returns:
            Typed ReviewThread instance
        """
        comment_nodes = (data.get("comments") or {}).get("nodes") or []
        return cls(
            id=data.get("id", ""),
            path=data.get("path", ""),
            line=data.get("line"),
            diff_side=DiffSide.from_string(data.get("diffSide") or "RIGHT"),
            original_line=data.get("originalLine"),
            start_line=data.get("startLine"),
            is_resolved=bool(data.get("isResolved", False)),
            is_outdated=bool(data.get("isOutdated", False)),
            comments=tuple(ReviewComment.from_dict(c) for c in comment_nodes),
        )

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def is_positionable(self) -> bool:
        return self.line is not None


@dataclass(frozen=True)
class PendingComment:
    """An unsubmitted comment held locally until the review is submitted."""

    path: str
    line: int
    side: DiffSide
    body: str

    def to_dict(self) -> dict:
        """Shape of a GraphQL DraftPullRequestReviewThread input."""
        return {
            "path": self.path,
            "line": self.line,
            "side": self.side.value,
            "body": self.body,
        }


@dataclass(frozen=True)
class ReviewAnchor:
    """The file position a new comment would attach to."""

    path: str
    line: int
    side: DiffSide


@dataclass
class LineOverlay:
    """Annotations anchored to one buffer line, split by pane."""

    threads: list[ReviewThread] = field(default_factory=list)
    pending: list[PendingComment] = field(default_factory=list)
    left_height: int = 0
    right_height: int = 0

    @property
    def filler_left(self) -> int:
        return max(self.right_height - self.left_height, 0)

    @property
    def filler_right(self) -> int:
        return max(self.left_height - self.right_height, 0)


@dataclass
class OverlayPlan:
    """Everything a renderer needs to paint review overlays on a file.

    Attributes:
        lines: Buffer line -> annotations anchored there
        positions: Buffer line -> first thread anchored there (navigation)
        collapsed: Thread id -> collapsed flag the heights were measured with
    """

    lines: dict[int, LineOverlay] = field(default_factory=dict)
    positions: dict[int, ReviewThread] = field(default_factory=dict)
    collapsed: dict[str, bool] = field(default_factory=dict)

    def is_collapsed(self, thread_id: str) -> bool:
        return self.collapsed.get(thread_id, True)

    @property
    def filler_left(self) -> dict[int, int]:
        return {line: o.filler_left for line, o in self.lines.items() if o.filler_left}

    @property
    def filler_right(self) -> dict[int, int]:
        return {line: o.filler_right for line, o in self.lines.items() if o.filler_right}

    @property
    def is_empty(self) -> bool:
        return not self.lines


# ============================================================
# Response Parsing
# ============================================================


def parse_review_threads(response: dict) -> tuple[list[ReviewThread], str]:
    """Parse a `pullRequest.reviewThreads` GraphQL response.

    Args:
        response: Decoded JSON response (with or without the top-level "data")

    Returns:
        (threads, pr_node_id)

    Raises:
        ValueError: If the response has no pullRequest object
    """
    data = response.get("data", response)
    pull_request = (data.get("repository") or {}).get("pullRequest")
    if not pull_request:
        raise ValueError("Unexpected review threads response: missing repository.pullRequest")

    nodes = (pull_request.get("reviewThreads") or {}).get("nodes") or []
    threads = [ReviewThread.from_dict(node) for node in nodes]
    return threads, pull_request.get("id", "")
