"""Domain models for aligned (render-ready) diff grids.

An aligned diff is a set of equal-length line arrays, one per pane, plus a
line map describing every row. Buffer lines are 1-based: row `i` of the grid
is `line_map[i - 1]`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from diffgrid.domain.diff import DiffSide, Hunk, LineType


# ============================================================
# Two-pane
# ============================================================


@dataclass(frozen=True)
class AlignedLineInfo:
    """Metadata for one row of a two-pane aligned diff."""

    left_type: LineType
    right_type: LineType
    left_lineno: int | None
    right_lineno: int | None
    hunk_index: int
    is_hunk_boundary: bool = False

    @property
    def is_context(self) -> bool:
        return self.left_type == LineType.CONTEXT and self.right_type == LineType.CONTEXT

    def lineno_for(self, side: DiffSide) -> int | None:
        """Source file line number shown on the given pane."""
        return self.left_lineno if side == DiffSide.LEFT else self.right_lineno

    def to_dict(self) -> dict:
        return {
            "left_type": self.left_type.value,
            "right_type": self.right_type.value,
            "left_lineno": self.left_lineno,
            "right_lineno": self.right_lineno,
            "hunk_index": self.hunk_index,
            "is_hunk_boundary": self.is_hunk_boundary,
        }


@dataclass
class AlignedDiff:
    """Two-pane grid: `len(left_lines) == len(right_lines) == len(line_map)`."""

    left_lines: list[str] = field(default_factory=list)
    right_lines: list[str] = field(default_factory=list)
    line_map: list[AlignedLineInfo] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.line_map)

    def to_dict(self) -> dict:
        return {
            "left_lines": self.left_lines,
            "right_lines": self.right_lines,
            "line_map": [info.to_dict() for info in self.line_map],
        }


# ============================================================
# Three-pane
# ============================================================


@dataclass
class ThreeWayFileDiff:
    """One file of the staging view: the staged and unstaged hunks for a path.

    Staged hunks diff HEAD→INDEX, unstaged hunks diff INDEX→WORKTREE. Either
    list may be empty but is never None.
    """

    path: str
    staged_hunks: list[Hunk] = field(default_factory=list)
    unstaged_hunks: list[Hunk] = field(default_factory=list)
    status_staged: str | None = None
    status_unstaged: str | None = None
    additions: int = 0
    deletions: int = 0

    @property
    def status(self) -> str:
        """Single status letter for file lists (staged wins)."""
        return self.status_staged or self.status_unstaged or "M"


@dataclass(frozen=True)
class ThreeWayLineInfo:
    """Metadata for one row of a HEAD | INDEX | WORKTREE grid."""

    left_type: LineType
    mid_type: LineType
    right_type: LineType
    left_lineno: int | None
    mid_lineno: int | None
    right_lineno: int | None
    hunk_index: int
    is_hunk_boundary: bool = False

    @property
    def is_context(self) -> bool:
        return (
            self.left_type == LineType.CONTEXT
            and self.mid_type == LineType.CONTEXT
            and self.right_type == LineType.CONTEXT
        )

    def lineno_for(self, side: DiffSide) -> int | None:
        if side == DiffSide.LEFT:
            return self.left_lineno
        if side == DiffSide.MID:
            return self.mid_lineno
        return self.right_lineno

    def to_dict(self) -> dict:
        return {
            "left_type": self.left_type.value,
            "mid_type": self.mid_type.value,
            "right_type": self.right_type.value,
            "left_lineno": self.left_lineno,
            "mid_lineno": self.mid_lineno,
            "right_lineno": self.right_lineno,
            "hunk_index": self.hunk_index,
            "is_hunk_boundary": self.is_hunk_boundary,
        }


@dataclass
class AlignedThreeWayDiff:
    """Three-pane grid; all four lists always have the same length."""

    left_lines: list[str] = field(default_factory=list)
    mid_lines: list[str] = field(default_factory=list)
    right_lines: list[str] = field(default_factory=list)
    line_map: list[ThreeWayLineInfo] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.line_map)

    def to_dict(self) -> dict:
        return {
            "left_lines": self.left_lines,
            "mid_lines": self.mid_lines,
            "right_lines": self.right_lines,
            "line_map": [info.to_dict() for info in self.line_map],
        }
