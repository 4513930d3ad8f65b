"""Domain models for diffgrid."""

from diffgrid.domain.aligned import (
    AlignedDiff,
    AlignedLineInfo,
    AlignedThreeWayDiff,
    ThreeWayFileDiff,
    ThreeWayLineInfo,
)
from diffgrid.domain.diff import DiffSide, FileDiff, Hunk, HunkHeader, LinePair, LineType
from diffgrid.domain.diff_source import (
    DiffSource,
    DiffSourceType,
    PRCommit,
    PRInfo,
    ref_for_source,
)
from diffgrid.domain.review import (
    LineOverlay,
    OverlayPlan,
    PendingComment,
    ReviewAnchor,
    ReviewComment,
    ReviewThread,
    parse_review_threads,
)

__all__ = [
    "AlignedDiff",
    "AlignedLineInfo",
    "AlignedThreeWayDiff",
    "DiffSide",
    "DiffSource",
    "DiffSourceType",
    "FileDiff",
    "Hunk",
    "HunkHeader",
    "LineOverlay",
    "LinePair",
    "LineType",
    "OverlayPlan",
    "PRCommit",
    "PRInfo",
    "PendingComment",
    "ReviewAnchor",
    "ReviewComment",
    "ReviewThread",
    "ThreeWayFileDiff",
    "ThreeWayLineInfo",
    "parse_review_threads",
    "ref_for_source",
]
