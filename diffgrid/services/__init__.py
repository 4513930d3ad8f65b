"""Services for diffgrid.

Services hold the alignment, overlay and navigation logic over domain
models, plus the git access layer that produces those models.
"""

from diffgrid.services.git_operations import GitDiffError, GitOperationsService, GitRepositoryError
from diffgrid.services.hunk_aligner import align, hunk_boundaries, next_hunk_line, prev_hunk_line
from diffgrid.services.overlay import (
    build_overlay_plan,
    group_threads_by_path,
    map_pending_to_lines,
    map_threads_to_lines,
)
from diffgrid.services.review_session import ReviewSession
from diffgrid.services.thread_navigator import (
    THREAD_PROXIMITY_LINES,
    anchor_at,
    next_thread_line,
    prev_thread_line,
    thread_at_cursor,
)
from diffgrid.services.three_way import align_three_way, compute_fold_ranges, merge_file_lists

__all__ = [
    "GitDiffError",
    "GitOperationsService",
    "GitRepositoryError",
    "ReviewSession",
    "THREAD_PROXIMITY_LINES",
    "align",
    "align_three_way",
    "anchor_at",
    "build_overlay_plan",
    "compute_fold_ranges",
    "group_threads_by_path",
    "hunk_boundaries",
    "map_pending_to_lines",
    "map_threads_to_lines",
    "merge_file_lists",
    "next_hunk_line",
    "next_thread_line",
    "prev_hunk_line",
    "prev_thread_line",
    "thread_at_cursor",
]
