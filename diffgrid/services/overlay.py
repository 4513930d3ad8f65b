"""Review overlay positioning.

Maps review threads and pending comments, which are anchored by file line
number and side, onto buffer lines of an aligned diff, and computes the
filler lines each pane needs so both panes stay the same height once the
overlay blocks are rendered.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence

from diffgrid.domain.aligned import AlignedLineInfo
from diffgrid.domain.diff import DiffSide
from diffgrid.domain.review import LineOverlay, OverlayPlan, PendingComment, ReviewThread
from diffgrid.services.thread_formatter import format_pending, format_thread

logger = logging.getLogger(__name__)

ThreadFormatter = Callable[[ReviewThread, bool], list[str]]
PendingFormatter = Callable[[PendingComment], list[str]]


# ============================================================
# Anchor Mapping
# ============================================================


def group_threads_by_path(threads: Sequence[ReviewThread]) -> dict[str, list[ReviewThread]]:
    """Partition threads by file path, keeping input order within each path."""
    grouped: dict[str, list[ReviewThread]] = {}
    for thread in threads:
        grouped.setdefault(thread.path, []).append(thread)
    return grouped


def _pane_side(side: DiffSide) -> DiffSide:
    return DiffSide.LEFT if side == DiffSide.LEFT else DiffSide.RIGHT


def _line_index(line_map: Sequence[AlignedLineInfo], side: DiffSide) -> dict[int, int]:
    """File line number -> first buffer line showing it on the given pane."""
    index: dict[int, int] = {}
    for buffer_line, info in enumerate(line_map, start=1):
        lineno = info.lineno_for(side)
        if lineno is not None:
            index.setdefault(lineno, buffer_line)
    return index


def map_threads_to_lines(
    threads: Sequence[ReviewThread],
    line_map: Sequence[AlignedLineInfo],
) -> dict[int, list[ReviewThread]]:
    """Resolve each thread's anchor to a 1-based buffer line.

    Threads without a line, or whose line is not shown in the current diff,
    are left out. Threads on the same buffer line keep their input order.
    """
    indexes = {
        DiffSide.LEFT: _line_index(line_map, DiffSide.LEFT),
        DiffSide.RIGHT: _line_index(line_map, DiffSide.RIGHT),
    }
    positions: dict[int, list[ReviewThread]] = {}

    for thread in threads:
        if not thread.is_positionable:
            continue
        buffer_line = indexes[_pane_side(thread.diff_side)].get(thread.line)
        if buffer_line is None:
            logger.debug("Thread %s on %s:%d not in diff window", thread.id, thread.path, thread.line)
            continue
        positions.setdefault(buffer_line, []).append(thread)

    return positions


def map_pending_to_lines(
    pending: Sequence[PendingComment],
    line_map: Sequence[AlignedLineInfo],
) -> dict[int, list[PendingComment]]:
    """Same resolution as map_threads_to_lines, for pending comments."""
    indexes = {
        DiffSide.LEFT: _line_index(line_map, DiffSide.LEFT),
        DiffSide.RIGHT: _line_index(line_map, DiffSide.RIGHT),
    }
    positions: dict[int, list[PendingComment]] = {}

    for comment in pending:
        buffer_line = indexes[_pane_side(comment.side)].get(comment.line)
        if buffer_line is not None:
            positions.setdefault(buffer_line, []).append(comment)

    return positions


# ============================================================
# Overlay Plan
# ============================================================


def build_overlay_plan(
    threads: Sequence[ReviewThread],
    line_map: Sequence[AlignedLineInfo],
    collapsed: Mapping[str, bool] | None = None,
    pending: Sequence[PendingComment] | None = None,
    formatter: ThreadFormatter = format_thread,
    pending_formatter: PendingFormatter = format_pending,
) -> OverlayPlan:
    """Place threads and pending comments and balance pane heights.

    Each block contributes the number of lines its formatter renders to the
    height of its own side only. The shorter side at each line receives the
    difference as filler.

    Args:
        threads: Threads for one file
        line_map: Line map of that file's aligned diff
        collapsed: Thread id -> collapsed flag; threads not listed are collapsed
        pending: Pending comments for the same file
        formatter: Renders a thread given its collapsed flag
        pending_formatter: Renders a pending comment

    Returns:
        OverlayPlan with per-line blocks, heights and the first-thread position map
    """
    plan = OverlayPlan(collapsed=dict(collapsed or {}))

    for buffer_line, line_threads in sorted(map_threads_to_lines(threads, line_map).items()):
        overlay = plan.lines.setdefault(buffer_line, LineOverlay())
        plan.positions[buffer_line] = line_threads[0]
        for thread in line_threads:
            overlay.threads.append(thread)
            height = len(formatter(thread, plan.is_collapsed(thread.id)))
            _add_height(overlay, thread.diff_side, height)

    if pending:
        for buffer_line, comments in sorted(map_pending_to_lines(pending, line_map).items()):
            overlay = plan.lines.setdefault(buffer_line, LineOverlay())
            for comment in comments:
                overlay.pending.append(comment)
                _add_height(overlay, comment.side, len(pending_formatter(comment)))

    plan.lines = dict(sorted(plan.lines.items()))
    return plan


def _add_height(overlay: LineOverlay, side: DiffSide, height: int) -> None:
    if _pane_side(side) == DiffSide.LEFT:
        overlay.left_height += height
    else:
        overlay.right_height += height
