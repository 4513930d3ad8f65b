"""Navigation queries over an overlay position map.

A position map is buffer line -> the first thread anchored there, as
produced by build_overlay_plan. All queries return None rather than raising
when nothing is in range.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from diffgrid.domain.aligned import AlignedLineInfo
from diffgrid.domain.diff import DiffSide
from diffgrid.domain.review import ReviewAnchor, ReviewThread

# Expanded threads render below their anchor line, so a cursor up to this
# many lines below an anchor still belongs to that anchor's thread.
THREAD_PROXIMITY_LINES = 30


def next_thread_line(positions: Mapping[int, ReviewThread], cursor: int) -> int | None:
    """Smallest anchored buffer line strictly after cursor."""
    later = [line for line in positions if line > cursor]
    return min(later) if later else None


def prev_thread_line(positions: Mapping[int, ReviewThread], cursor: int) -> int | None:
    """Largest anchored buffer line strictly before cursor."""
    earlier = [line for line in positions if line < cursor]
    return max(earlier) if earlier else None


def thread_at_cursor(
    positions: Mapping[int, ReviewThread],
    cursor: int,
    proximity: int = THREAD_PROXIMITY_LINES,
) -> tuple[ReviewThread | None, int | None]:
    """Thread under the cursor, or the nearest one anchored just above it.

    Returns:
        (thread, anchor buffer line), or (None, None) if no anchor is within
        `proximity` lines at or above the cursor
    """
    if cursor in positions:
        return positions[cursor], cursor

    for line in range(cursor - 1, max(1, cursor - proximity) - 1, -1):
        if line in positions:
            return positions[line], line

    return None, None


def anchor_at(
    line_map: Sequence[AlignedLineInfo],
    buffer_line: int,
    side: DiffSide,
    path: str,
) -> ReviewAnchor | None:
    """Where a new comment at this buffer line and pane would attach.

    Returns None outside the line map or on a filler row of that pane.
    """
    if buffer_line < 1 or buffer_line > len(line_map):
        return None
    lineno = line_map[buffer_line - 1].lineno_for(side)
    if lineno is None:
        return None
    return ReviewAnchor(path=path, line=lineno, side=side)
