"""Two-pane hunk alignment.

Flattens the classified hunks of a FileDiff into two equal-length line
arrays plus a line map, and answers hunk navigation queries over that map.
"""

from __future__ import annotations

from collections.abc import Sequence

from diffgrid.domain.aligned import AlignedDiff, AlignedLineInfo
from diffgrid.domain.diff import FileDiff


def align(file_diff: FileDiff) -> AlignedDiff:
    """Flatten a file's hunks into a two-pane aligned diff.

    Filler sides become empty strings. Each row records the 1-based index
    of the hunk that produced it. A row is a hunk boundary when it is the
    first non-context row after a context row (or at the start) of its hunk,
    so one large hunk with several change regions gets one boundary per region.

    Args:
        file_diff: File with zero or more classified hunks

    Returns:
        AlignedDiff whose three arrays have equal length
    """
    aligned = AlignedDiff()

    for hunk_index, hunk in enumerate(file_diff.hunks, start=1):
        prev_context = True
        for pair in hunk.pairs:
            is_context = pair.is_context
            aligned.left_lines.append(pair.left_text if pair.left_text is not None else "")
            aligned.right_lines.append(pair.right_text if pair.right_text is not None else "")
            aligned.line_map.append(
                AlignedLineInfo(
                    left_type=pair.left_type,
                    right_type=pair.right_type,
                    left_lineno=pair.left_lineno,
                    right_lineno=pair.right_lineno,
                    hunk_index=hunk_index,
                    is_hunk_boundary=not is_context and prev_context,
                )
            )
            prev_context = is_context

    return aligned


# ============================================================
# Hunk Navigation
# ============================================================


def next_hunk_line(line_map: Sequence[AlignedLineInfo], current_line: int) -> int | None:
    """First boundary buffer line strictly after current_line, or None.

    Works for both two-pane and three-pane line maps.
    """
    for buffer_line in range(max(current_line, 0) + 1, len(line_map) + 1):
        if line_map[buffer_line - 1].is_hunk_boundary:
            return buffer_line
    return None


def prev_hunk_line(line_map: Sequence[AlignedLineInfo], current_line: int) -> int | None:
    """Last boundary buffer line strictly before current_line, or None."""
    for buffer_line in range(min(current_line, len(line_map) + 1) - 1, 0, -1):
        if line_map[buffer_line - 1].is_hunk_boundary:
            return buffer_line
    return None


def hunk_boundaries(line_map: Sequence[AlignedLineInfo]) -> list[int]:
    """All boundary buffer lines, ascending."""
    return [i for i, info in enumerate(line_map, start=1) if info.is_hunk_boundary]
