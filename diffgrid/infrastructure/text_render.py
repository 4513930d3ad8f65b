"""Plain-text rendering of aligned diffs for the command line.

Each pane is a fixed-width column of "lineno marker text". Folded ranges
and review overlay blocks are interleaved as extra rows.
"""

from __future__ import annotations

import json

from diffgrid.domain.aligned import AlignedDiff, AlignedThreeWayDiff
from diffgrid.domain.diff import DiffSide, LineType
from diffgrid.domain.review import OverlayPlan
from diffgrid.services.thread_formatter import format_pending, format_thread

PANE_WIDTH = 60
SEPARATOR = " │ "

_MARKERS = {
    LineType.CONTEXT: " ",
    LineType.CHANGE: "~",
    LineType.DELETE: "-",
    LineType.ADD: "+",
    LineType.FILLER: " ",
}


def _cell(lineno: int | None, line_type: LineType, text: str, width: int = PANE_WIDTH) -> str:
    number = f"{lineno:>5}" if lineno is not None else " " * 5
    body = f"{number} {_MARKERS[line_type]} {text}"
    if len(body) > width:
        body = body[: width - 1] + "…"
    return body.ljust(width)


def _overlay_rows(plan: OverlayPlan, buffer_line: int) -> list[str]:
    overlay = plan.lines.get(buffer_line)
    if overlay is None:
        return []

    left: list[str] = []
    right: list[str] = []
    for thread in overlay.threads:
        block = format_thread(thread, plan.is_collapsed(thread.id))
        (left if thread.diff_side == DiffSide.LEFT else right).extend(block)
    for comment in overlay.pending:
        (left if comment.side == DiffSide.LEFT else right).extend(format_pending(comment))

    left.extend([""] * overlay.filler_left)
    right.extend([""] * overlay.filler_right)
    return [f"{lt:<{PANE_WIDTH}}{SEPARATOR}{rt}".rstrip() for lt, rt in zip(left, right)]


def format_aligned_text(
    aligned: AlignedDiff,
    title: str = "",
    plan: OverlayPlan | None = None,
) -> str:
    """Two columns, one row per aligned line, with overlay blocks below anchors.

    Threads render in the collapse state recorded on the plan.
    """
    lines = [title] if title else []
    for i, info in enumerate(aligned.line_map):
        marker = ">" if info.is_hunk_boundary else " "
        left = _cell(info.left_lineno, info.left_type, aligned.left_lines[i])
        right = _cell(info.right_lineno, info.right_type, aligned.right_lines[i])
        lines.append(f"{marker}{left}{SEPARATOR}{right}".rstrip())
        if plan is not None:
            lines.extend(" " + row for row in _overlay_rows(plan, i + 1))
    return "\n".join(lines)


def format_three_way_text(
    aligned: AlignedThreeWayDiff,
    title: str = "",
    fold_ranges: list[tuple[int, int]] | None = None,
) -> str:
    """Three columns; folded ranges render as one summary row."""
    width = PANE_WIDTH * 2 // 3
    folds = {start: end for start, end in fold_ranges or []}
    lines = [title] if title else []

    i = 0
    while i < len(aligned.line_map):
        end = folds.get(i + 1)
        if end is not None:
            lines.append(f"  ⋯ {end - i} unchanged lines")
            i = end
            continue

        info = aligned.line_map[i]
        marker = ">" if info.is_hunk_boundary else " "
        cells = [
            _cell(info.left_lineno, info.left_type, aligned.left_lines[i], width),
            _cell(info.mid_lineno, info.mid_type, aligned.mid_lines[i], width),
            _cell(info.right_lineno, info.right_type, aligned.right_lines[i], width),
        ]
        lines.append((marker + SEPARATOR.join(cells)).rstrip())
        i += 1

    return "\n".join(lines)


def format_json(payload: dict | list) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)
