"""Three-pane (HEAD | INDEX | WORKTREE) staging alignment.

Merges a staged diff (HEAD→INDEX) and an unstaged diff (INDEX→WORKTREE)
into one grid without re-diffing anything. INDEX is the shared coordinate:
the staged hunks are positioned by their new side, the unstaged hunks by
their old side, and both are walked together in INDEX order.

Every row has a definite INDEX (mid) value. A pane that no hunk drives at a
row mirrors the mid pane; the mirroring is recorded on StagingRow so it can be
inspected before the rows are collapsed into plain render lists.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum

from diffgrid.domain.aligned import AlignedThreeWayDiff, ThreeWayFileDiff, ThreeWayLineInfo
from diffgrid.domain.diff import DiffSide, FileDiff, Hunk, LinePair, LineType

logger = logging.getLogger(__name__)

DEFAULT_FOLD_CONTEXT_LINES = 3
MIN_FOLD_SIZE = 2


# ============================================================
# File List Merging
# ============================================================


def merge_file_lists(
    staged: Sequence[FileDiff],
    unstaged: Sequence[FileDiff],
) -> list[ThreeWayFileDiff]:
    """Merge staged and unstaged file lists by path.

    Output follows the staged list's order (merged with unstaged data when
    the path appears in both), followed by unstaged-only files in unstaged
    order. Additions and deletions are summed across both sides.

    Args:
        staged: Files from the HEAD→INDEX diff
        unstaged: Files from the INDEX→WORKTREE diff

    Returns:
        One ThreeWayFileDiff per distinct path
    """
    unstaged_by_path = {f.path: f for f in unstaged}
    emitted: set[str] = set()
    result: list[ThreeWayFileDiff] = []

    for staged_file in staged:
        path = staged_file.path
        if path in emitted:
            continue
        emitted.add(path)
        result.append(_merge_file(path, staged_file, unstaged_by_path.get(path)))

    for unstaged_file in unstaged:
        path = unstaged_file.path
        if path in emitted:
            continue
        emitted.add(path)
        result.append(_merge_file(path, None, unstaged_file))

    return result


def _merge_file(path: str, staged: FileDiff | None, unstaged: FileDiff | None) -> ThreeWayFileDiff:
    additions = deletions = 0
    for file_diff in (staged, unstaged):
        if file_diff is not None:
            additions += file_diff.additions
            deletions += file_diff.deletions

    return ThreeWayFileDiff(
        path=path,
        staged_hunks=list(staged.hunks) if staged else [],
        unstaged_hunks=list(unstaged.hunks) if unstaged else [],
        status_staged=staged.status if staged else None,
        status_unstaged=unstaged.status if unstaged else None,
        additions=additions,
        deletions=deletions,
    )


# ============================================================
# Intermediate Row Model
# ============================================================


class PaneSource(Enum):
    """Where a pane's value at a row came from."""

    OWN = "own"
    MIRRORED_FROM_MID = "mirrored_from_mid"


@dataclass(frozen=True)
class PaneValue:
    text: str | None
    type: LineType
    lineno: int | None
    source: PaneSource = PaneSource.OWN


@dataclass(frozen=True)
class StagingRow:
    """One three-pane row before it is flattened for rendering."""

    left: PaneValue
    mid: PaneValue
    right: PaneValue

    @property
    def is_context(self) -> bool:
        return all(p.type == LineType.CONTEXT for p in (self.left, self.mid, self.right))


@dataclass
class StagingRegion:
    """Staged and unstaged hunks whose INDEX ranges overlap.

    `start`/`end` are the inclusive INDEX line range covered by the region.
    """

    start: int
    end: int
    staged: list[Hunk] = field(default_factory=list)
    unstaged: list[Hunk] = field(default_factory=list)


# ============================================================
# Region Grouping
# ============================================================


def group_regions(staged: Sequence[Hunk], unstaged: Sequence[Hunk]) -> list[StagingRegion]:
    """Merge two position-sorted hunk lists into INDEX-ordered regions.

    A two-pointer walk takes the hunk with the lower INDEX start next
    (staged first on ties). A hunk that starts at or before the end of the
    current region joins it; otherwise it opens a new region.
    """
    regions: list[StagingRegion] = []
    si = ui = 0

    while si < len(staged) or ui < len(unstaged):
        staged_range = staged[si].header.anchor_range(DiffSide.RIGHT) if si < len(staged) else None
        unstaged_range = unstaged[ui].header.anchor_range(DiffSide.LEFT) if ui < len(unstaged) else None

        take_staged = unstaged_range is None or (
            staged_range is not None and staged_range[0] <= unstaged_range[0]
        )
        if take_staged:
            hunk, (start, end) = staged[si], staged_range
            si += 1
        else:
            hunk, (start, end) = unstaged[ui], unstaged_range
            ui += 1

        current = regions[-1] if regions else None
        if current is None or start > current.end:
            current = StagingRegion(start=start, end=end)
            regions.append(current)
        else:
            current.end = max(current.end, end)

        if take_staged:
            current.staged.append(hunk)
        else:
            current.unstaged.append(hunk)

    return regions


def _keyed_pairs(hunks: Sequence[Hunk], index_side: DiffSide) -> list[tuple[tuple[int, int], LinePair]]:
    """Attach an INDEX-order sort key to every pair of the given hunks.

    Rows with an INDEX line sort as (line, 1). Rows without one (a staged
    deletion or an unstaged addition) sort as (next INDEX line, 0), i.e.
    just before the INDEX line they precede.
    """
    keyed: list[tuple[tuple[int, int], LinePair]] = []

    for hunk in hunks:
        header = hunk.header
        if index_side == DiffSide.RIGHT:
            start, count = header.new_start, header.new_count
        else:
            start, count = header.old_start, header.old_count
        next_index = start if count > 0 else start + 1

        for pair in hunk.pairs:
            if index_side == DiffSide.RIGHT:
                index_type, index_lineno = pair.right_type, pair.right_lineno
            else:
                index_type, index_lineno = pair.left_type, pair.left_lineno

            if index_type == LineType.FILLER or index_lineno is None:
                keyed.append(((next_index, 0), pair))
            else:
                keyed.append(((index_lineno, 1), pair))
                next_index = index_lineno + 1

    return keyed


# ============================================================
# Row Construction
# ============================================================


class _StagingWalk:
    """Builds StagingRows for successive regions of one file.

    Tracks the running HEAD-INDEX and WORKTREE-INDEX line offsets so that a
    mirrored pane gets the line number it has in its own snapshot.
    """

    def __init__(self) -> None:
        self.head_offset = 0
        self.worktree_offset = 0

    def rows_for(self, region: StagingRegion) -> list[StagingRow]:
        staged = _keyed_pairs(region.staged, DiffSide.RIGHT)
        unstaged = _keyed_pairs(region.unstaged, DiffSide.LEFT)
        rows: list[StagingRow] = []
        si = ui = 0

        while si < len(staged) or ui < len(unstaged):
            if ui >= len(unstaged) or (si < len(staged) and staged[si][0] < unstaged[ui][0]):
                rows.append(self._staged_row(staged[si][1]))
                si += 1
            elif si >= len(staged) or unstaged[ui][0] < staged[si][0]:
                rows.append(self._unstaged_row(unstaged[ui][1]))
                ui += 1
            elif staged[si][0][1] == 0:
                # HEAD-only and WORKTREE-only rows before the same INDEX line
                rows.append(self._staged_row(staged[si][1]))
                si += 1
            else:
                rows.append(self._shared_row(staged[si][1], unstaged[ui][1]))
                si += 1
                ui += 1

        return rows

    # --------------------------------------------------------
    # Row kinds
    # --------------------------------------------------------

    def _staged_row(self, pair: LinePair) -> StagingRow:
        """Row driven by the staged diff only; WORKTREE mirrors INDEX."""
        mid = PaneValue(pair.right_text, pair.right_type, pair.right_lineno)
        row = StagingRow(
            left=PaneValue(pair.left_text, pair.left_type, pair.left_lineno),
            mid=mid,
            right=_mirror(mid, self.worktree_offset),
        )
        self.head_offset += _offset_delta(pair)
        return row

    def _unstaged_row(self, pair: LinePair) -> StagingRow:
        """Row driven by the unstaged diff only; HEAD mirrors INDEX."""
        mid = PaneValue(pair.left_text, pair.left_type, pair.left_lineno)
        row = StagingRow(
            left=_mirror(mid, self.head_offset),
            mid=mid,
            right=PaneValue(pair.right_text, pair.right_type, pair.right_lineno),
        )
        self.worktree_offset -= _offset_delta(pair)
        return row

    def _shared_row(self, staged: LinePair, unstaged: LinePair) -> StagingRow:
        """Row at an INDEX line that both diffs cover.

        A context pair does not drive its outer pane, so a change on only one
        side still mirrors on the other. When both pairs change the line,
        each pane keeps its own value.
        """
        if staged.is_context and not unstaged.is_context:
            row = self._unstaged_row(unstaged)
            return replace(row, left=replace(row.left, lineno=staged.left_lineno))
        if unstaged.is_context and not staged.is_context:
            row = self._staged_row(staged)
            return replace(row, right=replace(row.right, lineno=unstaged.right_lineno))

        self.head_offset += _offset_delta(staged)
        self.worktree_offset -= _offset_delta(unstaged)
        return StagingRow(
            left=PaneValue(staged.left_text, staged.left_type, staged.left_lineno),
            mid=PaneValue(staged.right_text, staged.right_type, staged.right_lineno),
            right=PaneValue(unstaged.right_text, unstaged.right_type, unstaged.right_lineno),
        )


def _mirror(mid: PaneValue, offset: int) -> PaneValue:
    lineno = None if mid.type == LineType.FILLER or mid.lineno is None else mid.lineno + offset
    return PaneValue(mid.text, mid.type, lineno, PaneSource.MIRRORED_FROM_MID)


def _offset_delta(pair: LinePair) -> int:
    """+1 for a left-only row, -1 for a right-only row, 0 otherwise."""
    left_present = pair.left_type != LineType.FILLER
    right_present = pair.right_type != LineType.FILLER
    if left_present and not right_present:
        return 1
    if right_present and not left_present:
        return -1
    return 0


def build_staging_rows(file_diff: ThreeWayFileDiff) -> list[list[StagingRow]]:
    """Source-tagged rows for each region of a file, in INDEX order."""
    walk = _StagingWalk()
    regions = group_regions(file_diff.staged_hunks, file_diff.unstaged_hunks)
    logger.debug(
        "%s: %d staged + %d unstaged hunks -> %d regions",
        file_diff.path,
        len(file_diff.staged_hunks),
        len(file_diff.unstaged_hunks),
        len(regions),
    )
    return [walk.rows_for(region) for region in regions]


# ============================================================
# Public API
# ============================================================


def align_three_way(file_diff: ThreeWayFileDiff) -> AlignedThreeWayDiff:
    """Align a staging file diff into HEAD | INDEX | WORKTREE panes.

    Each region of overlapping hunks gets its own 1-based hunk_index. A row
    is a hunk boundary when any pane is non-context and the previous row of
    its region was all-context (or it is the region's first row).

    Args:
        file_diff: Staged and unstaged hunks for one path

    Returns:
        AlignedThreeWayDiff with equal-length pane lists and line map
    """
    aligned = AlignedThreeWayDiff()

    for hunk_index, rows in enumerate(build_staging_rows(file_diff), start=1):
        prev_context = True
        for row in rows:
            is_context = row.is_context
            aligned.left_lines.append(row.left.text or "")
            aligned.mid_lines.append(row.mid.text or "")
            aligned.right_lines.append(row.right.text or "")
            aligned.line_map.append(
                ThreeWayLineInfo(
                    left_type=row.left.type,
                    mid_type=row.mid.type,
                    right_type=row.right.type,
                    left_lineno=row.left.lineno,
                    mid_lineno=row.mid.lineno,
                    right_lineno=row.right.lineno,
                    hunk_index=hunk_index,
                    is_hunk_boundary=not is_context and prev_context,
                )
            )
            prev_context = is_context

    return aligned


def compute_fold_ranges(
    line_map: Sequence[ThreeWayLineInfo],
    context_lines: int = DEFAULT_FOLD_CONTEXT_LINES,
) -> list[tuple[int, int]]:
    """Buffer line ranges of unchanged rows that can be folded away.

    Rows within `context_lines` of a non-context row stay visible. Runs of
    hidden rows shorter than MIN_FOLD_SIZE are not folded. Accepts two-pane
    line maps as well.

    Returns:
        Inclusive 1-based (start, end) ranges, ascending
    """
    total = len(line_map)
    visible = [False] * total
    for i, info in enumerate(line_map):
        if info.is_context:
            continue
        for j in range(max(0, i - context_lines), min(total, i + context_lines + 1)):
            visible[j] = True

    ranges: list[tuple[int, int]] = []
    run_start: int | None = None
    for i in range(total + 1):
        hidden = i < total and not visible[i]
        if hidden and run_start is None:
            run_start = i
        elif not hidden and run_start is not None:
            if i - run_start >= MIN_FOLD_SIZE:
                ranges.append((run_start + 1, i))
            run_start = None

    return ranges
