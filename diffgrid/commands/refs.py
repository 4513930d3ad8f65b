"""Refs command.

Prints which git ref each pane of a diff source reads its content from.
"""

from __future__ import annotations

import sys

from diffgrid.domain.diff import DiffSide
from diffgrid.domain.diff_source import DiffSource, DiffSourceType, ref_for_source


def cmd_refs(source: str, ref: str | None = None, range_expr: str | None = None) -> int:
    """Print "SIDE<TAB>ref" for each pane of the source, plus its git command.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        diff_source = DiffSource(type=DiffSourceType.from_string(source), ref=ref, range=range_expr)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    sides = [DiffSide.LEFT, DiffSide.RIGHT]
    if diff_source.is_three_way:
        sides.insert(1, DiffSide.MID)

    for side in sides:
        print(f"{side.value}\t{ref_for_source(diff_source, side)}")

    if not diff_source.is_three_way:
        try:
            print("git " + " ".join(diff_source.git_args()))
        except ValueError as e:
            print(str(e), file=sys.stderr)
            return 1
    return 0
