"""Tests for review overlay positioning.

Tests cover:
- Mapping threads and pending comments onto buffer lines by side
- Dropping threads with no current anchor
- Filler balancing between panes for collapsed and expanded threads
- Position map used for thread navigation
"""

import unittest

from diffgrid.domain.aligned import AlignedLineInfo
from diffgrid.domain.diff import DiffSide, LineType
from diffgrid.domain.review import PendingComment, ReviewComment, ReviewThread
from diffgrid.services.overlay import (
    build_overlay_plan,
    group_threads_by_path,
    map_pending_to_lines,
    map_threads_to_lines,
)


# ============================================================
# Test Fixtures
# ============================================================


def make_line_map(total: int = 10, right_offset: int = 2) -> list[AlignedLineInfo]:
    """Context rows where buffer line i shows left line i and right line i + right_offset."""
    return [
        AlignedLineInfo(LineType.CONTEXT, LineType.CONTEXT, i, i + right_offset, hunk_index=1)
        for i in range(1, total + 1)
    ]


def make_thread(
    thread_id: str = "T1",
    line: int | None = 5,
    side: DiffSide = DiffSide.RIGHT,
    bodies: tuple[str, ...] = ("Looks good",),
    path: str = "src/app.py",
) -> ReviewThread:
    return ReviewThread(
        id=thread_id,
        path=path,
        line=line,
        diff_side=side,
        comments=tuple(ReviewComment(author="alice", body=b) for b in bodies),
    )


class TestMapThreadsToLines(unittest.TestCase):
    """Tests for map_threads_to_lines."""

    def test_right_thread_maps_by_right_line_number(self):
        """Test that a RIGHT thread on line 5 lands where right_lineno is 5."""
        positions = map_threads_to_lines([make_thread(line=5)], make_line_map())

        self.assertEqual(list(positions), [3])
        self.assertEqual(positions[3][0].id, "T1")

    def test_left_thread_maps_by_left_line_number(self):
        """Test that a LEFT thread uses left_lineno."""
        positions = map_threads_to_lines([make_thread(line=5, side=DiffSide.LEFT)], make_line_map())

        self.assertEqual(list(positions), [5])

    def test_thread_without_line_is_dropped(self):
        """Test that an outdated thread with no line maps to nothing."""
        self.assertEqual(map_threads_to_lines([make_thread(line=None)], make_line_map()), {})

    def test_thread_outside_diff_is_dropped(self):
        """Test that a line not shown in the diff maps to nothing."""
        self.assertEqual(map_threads_to_lines([make_thread(line=500)], make_line_map()), {})

    def test_same_line_keeps_input_order(self):
        """Test that threads on one line accumulate in input order."""
        threads = [make_thread("A"), make_thread("B"), make_thread("C")]

        positions = map_threads_to_lines(threads, make_line_map())

        self.assertEqual([t.id for t in positions[3]], ["A", "B", "C"])

    def test_filler_rows_never_match(self):
        """Test that a filler pane's missing line number is not matched."""
        line_map = [AlignedLineInfo(LineType.DELETE, LineType.FILLER, 7, None, hunk_index=1)]

        self.assertEqual(map_threads_to_lines([make_thread(line=7)], line_map), {})

    def test_empty_inputs(self):
        """Test that no threads or no lines give an empty map."""
        self.assertEqual(map_threads_to_lines([], make_line_map()), {})
        self.assertEqual(map_threads_to_lines([make_thread()], []), {})


class TestGroupThreadsByPath(unittest.TestCase):
    """Tests for group_threads_by_path."""

    def test_partitions_preserving_order(self):
        """Test that threads are grouped by path in input order."""
        threads = [
            make_thread("A", path="a.py"),
            make_thread("B", path="b.py"),
            make_thread("C", path="a.py"),
        ]

        grouped = group_threads_by_path(threads)

        self.assertEqual(list(grouped), ["a.py", "b.py"])
        self.assertEqual([t.id for t in grouped["a.py"]], ["A", "C"])

    def test_empty(self):
        """Test that no threads give an empty map."""
        self.assertEqual(group_threads_by_path([]), {})


class TestBuildOverlayPlan(unittest.TestCase):
    """Tests for build_overlay_plan."""

    def test_two_collapsed_right_threads_fill_left(self):
        """Test that two one-line RIGHT blocks need two filler lines on the left."""
        plan = build_overlay_plan([make_thread("A"), make_thread("B")], make_line_map())

        self.assertEqual(plan.filler_left, {3: 2})
        self.assertEqual(plan.filler_right, {})

    def test_one_thread_per_side_is_balanced(self):
        """Test that equal heights on both sides need no filler."""
        threads = [make_thread("A", line=5), make_thread("B", line=3, side=DiffSide.LEFT)]

        plan = build_overlay_plan(threads, make_line_map())

        self.assertEqual(plan.lines[3].filler_left, 0)
        self.assertEqual(plan.lines[3].filler_right, 0)
        self.assertEqual(plan.filler_left, {})

    def test_expanded_height_counts_comments_and_body_lines(self):
        """Test expanded height: headers, body lines, separators and border."""
        thread = make_thread("A", bodies=("one", "two\nlines"))

        plan = build_overlay_plan([thread], make_line_map(), collapsed={"A": False})

        self.assertEqual(plan.lines[3].right_height, 7)
        self.assertEqual(plan.filler_left, {3: 7})

    def test_threads_default_to_collapsed(self):
        """Test that threads missing from the collapse state render as one line."""
        thread = make_thread("A", bodies=("one", "two\nlines"))

        plan = build_overlay_plan([thread], make_line_map())

        self.assertEqual(plan.lines[3].right_height, 1)

    def test_balance_holds_for_every_line(self):
        """Test that height plus filler is equal on both sides at each line."""
        threads = [
            make_thread("A", line=5, bodies=("a\nb\nc",)),
            make_thread("B", line=3, side=DiffSide.LEFT),
            make_thread("C", line=8),
        ]
        plan = build_overlay_plan(threads, make_line_map(), collapsed={"A": False})

        for overlay in plan.lines.values():
            self.assertEqual(
                overlay.left_height + overlay.filler_left,
                overlay.right_height + overlay.filler_right,
            )

    def test_pending_comment_is_one_line(self):
        """Test that a pending comment adds one line on its side."""
        pending = [PendingComment("src/app.py", 4, DiffSide.LEFT, "first\nsecond")]

        plan = build_overlay_plan([], make_line_map(), pending=pending)

        self.assertEqual(plan.lines[4].left_height, 1)
        self.assertEqual(plan.filler_right, {4: 1})
        self.assertEqual(plan.positions, {})

    def test_pending_and_thread_share_a_line(self):
        """Test that a pending comment and a thread on opposite sides balance."""
        pending = [PendingComment("src/app.py", 3, DiffSide.LEFT, "reply")]

        plan = build_overlay_plan([make_thread(line=5)], make_line_map(), pending=pending)

        self.assertEqual(len(plan.lines[3].threads), 1)
        self.assertEqual(len(plan.lines[3].pending), 1)
        self.assertEqual(plan.lines[3].filler_left, 0)

    def test_positions_hold_first_thread_per_line(self):
        """Test that the position map records the first thread at each line."""
        threads = [make_thread("A", line=5), make_thread("B", line=5), make_thread("C", line=9)]

        plan = build_overlay_plan(threads, make_line_map())

        self.assertEqual({line: t.id for line, t in plan.positions.items()}, {3: "A", 7: "C"})

    def test_custom_formatter_sets_heights(self):
        """Test that heights come from the supplied formatter."""
        plan = build_overlay_plan(
            [make_thread()],
            make_line_map(),
            formatter=lambda thread, collapsed: ["x", "y", "z"],
        )

        self.assertEqual(plan.filler_left, {3: 3})

    def test_no_threads_is_empty(self):
        """Test that nothing to place yields an empty plan."""
        self.assertTrue(build_overlay_plan([], make_line_map()).is_empty)


class TestMapPendingToLines(unittest.TestCase):
    """Tests for map_pending_to_lines."""

    def test_maps_by_side(self):
        """Test that pending comments resolve like threads."""
        pending = [
            PendingComment("f", 5, DiffSide.RIGHT, "r"),
            PendingComment("f", 5, DiffSide.LEFT, "l"),
            PendingComment("f", 99, DiffSide.RIGHT, "gone"),
        ]

        positions = map_pending_to_lines(pending, make_line_map())

        self.assertEqual({line: [c.body for c in cs] for line, cs in positions.items()}, {3: ["r"], 5: ["l"]})


if __name__ == "__main__":
    unittest.main()
