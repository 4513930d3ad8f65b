"""Tests for unified diff parsing.

Tests cover:
- Hunk header parsing with and without counts
- Classification of hunk lines into side-by-side pairs
- File status detection (added, deleted, renamed, binary)
- Hunk content that looks like file headers
"""

import tempfile
import unittest

from diffgrid.domain.diff import DiffSide, HunkHeader, LineType
from diffgrid.infrastructure.git.diff_parser import has_content, parse_unified_diff, read_diff

MODIFIED_DIFF = """diff --git a/src/app.py b/src/app.py
index 1111111..2222222 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,4 +1,5 @@
 import os
-import sys
+import sys, json
+import re

 def main():
@@ -10,2 +11,2 @@ def main():
     x = 1
-    return x
+    return x + 1
"""


class TestHunkHeader(unittest.TestCase):
    """Tests for HunkHeader.from_line."""

    def test_parses_all_counts(self):
        """Test that start and count are read for both sides."""
        header = HunkHeader.from_line("@@ -10,4 +12,6 @@ def foo():")
        self.assertEqual(
            (header.old_start, header.old_count, header.new_start, header.new_count),
            (10, 4, 12, 6),
        )

    def test_missing_count_means_one_line(self):
        """Test that `@@ -3 +3 @@` has counts of 1."""
        header = HunkHeader.from_line("@@ -3 +3 @@")
        self.assertEqual(header.old_count, 1)
        self.assertEqual(header.new_count, 1)

    def test_non_header_returns_none(self):
        """Test that ordinary lines are not parsed as headers."""
        self.assertIsNone(HunkHeader.from_line("+@@ not a header"))

    def test_anchor_range_zero_count_occupies_start(self):
        """Test that a pure insertion still covers its start line."""
        header = HunkHeader.from_line("@@ -4,0 +5,2 @@")
        self.assertEqual(header.anchor_range(DiffSide.LEFT), (4, 4))
        self.assertEqual(header.anchor_range(DiffSide.RIGHT), (5, 6))


class TestParseUnifiedDiff(unittest.TestCase):
    """Tests for parse_unified_diff."""

    def test_parses_file_and_hunks(self):
        """Test that a modified file yields its hunks in order."""
        files = parse_unified_diff(MODIFIED_DIFF)

        self.assertEqual(len(files), 1)
        self.assertEqual(files[0].path, "src/app.py")
        self.assertEqual(files[0].status, "M")
        self.assertEqual(len(files[0].hunks), 2)

    def test_pairs_change_runs(self):
        """Test that one deletion and two additions become change + add rows."""
        pairs = parse_unified_diff(MODIFIED_DIFF)[0].hunks[0].pairs

        types = [(p.left_type, p.right_type) for p in pairs]
        self.assertEqual(
            types,
            [
                (LineType.CONTEXT, LineType.CONTEXT),
                (LineType.CHANGE, LineType.CHANGE),
                (LineType.FILLER, LineType.ADD),
                (LineType.CONTEXT, LineType.CONTEXT),
                (LineType.CONTEXT, LineType.CONTEXT),
            ],
        )
        self.assertEqual(pairs[1].left_text, "import sys")
        self.assertEqual(pairs[1].right_text, "import sys, json")
        self.assertEqual(pairs[2].right_lineno, 3)
        self.assertIsNone(pairs[2].left_lineno)

    def test_line_numbers_follow_both_sides(self):
        """Test that context after an addition is offset on the right."""
        pairs = parse_unified_diff(MODIFIED_DIFF)[0].hunks[0].pairs

        self.assertEqual((pairs[4].left_lineno, pairs[4].right_lineno), (4, 5))

    def test_counts_additions_and_deletions(self):
        """Test that change rows count on both sides."""
        file_diff = parse_unified_diff(MODIFIED_DIFF)[0]

        self.assertEqual(file_diff.additions, 3)
        self.assertEqual(file_diff.deletions, 2)

    def test_surplus_deletions_get_filler(self):
        """Test that extra deletions become DELETE/FILLER rows."""
        diff = "diff --git a/f b/f\n@@ -1,3 +1,1 @@\n-a\n-b\n+A\n c\n"
        pairs = parse_unified_diff(diff)[0].hunks[0].pairs

        self.assertEqual(pairs[0].left_type, LineType.CHANGE)
        self.assertEqual(pairs[1].left_type, LineType.DELETE)
        self.assertEqual(pairs[1].right_type, LineType.FILLER)
        self.assertIsNone(pairs[1].right_text)

    def test_new_file_status(self):
        """Test that /dev/null as the old file marks an addition."""
        diff = (
            "diff --git a/new.txt b/new.txt\n"
            "new file mode 100644\n"
            "--- /dev/null\n"
            "+++ b/new.txt\n"
            "@@ -0,0 +1,2 @@\n"
            "+one\n"
            "+two\n"
        )
        file_diff = parse_unified_diff(diff)[0]

        self.assertEqual(file_diff.status, "A")
        self.assertTrue(all(p.left_type == LineType.FILLER for p in file_diff.hunks[0].pairs))

    def test_deleted_file_status(self):
        """Test that /dev/null as the new file marks a deletion."""
        diff = "diff --git a/old.txt b/old.txt\n--- a/old.txt\n+++ /dev/null\n@@ -1 +0,0 @@\n-gone\n"
        self.assertEqual(parse_unified_diff(diff)[0].status, "D")

    def test_rename_status(self):
        """Test that rename headers mark the file as renamed."""
        diff = (
            "diff --git a/old.py b/new.py\n"
            "similarity index 100%\n"
            "rename from old.py\n"
            "rename to new.py\n"
        )
        file_diff = parse_unified_diff(diff)[0]

        self.assertEqual(file_diff.status, "R")
        self.assertEqual(file_diff.old_path, "old.py")
        self.assertEqual(file_diff.path, "new.py")
        self.assertTrue(file_diff.is_empty)

    def test_binary_file(self):
        """Test that binary markers are recorded."""
        diff = "diff --git a/logo.png b/logo.png\nBinary files a/logo.png and b/logo.png differ\n"
        self.assertTrue(parse_unified_diff(diff)[0].is_binary)

    def test_header_like_content_inside_hunk(self):
        """Test that a deleted '-- comment' line is hunk content, not a header."""
        diff = "diff --git a/q.sql b/q.sql\n@@ -1,2 +1,1 @@\n--- comment\n select 1;\n"
        file_diff = parse_unified_diff(diff)[0]

        self.assertEqual(file_diff.status, "M")
        self.assertEqual(file_diff.hunks[0].pairs[0].left_text, "-- comment")
        self.assertEqual(file_diff.hunks[0].pairs[0].left_type, LineType.DELETE)

    def test_no_newline_marker_is_ignored(self):
        """Test that the no-newline marker produces no row."""
        diff = "diff --git a/f b/f\n@@ -1 +1 @@\n-a\n\\ No newline at end of file\n+b\n"
        pairs = parse_unified_diff(diff)[0].hunks[0].pairs

        self.assertEqual(len(pairs), 1)
        self.assertEqual(pairs[0].left_type, LineType.CHANGE)

    def test_multiple_files(self):
        """Test that each diff --git section becomes one file."""
        diff = MODIFIED_DIFF + "diff --git a/b.txt b/b.txt\n@@ -1 +1 @@\n-x\n+y\n"
        self.assertEqual([f.path for f in parse_unified_diff(diff)], ["src/app.py", "b.txt"])

    def test_empty_input(self):
        """Test that empty input yields no files."""
        self.assertEqual(parse_unified_diff(""), [])


class TestDiffInput(unittest.TestCase):
    """Tests for reading diff input."""

    def test_has_content(self):
        """Test detection of meaningful diff content."""
        self.assertTrue(has_content(MODIFIED_DIFF))
        self.assertTrue(has_content("@@ -1 +1 @@\n-a\n+b"))
        self.assertFalse(has_content("   \n"))
        self.assertFalse(has_content("hello"))

    def test_read_diff_from_file(self):
        """Test that read_diff reads the given file."""
        with tempfile.NamedTemporaryFile("w", suffix=".diff", delete=False) as f:
            f.write(MODIFIED_DIFF)

        self.assertEqual(read_diff(f.name), MODIFIED_DIFF)

    def test_read_diff_missing_file_raises(self):
        """Test that a missing file raises FileNotFoundError."""
        with self.assertRaises(FileNotFoundError):
            read_diff("/nonexistent/path.diff")


if __name__ == "__main__":
    unittest.main()
