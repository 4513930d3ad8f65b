"""Domain models for side-by-side git diffs.

Parse-once pattern: unified diff text is classified into line pairs at the
boundary (see infrastructure.git.diff_parser). Everything downstream works on
the typed LinePair / Hunk / FileDiff models defined here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d*))? \+(\d+)(?:,(\d*))? @@")


# ============================================================
# Enums
# ============================================================


class LineType(Enum):
    """Classification of one side of a diff row."""

    CONTEXT = "context"
    CHANGE = "change"
    DELETE = "delete"
    ADD = "add"
    FILLER = "filler"


class DiffSide(Enum):
    """Pane a line number or annotation belongs to.

    LEFT/RIGHT are the two panes of a side-by-side diff. MID is the INDEX
    pane of the three-pane staging view.
    """

    LEFT = "LEFT"
    MID = "MID"
    RIGHT = "RIGHT"

    @classmethod
    def from_string(cls, value: str) -> DiffSide:
        """Parse a DiffSide from its string value (case-insensitive).

        Raises:
            ValueError: If value is not a valid side
        """
        value_upper = value.upper()
        for member in cls:
            if member.value == value_upper:
                return member
        valid_values = [m.value for m in cls]
        raise ValueError(
            f"Invalid diff side: {value}. Must be one of: {', '.join(valid_values)}"
        )


# ============================================================
# Domain Models
# ============================================================


@dataclass(frozen=True)
class LinePair:
    """One row of a hunk before flattening.

    A side whose text is None has no line at this row (its type is FILLER).
    Use the factory methods rather than the constructor so that a context
    row always carries both sides.
    """

    left_type: LineType
    right_type: LineType
    left_text: str | None = None
    right_text: str | None = None
    left_lineno: int | None = None
    right_lineno: int | None = None

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def context(cls, text: str, left_lineno: int, right_lineno: int) -> LinePair:
        return cls(
            left_type=LineType.CONTEXT,
            right_type=LineType.CONTEXT,
            left_text=text,
            right_text=text,
            left_lineno=left_lineno,
            right_lineno=right_lineno,
        )

    @classmethod
    def change(
        cls,
        left_text: str,
        left_lineno: int,
        right_text: str,
        right_lineno: int,
    ) -> LinePair:
        return cls(
            left_type=LineType.CHANGE,
            right_type=LineType.CHANGE,
            left_text=left_text,
            right_text=right_text,
            left_lineno=left_lineno,
            right_lineno=right_lineno,
        )

    @classmethod
    def delete(cls, text: str, left_lineno: int) -> LinePair:
        """A line present only on the left; the right side is filler."""
        return cls(
            left_type=LineType.DELETE,
            right_type=LineType.FILLER,
            left_text=text,
            left_lineno=left_lineno,
        )

    @classmethod
    def add(cls, text: str, right_lineno: int) -> LinePair:
        """A line present only on the right; the left side is filler."""
        return cls(
            left_type=LineType.FILLER,
            right_type=LineType.ADD,
            right_text=text,
            right_lineno=right_lineno,
        )

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def is_context(self) -> bool:
        return self.left_type == LineType.CONTEXT and self.right_type == LineType.CONTEXT


@dataclass(frozen=True)
class HunkHeader:
    """Parsed `@@ -a,b +c,d @@` header of a unified diff hunk."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    raw_text: str = ""

    @classmethod
    def from_line(cls, line: str) -> HunkHeader | None:
        """Parse a hunk header line.

        A missing count means a single line, as in `@@ -3 +3 @@`.

        Returns:
            Parsed header, or None if the line is not a hunk header
        """
        match = _HUNK_HEADER_RE.match(line)
        if not match:
            return None
        return cls(
            old_start=int(match.group(1)),
            old_count=int(match.group(2)) if match.group(2) else 1,
            new_start=int(match.group(3)),
            new_count=int(match.group(4)) if match.group(4) else 1,
            raw_text=line,
        )

    def anchor_range(self, side: DiffSide) -> tuple[int, int]:
        """Inclusive line range this hunk covers on one side.

        A zero count (pure insertion or pure removal) still occupies the
        start line so that it sorts and groups next to its neighbours.
        """
        if side == DiffSide.LEFT:
            start, count = self.old_start, self.old_count
        else:
            start, count = self.new_start, self.new_count
        return start, start + max(count, 1) - 1


@dataclass
class Hunk:
    """A contiguous block of a diff sharing one @@ header."""

    header: HunkHeader
    pairs: list[LinePair] = field(default_factory=list)

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_hunk_lines(cls, header: HunkHeader, hunk_lines: list[str]) -> Hunk:
        """Classify the body lines of a hunk into side-by-side pairs.

        Runs of `-` and `+` lines are paired up as CHANGE rows; surplus
        deletions become DELETE/FILLER rows and surplus additions become
        FILLER/ADD rows, in that order.

        Args:
            header: Parsed @@ header for this hunk
            hunk_lines: Body lines with their `+`/`-`/` ` prefix

        Returns:
            Hunk with classified pairs
        """
        pairs: list[LinePair] = []
        old_lineno = header.old_start
        new_lineno = header.new_start
        deleted: list[tuple[str, int]] = []
        added: list[tuple[str, int]] = []

        def flush_run() -> None:
            pairs.extend(pair_change_run(deleted, added))
            deleted.clear()
            added.clear()

        for line in hunk_lines:
            prefix, content = line[:1], line[1:]
            if prefix == "-":
                deleted.append((content, old_lineno))
                old_lineno += 1
            elif prefix == "+":
                added.append((content, new_lineno))
                new_lineno += 1
            elif prefix == "\\":
                # "\ No newline at end of file" belongs to the current run
                continue
            else:
                flush_run()
                pairs.append(LinePair.context(content, old_lineno, new_lineno))
                old_lineno += 1
                new_lineno += 1

        flush_run()
        return cls(header=header, pairs=pairs)

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def additions(self) -> int:
        return sum(1 for p in self.pairs if p.right_type in (LineType.ADD, LineType.CHANGE))

    @property
    def deletions(self) -> int:
        return sum(1 for p in self.pairs if p.left_type in (LineType.DELETE, LineType.CHANGE))


def pair_change_run(
    deleted: list[tuple[str, int]],
    added: list[tuple[str, int]],
) -> list[LinePair]:
    """Pair a run of deleted and added lines side by side.

    Args:
        deleted: (text, old line number) for each `-` line, in order
        added: (text, new line number) for each `+` line, in order

    Returns:
        CHANGE pairs for the common prefix, then DELETE rows, then ADD rows
    """
    paired = min(len(deleted), len(added))
    result = [
        LinePair.change(deleted[i][0], deleted[i][1], added[i][0], added[i][1])
        for i in range(paired)
    ]
    result.extend(LinePair.delete(text, lineno) for text, lineno in deleted[paired:])
    result.extend(LinePair.add(text, lineno) for text, lineno in added[paired:])
    return result


@dataclass
class FileDiff:
    """All hunks of one file in a diff.

    Status is a single letter: M (modified), A (added), D (deleted),
    R (renamed), C (copied), U (unmerged).
    """

    old_path: str
    new_path: str
    status: str = "M"
    hunks: list[Hunk] = field(default_factory=list)
    additions: int = 0
    deletions: int = 0
    is_binary: bool = False

    @classmethod
    def from_hunks(
        cls,
        old_path: str,
        new_path: str,
        hunks: list[Hunk],
        status: str | None = None,
        is_binary: bool = False,
    ) -> FileDiff:
        """Build a FileDiff and count its additions/deletions from the hunks."""
        return cls(
            old_path=old_path,
            new_path=new_path,
            status=status or detect_file_status(old_path, new_path),
            hunks=hunks,
            additions=sum(h.additions for h in hunks),
            deletions=sum(h.deletions for h in hunks),
            is_binary=is_binary,
        )

    @property
    def path(self) -> str:
        """Path used to identify the file (new path unless it is empty)."""
        return self.new_path if self.new_path else self.old_path

    @property
    def is_empty(self) -> bool:
        return not self.hunks


def detect_file_status(old_path: str, new_path: str) -> str:
    """Derive a file status letter from the a/ and b/ paths."""
    if old_path in ("", "/dev/null"):
        return "A"
    if new_path in ("", "/dev/null"):
        return "D"
    if old_path != new_path:
        return "R"
    return "M"
