"""Infrastructure for reading and parsing unified git diffs.

Reads diff text from stdin or files and parses it into FileDiff models with
side-by-side classified hunks.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path

from diffgrid.domain.diff import FileDiff, Hunk, HunkHeader, detect_file_status

_DIFF_GIT_RE = re.compile(r'^diff --git "?a/(.+?)"? "?b/(.+?)"?$')


# ============================================================
# Input Functions
# ============================================================


def read_diff_from_stdin() -> str:
    return sys.stdin.read()


def read_diff_from_file(path: str | Path) -> str:
    """Read diff content from a file.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    with open(path) as f:
        return f.read()


def read_diff(input_file: str | None = None) -> str:
    """Read diff content from stdin or a file.

    Args:
        input_file: Optional path to read from. If None, reads from stdin.
    """
    if input_file is None:
        return read_diff_from_stdin()
    return read_diff_from_file(input_file)


def has_content(diff_content: str) -> bool:
    """Check if the diff has any meaningful content."""
    stripped = diff_content.strip()
    if not stripped:
        return False
    return "diff --git" in stripped or stripped.startswith("@@")


# ============================================================
# Parsing
# ============================================================


@dataclass
class _FileBuilder:
    """Accumulates one file's header fields and raw hunks while scanning."""

    old_path: str
    new_path: str
    status: str
    is_binary: bool = False
    raw_hunks: list[tuple[HunkHeader, list[str]]] = field(default_factory=list)

    def build(self) -> FileDiff:
        hunks = [
            Hunk.from_hunk_lines(header, _strip_trailing_blank(lines))
            for header, lines in self.raw_hunks
        ]
        return FileDiff.from_hunks(
            old_path=self.old_path,
            new_path=self.new_path,
            hunks=hunks,
            status=self.status,
            is_binary=self.is_binary,
        )


def _strip_trailing_blank(lines: list[str]) -> list[str]:
    end = len(lines)
    while end > 0 and lines[end - 1] == "":
        end -= 1
    return lines[:end]


def _start_file(line: str) -> _FileBuilder | None:
    match = _DIFF_GIT_RE.match(line)
    if not match:
        return None
    old_path, new_path = match.group(1), match.group(2)
    return _FileBuilder(
        old_path=old_path,
        new_path=new_path,
        status=detect_file_status(old_path, new_path),
    )


def parse_unified_diff(diff_content: str) -> list[FileDiff]:
    """Parse `git diff` output into FileDiffs with side-by-side hunks.

    Lines inside a hunk are hunk content even when they look like file
    headers: a deleted line "-- comment" appears as "--- comment".

    Args:
        diff_content: Raw output from git diff, git show or gh pr diff

    Returns:
        One FileDiff per `diff --git` section, in order
    """
    files: list[FileDiff] = []
    current_file: _FileBuilder | None = None
    current_header: HunkHeader | None = None
    current_lines: list[str] = []

    def finish_hunk() -> None:
        nonlocal current_header, current_lines
        if current_file is not None and current_header is not None:
            current_file.raw_hunks.append((current_header, current_lines))
        current_header = None
        current_lines = []

    def finish_file() -> None:
        nonlocal current_file
        finish_hunk()
        if current_file is not None:
            files.append(current_file.build())
        current_file = None

    for line in diff_content.split("\n"):
        if line.startswith("diff --git "):
            finish_file()
            current_file = _start_file(line)

        elif line.startswith("@@"):
            finish_hunk()
            current_header = HunkHeader.from_line(line)

        elif current_header is not None:
            current_lines.append(line)

        elif current_file is None:
            continue

        elif line.startswith("Binary files") or "GIT binary patch" in line:
            current_file.is_binary = True

        elif line.startswith("--- /dev/null"):
            current_file.status = "A"

        elif line.startswith("+++ /dev/null"):
            current_file.status = "D"

        elif line.startswith("rename from "):
            current_file.status = "R"

        elif line.startswith("copy from "):
            current_file.status = "C"

    finish_file()
    return files
