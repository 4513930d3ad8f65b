"""Align diff command.

Thin command that reads a unified diff from stdin or a file and prints each
file as a two-pane side-by-side grid, optionally with review threads
overlaid from a saved GraphQL response.
"""

from __future__ import annotations

import json
import logging
import sys

from diffgrid.domain.review import parse_review_threads
from diffgrid.infrastructure.git.diff_parser import has_content, parse_unified_diff, read_diff
from diffgrid.infrastructure.text_render import format_aligned_text, format_json
from diffgrid.services.hunk_aligner import align
from diffgrid.services.review_session import ReviewSession

logger = logging.getLogger(__name__)


def cmd_align(
    input_file: str | None = None,
    output_format: str = "text",
    path: str | None = None,
    threads_file: str | None = None,
) -> int:
    """Print the two-pane alignment of each file in a diff.

    Args:
        input_file: Optional path to read diff from. If None, reads from stdin.
        output_format: 'text' (default) or 'json'
        path: Only show this file
        threads_file: Optional reviewThreads GraphQL response (JSON) to overlay

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    # --------------------------------------------------------
    # 1. Read diff input
    # --------------------------------------------------------
    try:
        diff_content = read_diff(input_file)
    except FileNotFoundError:
        print(f"Input file not found: {input_file}", file=sys.stderr)
        return 1

    if not has_content(diff_content):
        print("No diff content", file=sys.stderr)
        return 1

    # --------------------------------------------------------
    # 2. Load review threads
    # --------------------------------------------------------
    session = None
    if threads_file:
        try:
            with open(threads_file) as f:
                threads, pr_node_id = parse_review_threads(json.load(f))
        except (OSError, ValueError) as e:
            print(f"Failed to load review threads: {e}", file=sys.stderr)
            return 1
        session = ReviewSession(threads, pr_node_id=pr_node_id)

    # --------------------------------------------------------
    # 3. Align and output
    # --------------------------------------------------------
    files = [f for f in parse_unified_diff(diff_content) if path is None or f.path == path]
    if path is not None and not files:
        print(f"File not in diff: {path}", file=sys.stderr)
        return 1

    results = []
    for file_diff in files:
        aligned = align(file_diff)
        logger.debug("%s: %d hunks -> %d rows", file_diff.path, len(file_diff.hunks), len(aligned))
        plan = session.overlay_for(file_diff.path, aligned.line_map) if session else None

        if output_format == "json":
            entry = {"path": file_diff.path, "status": file_diff.status, **aligned.to_dict()}
            if plan is not None:
                entry["threads"] = {str(line): t.id for line, t in plan.positions.items()}
            results.append(entry)
        else:
            header = f"{file_diff.status} {file_diff.path} (+{file_diff.additions} -{file_diff.deletions})"
            if file_diff.is_binary:
                results.append(f"{header}\n  Binary file")
            else:
                results.append(format_aligned_text(aligned, title=header, plan=plan))

    if output_format == "json":
        print(format_json(results))
    else:
        print("\n\n".join(results))
    return 0
