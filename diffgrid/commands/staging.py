"""Staging view command.

Prints the HEAD | INDEX | WORKTREE view of a repository's staged and
unstaged changes, or the OURS | BASE | THEIRS view of its merge conflicts.
"""

from __future__ import annotations

import sys

from diffgrid.domain.diff_source import DiffSource, DiffSourceType
from diffgrid.infrastructure.text_render import format_json, format_three_way_text
from diffgrid.services.git_operations import GitDiffError, GitOperationsService, GitRepositoryError
from diffgrid.services.three_way import DEFAULT_FOLD_CONTEXT_LINES, align_three_way, compute_fold_ranges


def cmd_staging(
    repo_path: str = ".",
    output_format: str = "text",
    merge: bool = False,
    fold: bool = True,
    context_lines: int = DEFAULT_FOLD_CONTEXT_LINES,
) -> int:
    """Print the three-pane staging (or merge) view.

    Args:
        repo_path: Repository to inspect
        output_format: 'text' (default) or 'json'
        merge: Show conflicted files instead of staged/unstaged changes
        fold: Fold unchanged runs in text output
        context_lines: Unchanged lines kept around each change when folding

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    source = DiffSource(type=DiffSourceType.MERGE if merge else DiffSourceType.THREE_WAY)
    service = GitOperationsService(repo_path)

    try:
        files = service.source_files(source)
    except (GitRepositoryError, GitDiffError) as e:
        print(str(e), file=sys.stderr)
        return 1

    if output_format == "json":
        payload = [
            {"path": f.path, "status": f.status, **align_three_way(f).to_dict()}
            for f in files
        ]
        print(format_json(payload))
        return 0

    print(source.title(len(files)))
    for file_diff in files:
        aligned = align_three_way(file_diff)
        folds = compute_fold_ranges(aligned.line_map, context_lines) if fold else None
        header = f"\n{file_diff.status} {file_diff.path} (+{file_diff.additions} -{file_diff.deletions})"
        print(format_three_way_text(aligned, title=header, fold_ranges=folds))
    return 0
