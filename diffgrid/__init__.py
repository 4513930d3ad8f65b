"""diffgrid: aligned diff views with review overlays.

Turns unified diffs into equal-length side-by-side line grids, merges staged
and unstaged changes into a HEAD | INDEX | WORKTREE grid, and positions pull
request review threads on those grids.

Usage:
    python -m diffgrid <command> [options]
    diffgrid <command> [options]

Structure:
    diffgrid/
    ├── __main__.py          # Entry point dispatcher
    ├── domain/              # Domain models (parse-once pattern)
    │   ├── diff.py          # LinePair, Hunk, FileDiff
    │   ├── aligned.py       # AlignedDiff, AlignedThreeWayDiff
    │   ├── diff_source.py   # DiffSource, ref_for_source
    │   └── review.py        # ReviewThread, PendingComment, OverlayPlan
    ├── services/            # Alignment, overlay and git services
    │   ├── hunk_aligner.py
    │   ├── three_way.py
    │   ├── overlay.py
    │   ├── thread_navigator.py
    │   ├── thread_formatter.py
    │   ├── review_session.py
    │   └── git_operations.py
    ├── infrastructure/      # Diff parsing and text output
    │   ├── git/diff_parser.py
    │   └── text_render.py
    └── commands/            # Thin command orchestrators
        ├── align.py
        ├── staging.py
        └── refs.py
"""
