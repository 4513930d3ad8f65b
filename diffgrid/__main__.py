#!/usr/bin/env python3
"""CLI entry point for diffgrid.

Usage:
    python -m diffgrid <command> [options]

Commands:
    align     Side-by-side view of a unified diff (stdin or file)
    staging   HEAD | INDEX | WORKTREE view of the current repository
    refs      Show which ref each pane of a diff source reads from
"""

import argparse
import logging
import sys

from diffgrid.commands.align import cmd_align
from diffgrid.commands.refs import cmd_refs
from diffgrid.commands.staging import cmd_staging
from diffgrid.domain.diff_source import DiffSourceType
from diffgrid.services.three_way import DEFAULT_FOLD_CONTEXT_LINES


def main() -> int:
    parser = argparse.ArgumentParser(
        prog="diffgrid",
        description="Aligned side-by-side and three-pane diff views",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  git diff | python -m diffgrid align
  python -m diffgrid align --input-file pr.diff --threads-file threads.json
  python -m diffgrid staging --repo-path . --no-fold
  python -m diffgrid refs range --range main...feature
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # align command
    parser_align = subparsers.add_parser("align", help="Two-pane view of a unified diff")
    parser_align.add_argument(
        "--input-file",
        help="Path to diff file. If not provided, reads from stdin",
    )
    parser_align.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser_align.add_argument("--path", help="Only show this file")
    parser_align.add_argument(
        "--threads-file",
        help="GitHub reviewThreads GraphQL response (JSON) to overlay",
    )

    # staging command
    parser_staging = subparsers.add_parser("staging", help="Three-pane staging view")
    parser_staging.add_argument("--repo-path", default=".", help="Repository path (default: .)")
    parser_staging.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser_staging.add_argument(
        "--merge",
        action="store_true",
        help="Show OURS | BASE | THEIRS for conflicted files",
    )
    parser_staging.add_argument(
        "--no-fold",
        action="store_true",
        help="Show unchanged lines instead of folding them",
    )
    parser_staging.add_argument(
        "--context",
        type=int,
        default=DEFAULT_FOLD_CONTEXT_LINES,
        help=f"Unchanged lines kept around changes when folding (default: {DEFAULT_FOLD_CONTEXT_LINES})",
    )

    # refs command
    parser_refs = subparsers.add_parser("refs", help="Refs read by each pane of a source")
    parser_refs.add_argument("source", choices=[t.value for t in DiffSourceType])
    parser_refs.add_argument("--ref", help="Commit or stash ref")
    parser_refs.add_argument("--range", help="Range expression such as main..HEAD")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "align":
        return cmd_align(
            input_file=args.input_file,
            output_format=args.format,
            path=args.path,
            threads_file=args.threads_file,
        )

    elif args.command == "staging":
        return cmd_staging(
            repo_path=args.repo_path,
            output_format=args.format,
            merge=args.merge,
            fold=not args.no_fold,
            context_lines=args.context,
        )

    elif args.command == "refs":
        return cmd_refs(source=args.source, ref=args.ref, range_expr=args.range)

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
