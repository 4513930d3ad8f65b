"""Git primitives - unified diff reading and parsing."""

from .diff_parser import has_content, parse_unified_diff, read_diff

__all__ = [
    "has_content",
    "parse_unified_diff",
    "read_diff",
]
