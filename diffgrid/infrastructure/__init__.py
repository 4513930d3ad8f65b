"""Infrastructure components for diffgrid.

This layer handles external system interactions:
- Reading diff text from files and stdin
- Parsing unified diff output into domain models

Organized into subdirectories:
- git/ - Unified diff parsing
"""

from .git import has_content, parse_unified_diff, read_diff

__all__ = [
    "has_content",
    "parse_unified_diff",
    "read_diff",
]
