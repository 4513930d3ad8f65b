"""Command implementations for diffgrid.

Commands are thin: they read input, call services and print results,
returning a process exit code.
"""

from diffgrid.commands.align import cmd_align
from diffgrid.commands.refs import cmd_refs
from diffgrid.commands.staging import cmd_staging

__all__ = [
    "cmd_align",
    "cmd_refs",
    "cmd_staging",
]
