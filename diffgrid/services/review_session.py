"""In-memory review session state.

Holds the review threads loaded for a pull request, the collapsed state of
each thread, and comments the user has written but not yet submitted.
Threads and pending comments persist across diff refreshes; the overlay
plan is recomputed from them for whichever line map is current.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from diffgrid.domain.aligned import AlignedLineInfo
from diffgrid.domain.review import OverlayPlan, PendingComment, ReviewThread
from diffgrid.services.overlay import build_overlay_plan, group_threads_by_path

logger = logging.getLogger(__name__)


class ReviewSession:
    """Threads, collapse state and pending comments for one review."""

    def __init__(self, threads: Sequence[ReviewThread] = (), pr_node_id: str = "") -> None:
        self.pr_node_id = pr_node_id
        self._threads: dict[str, list[ReviewThread]] = {}
        self._collapsed: dict[str, bool] = {}
        self._pending: list[PendingComment] = []
        self.load_threads(threads)

    # --------------------------------------------------------
    # Threads
    # --------------------------------------------------------

    def load_threads(self, threads: Sequence[ReviewThread]) -> None:
        """Replace the loaded threads. Collapse state of known ids is kept."""
        self._threads = group_threads_by_path(threads)
        logger.debug("Loaded %d threads across %d files", len(threads), len(self._threads))

    def threads_for(self, path: str) -> list[ReviewThread]:
        return list(self._threads.get(path, []))

    @property
    def paths(self) -> list[str]:
        return list(self._threads)

    def is_collapsed(self, thread_id: str) -> bool:
        return self._collapsed.get(thread_id, True)

    def set_collapsed(self, thread_id: str, collapsed: bool) -> None:
        self._collapsed[thread_id] = collapsed

    def toggle_collapsed(self, thread_id: str) -> bool:
        """Flip a thread between collapsed and expanded; returns the new state."""
        collapsed = not self.is_collapsed(thread_id)
        self._collapsed[thread_id] = collapsed
        return collapsed

    # --------------------------------------------------------
    # Pending comments
    # --------------------------------------------------------

    def add_pending(self, comment: PendingComment) -> None:
        """Queue a comment for submission.

        Raises:
            ValueError: If the comment body is empty
        """
        if not comment.body.strip():
            raise ValueError("Pending comment body cannot be empty")
        self._pending.append(comment)

    def discard_pending(self, comment: PendingComment) -> bool:
        """Remove a queued comment; returns False if it was not queued."""
        try:
            self._pending.remove(comment)
        except ValueError:
            return False
        return True

    def clear_pending(self) -> list[PendingComment]:
        """Drop all queued comments, returning them (e.g. for submission)."""
        pending, self._pending = self._pending, []
        return pending

    @property
    def pending(self) -> list[PendingComment]:
        return list(self._pending)

    def pending_for(self, path: str) -> list[PendingComment]:
        return [c for c in self._pending if c.path == path]

    # --------------------------------------------------------
    # Overlays
    # --------------------------------------------------------

    def overlay_for(self, path: str, line_map: Sequence[AlignedLineInfo]) -> OverlayPlan:
        """Overlay plan for one file against its current line map."""
        return build_overlay_plan(
            self.threads_for(path),
            line_map,
            collapsed=self._collapsed,
            pending=self.pending_for(path),
        )
