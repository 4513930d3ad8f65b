"""Default text formatting for review thread overlays.

The overlay positioner only needs the number of lines a block renders to, so
any callable with the `format_thread` signature can be swapped in.
"""

from __future__ import annotations

from datetime import datetime, timezone

from diffgrid.domain.review import PendingComment, ReviewThread

COLLAPSED_PREVIEW_WIDTH = 60
EXPANDED_BORDER_WIDTH = 40

_MINUTE = 60
_HOUR = 3600
_DAY = 86400
_MONTH = 30 * _DAY
_YEAR = 365 * _DAY


def _preview(body: str) -> str:
    text = body.replace("\n", " ")
    if len(text) > COLLAPSED_PREVIEW_WIDTH:
        return text[: COLLAPSED_PREVIEW_WIDTH - 3] + "..."
    return text


def _status_tag(thread: ReviewThread) -> str:
    if thread.is_resolved:
        return "resolved"
    if thread.is_outdated:
        return "outdated"
    return ""


def format_collapsed(thread: ReviewThread) -> str:
    """One-line summary: first comment preview, reply count and status."""
    if not thread.comments:
        return ""

    first = thread.comments[0]
    replies = len(thread.comments) - 1
    reply_text = ""
    if replies > 0:
        reply_text = f" [{replies} {'reply' if replies == 1 else 'replies'}]"

    status = _status_tag(thread)
    status_text = f" [{status}]" if status else ""

    return f" @{first.author}: {_preview(first.body)}{reply_text}{status_text} "


def format_expanded(thread: ReviewThread) -> list[str]:
    """Full thread: a header and body per comment, separators, bottom border."""
    lines: list[str] = []

    for i, comment in enumerate(thread.comments):
        prefix = "┌" if i == 0 else "│"
        lines.append(f"{prefix} @{comment.author}  {relative_time(comment.created_at)}")
        lines.extend(f"│ {line}" for line in comment.body_lines)
        if i < len(thread.comments) - 1:
            lines.append("│   ")

    status = _status_tag(thread)
    lines.append("└" + "─" * EXPANDED_BORDER_WIDTH + (f" {status}" if status else ""))
    return lines


def format_thread(thread: ReviewThread, collapsed: bool) -> list[str]:
    """Render a thread overlay block as lines."""
    if collapsed:
        return ["── " + format_collapsed(thread)]
    return format_expanded(thread)


def format_pending(comment: PendingComment) -> list[str]:
    """Pending comments always render as a single preview line."""
    return ["── [pending] " + _preview(comment.body)]


def relative_time(iso_string: str, now: datetime | None = None) -> str:
    """Format an ISO 8601 timestamp as e.g. "2 days ago".

    Args:
        iso_string: Timestamp such as "2026-02-19T10:30:00Z"
        now: Reference time, defaults to the current UTC time

    Returns:
        Relative description, "" for an empty input, or the input unchanged
        when it cannot be parsed
    """
    if not iso_string:
        return ""

    try:
        timestamp = datetime.fromisoformat(iso_string.replace("Z", "+00:00"))
    except ValueError:
        return iso_string
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    diff = int((now - timestamp).total_seconds())

    if diff < 0:
        return "in the future"
    if diff < _MINUTE:
        return "just now"
    for unit_seconds, next_unit, name in (
        (_MINUTE, _HOUR, "minute"),
        (_HOUR, _DAY, "hour"),
        (_DAY, _MONTH, "day"),
        (_MONTH, _YEAR, "month"),
    ):
        if diff < next_unit:
            return _plural(diff // unit_seconds, name)
    return _plural(diff // _YEAR, "year")


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit} ago" if count == 1 else f"{count} {unit}s ago"
