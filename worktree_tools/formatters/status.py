"""Status and readiness formatting utilities."""

from typing import Tuple

from worktree_tools.constants import (
    STATUS_BEHIND,
    STATUS_NOTHING_TO_PUSH,
    STATUS_READY,
    STATUS_UNCOMMITTED,
)
from worktree_tools.models.worktree import DivergenceStatus


def is_ready_for_pr(status: DivergenceStatus) -> bool:
    """A worktree is ready when it is clean and has commits to push."""
    return status.clean and status.ahead > 0


def format_status_message(status: DivergenceStatus) -> str:
    """
    Human-readable summary of a worktree's status.

    Precedence: uncommitted changes, nothing to push, behind upstream, ready.

    Args:
        status: Divergence status of the worktree

    Returns:
        Message string
    """
    if not status.clean:
        return STATUS_UNCOMMITTED
    if status.ahead == 0:
        return STATUS_NOTHING_TO_PUSH
    if status.behind > 0:
        return STATUS_BEHIND.format(behind=status.behind, upstream=status.upstream or "upstream")
    return STATUS_READY.format(ahead=status.ahead)


def readiness(status: DivergenceStatus) -> Tuple[bool, str]:
    """Return (ready_for_pr, message) for a status."""
    return is_ready_for_pr(status), format_status_message(status)


def format_sync(status: DivergenceStatus) -> str:
    """Compact ahead/behind text for tables: ``↑2 ↓1``, ``synced`` or ``no upstream``."""
    if not status.has_upstream:
        return "no upstream"
    parts = []
    if status.ahead:
        parts.append(f"↑{status.ahead}")
    if status.behind:
        parts.append(f"↓{status.behind}")
    return " ".join(parts) if parts else "synced"
