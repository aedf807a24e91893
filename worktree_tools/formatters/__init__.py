"""Formatting utilities for worktree-tools."""

from .status import format_status_message, format_sync, is_ready_for_pr, readiness

__all__ = [
    "format_status_message",
    "format_sync",
    "is_ready_for_pr",
    "readiness",
]
