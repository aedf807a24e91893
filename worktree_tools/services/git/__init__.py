"""Git-related services for worktree-tools."""

from .operations import GitOperations
from .worktrees import WorktreeService

__all__ = [
    "GitOperations",
    "WorktreeService",
]
