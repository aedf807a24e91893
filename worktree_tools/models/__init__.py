"""Data models for worktree-tools."""

from .identity import Identity, IdentitySource
from .worktree import DivergenceStatus, WorktreeRecord, WorktreeListItem, ListResult, StatusReport
from .lifecycle import CreationPlan, CreationResult, CleanupResult
from .pull_request import PullRequestDraft, PullRequestResult

__all__ = [
    "Identity",
    "IdentitySource",
    "DivergenceStatus",
    "WorktreeRecord",
    "WorktreeListItem",
    "ListResult",
    "StatusReport",
    "CreationPlan",
    "CreationResult",
    "CleanupResult",
    "PullRequestDraft",
    "PullRequestResult",
]
