"""Worktree data models."""

from dataclasses import dataclass, field, asdict
from typing import List, Optional


@dataclass
class WorktreeRecord:
    """Information about a git worktree.

    Built fresh from ``git worktree list --porcelain`` on every enumeration.
    """

    path: str
    branch_name: str
    head_commit: str
    is_main: bool  # First entry git lists is the main checkout
    is_detached: bool = False
    is_locked: bool = False
    is_prunable: bool = False
    is_orphaned: bool = False  # Directory missing?

    def __str__(self) -> str:
        """String representation of worktree."""
        status = "orphaned" if self.is_orphaned else "active"
        main_marker = " (main)" if self.is_main else ""
        branch = self.branch_name or "(detached)"
        return f"{branch} @ {self.path}{main_marker} [{status}]"


@dataclass(frozen=True)
class DivergenceStatus:
    """Clean flag plus ahead/behind counts relative to the upstream branch.

    ``upstream`` is None when the branch has no tracking branch configured;
    ahead and behind are then both 0 without meaning "in sync".
    """

    clean: bool
    ahead: int = 0
    behind: int = 0
    upstream: Optional[str] = None

    @property
    def uncommitted(self) -> bool:
        return not self.clean

    @property
    def has_upstream(self) -> bool:
        return self.upstream is not None

    def to_dict(self) -> dict:
        return {
            "clean": self.clean,
            "ahead": self.ahead,
            "behind": self.behind,
            "uncommitted": self.uncommitted,
            "upstream": self.upstream,
            "has_upstream": self.has_upstream,
        }


@dataclass
class WorktreeListItem:
    """A worktree record with its status, or None when status is unknown."""

    record: WorktreeRecord
    status: Optional[DivergenceStatus] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self.record)
        data["status"] = self.status.to_dict() if self.status else None
        data["error"] = self.error
        return data


@dataclass
class ListResult:
    """Result of the list operation."""

    main_repo_path: str
    worktrees: List[WorktreeListItem] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "main_repo_path": self.main_repo_path,
            "worktrees": [item.to_dict() for item in self.worktrees],
        }


@dataclass
class StatusReport:
    """Result of the status operation: divergence plus a readiness verdict."""

    worktree_path: str
    status: DivergenceStatus
    ready_for_pr: bool
    message: str

    def to_dict(self) -> dict:
        data = self.status.to_dict()
        data.update({
            "worktree_path": self.worktree_path,
            "ready_for_pr": self.ready_for_pr,
            "message": self.message,
        })
        return data
