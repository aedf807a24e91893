"""Models for worktree creation and removal."""

from dataclasses import dataclass, field, asdict
from typing import List, Optional

from worktree_tools.models.identity import Identity


@dataclass(frozen=True)
class CreationPlan:
    """Deterministic branch name and path for a new worktree."""

    identity: Identity
    repo_name: str
    ticket: str
    normalized_description: str
    full_branch_name: str
    worktree_path: str


@dataclass
class CreationResult:
    """Outcome of the create operation.

    Best-effort stages report independently; their failures end up in
    ``warnings`` instead of being raised.
    """

    worktree_path: str
    branch_full_name: str
    username: str
    username_source: str
    repo_name: str
    base_branch: str
    dependencies_installed: bool = False
    package_manager: Optional[str] = None
    env_files_copied: int = 0
    ide_opened: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CleanupResult:
    """Outcome of the cleanup operation."""

    removed: bool
    worktree_path: str
    branch_name: Optional[str] = None
    branch_deleted: bool = False
    directories_removed: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)
