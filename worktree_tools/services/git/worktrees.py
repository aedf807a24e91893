"""Worktree operations service for worktree-tools."""

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Any, List, Tuple, Union, TYPE_CHECKING

import git

from worktree_tools.exceptions import (
    GitOperationError,
    NotARepository,
    WorktreeCreationFailed,
    WorktreeRemovalFailed,
)
from worktree_tools.models.worktree import DivergenceStatus, WorktreeRecord, WorktreeListItem
from worktree_tools.logging_config import get_logger
from worktree_tools.utils.threading import get_optimal_worker_count

if TYPE_CHECKING:
    from worktree_tools.config import Config

logger = get_logger(__name__)


def describe_git_error(e: git.exc.GitCommandError, command: str) -> str:
    """Build a one-line message from a GitCommandError's stderr and exit status."""
    stderr = (e.stderr if getattr(e, "stderr", None) else str(e)).strip()
    status = e.status if getattr(e, "status", None) is not None else "unknown"
    if stderr:
        return f"{command} failed (exit {status}): {stderr}"
    return f"{command} failed with exit code {status}"


def parse_worktree_porcelain(output: str) -> List[WorktreeRecord]:
    """Parse ``git worktree list --porcelain`` output into records.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name   (or "detached")
        locked [reason]                 (optional)
        prunable [reason]               (optional)
        (blank line between worktrees)

    Git always lists the main working tree first, so the first record is the
    only one flagged ``is_main``.
    """
    worktree_list: List[WorktreeRecord] = []
    current: Dict[str, Any] = {}

    def flush():
        path = current.get("path")
        if not path:
            return
        worktree_list.append(
            WorktreeRecord(
                path=path,
                branch_name=current.get("branch", ""),
                head_commit=current.get("HEAD", ""),
                is_main=not worktree_list,
                is_detached=current.get("detached", False),
                is_locked=current.get("locked", False),
                is_prunable=current.get("prunable", False),
                is_orphaned=not os.path.exists(path),
            )
        )

    for line in output.split("\n"):
        line = line.rstrip("\r")

        if not line.strip():
            # Empty line marks end of worktree entry
            flush()
            current = {}
            continue

        if line.startswith("worktree "):
            if current.get("path"):
                flush()
            current = {"path": line.split(" ", 1)[1]}
        elif line.startswith("HEAD "):
            current["HEAD"] = line.split(" ", 1)[1]
        elif line.startswith("branch "):
            branch_ref = line.split(" ", 1)[1]
            if branch_ref.startswith("refs/heads/"):
                current["branch"] = branch_ref[len("refs/heads/"):]
            else:
                current["branch"] = branch_ref
        elif line == "detached":
            current["detached"] = True
            current["branch"] = ""
        elif line == "locked" or line.startswith("locked "):
            current["locked"] = True
        elif line == "prunable" or line.startswith("prunable "):
            current["prunable"] = True

    # Handle last entry if no trailing blank line
    flush()
    return worktree_list


def parse_left_right_count(output: str) -> Tuple[int, int]:
    """Parse ``rev-list --left-right --count upstream...HEAD`` into (behind, ahead)."""
    parts = output.strip().split()
    if len(parts) != 2:
        return 0, 0
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return 0, 0


class WorktreeService:
    """Service for managing git worktrees."""

    def __init__(self, config: Union["Config", dict]):
        """Initialize the worktree service.

        Args:
            config: Configuration dictionary or Config object
        """
        self.config = config
        self.git_timeout = config.get("git_timeout", 30)
        self.checkout_timeout = config.get("checkout_timeout", 300)

    def _get_repo(self, path: str) -> git.Repo:
        """Open the repository or worktree at ``path``.

        A fresh instance per call keeps the service safe to use from worker threads.
        """
        try:
            return git.Repo(path)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise NotARepository(path, type(e).__name__) from e

    def list_worktrees(self, repo_path: str) -> List[WorktreeRecord]:
        """Enumerate all worktrees of the repository at ``repo_path``.

        Never cached: worktrees can come and go between calls.
        """
        repo = self._get_repo(repo_path)
        try:
            output = repo.git.worktree("list", "--porcelain", kill_after_timeout=self.git_timeout)
        except git.exc.GitCommandError as e:
            raise GitOperationError("worktree list", repo_path, describe_git_error(e, "git worktree list")) from e

        worktree_list = parse_worktree_porcelain(output)
        logger.debug(f"Found {len(worktree_list)} worktrees")
        for wt in worktree_list:
            logger.debug(f"  {wt}")
        return worktree_list

    def divergence(self, worktree_path: str) -> DivergenceStatus:
        """Get clean/ahead/behind status of a worktree relative to its upstream.

        A branch without an upstream reports ahead = behind = 0 and
        ``upstream=None``; that is not an error.
        """
        repo = self._get_repo(worktree_path)

        try:
            status = repo.git.status("--porcelain", kill_after_timeout=self.git_timeout)
        except git.exc.GitCommandError as e:
            raise GitOperationError("status", worktree_path, describe_git_error(e, "git status")) from e
        clean = not status.strip()

        try:
            branch = repo.git.rev_parse("--abbrev-ref", "HEAD", kill_after_timeout=self.git_timeout)
            upstream = repo.git.rev_parse(
                "--abbrev-ref", f"{branch}@{{upstream}}", kill_after_timeout=self.git_timeout
            )
        except git.exc.GitCommandError as e:
            logger.debug(f"No upstream for {worktree_path}: {describe_git_error(e, 'git rev-parse')}")
            return DivergenceStatus(clean=clean)

        try:
            counts = repo.git.rev_list(
                "--left-right", "--count", f"{upstream}...{branch}",
                kill_after_timeout=self.git_timeout,
            )
        except git.exc.GitCommandError as e:
            raise GitOperationError("rev-list", worktree_path, describe_git_error(e, "git rev-list")) from e

        behind, ahead = parse_left_right_count(counts)
        return DivergenceStatus(clean=clean, ahead=ahead, behind=behind, upstream=upstream)

    def list_with_status(self, repo_path: str) -> List[WorktreeListItem]:
        """List worktrees and compute each non-main worktree's status in parallel.

        A failure for one worktree leaves its status as None ("status unknown")
        and does not affect the others.
        """
        records = self.list_worktrees(repo_path)
        items = [WorktreeListItem(record=record) for record in records]
        pending = [item for item in items if not item.record.is_main]
        if not pending:
            return items

        max_workers = get_optimal_worker_count(self.config.get("workers"), tasks=len(pending))
        logger.debug(f"Checking status of {len(pending)} worktrees using {max_workers} workers")

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_item = {
                executor.submit(self.divergence, item.record.path): item
                for item in pending
            }
            for future in as_completed(future_to_item):
                item = future_to_item[future]
                try:
                    item.status = future.result()
                except Exception as e:
                    item.error = str(e)
                    logger.warning(f"Could not check worktree status for {item.record.path}: {e}")

        return items

    def add_worktree(self, repo_path: str, worktree_path: str, branch_name: str, base: str) -> None:
        """Create ``worktree_path`` on a new branch ``branch_name`` started from ``base``."""
        repo = self._get_repo(repo_path)
        try:
            repo.git.worktree(
                "add", worktree_path, "-b", branch_name, base,
                kill_after_timeout=self.checkout_timeout,
            )
        except git.exc.GitCommandError as e:
            error_msg = describe_git_error(e, "git worktree add")
            logger.error(f"Failed to create worktree at {worktree_path}: {error_msg}")
            raise WorktreeCreationFailed(worktree_path, error_msg) from e
        logger.info(f"Created worktree at {worktree_path} on branch {branch_name} from {base}")

    def remove_worktree(self, repo_path: str, worktree_path: str, force: bool = True) -> None:
        """Remove the worktree at ``worktree_path``.

        Args:
            repo_path: Path to the main repository
            worktree_path: Path to the worktree directory
            force: Remove even if the working tree is dirty
        """
        repo = self._get_repo(repo_path)
        args = ["remove", worktree_path]
        if force:
            args.append("--force")
        try:
            repo.git.worktree(*args, kill_after_timeout=self.git_timeout)
        except git.exc.GitCommandError as e:
            error_msg = describe_git_error(e, "git worktree remove")
            logger.error(f"Failed to remove worktree at {worktree_path}: {error_msg}")
            raise WorktreeRemovalFailed(worktree_path, error_msg) from e
        logger.info(f"Removed worktree at {worktree_path}")
