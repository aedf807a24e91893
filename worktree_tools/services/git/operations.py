"""Git operations service"""

import os
import re
from typing import List, Optional, Union, TYPE_CHECKING

import git

from worktree_tools.exceptions import (
    DetachedHeadError,
    GitOperationError,
    NoCommits,
    NoTrunkFound,
    NotARepository,
    TrunkSyncFailed,
)
from worktree_tools.services.git.worktrees import describe_git_error
from worktree_tools.logging_config import get_logger

if TYPE_CHECKING:
    from worktree_tools.config import Config

logger = get_logger(__name__)

# Last path segment of a remote URL, for both HTTPS and SSH forms
_REPO_NAME_PATTERN = re.compile(r"[/:]([^/:]+?)(?:\.git)?/?$")


def repo_name_from_url(url: str) -> Optional[str]:
    """Extract the lowercase repository name from a remote URL, if any."""
    match = _REPO_NAME_PATTERN.search(url.strip())
    if match and match.group(1):
        return match.group(1).lower()
    return None


class GitOperations:
    """Repository-level queries: main checkout, name, trunk, fetch, branches, commits."""

    def __init__(self, config: Union["Config", dict]):
        """Initialize the service.

        Args:
            config: Configuration dictionary or Config object
        """
        self.config = config
        self.remote_name = config.get("remote_name", "origin")
        self.trunk_candidates = config.get("trunk_candidates", ["main", "master"])
        self.git_timeout = config.get("git_timeout", 30)
        self.fetch_timeout = config.get("fetch_timeout", 120)

    def _get_repo(self, path: str) -> git.Repo:
        """Open the repository or worktree at ``path``."""
        try:
            return git.Repo(path)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise NotARepository(path, type(e).__name__) from e

    def locate_main_root(self, start_dir: Optional[str] = None) -> str:
        """Return the path of the main checkout for the repository containing ``start_dir``.

        Relies on git listing the main working tree first in
        ``git worktree list``, which holds from any of the repository's worktrees.
        """
        start_dir = os.path.abspath(start_dir or os.getcwd())
        if not os.path.isdir(start_dir):
            raise NotARepository(start_dir, "directory does not exist")

        try:
            output = git.Git(start_dir).worktree("list", "--porcelain", kill_after_timeout=self.git_timeout)
        except git.exc.GitCommandError as e:
            raise NotARepository(start_dir, describe_git_error(e, "git worktree list")) from e

        for line in output.split("\n"):
            if line.startswith("worktree "):
                main_root = line[len("worktree "):].strip()
                logger.debug(f"Main repository root for {start_dir}: {main_root}")
                return main_root

        raise NotARepository(start_dir)

    def origin_url(self, repo_path: str) -> Optional[str]:
        """URL of the configured remote, or None when it does not exist."""
        try:
            repo = self._get_repo(repo_path)
            return repo.remote(self.remote_name).url
        except Exception as e:
            logger.debug(f"No {self.remote_name} remote for {repo_path}: {e}")
            return None

    def repository_name(self, main_root: str) -> str:
        """Repository name from the remote URL, falling back to the directory name."""
        url = self.origin_url(main_root)
        if url:
            name = repo_name_from_url(url)
            if name:
                return name
            logger.debug(f"Could not parse repository name from {url}")
        return os.path.basename(os.path.normpath(main_root)).lower()

    def default_trunk(self, repo_path: str) -> str:
        """Return the first existing remote trunk ref, e.g. ``origin/main``."""
        repo = self._get_repo(repo_path)
        for candidate in self.trunk_candidates:
            ref = f"{self.remote_name}/{candidate}"
            try:
                repo.git.show_ref(
                    "--verify", "--quiet", f"refs/remotes/{ref}", kill_after_timeout=self.git_timeout
                )
            except git.exc.GitCommandError:
                logger.debug(f"Trunk candidate {ref} not found")
                continue
            logger.debug(f"Using trunk {ref}")
            return ref
        raise NoTrunkFound([f"{self.remote_name}/{c}" for c in self.trunk_candidates])

    def trunk_branch_name(self, trunk_ref: str) -> str:
        """Strip the remote prefix from a trunk ref: ``origin/main`` -> ``main``."""
        prefix = f"{self.remote_name}/"
        return trunk_ref[len(prefix):] if trunk_ref.startswith(prefix) else trunk_ref

    def fetch(self, repo_path: str) -> None:
        """Fetch the latest refs from the remote."""
        repo = self._get_repo(repo_path)
        logger.info(f"Fetching {self.remote_name}...")
        try:
            repo.git.fetch(self.remote_name, kill_after_timeout=self.fetch_timeout)
        except git.exc.GitCommandError as e:
            raise TrunkSyncFailed(self.remote_name, describe_git_error(e, "git fetch")) from e

    def current_branch(self, worktree_path: str) -> str:
        """Name of the branch checked out in ``worktree_path``."""
        repo = self._get_repo(worktree_path)
        try:
            branch = repo.git.rev_parse("--abbrev-ref", "HEAD", kill_after_timeout=self.git_timeout).strip()
        except git.exc.GitCommandError as e:
            raise GitOperationError("rev-parse", worktree_path, describe_git_error(e, "git rev-parse")) from e
        if branch == "HEAD":
            raise DetachedHeadError(worktree_path)
        return branch

    def delete_branch(self, repo_path: str, branch_name: str) -> None:
        """Force-delete a local branch."""
        repo = self._get_repo(repo_path)
        try:
            repo.git.branch("-D", branch_name, kill_after_timeout=self.git_timeout)
        except git.exc.GitCommandError as e:
            raise GitOperationError("delete_branch", branch_name, describe_git_error(e, "git branch -D")) from e
        logger.info(f"Deleted local branch {branch_name}")

    def commits_since(self, worktree_path: str, trunk_ref: str) -> List[str]:
        """Full messages of commits reachable from HEAD but not from ``trunk_ref``, oldest first."""
        repo = self._get_repo(worktree_path)
        commit_range = f"{trunk_ref}..HEAD"
        try:
            # Each message is NUL-terminated; messages span several lines
            output = repo.git.log(
                commit_range, "--reverse", "--format=%B%x00", kill_after_timeout=self.git_timeout
            )
        except git.exc.GitCommandError as e:
            raise GitOperationError("log", commit_range, describe_git_error(e, "git log")) from e

        messages = [message.strip() for message in output.split("\x00") if message.strip()]
        if not messages:
            raise NoCommits(commit_range)
        logger.debug(f"Found {len(messages)} commits in {commit_range}")
        return messages
