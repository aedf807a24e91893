"""Core functionality for worktree-tools"""

import os
from typing import Mapping, Optional, Union

from worktree_tools.config import Config
from worktree_tools.exceptions import GitHubAPIError
from worktree_tools.formatters import readiness
from worktree_tools.models.lifecycle import CleanupResult, CreationResult
from worktree_tools.models.pull_request import PullRequestResult
from worktree_tools.models.worktree import ListResult, StatusReport
from worktree_tools.services.git import GitOperations, WorktreeService
from worktree_tools.services.github_service import GitHubService
from worktree_tools.services.identity_service import IdentityService
from worktree_tools.services.lifecycle_service import LifecycleService
from worktree_tools.services.pr_content_service import PRContentService
from worktree_tools.services.workspace_setup import WorkspaceSetup
from worktree_tools.logging_config import get_logger

logger = get_logger(__name__)


class WorktreeTools:
    """The five worktree operations: create, list, status, cleanup and create_pr.

    Each call is independent: nothing is cached between calls, and the
    repository and filesystem are the only shared state.
    """

    def __init__(self, config: Optional[Union[Config, dict]] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """Initialize WorktreeTools.

        Args:
            config: Configuration dict or Config object (defaults apply when None)
            environ: Environment used for credential lookup (defaults to os.environ)
        """
        if config is None:
            config = Config()
        elif isinstance(config, dict):
            config = Config.from_dict(config)
        self.config = config

        self.worktree_service = WorktreeService(config)
        self.git_operations = GitOperations(config)
        self.identity_service = IdentityService(config)
        self.workspace_setup = WorkspaceSetup(config)
        self.lifecycle_service = LifecycleService(
            config,
            git_operations=self.git_operations,
            worktree_service=self.worktree_service,
            identity_service=self.identity_service,
            workspace_setup=self.workspace_setup,
        )
        self.pr_content_service = PRContentService(config, git_operations=self.git_operations)
        self.github_service = GitHubService(config, environ=environ)

    def create(
        self,
        ticket: str,
        description: str,
        base_directory: Optional[str] = None,
        ide_hint: Optional[str] = None,
        base_branch: Optional[str] = None,
    ) -> CreationResult:
        """Create a worktree at ``../<repo>-worktrees/<user>/<ticket>/<description>``."""
        return self.lifecycle_service.create(
            ticket,
            description,
            start_dir=base_directory,
            base_branch=base_branch,
            ide_hint=ide_hint,
        )

    def list_worktrees(self, base_directory: Optional[str] = None) -> ListResult:
        """List every worktree, with status for each non-main one."""
        main_root = self.git_operations.locate_main_root(base_directory)
        items = self.worktree_service.list_with_status(main_root)
        return ListResult(main_repo_path=main_root, worktrees=items)

    def status(self, worktree_path: str) -> StatusReport:
        """Divergence of a worktree plus whether it is ready for a PR."""
        worktree_path = os.path.abspath(worktree_path)
        status = self.worktree_service.divergence(worktree_path)
        ready_for_pr, message = readiness(status)
        return StatusReport(
            worktree_path=worktree_path,
            status=status,
            ready_for_pr=ready_for_pr,
            message=message,
        )

    def cleanup(
        self,
        worktree_path: str,
        delete_branch: bool = False,
        base_directory: Optional[str] = None,
    ) -> CleanupResult:
        """Remove a worktree and prune the directories it leaves empty."""
        return self.lifecycle_service.cleanup(
            worktree_path, delete_branch=delete_branch, start_dir=base_directory
        )

    def create_pr(
        self,
        worktree_path: str,
        title: Optional[str] = None,
        body: Optional[str] = None,
        draft: bool = False,
    ) -> PullRequestResult:
        """Open a GitHub pull request for the worktree's branch.

        Missing title/body are synthesized from the commits since trunk.
        Nothing is sent to GitHub when HEAD is a trunk branch.
        """
        worktree_path = os.path.abspath(worktree_path)
        branch = self.git_operations.current_branch(worktree_path)
        self.pr_content_service.ensure_not_trunk(branch)

        trunk_ref = self.git_operations.default_trunk(worktree_path)
        base = self.git_operations.trunk_branch_name(trunk_ref)
        self.pr_content_service.ensure_not_trunk(branch, base)

        if not title or not body:
            generated = self.pr_content_service.synthesize(worktree_path, trunk_ref)
            title = title or generated.title
            body = body or generated.body

        remote_url = self.git_operations.origin_url(worktree_path)
        if not remote_url:
            raise GitHubAPIError("parse_remote", f"No {self.config.remote_name} remote found")

        return self.github_service.create_pull_request(
            remote_url,
            head=branch,
            base=base,
            title=title,
            body=body,
            draft=draft,
            worktree_path=worktree_path,
        )
