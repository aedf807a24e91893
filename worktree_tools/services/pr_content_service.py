"""Derive pull request title and body from commit history."""

from typing import List, Optional, Union, TYPE_CHECKING

from worktree_tools.constants import PR_COMMITS_HEADING
from worktree_tools.exceptions import CannotCreateFromTrunk
from worktree_tools.models.pull_request import PullRequestDraft
from worktree_tools.services.git import GitOperations
from worktree_tools.logging_config import get_logger

if TYPE_CHECKING:
    from worktree_tools.config import Config

logger = get_logger(__name__)


def first_line(message: str) -> str:
    lines = message.strip().splitlines()
    return lines[0].strip() if lines else ""


def draft_from_messages(messages: List[str]) -> PullRequestDraft:
    """Title from the first commit; a bulleted list of all commits when there are several."""
    title = first_line(messages[0])
    if len(messages) > 1:
        bullets = "\n".join(f"- {first_line(message)}" for message in messages)
        body = f"{PR_COMMITS_HEADING}\n\n{bullets}"
    else:
        body = ""
    return PullRequestDraft(title=title, body=body)


class PRContentService:
    """Synthesizes pull request content for a worktree's branch."""

    def __init__(self, config: Union["Config", dict], git_operations: Optional[GitOperations] = None):
        self.config = config
        self.git_operations = git_operations or GitOperations(config)
        self.trunk_candidates = config.get("trunk_candidates", ["main", "master"])

    def ensure_not_trunk(self, branch: str, trunk_branch: Optional[str] = None) -> None:
        """Refuse to work from a trunk branch."""
        if branch in self.trunk_candidates or branch == trunk_branch:
            raise CannotCreateFromTrunk(branch)

    def commits_since_trunk(self, worktree_path: str, trunk_ref: str) -> List[str]:
        """Commit messages on HEAD but not on ``trunk_ref``, oldest first.

        Raises:
            NoCommits: the range is empty
        """
        return self.git_operations.commits_since(worktree_path, trunk_ref)

    def synthesize(self, worktree_path: str, trunk_ref: Optional[str] = None) -> PullRequestDraft:
        """Build a PullRequestDraft for the branch checked out in ``worktree_path``.

        Raises:
            CannotCreateFromTrunk: HEAD is the trunk branch
            NoCommits: nothing to describe
        """
        trunk_ref = trunk_ref or self.git_operations.default_trunk(worktree_path)
        branch = self.git_operations.current_branch(worktree_path)
        self.ensure_not_trunk(branch, self.git_operations.trunk_branch_name(trunk_ref))

        messages = self.commits_since_trunk(worktree_path, trunk_ref)
        draft = draft_from_messages(messages)
        logger.debug(f"Synthesized PR title '{draft.title}' from {len(messages)} commit(s)")
        return draft
