"""GitHub API integration service"""

import os
from typing import Mapping, Optional, Tuple, TYPE_CHECKING, Union
from urllib.parse import urlparse

from github import Auth, Github, GithubException

from worktree_tools.exceptions import AuthenticationRequired, CommandError, GitHubAPIError
from worktree_tools.models.pull_request import PullRequestResult
from worktree_tools.utils.process import run_command
from worktree_tools.logging_config import get_logger

if TYPE_CHECKING:
    from worktree_tools.config import Config

logger = get_logger(__name__)


def parse_github_remote(remote_url: str) -> Tuple[str, str]:
    """Split a GitHub remote URL into (owner, repo).

    Handles ``git@github.com:owner/repo.git`` and ``https://github.com/owner/repo.git``.

    Raises:
        GitHubAPIError: the URL does not point at github.com
    """
    remote_url = remote_url.strip()
    if remote_url.startswith("git@"):
        # Handle SSH URL format (git@github.com:org/repo.git)
        host, _, path = remote_url[len("git@"):].partition(":")
    else:
        # Handle HTTPS / ssh:// URL format (https://github.com/org/repo.git)
        parsed_url = urlparse(remote_url)
        host = parsed_url.hostname or ""
        path = parsed_url.path

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[:-4]

    parts = path.split("/")
    if host != "github.com" or len(parts) != 2 or not all(parts):
        raise GitHubAPIError("parse_remote", f"Origin remote is not a GitHub repository: {remote_url}")
    return parts[0], parts[1]


class GitHubService:
    def __init__(self, config: Union["Config", dict], environ: Optional[Mapping[str, str]] = None):
        """Initialize the service.

        Args:
            config: Configuration dictionary or Config object
            environ: Environment used for GITHUB_TOKEN (defaults to os.environ)
        """
        self.config = config
        self.environ = os.environ if environ is None else environ
        self.timeout = config.get("identity_timeout", 5)
        self.github: Optional[Github] = None

    def resolve_token(self) -> str:
        """Token from config, then GITHUB_TOKEN, then ``gh auth token``.

        Raises:
            AuthenticationRequired: none of the three produced a token
        """
        token = self.config.get("github_token") or self.environ.get("GITHUB_TOKEN")
        if token:
            return token

        try:
            token = run_command(["gh", "auth", "token"], timeout=self.timeout)
        except (CommandError, OSError) as e:
            logger.debug(f"[GitHub] gh auth token unavailable: {e}")
            token = ""
        if token:
            return token

        raise AuthenticationRequired()

    def create_pull_request(
        self,
        remote_url: str,
        head: str,
        base: str,
        title: str,
        body: str = "",
        draft: bool = False,
        worktree_path: str = "",
    ) -> PullRequestResult:
        """Open a pull request from ``head`` into ``base``."""
        owner, repo_name = parse_github_remote(remote_url)
        token = self.resolve_token()

        self.github = Github(auth=Auth.Token(token))
        try:
            gh_repo = self.github.get_repo(f"{owner}/{repo_name}")
            logger.debug(f"[GitHub] Creating PR {head} -> {base} in {owner}/{repo_name}")
            pr = gh_repo.create_pull(title=title, body=body, head=head, base=base, draft=draft)
        except GithubException as e:
            message = e.data.get("message") if isinstance(e.data, dict) else None
            raise GitHubAPIError("create_pull", f"{e.status} {message or e}") from e
        finally:
            self.close()

        logger.info(f"[GitHub] Opened PR #{pr.number}: {pr.html_url}")
        return PullRequestResult(
            url=pr.html_url,
            number=pr.number,
            title=pr.title,
            head=head,
            base=base,
            draft=draft,
            worktree_path=worktree_path,
        )

    def close(self) -> None:
        """Close the GitHub API connection to clean up resources."""
        if self.github:
            try:
                self.github.close()
                logger.debug("[GitHub] Closed GitHub API connection")
            except Exception as e:
                logger.debug(f"[GitHub] Error closing GitHub API connection: {e}")
            self.github = None
