"""Service for resolving the acting user's handle"""

import re
from typing import Callable, List, Optional, Tuple, Union, TYPE_CHECKING

import git

from worktree_tools.exceptions import CommandError, IdentityUnresolved
from worktree_tools.models.identity import Identity, IdentitySource
from worktree_tools.utils.naming import normalize_name
from worktree_tools.utils.process import run_command
from worktree_tools.logging_config import get_logger

if TYPE_CHECKING:
    from worktree_tools.config import Config

logger = get_logger(__name__)

_USERNAME_LINE = re.compile(r"^\s*USERNAME=(.+)$", re.MULTILINE)


class IdentityService:
    """Resolve a username handle through an ordered chain of sources.

    1. ``USERNAME=value`` in the override file (used verbatim)
    2. GitHub login from the ``gh`` CLI
    3. git ``user.name``, normalized to a handle

    The first source that yields a non-empty handle wins. Every source is
    read-only, so resolution is safe to retry.
    """

    def __init__(self, config: Union["Config", dict]):
        self.config = config
        self.timeout = config.get("identity_timeout", 5)

    def resolve(self, override_path: Optional[str] = None, repo_path: Optional[str] = None) -> Identity:
        """Return the first identity any source can produce.

        Args:
            override_path: Path of the override file, if one should be consulted
            repo_path: Repository whose git config is read (global config otherwise)

        Raises:
            IdentityUnresolved: no source produced a handle
        """
        strategies: List[Tuple[IdentitySource, Callable[[], Optional[str]]]] = [
            (IdentitySource.MANUAL_OVERRIDE, lambda: self.from_override_file(override_path)),
            (IdentitySource.HOSTED_CLI_LOGIN, self.from_github_cli),
            (IdentitySource.LOCAL_CONFIG_NAME, lambda: self.from_git_config(repo_path)),
        ]

        for source, strategy in strategies:
            handle = strategy()
            if handle:
                identity = Identity(handle=handle, source=source)
                logger.debug(f"Resolved identity {identity}")
                return identity
            logger.debug(f"Identity source {source.value} produced nothing")

        raise IdentityUnresolved()

    def from_override_file(self, override_path: Optional[str]) -> Optional[str]:
        """Handle from a ``USERNAME=value`` line, or None."""
        if not override_path:
            return None
        try:
            with open(override_path, encoding="utf-8") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Override file {override_path} not readable: {e}")
            return None

        match = _USERNAME_LINE.search(content)
        if match:
            return match.group(1).strip() or None
        return None

    def from_github_cli(self) -> Optional[str]:
        """Login of the user authenticated with the ``gh`` CLI, or None."""
        try:
            return run_command(["gh", "api", "user", "--jq", ".login"], timeout=self.timeout) or None
        except (CommandError, OSError) as e:
            logger.debug(f"GitHub CLI login unavailable: {e}")
            return None

    def from_git_config(self, repo_path: Optional[str] = None) -> Optional[str]:
        """git ``user.name`` converted to handle form, or None."""
        try:
            name = git.Git(repo_path).config("--get", "user.name", kill_after_timeout=self.timeout)
        except Exception as e:
            logger.debug(f"git user.name unavailable: {e}")
            return None
        return normalize_name(name.strip()) or None
