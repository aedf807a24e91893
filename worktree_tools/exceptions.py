"""Custom exceptions for worktree-tools"""

from typing import Optional, Sequence


class WorktreeToolsError(Exception):
    """Base exception for all worktree-tools errors."""
    pass


class InvalidArgument(WorktreeToolsError):
    """Exception raised for bad caller input, before any side effect."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Invalid {field}: {message}")


class IdentityUnresolved(WorktreeToolsError):
    """Exception raised when no identity source produced a handle."""

    def __init__(self):
        super().__init__(
            "Unable to detect username automatically. "
            'Please configure git: git config --global user.name "Your Name" '
            "or install GitHub CLI: brew install gh && gh auth login"
        )


class NotARepository(WorktreeToolsError):
    """Exception raised when a directory is not inside a git repository."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        error_msg = f"Not inside a git repository: {path}"
        if message:
            error_msg += f" ({message})"
        super().__init__(error_msg)


class NoTrunkFound(WorktreeToolsError):
    """Exception raised when none of the trunk candidates exist on the remote."""

    def __init__(self, candidates: Sequence[str]):
        self.candidates = list(candidates)
        super().__init__(f"Could not find {' or '.join(self.candidates)} branch")


class GitOperationError(WorktreeToolsError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, target: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.target = target
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if target:
            error_msg += f" for '{target}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class TrunkSyncFailed(GitOperationError):
    """Exception raised when fetching the trunk from the remote fails."""

    def __init__(self, remote: str, message: Optional[str] = None):
        super().__init__("fetch", remote, message)


class WorktreeCreationFailed(GitOperationError):
    """Exception raised when `git worktree add` fails."""

    def __init__(self, path: str, message: Optional[str] = None):
        super().__init__("worktree add", path, message)


class WorktreeRemovalFailed(GitOperationError):
    """Exception raised when `git worktree remove` fails."""

    def __init__(self, path: str, message: Optional[str] = None):
        super().__init__("worktree remove", path, message)


class DetachedHeadError(GitOperationError):
    """Exception raised when a worktree is in detached HEAD state."""

    def __init__(self, path: Optional[str] = None):
        super().__init__("check_state", path, "Worktree is in detached HEAD state")


class CannotCreateFromTrunk(WorktreeToolsError):
    """Exception raised when a pull request is requested from the trunk branch itself."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"Cannot create PR from trunk branch '{branch}'")


class NoCommits(WorktreeToolsError):
    """Exception raised when the commit range for a PR is empty."""

    def __init__(self, commit_range: str):
        self.commit_range = commit_range
        super().__init__(f"No commits found for PR in range {commit_range}")


class GitHubAPIError(WorktreeToolsError):
    """Exception raised for errors in GitHub API operations."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"GitHub API operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class AuthenticationRequired(GitHubAPIError):
    """Exception raised when no usable GitHub credentials were found."""

    def __init__(self):
        super().__init__(
            "authenticate",
            "GitHub authentication required. "
            "Either set GITHUB_TOKEN environment variable or run: gh auth login",
        )


class CommandError(WorktreeToolsError):
    """Exception raised when an external (non-git) command fails or times out."""

    def __init__(self, command: Sequence[str], message: str, returncode: Optional[int] = None):
        self.command = list(command)
        self.message = message
        self.returncode = returncode
        super().__init__(f"Command '{' '.join(self.command)}' failed: {message}")
