"""Configuration handling for worktree-tools"""

from dataclasses import dataclass, field, fields
from typing import Optional, List


@dataclass
class Config:
    """Configuration for worktree-tools with validation."""

    # Repository layout
    remote_name: str = "origin"
    trunk_candidates: List[str] = field(default_factory=lambda: ["main", "master"])
    override_file_name: str = ".worktree-config"
    worktrees_suffix: str = "-worktrees"

    # Timeouts (seconds) for external calls
    identity_timeout: int = 5
    fetch_timeout: int = 120
    install_timeout: int = 300  # 5 minutes
    git_timeout: int = 30
    checkout_timeout: int = 300

    # Creation pipeline
    env_file_max_depth: int = 3
    install_dependencies: bool = True
    copy_env_files: bool = True

    # Execution modes
    verbose: bool = False
    debug: bool = False
    workers: Optional[int] = None  # Parallel status workers (None = auto-detect)

    # GitHub integration
    github_token: Optional[str] = None

    # Directory pruning never climbs past this (None = current user's home)
    home_directory: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_remote_name()
        self._validate_trunk_candidates()
        self._validate_worktrees_suffix()
        self._validate_timeouts()
        self._validate_env_file_max_depth()
        self._validate_workers()

    def _validate_remote_name(self):
        """Validate remote_name is not empty."""
        if not self.remote_name or not self.remote_name.strip():
            raise ValueError("remote_name cannot be empty")
        self.remote_name = self.remote_name.strip()

    def _validate_trunk_candidates(self):
        """Validate trunk_candidates is a non-empty list of names."""
        if not isinstance(self.trunk_candidates, list) or not self.trunk_candidates:
            raise ValueError("trunk_candidates must be a non-empty list")
        if any(not name or not name.strip() for name in self.trunk_candidates):
            raise ValueError("trunk_candidates cannot contain empty names")

    def _validate_worktrees_suffix(self):
        """Validate worktrees_suffix can be used as part of a directory name."""
        if not self.worktrees_suffix or not self.worktrees_suffix.strip():
            raise ValueError("worktrees_suffix cannot be empty")
        if "/" in self.worktrees_suffix or "\\" in self.worktrees_suffix:
            raise ValueError(f"worktrees_suffix cannot contain a path separator, got '{self.worktrees_suffix}'")

    def _validate_timeouts(self):
        """Validate all timeouts are positive."""
        for name in ("identity_timeout", "fetch_timeout", "install_timeout", "git_timeout", "checkout_timeout"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    def _validate_env_file_max_depth(self):
        """Validate env_file_max_depth is positive."""
        if self.env_file_max_depth <= 0:
            raise ValueError(f"env_file_max_depth must be positive, got {self.env_file_max_depth}")

    def _validate_workers(self):
        """Validate workers is positive when given."""
        if self.workers is not None and self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def get(self, key: str, default=None):
        """Get config value by key, dictionary style."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
