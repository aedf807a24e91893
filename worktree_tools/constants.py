"""Shared constants for worktree-tools."""

from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("branch", "Branch", 40),
    ColumnDefinition("path", "Path"),
    ColumnDefinition("changes", "Changes", 9),
    ColumnDefinition("sync", "Sync", 14),
    ColumnDefinition("head", "HEAD", 9),
]


# Lock file -> package manager, in detection priority order
PACKAGE_MANAGERS: List[Tuple[str, str]] = [
    ("pnpm-lock.yaml", "pnpm"),
    ("package-lock.json", "npm"),
    ("yarn.lock", "yarn"),
]

# IDE hint -> launcher executable
IDE_COMMANDS: Dict[str, str] = {
    "cursor": "cursor",
    "vscode": "code",
}
IDE_CHOICES = ["auto", *IDE_COMMANDS]

ENV_FILE_PATTERN = ".env*"
ENV_WALK_SKIP_DIRS = frozenset({".git", "node_modules"})

PR_COMMITS_HEADING = "## Commits"


# Status messages
STATUS_UNCOMMITTED = "⚠️  Working directory has uncommitted changes"
STATUS_NOTHING_TO_PUSH = "ℹ️  No commits to push"
STATUS_BEHIND = "⚠️  Branch is {behind} commit(s) behind {upstream}"
STATUS_READY = "✅ Clean and {ahead} commit(s) ahead - ready for PR"

SYMBOL_MAIN = "*"
SYMBOL_UNKNOWN = "⚠"


# CLI colors (Rich color names)
CLI_COLORS = {
    "main": "cyan",
    "dirty": "yellow",
    "unknown": "red",
    "clean": None,
}
