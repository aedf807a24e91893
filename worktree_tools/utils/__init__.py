"""Utility functions for worktree-tools.

This package provides utility modules:
- naming: handle/description normalization and worktree path planning
- process: bounded execution of external commands
- threading: worker count for parallel status queries
"""

from .naming import normalize_name, validate_ticket, plan_worktree
from .process import run_command
from .threading import is_free_threading_enabled, get_optimal_worker_count

__all__ = [
    # Naming
    "normalize_name",
    "validate_ticket",
    "plan_worktree",
    # Process
    "run_command",
    # Threading
    "is_free_threading_enabled",
    "get_optimal_worker_count",
]
