"""
worktree-tools - git worktree lifecycle and pull request helpers
"""

from .__version__ import __version__
from .core import WorktreeTools
from .config import Config

__all__ = ["WorktreeTools", "Config", "__version__"]
