"""Command-line argument parsing for worktree-tools."""

import argparse

from worktree_tools.__version__ import __version__
from worktree_tools.constants import IDE_CHOICES


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one sub-command per operation."""
    parser = argparse.ArgumentParser(
        prog="worktree-tools",
        description="Create, inspect and clean up git worktrees, and open pull requests from them",
        epilog="Worktrees are created at ../<repo>-worktrees/<username>/<TICKET>/<branch-name>. "
        "PR creation needs GITHUB_TOKEN or an authenticated gh CLI.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--debug", action="store_true", help="Show debug information for troubleshooting")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--version", action="version", version=f"worktree-tools {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Create a new worktree with automatic setup")
    create.add_argument("ticket", help="Ticket number (e.g., CO-4493, PROJ-123)")
    create.add_argument(
        "description",
        help='Branch description; spaces become hyphens ("billing feature" -> "billing-feature")',
    )
    create.add_argument("-C", "--base-dir", help="Directory inside the repository (default: current)")
    create.add_argument("--base-branch", help="Branch from this ref instead of origin/main or origin/master")
    create.add_argument("--ide", choices=IDE_CHOICES, help="Open the worktree in an IDE after creation")
    create.add_argument("--no-install", action="store_true", help="Skip dependency installation")
    create.add_argument("--no-env", action="store_true", help="Skip copying .env files")

    list_cmd = subparsers.add_parser("list", help="List worktrees with their status")
    list_cmd.add_argument("-C", "--base-dir", help="Directory inside the repository (default: current)")
    list_cmd.add_argument("--workers", type=int, metavar="N", help="Parallel status workers (default: auto)")

    status = subparsers.add_parser("status", help="Show whether a worktree is clean and ready for a PR")
    status.add_argument("worktree_path", help="Path to the worktree to check")

    cleanup = subparsers.add_parser("cleanup", help="Remove a worktree and empty parent directories")
    cleanup.add_argument("worktree_path", help="Path to the worktree to remove")
    cleanup.add_argument("--delete-branch", action="store_true", help="Also delete the local branch")
    cleanup.add_argument("-C", "--base-dir", help="Directory inside the repository (default: current)")

    create_pr = subparsers.add_parser("create-pr", help="Open a GitHub pull request from a worktree")
    create_pr.add_argument("worktree_path", help="Path to the worktree")
    create_pr.add_argument("--title", help="PR title (default: generated from commits)")
    create_pr.add_argument("--body", help="PR body (default: generated from commits)")
    create_pr.add_argument("--draft", action="store_true", help="Create as draft PR")

    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
