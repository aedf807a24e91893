"""Naming rules for handles, branches and worktree paths.

Everything here is pure: the same inputs always give the same branch name
and path, which is what makes ``cleanup`` able to find what ``create`` made.
"""

import os
import re

from worktree_tools.exceptions import InvalidArgument
from worktree_tools.models.identity import Identity
from worktree_tools.models.lifecycle import CreationPlan

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9-]")


def normalize_name(text: str) -> str:
    """Lowercase, collapse whitespace runs to hyphens, drop anything outside [a-z0-9-].

    Idempotent: normalizing an already normalized name returns it unchanged.

    >>> normalize_name("Billing Feature!")
    'billing-feature'
    """
    return _DISALLOWED.sub("", _WHITESPACE.sub("-", text.lower()))


def validate_ticket(ticket: str) -> str:
    """Return the trimmed ticket, or raise InvalidArgument.

    The ticket becomes a branch and directory segment as-is, so it may not be
    empty, contain whitespace or a path separator, or be a relative directory.
    """
    ticket = (ticket or "").strip()
    if not ticket:
        raise InvalidArgument("ticket", "Ticket number is required")
    if "/" in ticket or "\\" in ticket:
        raise InvalidArgument("ticket", f"'{ticket}' must not contain a path separator")
    if ticket in (".", ".."):
        raise InvalidArgument("ticket", f"'{ticket}' is not a valid ticket")
    if _WHITESPACE.search(ticket):
        raise InvalidArgument("ticket", f"'{ticket}' must not contain whitespace")
    return ticket


def validate_description(description: str) -> str:
    """Return the normalized description, or raise InvalidArgument."""
    if not description or not description.strip():
        raise InvalidArgument("description", "Branch name is required")
    normalized = normalize_name(description.strip())
    if not normalized:
        raise InvalidArgument(
            "description", f"'{description}' has no characters left after normalization"
        )
    return normalized


def worktrees_container(main_root: str, repo_name: str, suffix: str = "-worktrees") -> str:
    """Directory that holds every worktree of a repository: ``<parent>/<repo><suffix>``."""
    parent = os.path.dirname(os.path.normpath(main_root))
    return os.path.join(parent, f"{repo_name}{suffix}")


def plan_worktree(
    identity: Identity,
    repo_name: str,
    main_root: str,
    ticket: str,
    normalized_description: str,
    suffix: str = "-worktrees",
) -> CreationPlan:
    """Compute the branch name ``<handle>/<ticket>/<description>`` and its worktree path."""
    full_branch_name = f"{identity.handle}/{ticket}/{normalized_description}"
    worktree_path = os.path.join(
        worktrees_container(main_root, repo_name, suffix),
        identity.handle,
        ticket,
        normalized_description,
    )
    return CreationPlan(
        identity=identity,
        repo_name=repo_name,
        ticket=ticket,
        normalized_description=normalized_description,
        full_branch_name=full_branch_name,
        worktree_path=worktree_path,
    )
