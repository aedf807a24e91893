"""Tests for branch and path naming rules"""
import os

import pytest

from worktree_tools.exceptions import InvalidArgument
from worktree_tools.models.identity import Identity, IdentitySource
from worktree_tools.utils.naming import (
    normalize_name,
    plan_worktree,
    validate_description,
    validate_ticket,
    worktrees_container,
)


class TestNormalizeName:
    """Test handle/description normalization."""

    @pytest.mark.parametrize("raw,expected", [
        ("Billing Feature!", "billing-feature"),
        ("John Doe", "john-doe"),
        ("  Fix   the\tbug  ", "-fix-the-bug-"),
        ("already-normal", "already-normal"),
        ("Émilie O'Brien", "milie-obrien"),
        ("v2 API_client", "v2-apiclient"),
    ])
    def test_normalize(self, raw, expected):
        """Test lowercasing, whitespace collapsing and character filtering."""
        assert normalize_name(raw) == expected

    @pytest.mark.parametrize("raw", ["Billing Feature!", "A  B\tC", "x_y.z", "MiXeD 123"])
    def test_idempotent(self, raw):
        """Test normalizing twice changes nothing."""
        once = normalize_name(raw)
        assert normalize_name(once) == once

    def test_output_alphabet(self):
        """Test only [a-z0-9-] survives."""
        result = normalize_name("Hello, World! #42 (ok)")
        assert all(c.isdigit() or c == "-" or "a" <= c <= "z" for c in result)


class TestValidation:
    """Test argument validation."""

    def test_valid_ticket_is_trimmed(self):
        """Test surrounding whitespace is removed."""
        assert validate_ticket("  CO-4493 ") == "CO-4493"

    @pytest.mark.parametrize("ticket", ["", "   ", "CO/1", "CO\\1", "CO 1", ".", ".."])
    def test_invalid_ticket(self, ticket):
        """Test tickets that cannot be a single path segment are rejected."""
        with pytest.raises(InvalidArgument) as exc_info:
            validate_ticket(ticket)
        assert exc_info.value.field == "ticket"

    def test_description_is_normalized(self):
        """Test the description comes back in branch form."""
        assert validate_description("Billing Feature!") == "billing-feature"

    @pytest.mark.parametrize("description", ["", "   ", "!!!", "???"])
    def test_invalid_description(self, description):
        """Test empty descriptions, before or after normalization, are rejected."""
        with pytest.raises(InvalidArgument) as exc_info:
            validate_description(description)
        assert exc_info.value.field == "description"


class TestPlanWorktree:
    """Test branch name and path planning."""

    def test_branch_and_path(self):
        """Test the layout for alice/CO-100/billing-feature in /work/acme."""
        identity = Identity("alice", IdentitySource.MANUAL_OVERRIDE)

        plan = plan_worktree(identity, "acme", "/work/acme", "CO-100", "billing-feature")

        assert plan.full_branch_name == "alice/CO-100/billing-feature"
        assert plan.worktree_path == os.path.join(
            "/work", "acme-worktrees", "alice", "CO-100", "billing-feature"
        )
        assert plan.repo_name == "acme"
        assert plan.identity == identity

    def test_deterministic(self):
        """Test identical inputs give identical plans."""
        identity = Identity("bob", IdentitySource.LOCAL_CONFIG_NAME)
        first = plan_worktree(identity, "acme", "/work/acme", "X-1", "thing")
        second = plan_worktree(identity, "acme", "/work/acme", "X-1", "thing")
        assert first == second

    def test_container_ignores_trailing_slash(self):
        """Test the container is a sibling of the main checkout."""
        assert worktrees_container("/work/acme/", "acme") == os.path.join("/work", "acme-worktrees")

    def test_custom_suffix(self):
        """Test the container suffix is configurable."""
        assert worktrees_container("/work/acme", "acme", "-wt") == os.path.join("/work", "acme-wt")
