"""Tests for status formatting and the status operation"""
import pytest

from worktree_tools.constants import STATUS_NOTHING_TO_PUSH, STATUS_UNCOMMITTED
from worktree_tools.core import WorktreeTools
from worktree_tools.exceptions import NotARepository
from worktree_tools.formatters import format_status_message, format_sync, is_ready_for_pr, readiness
from worktree_tools.models.worktree import DivergenceStatus


class TestReadiness:
    """Test readiness rules and message precedence."""

    def test_ready(self):
        """Test a clean branch with commits is ready."""
        status = DivergenceStatus(clean=True, ahead=2, behind=0, upstream="origin/main")
        assert is_ready_for_pr(status)
        assert "ready for PR" in format_status_message(status)
        assert "2 commit(s) ahead" in format_status_message(status)

    def test_uncommitted_wins(self):
        """Test uncommitted changes take precedence over everything."""
        status = DivergenceStatus(clean=False, ahead=3, behind=2, upstream="origin/main")
        assert not is_ready_for_pr(status)
        assert format_status_message(status) == STATUS_UNCOMMITTED

    def test_nothing_to_push(self):
        """Test a clean branch without commits is not ready."""
        status = DivergenceStatus(clean=True, ahead=0, behind=4, upstream="origin/main")
        assert readiness(status) == (False, STATUS_NOTHING_TO_PUSH)

    def test_behind_but_ready(self):
        """Test being behind is reported but does not block readiness."""
        status = DivergenceStatus(clean=True, ahead=1, behind=2, upstream="origin/main")
        ready, message = readiness(status)
        assert ready
        assert "2 commit(s) behind origin/main" in message

    def test_no_upstream(self):
        """Test a branch without tracking has nothing to push."""
        status = DivergenceStatus(clean=True)
        assert readiness(status) == (False, STATUS_NOTHING_TO_PUSH)

    @pytest.mark.parametrize("status,expected", [
        (DivergenceStatus(clean=True), "no upstream"),
        (DivergenceStatus(clean=True, upstream="origin/main"), "synced"),
        (DivergenceStatus(clean=True, ahead=2, behind=1, upstream="origin/main"), "↑2 ↓1"),
        (DivergenceStatus(clean=True, ahead=3, upstream="origin/main"), "↑3"),
    ])
    def test_format_sync(self, status, expected):
        """Test the compact table column."""
        assert format_sync(status) == expected


class TestStatusOperation:
    """Test status against real worktrees."""

    def test_ready_after_commits(self, feature_worktree, config, make_commit):
        """Test a clean worktree with three commits is ready."""
        for i in range(3):
            make_commit(str(feature_worktree), f"f{i}.txt", "x\n", f"Commit {i}")

        report = WorktreeTools(config).status(str(feature_worktree))

        assert report.status.clean
        assert report.status.ahead == 3
        assert report.ready_for_pr
        assert report.message == "✅ Clean and 3 commit(s) ahead - ready for PR"

    def test_dirty_not_ready(self, feature_worktree, config):
        """Test an untracked file blocks readiness."""
        (feature_worktree / "new.txt").write_text("x\n")

        report = WorktreeTools(config).status(str(feature_worktree))

        assert not report.status.clean
        assert not report.ready_for_pr
        assert report.message == STATUS_UNCOMMITTED

    def test_report_to_dict(self, feature_worktree, config):
        """Test the JSON shape of a status report."""
        data = WorktreeTools(config).status(str(feature_worktree)).to_dict()

        assert data["clean"] is True
        assert data["ahead"] == 0
        assert data["behind"] == 0
        assert data["uncommitted"] is False
        assert data["upstream"] == "origin/main"
        assert data["ready_for_pr"] is False
        assert data["worktree_path"] == str(feature_worktree)

    def test_not_a_worktree(self, temp_dir, config):
        """Test a plain directory is rejected."""
        plain = temp_dir / "plain"
        plain.mkdir()
        with pytest.raises(NotARepository):
            WorktreeTools(config).status(str(plain))


class TestListOperation:
    """Test the list operation."""

    def test_list(self, git_repo, feature_worktree, config):
        """Test the main record comes first and worktrees carry status."""
        result = WorktreeTools(config).list_worktrees(str(feature_worktree))

        assert result.main_repo_path == git_repo.working_dir
        assert len(result.worktrees) == 2
        assert result.worktrees[0].record.is_main
        assert result.worktrees[1].status.upstream == "origin/main"

        data = result.to_dict()
        assert data["worktrees"][0]["is_main"] is True
        assert data["worktrees"][0]["status"] is None
        assert data["worktrees"][1]["branch_name"] == "alice/CO-1/billing-feature"
