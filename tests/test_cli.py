"""Tests for the command-line interface"""
import json

import pytest

from worktree_tools.cli import main, parse_args


class TestParseArgs:
    """Test argument parsing."""

    def test_create(self):
        """Test create arguments and flags."""
        args = parse_args(["create", "CO-1", "billing feature", "--ide", "cursor", "--no-install"])

        assert args.command == "create"
        assert args.ticket == "CO-1"
        assert args.description == "billing feature"
        assert args.ide == "cursor"
        assert args.no_install
        assert not args.no_env

    def test_create_pr(self):
        """Test create-pr arguments."""
        args = parse_args(["--json", "create-pr", "/tmp/wt", "--draft", "--title", "T"])

        assert args.json
        assert args.command == "create-pr"
        assert args.worktree_path == "/tmp/wt"
        assert args.draft
        assert args.title == "T"
        assert args.body is None

    def test_command_required(self):
        """Test a sub-command must be given."""
        with pytest.raises(SystemExit):
            parse_args([])

    def test_unknown_ide(self):
        """Test the IDE choice is validated."""
        with pytest.raises(SystemExit):
            parse_args(["create", "CO-1", "x", "--ide", "notepad"])


class TestMain:
    """Test the entry point."""

    def test_status_json(self, feature_worktree, capsys):
        """Test status prints a JSON report."""
        assert main(["--json", "status", str(feature_worktree)]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["clean"] is True
        assert data["upstream"] == "origin/main"

    def test_list_json(self, git_repo, feature_worktree, capsys):
        """Test list prints every worktree."""
        assert main(["--json", "list", "-C", git_repo.working_dir]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["main_repo_path"] == git_repo.working_dir
        assert len(data["worktrees"]) == 2

    def test_error_exit_code(self, temp_dir, capsys):
        """Test tool errors become exit code 1 with a JSON error."""
        plain = temp_dir / "plain"
        plain.mkdir()

        assert main(["--json", "status", str(plain)]) == 1

        data = json.loads(capsys.readouterr().out)
        assert data["type"] == "NotARepository"

    def test_invalid_argument_exit_code(self, capsys):
        """Test invalid input fails without touching git."""
        assert main(["--json", "create", "CO/1", "billing"]) == 1

        data = json.loads(capsys.readouterr().out)
        assert data["type"] == "InvalidArgument"
