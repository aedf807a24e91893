"""Tests for pull request content and creation"""
from unittest.mock import Mock, patch

import pytest
from github import GithubException

from worktree_tools.core import WorktreeTools
from worktree_tools.exceptions import (
    AuthenticationRequired,
    CannotCreateFromTrunk,
    CommandError,
    GitHubAPIError,
    NoCommits,
)
from worktree_tools.services.github_service import GitHubService, parse_github_remote
from worktree_tools.services.pr_content_service import PRContentService, draft_from_messages


GITHUB_CLASS = 'worktree_tools.services.github_service.Github'
GH_COMMAND = 'worktree_tools.services.github_service.run_command'


def _mock_github(mock_github_class, number=42):
    """Wire a mocked Github class so create_pull returns a PR."""
    mock_gh = Mock()
    mock_repo = Mock()
    mock_pr = Mock()
    mock_pr.number = number
    mock_pr.html_url = f"https://github.com/acme/acme/pull/{number}"
    mock_pr.title = "Add billing model"
    mock_repo.create_pull.return_value = mock_pr
    mock_gh.get_repo.return_value = mock_repo
    mock_github_class.return_value = mock_gh
    return mock_gh, mock_repo


class TestDraftFromMessages:
    """Test title/body synthesis."""

    def test_single_commit(self):
        """Test one commit gives a title and an empty body."""
        draft = draft_from_messages(["Add billing model\n\nLonger explanation\n"])
        assert draft.title == "Add billing model"
        assert draft.body == ""

    def test_several_commits(self):
        """Test the body lists every commit subject, oldest first."""
        draft = draft_from_messages(["Add billing model\n", "Wire billing API\n\nDetails", "Fix typo"])

        assert draft.title == "Add billing model"
        assert draft.body == (
            "## Commits\n\n"
            "- Add billing model\n"
            "- Wire billing API\n"
            "- Fix typo"
        )


class TestPRContentService:
    """Test synthesis against a real worktree."""

    def test_synthesize(self, feature_worktree, mock_config, make_commit):
        """Test the oldest commit becomes the title."""
        make_commit(str(feature_worktree), "a.txt", "a\n", "Add billing model")
        make_commit(str(feature_worktree), "b.txt", "b\n", "Wire billing API")

        draft = PRContentService(mock_config).synthesize(str(feature_worktree))

        assert draft.title == "Add billing model"
        assert draft.body == "## Commits\n\n- Add billing model\n- Wire billing API"

    def test_no_commits(self, feature_worktree, mock_config):
        """Test a branch level with trunk has nothing to describe."""
        with pytest.raises(NoCommits):
            PRContentService(mock_config).synthesize(str(feature_worktree))

    def test_trunk_rejected(self, git_repo, mock_config):
        """Test synthesis from the trunk checkout is refused."""
        with pytest.raises(CannotCreateFromTrunk):
            PRContentService(mock_config).synthesize(git_repo.working_dir)

    @pytest.mark.parametrize("branch", ["main", "master"])
    def test_ensure_not_trunk(self, mock_config, branch):
        """Test every trunk candidate is refused."""
        with pytest.raises(CannotCreateFromTrunk):
            PRContentService(mock_config).ensure_not_trunk(branch)

    def test_ensure_not_trunk_detected_name(self, mock_config):
        """Test a detected trunk outside the candidates is refused too."""
        with pytest.raises(CannotCreateFromTrunk):
            PRContentService(mock_config).ensure_not_trunk("develop", "develop")
        PRContentService(mock_config).ensure_not_trunk("alice/CO-1/x", "main")


class TestParseGithubRemote:
    """Test GitHub remote URL parsing."""

    @pytest.mark.parametrize("url", [
        "git@github.com:acme/widgets.git",
        "https://github.com/acme/widgets.git",
        "https://github.com/acme/widgets",
        "ssh://git@github.com/acme/widgets.git",
    ])
    def test_parse(self, url):
        """Test supported URL forms."""
        assert parse_github_remote(url) == ("acme", "widgets")

    @pytest.mark.parametrize("url", [
        "git@gitlab.com:acme/widgets.git",
        "/srv/git/acme.git",
        "https://github.com/acme",
    ])
    def test_not_github(self, url):
        """Test non-GitHub remotes are rejected."""
        with pytest.raises(GitHubAPIError):
            parse_github_remote(url)


class TestTokenResolution:
    """Test where the GitHub token comes from."""

    def test_config_token_first(self, mock_config):
        """Test the configured token wins over the environment."""
        mock_config['github_token'] = "config_token"
        service = GitHubService(mock_config, environ={'GITHUB_TOKEN': 'env_token'})
        assert service.resolve_token() == "config_token"

    def test_environment_token(self, mock_config):
        """Test GITHUB_TOKEN is used without a configured token."""
        service = GitHubService(mock_config, environ={'GITHUB_TOKEN': 'env_token'})

        with patch(GH_COMMAND) as mock_run:
            assert service.resolve_token() == "env_token"
            mock_run.assert_not_called()

    def test_gh_cli_token(self, mock_config):
        """Test gh auth token is the last resort."""
        service = GitHubService(mock_config, environ={})

        with patch(GH_COMMAND, return_value="gh_token") as mock_run:
            assert service.resolve_token() == "gh_token"
            mock_run.assert_called_once_with(["gh", "auth", "token"], timeout=5)

    def test_no_token(self, mock_config):
        """Test missing credentials raise AuthenticationRequired."""
        service = GitHubService(mock_config, environ={})

        with patch(GH_COMMAND, side_effect=CommandError(["gh"], "executable not found: gh")):
            with pytest.raises(AuthenticationRequired) as exc_info:
                service.resolve_token()
        assert "gh auth login" in str(exc_info.value)


class TestGitHubServiceCreatePull:
    """Test pull request creation against a mocked API."""

    def test_create_pull_request(self, mock_config):
        """Test the API is called with the given fields."""
        service = GitHubService(mock_config, environ={'GITHUB_TOKEN': 't'})

        with patch(GITHUB_CLASS) as mock_github_class:
            mock_gh, mock_repo = _mock_github(mock_github_class)
            result = service.create_pull_request(
                "git@github.com:acme/acme.git", head="alice/CO-1/x", base="main",
                title="Add billing model", body="", draft=True,
            )

        mock_gh.get_repo.assert_called_once_with("acme/acme")
        mock_repo.create_pull.assert_called_once_with(
            title="Add billing model", body="", head="alice/CO-1/x", base="main", draft=True
        )
        mock_gh.close.assert_called_once()
        assert result.number == 42
        assert result.url == "https://github.com/acme/acme/pull/42"
        assert result.draft

    def test_api_error(self, mock_config):
        """Test API failures are wrapped."""
        service = GitHubService(mock_config, environ={'GITHUB_TOKEN': 't'})

        with patch(GITHUB_CLASS) as mock_github_class:
            _, mock_repo = _mock_github(mock_github_class)
            mock_repo.create_pull.side_effect = GithubException(
                422, {"message": "A pull request already exists"}, None
            )
            with pytest.raises(GitHubAPIError) as exc_info:
                service.create_pull_request(
                    "git@github.com:acme/acme.git", head="x", base="main", title="t"
                )

        assert "already exists" in str(exc_info.value)
        assert service.github is None

    def test_remote_checked_before_token(self, mock_config):
        """Test a non-GitHub remote is reported without looking for credentials."""
        service = GitHubService(mock_config, environ={})

        with patch(GH_COMMAND) as mock_run, patch(GITHUB_CLASS) as mock_github_class:
            with pytest.raises(GitHubAPIError) as exc_info:
                service.create_pull_request(
                    "git@gitlab.com:acme/widgets.git", head="x", base="main", title="t"
                )

        assert not isinstance(exc_info.value, AuthenticationRequired)
        assert exc_info.value.operation == "parse_remote"
        mock_run.assert_not_called()
        mock_github_class.assert_not_called()


class TestCreatePR:
    """Test the create_pr operation end to end."""

    def test_trunk_makes_no_network_call(self, git_repo, config):
        """Test create_pr from main fails before touching GitHub."""
        tools = WorktreeTools(config, environ={'GITHUB_TOKEN': 't'})

        with patch(GITHUB_CLASS) as mock_github_class, patch(GH_COMMAND) as mock_run:
            with pytest.raises(CannotCreateFromTrunk):
                tools.create_pr(git_repo.working_dir)

        mock_github_class.assert_not_called()
        mock_run.assert_not_called()

    def test_create_pr_synthesizes_content(self, git_repo, feature_worktree, config, make_commit):
        """Test title and body come from commits when not given."""
        make_commit(str(feature_worktree), "a.txt", "a\n", "Add billing model")
        make_commit(str(feature_worktree), "b.txt", "b\n", "Wire billing API")
        git_repo.git.remote('set-url', 'origin', 'git@github.com:acme/acme.git')
        tools = WorktreeTools(config, environ={'GITHUB_TOKEN': 't'})

        with patch(GITHUB_CLASS) as mock_github_class:
            _, mock_repo = _mock_github(mock_github_class, number=7)
            result = tools.create_pr(str(feature_worktree), draft=True)

        mock_repo.create_pull.assert_called_once_with(
            title="Add billing model",
            body="## Commits\n\n- Add billing model\n- Wire billing API",
            head="alice/CO-1/billing-feature",
            base="main",
            draft=True,
        )
        assert result.number == 7
        assert result.worktree_path == str(feature_worktree)

    def test_explicit_title_and_body(self, git_repo, feature_worktree, config, make_commit):
        """Test given title and body are passed through unchanged."""
        make_commit(str(feature_worktree), "a.txt", "a\n", "Add billing model")
        git_repo.git.remote('set-url', 'origin', 'https://github.com/acme/acme.git')
        tools = WorktreeTools(config, environ={'GITHUB_TOKEN': 't'})

        with patch(GITHUB_CLASS) as mock_github_class:
            _, mock_repo = _mock_github(mock_github_class)
            tools.create_pr(str(feature_worktree), title="Billing", body="Adds billing.")

        kwargs = mock_repo.create_pull.call_args.kwargs
        assert kwargs["title"] == "Billing"
        assert kwargs["body"] == "Adds billing."
        assert kwargs["draft"] is False

    def test_non_github_remote(self, feature_worktree, config, make_commit):
        """Test a non-GitHub origin is rejected."""
        make_commit(str(feature_worktree), "a.txt", "a\n", "Add billing model")
        tools = WorktreeTools(config, environ={'GITHUB_TOKEN': 't'})

        with patch(GITHUB_CLASS) as mock_github_class:
            with pytest.raises(GitHubAPIError):
                tools.create_pr(str(feature_worktree))
        mock_github_class.assert_not_called()
