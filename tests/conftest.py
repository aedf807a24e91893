"""Pytest fixtures for worktree-tools tests"""
import os
import tempfile
from pathlib import Path

import pytest
import git

from worktree_tools.config import Config


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        # git reports resolved paths, so compare against the resolved form
        yield Path(os.path.realpath(tmpdir))


@pytest.fixture
def mock_config(temp_dir):
    """Create a mock configuration dictionary."""
    return {
        'verbose': False,
        'debug': False,
        'remote_name': 'origin',
        'trunk_candidates': ['main', 'master'],
        'override_file_name': '.worktree-config',
        'worktrees_suffix': '-worktrees',
        'identity_timeout': 5,
        'git_timeout': 30,
        'install_dependencies': True,
        'copy_env_files': True,
        'github_token': None,
        'home_directory': str(temp_dir / "home"),
    }


@pytest.fixture
def config(mock_config):
    """Create a Config object from the mock configuration."""
    return Config.from_dict(mock_config)


@pytest.fixture
def origin_repo(temp_dir):
    """Create a bare repository acting as the origin remote."""
    origin_path = temp_dir / "remotes" / "acme.git"
    origin_path.mkdir(parents=True)
    repo = git.Repo.init(origin_path, bare=True)

    yield repo

    repo.close()


@pytest.fixture
def git_repo(temp_dir, origin_repo):
    """Create the main checkout of a real repository with origin/main pushed."""
    repo_path = temp_dir / "work" / "acme"
    repo_path.mkdir(parents=True)

    repo = git.Repo.init(repo_path)

    # Configure git user for commits; worktrees share this config
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    test_file = repo_path / "README.md"
    test_file.write_text("# Acme\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")
    repo.git.branch('-M', 'main')

    repo.create_remote('origin', origin_repo.git_dir)
    repo.git.push('-u', 'origin', 'main')

    yield repo

    repo.close()


@pytest.fixture
def make_commit():
    """Return a helper that commits one file in a repository or worktree."""
    def _commit(repo_path, filename, content, message):
        repo = git.Repo(repo_path)
        try:
            target = Path(repo_path) / filename
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
            repo.index.add([filename])
            return repo.index.commit(message)
        finally:
            repo.close()

    return _commit


@pytest.fixture
def feature_worktree(git_repo, temp_dir):
    """Create a worktree on a new branch tracking origin/main."""
    worktree_path = temp_dir / "work" / "acme-worktrees" / "alice" / "CO-1" / "billing-feature"
    git_repo.git.worktree("add", str(worktree_path), "-b", "alice/CO-1/billing-feature", "origin/main")
    return worktree_path


@pytest.fixture
def override_file(git_repo):
    """Write a USERNAME override into the main checkout."""
    path = Path(git_repo.working_dir) / ".worktree-config"
    path.write_text("# local overrides\nUSERNAME=alice\n")
    return path
