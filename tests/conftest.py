"""Pytest fixtures for git-worktree-manager tests"""
import tempfile
from pathlib import Path
from unittest.mock import Mock

import git
import pytest

from git_worktree_manager.config import Config
from git_worktree_manager.core import WorktreeManager
from git_worktree_manager.services.display_service import DisplayService
from git_worktree_manager.services.registry_service import RegistryService
from git_worktree_manager.services.shell_service import ShellService


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        # Resolve symlinks so paths match what git reports (e.g. macOS /private/var)
        yield Path(tmpdir).resolve()


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with a GitHub-style origin remote."""
    repo_path = temp_dir / "widgets"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    test_file = repo_path / "README.md"
    test_file.write_text("# Widgets\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    try:
        repo.git.branch('-M', 'main')
    except Exception:
        pass

    repo.create_remote('origin', 'git@github.com:acme/widgets.git')

    yield repo

    repo.close()


@pytest.fixture
def state_file(temp_dir):
    """Registry file location inside the temporary directory."""
    return temp_dir / "state" / "state.json"


@pytest.fixture
def registry(state_file):
    """Create an empty registry backed by a temporary file."""
    return RegistryService(state_file)


@pytest.fixture
def worktree_dir(temp_dir):
    """Base directory for worktrees created during a test."""
    return temp_dir / "wt"


@pytest.fixture
def mock_config(worktree_dir):
    """Create a configuration pointing at the temporary worktree directory."""
    return Config(worktree_dir=str(worktree_dir))


@pytest.fixture
def mock_shell_service():
    """Create a ShellService that does not start a real shell."""
    service = Mock(spec=ShellService)
    service.launch = Mock(return_value=(True, None))
    return service


@pytest.fixture
def mock_display_service():
    """Create a DisplayService mock to inspect what would be rendered."""
    return Mock(spec=DisplayService)


@pytest.fixture
def manager(git_repo, mock_config, registry, mock_shell_service, mock_display_service):
    """Create a WorktreeManager for the test repository."""
    return WorktreeManager(
        git_repo.working_dir,
        mock_config,
        registry=registry,
        shell_service=mock_shell_service,
        display_service=mock_display_service,
    )
