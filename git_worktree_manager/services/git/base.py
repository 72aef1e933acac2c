"""Shared repository access for git services."""

import git

from git_worktree_manager.exceptions import GitOperationError


def format_git_error(command: str, error: git.exc.GitCommandError) -> str:
    """Build an error message from a failed git command, including its output."""
    stderr = (error.stderr if hasattr(error, "stderr") else str(error)).strip()
    stdout = (error.stdout if hasattr(error, "stdout") else "").strip()
    status = error.status if hasattr(error, "status") else "unknown"

    output = "\n".join(part for part in (stdout, stderr) if part)
    if output:
        return f"git {command} failed (exit {status}): {output}"
    return f"git {command} failed with exit code {status}"


class GitRepoService:
    """Base class for services operating on one git repository."""

    def __init__(self, repo_path: str):
        """Initialize the service.

        Args:
            repo_path: Path inside the git repository (parent directories are searched)
        """
        self.repo_path = repo_path

    def _get_repo(self) -> git.Repo:
        """Get a git.Repo instance for the repository containing repo_path.

        Git commands run through ``repo.git`` execute in the repository root.

        Raises:
            GitOperationError: If repo_path is not inside a git repository
        """
        try:
            return git.Repo(self.repo_path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise GitOperationError("open_repository", message=f"not a git repository: {e}") from e
