"""Git operations service"""

from typing import Optional

import git

from git_worktree_manager.exceptions import GitOperationError
from git_worktree_manager.logging_config import get_logger
from git_worktree_manager.services.git.base import GitRepoService, format_git_error

logger = get_logger(__name__)


class GitOperations(GitRepoService):
    """Service for repository queries and branch operations."""

    def __init__(self, repo_path: str, remote_name: str = "origin"):
        """Initialize the service.

        Args:
            repo_path: Path inside the git repository
            remote_name: Remote whose URL identifies the repository
        """
        super().__init__(repo_path)
        self.remote_name = remote_name

    def get_repo_root(self) -> str:
        """Get the top-level directory of the repository.

        Raises:
            GitOperationError: If the root cannot be determined
        """
        repo = self._get_repo()
        try:
            return repo.git.rev_parse("--show-toplevel").strip()
        except git.exc.GitCommandError as e:
            raise GitOperationError("rev-parse", message=format_git_error("rev-parse --show-toplevel", e)) from e

    def get_remote_url(self) -> str:
        """Get the URL of the configured remote.

        Raises:
            GitOperationError: If the remote is not configured
        """
        repo = self._get_repo()
        key = f"remote.{self.remote_name}.url"
        try:
            url = repo.git.config("--get", key).strip()
        except git.exc.GitCommandError as e:
            raise GitOperationError(
                "get_remote_url", message=f"no URL configured for remote '{self.remote_name}'"
            ) from e
        logger.debug(f"Remote {self.remote_name} URL: {url}")
        return url

    def delete_branch(self, branch_name: str, force: bool = False) -> tuple[bool, Optional[str]]:
        """Delete a local branch.

        Args:
            branch_name: Branch to delete
            force: Use ``-D`` (delete even if unmerged) instead of ``-d``

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        flag = "-D" if force else "-d"
        try:
            repo = self._get_repo()
            repo.git.branch(flag, branch_name)
            logger.info(f"Deleted branch {branch_name}")
            return True, None
        except git.exc.GitCommandError as e:
            error_msg = format_git_error(f"branch {flag}", e)
            logger.error(f"Failed to delete branch {branch_name}: {error_msg}")
            return False, error_msg
        except GitOperationError as e:
            return False, str(e)
