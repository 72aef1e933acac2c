"""Custom exceptions for git-worktree-manager"""

from typing import Optional


class WorktreeManagerError(Exception):
    """Base exception for all git-worktree-manager errors."""
    pass


class GitOperationError(WorktreeManagerError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class StorageError(WorktreeManagerError):
    """Exception raised when the worktree registry cannot be read or written."""

    def __init__(self, operation: str, path: str, message: Optional[str] = None):
        self.operation = operation
        self.path = path
        self.message = message

        error_msg = f"Registry {operation} failed for '{path}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class RemoteURLError(WorktreeManagerError):
    """Exception raised when no repository identifier can be derived from a remote URL."""

    def __init__(self, remote_url: str):
        self.remote_url = remote_url
        super().__init__(
            f"Could not parse organization/username and repository name from remote URL: '{remote_url}'"
        )
