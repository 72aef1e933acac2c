"""Worktree data models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from git_worktree_manager.formatters.date import format_timestamp, parse_timestamp


def make_worktree_id(git_repo: str, branch_name: str) -> str:
    """Build the registry key for a repository identifier and branch."""
    return f"{git_repo}/{branch_name}"


@dataclass
class WorktreeEntry:
    """A worktree registered in the worktree registry."""

    path: str
    git_repo: str  # Organization/repository, e.g. "owner/repo"
    branch_name: str
    remote_url: str  # Remote URL observed at creation time
    created_at: datetime
    last_accessed: datetime

    @property
    def id(self) -> str:
        """Registry key, always derived from git_repo and branch_name."""
        return make_worktree_id(self.git_repo, self.branch_name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the registry file representation."""
        return {
            "id": self.id,
            "path": self.path,
            "git_repo": self.git_repo,
            "branch_name": self.branch_name,
            "remote_url": self.remote_url,
            "created_at": format_timestamp(self.created_at),
            "last_accessed": format_timestamp(self.last_accessed),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorktreeEntry":
        """Create an entry from its registry file representation.

        Raises:
            KeyError: If a required field is missing
            ValueError: If a timestamp cannot be parsed
        """
        return cls(
            path=data["path"],
            git_repo=data["git_repo"],
            branch_name=data["branch_name"],
            remote_url=data.get("remote_url", ""),
            created_at=parse_timestamp(data["created_at"]),
            last_accessed=parse_timestamp(data["last_accessed"]),
        )

    def __str__(self) -> str:
        return f"{self.branch_name} @ {self.path} [{self.git_repo}]"


@dataclass
class WorktreeInfo:
    """A worktree as reported by ``git worktree list --porcelain``."""

    path: str
    branch_name: str  # "detached HEAD" when no branch is checked out
    commit_sha: str
    is_main: bool  # Is this the main working tree?

    def __str__(self) -> str:
        """String representation of worktree."""
        main_marker = " (main)" if self.is_main else ""
        return f"{self.branch_name} @ {self.path}{main_marker}"
