"""Data models for git-worktree-manager."""

from .worktree import WorktreeEntry, WorktreeInfo, make_worktree_id

__all__ = ["WorktreeEntry", "WorktreeInfo", "make_worktree_id"]
