"""Core worktree lifecycle orchestration."""

from .worktree_manager import WorktreeManager

__all__ = ["WorktreeManager"]
