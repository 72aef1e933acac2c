"""Version information for git-worktree-manager."""

__version__ = "0.3.0"
