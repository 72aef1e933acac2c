"""
git-worktree-manager - Track and switch between Git worktrees by branch name
"""

from .__version__ import __version__
from .core import WorktreeManager
from .cli.main import main

__all__ = ["WorktreeManager", "main", "__version__"]
