"""Utility functions for git-worktree-manager.

This package provides utility modules:
- paths: Platform-specific locations for worktrees and the registry file
- remote_url: Repository identifier derivation from remote URLs
"""

from .paths import (
    get_default_worktree_dir,
    get_state_dir,
    get_legacy_state_dir,
    migrate_legacy_state,
    resolve_state_path,
)
from .remote_url import derive_repo_identifier

__all__ = [
    # Paths
    "get_default_worktree_dir",
    "get_state_dir",
    "get_legacy_state_dir",
    "migrate_legacy_state",
    "resolve_state_path",
    # Remote URLs
    "derive_repo_identifier",
]
