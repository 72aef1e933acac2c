"""Shared constants for git-worktree-manager."""

APP_NAME = "git-worktree-manager"

# Registry storage
STATE_FILE_NAME = "state.json"
STATE_VERSION = "1.0"
LOG_FILE_NAME = "git-worktree-manager.log"

# Environment variable overriding where new worktrees are placed
WORKTREE_DIR_ENV_VAR = "GIT_WORKTREE_MANAGER_DIR"

# Fallback when the home directory cannot be determined
FALLBACK_WORKTREE_DIR = "/tmp/git-worktrees"

DETACHED_HEAD = "detached HEAD"


# Symbol constants
SYMBOL_PRESENT = "✓"
SYMBOL_STALE = "✗"
SYMBOL_ACTIVE = "*"
SYMBOL_INACTIVE = " "


# Status display names for the managed worktree table
class WorktreeStatus:
    """Reconciliation status of a registered worktree."""

    PRESENT = "present"
    STALE = "stale"
    UNMANAGED = "unmanaged"


STATUS_SYMBOLS = {
    WorktreeStatus.PRESENT: SYMBOL_PRESENT,
    WorktreeStatus.STALE: SYMBOL_STALE,
    WorktreeStatus.UNMANAGED: "?",
}

# CLI colors (Rich color names)
CLI_COLORS = {
    WorktreeStatus.PRESENT: "green",
    WorktreeStatus.STALE: "red",
    WorktreeStatus.UNMANAGED: "yellow",
}
