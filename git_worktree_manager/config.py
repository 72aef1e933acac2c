"""Configuration handling for git-worktree-manager"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from git_worktree_manager.constants import WORKTREE_DIR_ENV_VAR
from git_worktree_manager.utils.paths import get_default_worktree_dir


def resolve_worktree_dir(cli_value: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> str:
    """Resolve the base directory for new worktrees.

    Precedence: command-line flag, then GIT_WORKTREE_MANAGER_DIR, then the
    platform default.
    """
    if cli_value:
        return cli_value
    environ = os.environ if environ is None else environ
    env_value = environ.get(WORKTREE_DIR_ENV_VAR)
    if env_value:
        return env_value
    return str(get_default_worktree_dir(environ=environ))


@dataclass
class Config:
    """Configuration for git-worktree-manager with validation."""

    # Base directory for new worktrees (<worktree_dir>/<org>/<repo>/<branch>)
    worktree_dir: str

    # Output
    verbose: bool = False
    debug: bool = False

    # Shell started by switch (None = detect from environment)
    shell: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_worktree_dir()

    def _validate_worktree_dir(self):
        """Validate worktree_dir is not empty and make it absolute."""
        if not self.worktree_dir or not str(self.worktree_dir).strip():
            raise ValueError("worktree_dir cannot be empty")
        self.worktree_dir = os.path.abspath(os.path.expanduser(str(self.worktree_dir).strip()))

    def worktree_path(self, git_repo: str, branch_name: str) -> str:
        """Get the conventional path of a worktree."""
        return str(Path(self.worktree_dir, git_repo, branch_name))

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "worktree_dir": self.worktree_dir,
            "verbose": self.verbose,
            "debug": self.debug,
            "shell": self.shell,
        }

