"""Services for git-worktree-manager."""

from .registry_service import RegistryService
from .shell_service import ShellService
from .display_service import DisplayService

__all__ = ["RegistryService", "ShellService", "DisplayService"]
