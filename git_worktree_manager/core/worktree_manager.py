"""Core functionality for git-worktree-manager"""

import os
from typing import Dict, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from git_worktree_manager.config import Config
from git_worktree_manager.constants import STATE_FILE_NAME, WORKTREE_DIR_ENV_VAR, WorktreeStatus
from git_worktree_manager.exceptions import RemoteURLError, StorageError, WorktreeManagerError
from git_worktree_manager.logging_config import get_logger
from git_worktree_manager.models.worktree import WorktreeInfo
from git_worktree_manager.services.display_service import DisplayService
from git_worktree_manager.services.git import GitOperations, WorktreeService
from git_worktree_manager.services.registry_service import RegistryService
from git_worktree_manager.services.shell_service import ShellService
from git_worktree_manager.utils.paths import get_default_worktree_dir, get_legacy_state_dir
from git_worktree_manager.utils.remote_url import derive_repo_identifier

console = Console()
logger = get_logger(__name__)


def _path_key(path: str) -> str:
    """Normalize a path for comparing registry paths with git's listing."""
    return os.path.normcase(os.path.realpath(path))


class WorktreeManager:
    """Creates, switches to, removes and lists worktrees tracked in the registry.

    Registry changes are made before the matching git command runs and are not
    rolled back when it fails, so the registry may list worktrees that do not
    exist (fixed by ``cleanup``) but never silently loses track of one.
    """

    def __init__(
        self,
        repo_path: str,
        config: Config,
        registry: Optional[RegistryService] = None,
        git_operations: Optional[GitOperations] = None,
        worktree_service: Optional[WorktreeService] = None,
        shell_service: Optional[ShellService] = None,
        display_service: Optional[DisplayService] = None,
    ):
        """Initialize WorktreeManager.

        Args:
            repo_path: Path inside the git repository to operate on
            config: Configuration object
            registry: Registry to use (opened from the platform location on first use if None)
        """
        self.repo_path = repo_path
        self.config = config
        self._registry = registry
        self.git_operations = git_operations or GitOperations(repo_path)
        self.worktree_service = worktree_service or WorktreeService(repo_path)
        self.shell_service = shell_service or ShellService(config.shell)
        self.display_service = display_service or DisplayService(verbose=config.verbose)

    @property
    def registry(self) -> RegistryService:
        """The worktree registry, opened on first access.

        Raises:
            StorageError: If the registry cannot be opened
        """
        if self._registry is None:
            self._registry = RegistryService()
        return self._registry

    def _resolve_repository(self) -> Tuple[str, str]:
        """Get the repository identifier and remote URL of the current repository.

        Raises:
            GitOperationError: If not inside a repository or no remote is configured
            RemoteURLError: If the remote URL cannot be parsed
        """
        repo_root = self.git_operations.get_repo_root()
        remote_url = self.git_operations.get_remote_url()
        git_repo = derive_repo_identifier(remote_url)
        if not git_repo:
            raise RemoteURLError(remote_url)
        logger.debug(f"Repository {git_repo} at {repo_root} ({remote_url})")
        return git_repo, remote_url

    def _report_error(self, message: str) -> None:
        console.print(f"[red]Error: {escape(message)}[/red]")

    def create_worktree(self, branch_name: str, create_branch: bool = False) -> bool:
        """Create a worktree for a branch, register it and switch into it.

        Args:
            branch_name: Branch to create the worktree for
            create_branch: Create the branch as well (otherwise it must exist)

        Returns:
            True if the worktree was created and the shell session ran
        """
        try:
            git_repo, remote_url = self._resolve_repository()
            worktree_path = self.config.worktree_path(git_repo, branch_name)

            if create_branch:
                console.print(
                    f"Creating new branch '{escape(branch_name)}' and worktree at '{escape(worktree_path)}'"
                )
            else:
                console.print(
                    f"Creating worktree for branch '{escape(branch_name)}' at '{escape(worktree_path)}'"
                )

            # Register first: a failure below leaves a stale entry for cleanup
            try:
                self.registry.add_worktree(worktree_path, git_repo, branch_name, remote_url)
            except StorageError as e:
                logger.warning(f"Registry not saved: {e}")
                console.print(f"[yellow]Warning: could not save worktree registry: {escape(str(e))}[/yellow]")

            success, error = self.worktree_service.add_worktree(worktree_path, branch_name, create_branch)
            if not success:
                self._report_error(f"creating worktree at '{worktree_path}': {error}")
                return False
        except WorktreeManagerError as e:
            self._report_error(str(e))
            return False

        console.print(f"[green]Created worktree for branch '{escape(branch_name)}' at '{escape(worktree_path)}'[/green]")
        return self.switch_worktree(branch_name)

    def switch_worktree(self, branch_name: str, silent: bool = False) -> bool:
        """Start a shell in the worktree of a branch.

        Unregistered branches fall back to the conventional worktree path.
        Blocks until the shell exits.

        Args:
            branch_name: Branch whose worktree to switch to
            silent: Suppress the status line

        Returns:
            True if the shell session ran
        """
        try:
            git_repo, _ = self._resolve_repository()
            entry = self.registry.get_worktree(git_repo, branch_name)
        except WorktreeManagerError as e:
            self._report_error(str(e))
            return False

        if entry is not None:
            worktree_path = entry.path
        else:
            worktree_path = self.config.worktree_path(git_repo, branch_name)
            logger.debug(f"Branch {branch_name} not registered, trying {worktree_path}")

        if not os.path.isdir(worktree_path):
            console.print(
                f"[yellow]Worktree for branch '{escape(branch_name)}' not found at '{escape(worktree_path)}'[/yellow]"
            )
            return False

        if not silent:
            console.print(f"Switching to worktree at '{escape(worktree_path)}'")

        success, error = self.shell_service.launch(worktree_path)
        if not success:
            self._report_error(f"starting shell in worktree: {error}")
            return False
        return True

    def remove_worktree(self, branch_name: str, remove_branch: bool = False, force: bool = False) -> bool:
        """Unregister and remove the worktree of a branch.

        Args:
            branch_name: Branch whose worktree to remove
            remove_branch: Delete the branch after removing the worktree
            force: Force worktree removal and use ``branch -D``

        Returns:
            True if everything requested was removed
        """
        try:
            git_repo, _ = self._resolve_repository()
            entry = self.registry.find_worktree(git_repo, branch_name)
            if entry is None:
                console.print(
                    f"[yellow]No registered worktree for branch '{escape(branch_name)}' in {escape(git_repo)}[/yellow]"
                )
                return False

            try:
                self.registry.remove_worktree(git_repo, branch_name)
            except StorageError as e:
                logger.warning(f"Registry not saved: {e}")
                console.print(f"[yellow]Warning: could not save worktree registry: {escape(str(e))}[/yellow]")
        except WorktreeManagerError as e:
            self._report_error(str(e))
            return False

        worktree_path = entry.path
        if not os.path.exists(worktree_path):
            console.print(
                f"[yellow]Worktree for branch '{escape(branch_name)}' not found at '{escape(worktree_path)}'[/yellow]"
            )
            return False

        success, error = self.worktree_service.remove_worktree(worktree_path, force=force)
        if not success:
            self._report_error(f"removing worktree at '{worktree_path}': {error}")
            return False

        if remove_branch:
            success, error = self.git_operations.delete_branch(branch_name, force=force)
            if not success:
                console.print(f"Removed worktree at '{escape(worktree_path)}'")
                self._report_error(f"removing branch '{branch_name}': {error}")
                return False
            console.print(
                f"[green]Removed worktree at '{escape(worktree_path)}' and branch '{escape(branch_name)}'[/green]"
            )
        else:
            console.print(f"[green]Removed worktree at '{escape(worktree_path)}'[/green]")
        return True

    def list_worktrees(self) -> bool:
        """Show registered worktrees against git's own worktree list.

        Registered worktrees git does not know about are shown as stale;
        worktrees git knows about that are not registered are shown as unmanaged.

        Returns:
            True if the listing was shown
        """
        try:
            entries = sorted(self.registry.list_worktrees(), key=lambda entry: entry.branch_name)
            git_worktrees = self.worktree_service.list_worktrees()
        except WorktreeManagerError as e:
            self._report_error(str(e))
            return False

        unmanaged: Dict[str, WorktreeInfo] = {_path_key(wt.path): wt for wt in git_worktrees}
        statuses: Dict[str, str] = {}
        for entry in entries:
            if unmanaged.pop(_path_key(entry.path), None) is not None:
                statuses[entry.id] = WorktreeStatus.PRESENT
            else:
                statuses[entry.id] = WorktreeStatus.STALE

        current_dir = os.getcwd()
        self.display_service.display_managed_table(entries, statuses, current_dir)
        self.display_service.display_unmanaged_table(list(unmanaged.values()), current_dir)
        return True

    def cleanup(self) -> bool:
        """Unregister worktrees whose directories no longer exist.

        Returns:
            True if the registry was cleaned up
        """
        try:
            before_count = len(self.registry)
            self.registry.cleanup_stale_entries()
            removed_count = before_count - len(self.registry)
        except WorktreeManagerError as e:
            self._report_error(f"cleaning up stale entries: {e}")
            return False

        if removed_count > 0:
            console.print(f"[green]Cleaned up {removed_count} stale worktree entries[/green]")
        else:
            console.print("No stale entries found")
        return True

    def show_config(self) -> bool:
        """Show configuration and state storage information."""
        try:
            registry = self.registry
        except WorktreeManagerError as e:
            self._report_error(str(e))
            return False

        settings = {
            "State file location": str(registry.state_path),
            "Legacy state file": str(get_legacy_state_dir() / STATE_FILE_NAME),
            "Total managed worktrees": str(len(registry)),
            "Worktree directory": self.config.worktree_dir,
            WORKTREE_DIR_ENV_VAR: os.environ.get(WORKTREE_DIR_ENV_VAR) or "(not set)",
            "Default worktree directory": str(get_default_worktree_dir()),
        }
        self.display_service.display_config(settings)
        return True
