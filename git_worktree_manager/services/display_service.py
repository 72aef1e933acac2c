"""Display and formatting service for worktree information"""
from typing import Dict, List

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from git_worktree_manager.constants import WorktreeStatus
from git_worktree_manager.formatters import (
    format_active_marker,
    format_date,
    format_status,
    is_active_path,
)
from git_worktree_manager.logging_config import get_logger
from git_worktree_manager.models.worktree import WorktreeEntry, WorktreeInfo

console = Console()
logger = get_logger(__name__)


class DisplayService:
    """Renders worktree listings and configuration as Rich tables."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def display_managed_table(
            self,
            entries: List[WorktreeEntry],
            statuses: Dict[str, str],
            current_dir: str,
        ) -> None:
        """Display registered worktrees with their reconciliation status.

        Args:
            entries: Registered worktrees, already sorted for display
            statuses: Worktree id to WorktreeStatus value
            current_dir: Process working directory, used to mark the active worktree
        """
        if not entries:
            console.print("[dim]No managed worktrees[/dim]")
            return

        table = Table(title="Managed Worktrees", title_justify="left")
        table.add_column("", width=1)
        table.add_column("Branch")
        table.add_column("Repository")
        table.add_column("Path")
        table.add_column("Status")
        if self.verbose:
            table.add_column("Last Accessed")

        for entry in entries:
            row = [
                format_active_marker(is_active_path(current_dir, entry.path)),
                escape(entry.branch_name),
                escape(entry.git_repo),
                escape(entry.path),
                format_status(statuses.get(entry.id, WorktreeStatus.STALE)),
            ]
            if self.verbose:
                row.append(format_date(entry.last_accessed))
            table.add_row(*row)

        console.print(table)

    def display_unmanaged_table(self, worktrees: List[WorktreeInfo], current_dir: str) -> None:
        """Display worktrees git knows about that are not registered."""
        if not worktrees:
            return

        table = Table(title="Unmanaged Git Worktrees", title_justify="left")
        table.add_column("", width=1)
        table.add_column("Branch")
        table.add_column("Path")
        table.add_column("Status")

        for worktree in worktrees:
            table.add_row(
                format_active_marker(is_active_path(current_dir, worktree.path)),
                escape(worktree.branch_name),
                escape(worktree.path),
                format_status(WorktreeStatus.UNMANAGED),
            )

        console.print()
        console.print(table)

    def display_config(self, settings: Dict[str, str]) -> None:
        """Display configuration and state information."""
        table = Table(title="Git Worktree Manager Configuration", title_justify="left", show_header=False)
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        for key, value in settings.items():
            table.add_row(key, escape(str(value)))
        console.print(table)
