"""Command-line interface for git-worktree-manager"""

import os
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from git_worktree_manager.cli.args import parse_args
from git_worktree_manager.config import Config, resolve_worktree_dir
from git_worktree_manager.core import WorktreeManager
from git_worktree_manager.logging_config import setup_logging

console = Console()

# Subcommand aliases resolved to their canonical names
COMMAND_ALIASES = {
    "new": "create",
    "s": "switch",
    "rm": "remove",
    "ls": "list",
    "clean": "cleanup",
}


def dispatch(manager: WorktreeManager, args) -> bool:
    """Run the operation selected by the parsed arguments."""
    command = COMMAND_ALIASES.get(args.command, args.command)

    if command == "create":
        return manager.create_worktree(args.branch, create_branch=args.create_branch)
    if command == "switch":
        return manager.switch_worktree(args.branch, silent=args.silent)
    if command == "remove":
        return manager.remove_worktree(args.branch, remove_branch=args.remove_branch, force=args.force)
    if command == "list":
        return manager.list_worktrees()
    if command == "cleanup":
        return manager.cleanup()
    if command == "config":
        return manager.show_config()
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application.

    Operation failures are reported by the manager and still exit with 0;
    only unexpected errors exit non-zero.
    """
    parsed_args = parse_args(argv)
    try:
        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        config = Config(
            worktree_dir=resolve_worktree_dir(getattr(parsed_args, "worktree_dir", None)),
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
        )

        if parsed_args.debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {escape(str(value))}")

        manager = WorktreeManager(os.getcwd(), config)
        dispatch(manager, parsed_args)
        return 0
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if parsed_args.debug:
            console.print_exception()
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
