"""Command-line argument parsing for git-worktree-manager."""

import argparse
from typing import List, Optional

from git_worktree_manager.__version__ import __version__
from git_worktree_manager.constants import WORKTREE_DIR_ENV_VAR


def _add_worktree_dir_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-w",
        "--worktree-dir",
        metavar="DIR",
        help=f"Base directory for worktrees (default: ${WORKTREE_DIR_ENV_VAR} or the platform default)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="git-worktree-manager",
        description="A CLI tool for managing Git worktrees",
        epilog="Worktrees are created under <worktree-dir>/<org>/<repo>/<branch> and "
        "remembered so you can switch between them by branch name.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"git-worktree-manager {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    create_parser = subparsers.add_parser(
        "create", aliases=["new"], help="Create a worktree for a branch and switch to it"
    )
    create_parser.add_argument("branch", help="Branch name")
    create_parser.add_argument(
        "-b",
        "--create-branch",
        action="store_true",
        help="Create a new branch instead of checking out an existing one",
    )
    _add_worktree_dir_argument(create_parser)

    switch_parser = subparsers.add_parser(
        "switch", aliases=["s"], help="Open a shell in an existing worktree"
    )
    switch_parser.add_argument("branch", help="Branch name")
    switch_parser.add_argument(
        "-s", "--silent", action="store_true", help="Suppress output messages"
    )
    _add_worktree_dir_argument(switch_parser)

    remove_parser = subparsers.add_parser(
        "remove", aliases=["rm"], help="Remove an existing worktree"
    )
    remove_parser.add_argument("branch", help="Branch name")
    remove_parser.add_argument(
        "-b",
        "--remove-branch",
        action="store_true",
        help="Also remove the associated Git branch",
    )
    remove_parser.add_argument(
        "-f", "--force", action="store_true", help="Force removal of the worktree and/or branch"
    )
    _add_worktree_dir_argument(remove_parser)

    subparsers.add_parser(
        "list", aliases=["ls"], help="List managed worktrees and git's own worktrees"
    )
    subparsers.add_parser(
        "cleanup", aliases=["clean"], help="Remove registry entries for worktrees that no longer exist"
    )

    config_parser = subparsers.add_parser(
        "config", help="Show configuration and state information"
    )
    _add_worktree_dir_argument(config_parser)

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
