"""Worktree table cell formatting utilities."""

import os

from git_worktree_manager.constants import (
    CLI_COLORS,
    STATUS_SYMBOLS,
    SYMBOL_ACTIVE,
    SYMBOL_INACTIVE,
)


def is_active_path(current_dir: str, worktree_path: str) -> bool:
    """
    Check whether the working directory is inside a worktree.

    Matches on path boundaries, so ``/wt/feature`` is not active for
    ``/wt/feature-2``.

    Args:
        current_dir: The process working directory
        worktree_path: Path of the worktree

    Returns:
        True if current_dir is the worktree path or lies beneath it
    """
    if not current_dir or not worktree_path:
        return False
    current = os.path.normpath(current_dir)
    path = os.path.normpath(worktree_path)
    return current == path or current.startswith(path.rstrip(os.sep) + os.sep)


def format_active_marker(is_active: bool) -> str:
    """Format the active worktree indicator column."""
    return SYMBOL_ACTIVE if is_active else SYMBOL_INACTIVE


def format_status(status: str) -> str:
    """
    Format a reconciliation status with symbol and color.

    Args:
        status: One of the WorktreeStatus values

    Returns:
        Rich markup string
    """
    symbol = STATUS_SYMBOLS.get(status, "")
    color = CLI_COLORS.get(status)
    text = f"{symbol} {status}".strip()
    if color:
        return f"[{color}]{text}[/{color}]"
    return text
