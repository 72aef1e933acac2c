"""Shared formatting functions for CLI output.

This package provides formatting utilities organized by category:
- date: Timestamp parsing and formatting
- worktree: Worktree table cell formatting
"""

from .date import format_date, format_timestamp, parse_timestamp
from .worktree import format_active_marker, format_status, is_active_path

__all__ = [
    # Date formatting
    "format_date",
    "format_timestamp",
    "parse_timestamp",
    # Worktree formatting
    "format_active_marker",
    "format_status",
    "is_active_path",
]
