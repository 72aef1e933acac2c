"""Platform-specific filesystem locations.

Worktrees and the registry file live in different places:

- new worktrees go under the *worktree directory* (overridable per invocation)
- the registry lives in the *state directory*, which moved between releases;
  the old location is the *legacy state directory* and is migrated on open
"""

import os
import sys
from pathlib import Path
from typing import Mapping, Optional

from git_worktree_manager.constants import APP_NAME, FALLBACK_WORKTREE_DIR, STATE_FILE_NAME
from git_worktree_manager.exceptions import StorageError
from git_worktree_manager.logging_config import get_logger

logger = get_logger(__name__)


def _is_windows(platform: Optional[str]) -> bool:
    return (platform or sys.platform).startswith("win")


def _home(home: Optional[Path]) -> Path:
    return Path(home) if home is not None else Path.home()


def get_default_worktree_dir(
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Get the platform default base directory for new worktrees.

    Args:
        platform: Platform name as reported by sys.platform (defaults to the current one)
        environ: Environment mapping (defaults to os.environ)
        home: Home directory (defaults to Path.home())

    Returns:
        Base directory under which ``<org>/<repo>/<branch>`` worktrees are created
    """
    environ = os.environ if environ is None else environ
    platform = platform or sys.platform
    try:
        home_dir = _home(home)
    except RuntimeError:
        logger.debug("Could not determine home directory, using fallback worktree directory")
        return Path(FALLBACK_WORKTREE_DIR)

    if _is_windows(platform):
        local_app_data = environ.get("LOCALAPPDATA")
        if not local_app_data:
            return home_dir / "AppData" / "Local" / APP_NAME
        return Path(local_app_data) / APP_NAME
    if platform == "darwin" or platform.startswith("linux"):
        return home_dir / ".local" / APP_NAME
    return home_dir / f".{APP_NAME}"


def get_state_dir(
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Get the directory holding the registry file."""
    environ = os.environ if environ is None else environ
    home_dir = _home(home)

    if _is_windows(platform):
        local_app_data = environ.get("LOCALAPPDATA")
        if not local_app_data:
            local_app_data = str(home_dir / "AppData" / "Local")
        return Path(local_app_data) / APP_NAME
    return home_dir / ".local" / "share" / APP_NAME


def get_legacy_state_dir(
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Get the directory older releases stored the registry file in."""
    environ = os.environ if environ is None else environ
    home_dir = _home(home)

    if _is_windows(platform):
        app_data = environ.get("APPDATA")
        if not app_data:
            app_data = str(home_dir / "AppData" / "Roaming")
        return Path(app_data) / APP_NAME
    config_home = environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / APP_NAME
    return home_dir / ".config" / APP_NAME


def migrate_legacy_state(legacy_path: Path, state_path: Path) -> bool:
    """Move a registry file from its legacy location to the current one.

    Only happens when the legacy file exists and the current one does not.
    A failed move is logged and otherwise ignored.

    Args:
        legacy_path: Registry file at the legacy location
        state_path: Registry file at the current location

    Returns:
        True if the file was moved
    """
    if not legacy_path.is_file() or state_path.exists():
        return False

    try:
        legacy_path.rename(state_path)
    except OSError as e:
        logger.error(f"Failed to migrate state file from {legacy_path} to {state_path}: {e}")
        return False

    logger.info(f"State file migrated from {legacy_path} to {state_path}")
    return True


def resolve_state_path(
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Resolve the registry file path, creating its directory and migrating legacy state.

    Raises:
        StorageError: If the state directory cannot be created
    """
    state_dir = get_state_dir(platform, environ, home)
    state_path = state_dir / STATE_FILE_NAME
    try:
        state_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError("open", str(state_path), f"cannot create state directory: {e}") from e

    legacy_path = get_legacy_state_dir(platform, environ, home) / STATE_FILE_NAME
    migrate_legacy_state(legacy_path, state_path)
    return state_path
