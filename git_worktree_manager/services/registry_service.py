"""Registry service for tracking managed worktrees on disk."""
import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union

from git_worktree_manager.constants import STATE_VERSION
from git_worktree_manager.exceptions import StorageError
from git_worktree_manager.logging_config import get_logger
from git_worktree_manager.models.worktree import WorktreeEntry, make_worktree_id
from git_worktree_manager.utils.paths import resolve_state_path

logger = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RegistryService:
    """Persistent mapping of (repository, branch) to worktree entries.

    The whole document is written back after every mutation. There is no
    locking: concurrent invocations race on the file and the last writer wins.
    """

    def __init__(self, state_path: Optional[Union[str, Path]] = None):
        """Open the registry, loading the existing document if there is one.

        Args:
            state_path: Registry file to use. Defaults to the platform state
                location, migrating a legacy file into it if needed.

        Raises:
            StorageError: If the registry file cannot be created or read
        """
        if state_path is None:
            self.state_path = resolve_state_path()
        else:
            self.state_path = Path(state_path)
            try:
                self.state_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError("open", str(self.state_path), f"cannot create state directory: {e}") from e

        self.version = STATE_VERSION
        self._worktrees: Dict[str, WorktreeEntry] = {}
        self._load()

    def __len__(self) -> int:
        return len(self._worktrees)

    def _load(self) -> None:
        """Load the registry document from disk, if present."""
        if not self.state_path.exists():
            logger.debug(f"No registry file at {self.state_path}, starting empty")
            return

        try:
            with open(self.state_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StorageError("load", str(self.state_path), f"invalid JSON: {e}") from e
        except OSError as e:
            raise StorageError("load", str(self.state_path), str(e)) from e

        if not isinstance(data, dict):
            raise StorageError("load", str(self.state_path), "document is not an object")

        self.version = data.get("version") or STATE_VERSION
        worktrees = data.get("worktrees") or {}
        if not isinstance(worktrees, dict):
            raise StorageError("load", str(self.state_path), "'worktrees' is not an object")

        for key, entry_data in worktrees.items():
            try:
                entry = WorktreeEntry.from_dict(entry_data)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise StorageError("load", str(self.state_path), f"invalid entry '{key}': {e}") from e
            self._worktrees[entry.id] = entry

        logger.debug(f"Loaded registry with {len(self._worktrees)} worktrees (version {self.version})")

    def _save(self) -> None:
        """Write the registry document using an atomic replace.

        Raises:
            StorageError: If the document cannot be written
        """
        document = {
            "version": self.version,
            "worktrees": {key: entry.to_dict() for key, entry in self._worktrees.items()},
        }

        temp_file = self.state_path.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_file, self.state_path)
            logger.debug(f"Saved registry with {len(self._worktrees)} worktrees")
        except OSError as e:
            raise StorageError("save", str(self.state_path), str(e)) from e
        finally:
            if temp_file.exists():
                try:
                    temp_file.unlink()
                except OSError as e:
                    logger.debug(f"Could not remove temporary registry file {temp_file}: {e}")

    def add_worktree(self, path: str, git_repo: str, branch_name: str, remote_url: str) -> WorktreeEntry:
        """Register a worktree, replacing any entry with the same id.

        Args:
            path: Absolute path of the worktree
            git_repo: Repository identifier (organization/repository)
            branch_name: Branch the worktree is for
            remote_url: Remote URL at creation time

        Returns:
            The new entry

        Raises:
            StorageError: If the registry cannot be saved. The entry stays
                registered in memory.
        """
        now = _now()
        entry = WorktreeEntry(
            path=path,
            git_repo=git_repo,
            branch_name=branch_name,
            remote_url=remote_url,
            created_at=now,
            last_accessed=now,
        )
        if entry.id in self._worktrees:
            logger.debug(f"Replacing existing registry entry {entry.id}")
        self._worktrees[entry.id] = entry
        logger.info(f"Registered worktree {entry.id} at {path}")
        self._save()
        return entry

    def remove_worktree(self, git_repo: str, branch_name: str) -> bool:
        """Unregister a worktree. Removing an unknown worktree is not an error.

        Returns:
            True if an entry was removed

        Raises:
            StorageError: If the registry cannot be saved
        """
        worktree_id = make_worktree_id(git_repo, branch_name)
        removed = self._worktrees.pop(worktree_id, None) is not None
        if removed:
            logger.info(f"Unregistered worktree {worktree_id}")
        else:
            logger.debug(f"Worktree {worktree_id} not registered, nothing to remove")
        self._save()
        return removed

    def get_worktree(self, git_repo: str, branch_name: str) -> Optional[WorktreeEntry]:
        """Look up a worktree and record the access time.

        Failing to save the access time is logged, not raised.

        Returns:
            The entry, or None if it is not registered
        """
        worktree_id = make_worktree_id(git_repo, branch_name)
        entry = self._worktrees.get(worktree_id)
        if entry is None:
            return None

        entry.last_accessed = _now()
        try:
            self._save()
        except StorageError as e:
            logger.warning(f"Could not record access time for {worktree_id}: {e}")
        return entry

    def find_worktree(self, git_repo: str, branch_name: str) -> Optional[WorktreeEntry]:
        """Look up a worktree without recording an access time."""
        return self._worktrees.get(make_worktree_id(git_repo, branch_name))

    def list_worktrees(self) -> List[WorktreeEntry]:
        """Get all registered worktrees, in no particular order."""
        return list(self._worktrees.values())

    def list_worktrees_by_repo(self, git_repo: str) -> List[WorktreeEntry]:
        """Get the registered worktrees of one repository."""
        return [entry for entry in self._worktrees.values() if entry.git_repo == git_repo]

    def cleanup_stale_entries(self) -> int:
        """Unregister worktrees whose directory no longer exists.

        Returns:
            Number of entries removed

        Raises:
            StorageError: If the registry cannot be saved
        """
        stale_ids = [
            worktree_id for worktree_id, entry in self._worktrees.items()
            if not os.path.exists(entry.path)
        ]

        for worktree_id in stale_ids:
            logger.debug(f"Removing stale registry entry {worktree_id}")
            del self._worktrees[worktree_id]

        if stale_ids:
            self._save()
        return len(stale_ids)
