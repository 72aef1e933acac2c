"""Tests for RegistryService"""
import json
import logging
from unittest.mock import patch

import pytest

from git_worktree_manager.exceptions import StorageError
from git_worktree_manager.services.registry_service import RegistryService


def _add(registry, path, git_repo="acme/widgets", branch="feature-x",
         remote_url="git@github.com:acme/widgets.git"):
    return registry.add_worktree(str(path), git_repo, branch, remote_url)


class TestRegistryOpen:
    """Test opening the registry."""

    def test_missing_file_starts_empty(self, state_file):
        """Test a registry without a file has no entries and writes nothing."""
        registry = RegistryService(state_file)
        assert registry.list_worktrees() == []
        assert len(registry) == 0
        assert not state_file.exists()

    def test_creates_parent_directory(self, temp_dir):
        """Test the state directory is created on open."""
        state_path = temp_dir / "a" / "b" / "state.json"
        RegistryService(state_path)
        assert state_path.parent.is_dir()

    def test_invalid_json_raises(self, state_file):
        """Test a corrupt registry file is reported."""
        state_file.parent.mkdir(parents=True)
        state_file.write_text("{not json")
        with pytest.raises(StorageError, match="invalid JSON"):
            RegistryService(state_file)

    def test_invalid_entry_raises(self, state_file):
        """Test an entry missing required fields is reported."""
        state_file.parent.mkdir(parents=True)
        state_file.write_text(json.dumps({
            "version": "1.0",
            "worktrees": {"acme/widgets/x": {"path": "/tmp/x"}},
        }))
        with pytest.raises(StorageError, match="acme/widgets/x"):
            RegistryService(state_file)

    def test_null_worktrees_is_empty(self, state_file):
        """Test a document with a null worktree map loads as empty."""
        state_file.parent.mkdir(parents=True)
        state_file.write_text(json.dumps({"version": "1.0", "worktrees": None}))
        assert RegistryService(state_file).list_worktrees() == []

    def test_loads_nanosecond_timestamps(self, state_file):
        """Test timestamps with offsets and nanosecond precision are accepted."""
        state_file.parent.mkdir(parents=True)
        state_file.write_text(json.dumps({
            "version": "1.0",
            "worktrees": {
                "acme/widgets/feature-x": {
                    "id": "acme/widgets/feature-x",
                    "path": "/tmp/wt/acme/widgets/feature-x",
                    "git_repo": "acme/widgets",
                    "branch_name": "feature-x",
                    "remote_url": "git@github.com:acme/widgets.git",
                    "created_at": "2024-05-01T10:20:30.123456789-07:00",
                    "last_accessed": "2024-05-02T08:00:00Z",
                }
            },
        }))
        registry = RegistryService(state_file)
        entry = registry.get_worktree("acme/widgets", "feature-x")
        assert entry is not None
        assert entry.created_at.year == 2024
        assert entry.created_at.microsecond == 123456
        assert entry.created_at.utcoffset().total_seconds() == -7 * 3600

    def test_loads_short_fraction_timestamps(self, state_file):
        """Test timestamps with trailing zeros trimmed from the fraction are accepted."""
        state_file.parent.mkdir(parents=True)
        state_file.write_text(json.dumps({
            "version": "1.0",
            "worktrees": {
                "acme/widgets/feature-x": {
                    "id": "acme/widgets/feature-x",
                    "path": "/tmp/wt/acme/widgets/feature-x",
                    "git_repo": "acme/widgets",
                    "branch_name": "feature-x",
                    "remote_url": "git@github.com:acme/widgets.git",
                    "created_at": "2024-05-01T10:20:30.12345-07:00",
                    "last_accessed": "2024-05-02T08:00:00.5Z",
                }
            },
        }))
        registry = RegistryService(state_file)
        entry = registry.list_worktrees()[0]
        assert entry.created_at.microsecond == 123450
        assert entry.created_at.utcoffset().total_seconds() == -7 * 3600
        assert entry.last_accessed.microsecond == 500000


class TestRegistryCrud:
    """Test adding, looking up and removing entries."""

    def test_add_then_get(self, registry, temp_dir):
        """Test a registered worktree can be looked up."""
        path = temp_dir / "wt" / "acme" / "widgets" / "feature-x"
        _add(registry, path)

        entry = registry.get_worktree("acme/widgets", "feature-x")
        assert entry is not None
        assert entry.id == "acme/widgets/feature-x"
        assert entry.path == str(path)
        assert entry.remote_url == "git@github.com:acme/widgets.git"
        assert entry.last_accessed >= entry.created_at

    def test_get_updates_last_accessed(self, registry, temp_dir):
        """Test repeated lookups never move the access time backwards."""
        _add(registry, temp_dir / "x")

        first = registry.get_worktree("acme/widgets", "feature-x").last_accessed
        second = registry.get_worktree("acme/widgets", "feature-x").last_accessed
        assert second >= first

    def test_get_persists_last_accessed(self, registry, state_file, temp_dir):
        """Test the access time is written to disk."""
        _add(registry, temp_dir / "x")
        entry = registry.get_worktree("acme/widgets", "feature-x")

        reloaded = RegistryService(state_file).list_worktrees()[0]
        assert reloaded.last_accessed == entry.last_accessed

    def test_find_does_not_touch_last_accessed(self, registry, state_file, temp_dir):
        """Test find looks up an entry without writing the registry."""
        entry = _add(registry, temp_dir / "x")
        accessed = entry.last_accessed

        with patch.object(registry, "_save") as mock_save:
            found = registry.find_worktree("acme/widgets", "feature-x")

        assert found is entry
        assert found.last_accessed == accessed
        mock_save.assert_not_called()
        assert registry.find_worktree("acme/widgets", "nope") is None

    def test_get_unknown_returns_none(self, registry, state_file):
        """Test looking up an unregistered branch has no side effects."""
        assert registry.get_worktree("acme/widgets", "nope") is None
        assert not state_file.exists()

    def test_get_swallows_save_failure(self, registry, temp_dir, caplog):
        """Test a failed access-time save is logged instead of raised."""
        _add(registry, temp_dir / "x")

        with patch("git_worktree_manager.services.registry_service.os.replace",
                   side_effect=OSError("disk full")):
            with caplog.at_level(logging.WARNING):
                entry = registry.get_worktree("acme/widgets", "feature-x")

        assert entry is not None
        assert "Could not record access time" in caplog.text

    def test_remove_then_get(self, registry, temp_dir):
        """Test a removed worktree is no longer found."""
        _add(registry, temp_dir / "x")

        assert registry.remove_worktree("acme/widgets", "feature-x") is True
        assert registry.get_worktree("acme/widgets", "feature-x") is None

    def test_remove_twice(self, registry, temp_dir):
        """Test removing an unregistered worktree is not an error."""
        _add(registry, temp_dir / "x")

        registry.remove_worktree("acme/widgets", "feature-x")
        assert registry.remove_worktree("acme/widgets", "feature-x") is False

    def test_readd_overwrites(self, registry, temp_dir):
        """Test registering the same branch again replaces the entry."""
        _add(registry, temp_dir / "old")
        _add(registry, temp_dir / "new")

        entries = registry.list_worktrees()
        assert len(entries) == 1
        assert entries[0].path == str(temp_dir / "new")

    def test_distinct_ids(self, registry, temp_dir):
        """Test every (repository, branch) pair gets its own entry."""
        pairs = [
            ("acme/widgets", "feature-x"),
            ("acme/widgets", "feature-y"),
            ("acme/gadgets", "feature-x"),
            ("someone/widgets", "main"),
        ]
        for git_repo, branch in pairs:
            _add(registry, temp_dir / git_repo / branch, git_repo=git_repo, branch=branch)

        entries = registry.list_worktrees()
        assert len(entries) == len(pairs)
        assert len({entry.id for entry in entries}) == len(pairs)

    def test_list_by_repo(self, registry, temp_dir):
        """Test filtering by repository identifier."""
        _add(registry, temp_dir / "a", branch="a")
        _add(registry, temp_dir / "b", branch="b")
        _add(registry, temp_dir / "c", git_repo="acme/gadgets", branch="c")

        branches = sorted(entry.branch_name for entry in registry.list_worktrees_by_repo("acme/widgets"))
        assert branches == ["a", "b"]
        assert registry.list_worktrees_by_repo("acme/unknown") == []

    def test_add_save_failure_keeps_entry_in_memory(self, registry, temp_dir):
        """Test a failed save raises but leaves the in-memory entry."""
        with patch("git_worktree_manager.services.registry_service.os.replace",
                   side_effect=OSError("permission denied")):
            with pytest.raises(StorageError, match="permission denied"):
                _add(registry, temp_dir / "x")

        assert len(registry.list_worktrees()) == 1
        assert not registry.state_path.with_suffix(".tmp").exists()


class TestRegistryCleanup:
    """Test stale entry cleanup."""

    def test_removes_only_missing_paths(self, registry, state_file, temp_dir):
        """Test entries whose directory is gone are removed."""
        existing = temp_dir / "existing"
        existing.mkdir()
        _add(registry, existing, branch="existing")
        _add(registry, temp_dir / "missing", branch="missing")

        removed = registry.cleanup_stale_entries()

        assert removed == 1
        assert [entry.branch_name for entry in registry.list_worktrees()] == ["existing"]
        assert [entry.branch_name for entry in RegistryService(state_file).list_worktrees()] == ["existing"]

    def test_no_stale_entries_skips_save(self, registry, temp_dir):
        """Test nothing is written when nothing was removed."""
        existing = temp_dir / "existing"
        existing.mkdir()
        _add(registry, existing)

        with patch.object(registry, "_save") as mock_save:
            assert registry.cleanup_stale_entries() == 0
            mock_save.assert_not_called()


class TestRegistryPersistence:
    """Test the on-disk document."""

    def test_document_format(self, registry, state_file, temp_dir):
        """Test the registry file layout."""
        _add(registry, temp_dir / "x")

        data = json.loads(state_file.read_text())
        assert data["version"] == "1.0"
        entry = data["worktrees"]["acme/widgets/feature-x"]
        assert entry["id"] == "acme/widgets/feature-x"
        assert entry["git_repo"] == "acme/widgets"
        assert entry["branch_name"] == "feature-x"
        assert entry["path"] == str(temp_dir / "x")
        assert entry["remote_url"] == "git@github.com:acme/widgets.git"
        assert "created_at" in entry
        assert "last_accessed" in entry

    def test_round_trip(self, registry, state_file, temp_dir):
        """Test reloading yields the same entries."""
        _add(registry, temp_dir / "a", branch="a")
        _add(registry, temp_dir / "b", git_repo="acme/gadgets", branch="b",
             remote_url="https://github.com/acme/gadgets.git")

        reloaded = RegistryService(state_file)

        original = sorted((e.to_dict() for e in registry.list_worktrees()), key=lambda d: d["id"])
        restored = sorted((e.to_dict() for e in reloaded.list_worktrees()), key=lambda d: d["id"])
        assert restored == original

    def test_version_is_preserved(self, state_file, temp_dir):
        """Test an existing version tag survives a rewrite."""
        state_file.parent.mkdir(parents=True)
        state_file.write_text(json.dumps({"version": "0.9", "worktrees": {}}))

        registry = RegistryService(state_file)
        _add(registry, temp_dir / "x")

        assert json.loads(state_file.read_text())["version"] == "0.9"
