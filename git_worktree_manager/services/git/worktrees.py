"""Worktree operations service for git-worktree-manager."""

from typing import Any, Dict, List, Optional

import git

from git_worktree_manager.constants import DETACHED_HEAD
from git_worktree_manager.exceptions import GitOperationError
from git_worktree_manager.logging_config import get_logger
from git_worktree_manager.models.worktree import WorktreeInfo
from git_worktree_manager.services.git.base import GitRepoService, format_git_error

logger = get_logger(__name__)

BRANCH_REF_PREFIX = "refs/heads/"


def _to_worktree_info(block: Dict[str, Any], is_main: bool) -> Optional[WorktreeInfo]:
    """Build a WorktreeInfo from a parsed porcelain block.

    Blocks without a branch or HEAD line (bare repositories) are skipped.
    """
    path = block.get("path")
    if not path:
        return None

    branch_name = block.get("branch")
    if not branch_name:
        if "HEAD" not in block:
            return None
        branch_name = DETACHED_HEAD

    return WorktreeInfo(
        path=path,
        branch_name=branch_name,
        commit_sha=block.get("HEAD", ""),
        is_main=is_main,
    )


def parse_worktree_porcelain(output: str) -> List[WorktreeInfo]:
    """Parse the output of ``git worktree list --porcelain``.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name
        (blank line between worktrees)

    Args:
        output: Raw command output

    Returns:
        One WorktreeInfo per worktree, in listing order
    """
    worktrees: List[WorktreeInfo] = []
    blocks: List[Dict[str, Any]] = []
    current: Dict[str, Any] = {}

    for line in output.split("\n"):
        line = line.strip()

        if not line:
            # Empty line marks end of worktree entry
            if current:
                blocks.append(current)
                current = {}
            continue

        if line.startswith("worktree "):
            if current:
                blocks.append(current)
            current = {"path": line.split(" ", 1)[1]}
        elif line.startswith("HEAD "):
            current["HEAD"] = line.split(" ", 1)[1]
        elif line.startswith("branch "):
            branch_ref = line.split(" ", 1)[1]
            if branch_ref.startswith(BRANCH_REF_PREFIX):
                branch_ref = branch_ref[len(BRANCH_REF_PREFIX):]
            current["branch"] = branch_ref

    # Handle last entry if no trailing blank line
    if current:
        blocks.append(current)

    for index, block in enumerate(blocks):
        # First worktree in list is always the main one
        info = _to_worktree_info(block, is_main=index == 0)
        if info is not None:
            worktrees.append(info)

    return worktrees


class WorktreeService(GitRepoService):
    """Service for managing git worktrees."""

    def list_worktrees(self) -> List[WorktreeInfo]:
        """Get the worktrees git knows about.

        Raises:
            GitOperationError: If the worktree list cannot be read
        """
        repo = self._get_repo()
        try:
            output = repo.git.worktree("list", "--porcelain")
        except git.exc.GitCommandError as e:
            raise GitOperationError("worktree list", message=format_git_error("worktree list", e)) from e

        worktrees = parse_worktree_porcelain(output)
        logger.debug(f"Found {len(worktrees)} worktrees")
        for wt in worktrees:
            logger.debug(f"  {wt}")
        return worktrees

    def add_worktree(self, path: str, branch_name: str, create_branch: bool = False) -> tuple[bool, Optional[str]]:
        """Create a worktree for a branch.

        Args:
            path: Directory for the new worktree
            branch_name: Branch to check out
            create_branch: Create the branch (``-b``) instead of attaching to an existing one

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        if create_branch:
            args = ["add", "-b", branch_name, path]
        else:
            args = ["add", path, branch_name]

        try:
            repo = self._get_repo()
            repo.git.worktree(*args)
            logger.info(f"Created worktree at {path} for branch {branch_name}")
            return True, None
        except git.exc.GitCommandError as e:
            error_msg = format_git_error("worktree add", e)
            logger.error(f"Failed to create worktree at {path}: {error_msg}")
            return False, error_msg
        except GitOperationError as e:
            return False, str(e)

    def remove_worktree(self, path: str, force: bool = False) -> tuple[bool, Optional[str]]:
        """Remove a worktree at the specified path.

        Args:
            path: Path to the worktree directory
            force: Force removal even if working tree is dirty or locked

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        args = ["remove"]
        if force:
            args.append("--force")
        args.append(path)

        try:
            repo = self._get_repo()
            repo.git.worktree(*args)
            logger.info(f"Removed worktree at {path}")
            return True, None
        except git.exc.GitCommandError as e:
            error_msg = format_git_error("worktree remove", e)
            logger.error(f"Failed to remove worktree at {path}: {error_msg}")
            return False, error_msg
        except GitOperationError as e:
            return False, str(e)
