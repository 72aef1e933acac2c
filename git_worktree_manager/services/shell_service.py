"""Interactive shell launching for switching into a worktree."""

import os
import subprocess
import sys
from typing import Mapping, Optional

from git_worktree_manager.logging_config import get_logger

logger = get_logger(__name__)


def get_default_shell(environ: Optional[Mapping[str, str]] = None, platform: Optional[str] = None) -> str:
    """Determine the user's shell.

    Uses $SHELL, then %COMSPEC% (or cmd.exe) on Windows, else bash.
    """
    environ = os.environ if environ is None else environ
    shell = environ.get("SHELL")
    if shell:
        return shell
    if (platform or sys.platform).startswith("win"):
        return environ.get("COMSPEC") or "cmd.exe"
    return "bash"


class ShellService:
    """Starts an interactive shell rooted at a directory."""

    def __init__(self, shell: Optional[str] = None):
        self.shell = shell or get_default_shell()

    def launch(self, path: str) -> tuple[bool, Optional[str]]:
        """Run the shell in path and block until the user exits it.

        Args:
            path: Working directory for the shell

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        logger.debug(f"Starting {self.shell} in {path}")
        try:
            result = subprocess.run([self.shell], cwd=path, check=False)
        except OSError as e:
            error_msg = f"could not start {self.shell}: {e}"
            logger.error(error_msg)
            return False, error_msg

        # The exit status is the user's last command, so it is only logged
        logger.debug(f"Shell exited with status {result.returncode}")
        return True, None
