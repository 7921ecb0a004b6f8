"""Locates the ssh client used for every tunnel group."""

import shutil

from ..common.exceptions import DependencyNotFoundError
from ..common.logging import get_logger

logger = get_logger(__name__)


class SSHLauncher:
    """Resolves the ssh executable that tunnel panes run."""

    def __init__(self, binary_path: str | None = None):
        """Initialize SSHLauncher.

        Args:
            binary_path: Path to ssh (auto-detected if None)
        """
        self._binary_path = binary_path

    def executable(self) -> str:
        """Return the ssh executable.

        Raises:
            DependencyNotFoundError: If ssh is not found in PATH
        """
        if self._binary_path is None:
            ssh_binary = shutil.which("ssh")
            if ssh_binary is None:
                raise DependencyNotFoundError(
                    "SSH client 'ssh' not found in system PATH. "
                    "Please install OpenSSH and ensure 'ssh' is available in your PATH."
                )
            self._binary_path = ssh_binary
            logger.debug("Found ssh client", path=ssh_binary)
        return self._binary_path
