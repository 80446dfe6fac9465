"""
Cross-process run locking for ToolsetKit.

Package managers keep shared caches and lock files (``~/.cargo``, pip's
cache) that are not safe to drive from two installers at once. An install
run therefore holds a file lock for its whole duration, so a second
ToolsetKit process waits for the first instead of racing it.

Usage:
    from toolsetkit.core.locking import LockManager

    lock_manager = LockManager()
    with lock_manager.run_lock(timeout=60):
        statuses = orchestrator.run(specs)
"""

import logging
import platform
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout as LockTimeout

from toolsetkit.core.exceptions import RunLockTimeout

logger = logging.getLogger(__name__)


def get_global_cache_dir() -> Path:
    """
    Get the global ToolsetKit directory used for lock files.

    Returns:
        Path to global cache directory
    """
    if platform.system() == "Windows":
        return Path.home() / "AppData" / "Local" / "toolsetkit"
    return Path.home() / ".toolsetkit"


class LockManager:
    """
    Manages file locks for ToolsetKit runs.

    Uses the ``filelock`` library, so locks are released automatically if
    the holding process dies.

    Attributes:
        lock_dir: Directory where lock files are stored
    """

    def __init__(self, lock_dir: Optional[Path] = None):
        """
        Initialize lock manager.

        Args:
            lock_dir: Directory for lock files (default: global cache/lock/)
        """
        if lock_dir is None:
            lock_dir = get_global_cache_dir() / "lock"

        self.lock_dir = Path(lock_dir)
        self.lock_dir.mkdir(parents=True, exist_ok=True)

    @property
    def run_lock_path(self) -> Path:
        return self.lock_dir / "install-run.lock"

    @contextmanager
    def run_lock(self, timeout: float = 60):
        """
        Acquire the install-run lock.

        Args:
            timeout: Maximum wait time in seconds

        Yields:
            None

        Raises:
            RunLockTimeout: If another run holds the lock past the timeout
        """
        lock = FileLock(self.run_lock_path, timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired run lock: {self.run_lock_path}")
                yield
                logger.debug(f"Released run lock: {self.run_lock_path}")
        except LockTimeout as e:
            logger.error(
                f"Could not acquire run lock after {timeout}s. "
                "Another ToolsetKit install may be running."
            )
            raise RunLockTimeout(
                f"Could not acquire run lock after {timeout}s. "
                "Another ToolsetKit install may be running."
            ) from e


__all__ = [
    "LockManager",
    "get_global_cache_dir",
]
