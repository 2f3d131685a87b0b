"""Advisory file locks shared between pierctl processes"""

import fcntl
import logging
import os
from pathlib import Path
from typing import Callable, Optional, Union

from ..api.exceptions import InstanceBusyError, PierToolError

logger = logging.getLogger(__name__)


class FileLock:
    """Non-blocking exclusive ``flock`` on a lock file

    The lock file itself is left on disk; only the kernel lock matters.

    Example:
        with FileLock(path):
            ...
    """

    def __init__(self,
                 path: Union[str, Path],
                 busy_error: Optional[Callable[[str], PierToolError]] = None):
        """Initialize lock

        Args:
            path: Lock file path
            busy_error: Factory for the error raised when the lock is held
        """
        self.path = Path(path)
        self.busy_error = busy_error or InstanceBusyError
        self._fd: Optional[int] = None

    def acquire(self) -> None:
        """Take the lock or raise the busy error immediately"""
        if self._fd is not None:
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(str(self.path), os.O_RDWR | os.O_CREAT, 0o644)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            os.close(fd)
            raise self.busy_error(str(self.path)) from None
        except OSError:
            os.close(fd)
            raise

        self._fd = fd
        logger.debug(f"Acquired lock {self.path}")

    def release(self) -> None:
        """Release the lock if held"""
        if self._fd is None:
            return
        try:
            fcntl.flock(self._fd, fcntl.LOCK_UN)
        finally:
            os.close(self._fd)
            self._fd = None
        logger.debug(f"Released lock {self.path}")

    def __enter__(self) -> "FileLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
