from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional

from timesync.exceptions import AlreadyRunningError

if sys.platform == "win32":
    import msvcrt
else:
    import fcntl

logger = logging.getLogger(__name__)


class ProcessLock:
    """Host-wide single-instance guard backed by an advisory lock on a file.

    The lock dies with the process, so a crash never leaves a stale lock
    behind. The file itself is left in place.
    """

    def __init__(self, path: str):
        self.path = path
        self._fh: Optional[IO[str]] = None

    @property
    def held(self) -> bool:
        return self._fh is not None

    def acquire(self) -> None:
        if self._fh is not None:
            return
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        fh = open(self.path, "a+", encoding="utf-8")
        try:
            self._lock(fh)
        except OSError as e:
            fh.close()
            raise AlreadyRunningError(self.path) from e
        fh.seek(0)
        fh.truncate()
        fh.write(str(os.getpid()))
        fh.flush()
        self._fh = fh
        logger.debug("Acquired process lock %s", self.path)

    def release(self) -> None:
        if self._fh is None:
            return
        fh, self._fh = self._fh, None
        try:
            self._unlock(fh)
        finally:
            fh.close()
        logger.debug("Released process lock %s", self.path)

    def __enter__(self) -> "ProcessLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    @staticmethod
    def _lock(fh) -> None:
        if sys.platform == "win32":
            fh.seek(0)
            msvcrt.locking(fh.fileno(), msvcrt.LK_NBLCK, 1)
        else:
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)

    @staticmethod
    def _unlock(fh) -> None:
        if sys.platform == "win32":
            fh.seek(0)
            msvcrt.locking(fh.fileno(), msvcrt.LK_UNLCK, 1)
        else:
            fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
