"""Advisory file locks held by the process, tracked per path."""

from __future__ import annotations

import enum
import fcntl
import os
import threading
import time
from dataclasses import dataclass, field


class LockType(enum.Enum):
    READ = "read"
    WRITE = "write"


@dataclass
class FileLockInfo:
    """A lock held on one file."""

    fd: int
    lock_type: LockType
    owner: int = field(default_factory=threading.get_ident)
    acquired_at: float = field(default_factory=time.monotonic)


def _release(info: FileLockInfo) -> None:
    try:
        fcntl.flock(info.fd, fcntl.LOCK_UN)
    finally:
        os.close(info.fd)


class FileLocker:
    """Takes shared or exclusive flock locks on files, creating them if needed."""

    def __init__(self) -> None:
        self._locks: dict[str, FileLockInfo] = {}
        self._mutex = threading.Lock()

    def __enter__(self) -> FileLocker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def acquire_lock(
        self, filepath: str, lock_type: LockType, timeout: float = 5.0
    ) -> bool:
        """Lock filepath, retrying until timeout seconds have passed.

        Returns True if this thread now holds the lock, False if another
        thread holds it or the lock could not be taken in time.
        """
        with self._mutex:
            existing = self._locks.get(filepath)
            if existing is not None:
                return existing.owner == threading.get_ident()

        fd = os.open(filepath, os.O_RDWR | os.O_CREAT, 0o644)
        operation = fcntl.LOCK_EX if lock_type is LockType.WRITE else fcntl.LOCK_SH
        start = time.monotonic()
        while True:
            try:
                fcntl.flock(fd, operation | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() - start >= timeout:
                    os.close(fd)
                    return False
                time.sleep(0.01)

        info = FileLockInfo(fd, lock_type)
        with self._mutex:
            existing = self._locks.get(filepath)
            if existing is None:
                self._locks[filepath] = info
                return True
        _release(info)
        return existing.owner == info.owner

    def release_lock(self, filepath: str) -> bool:
        """Release a lock held here; False if filepath is not locked."""
        with self._mutex:
            info = self._locks.pop(filepath, None)
        if info is None:
            return False
        _release(info)
        return True

    def is_locked(self, filepath: str) -> bool:
        with self._mutex:
            return filepath in self._locks

    def get_lock_type(self, filepath: str) -> LockType | None:
        """The type of the lock held on filepath, or None if it is not locked."""
        with self._mutex:
            info = self._locks.get(filepath)
        return info.lock_type if info is not None else None

    def force_unlock(self, filepath: str) -> bool:
        """Release a lock regardless of which thread took it."""
        return self.release_lock(filepath)

    def cleanup_stale_locks(self, max_age: float = 300.0) -> None:
        """Release every lock held for longer than max_age seconds."""
        now = time.monotonic()
        with self._mutex:
            stale = [
                path
                for path, info in self._locks.items()
                if now - info.acquired_at > max_age
            ]
            released = [self._locks.pop(path) for path in stale]
        for info in released:
            _release(info)

    def close(self) -> None:
        """Release all locks."""
        with self._mutex:
            released = list(self._locks.values())
            self._locks.clear()
        for info in released:
            _release(info)