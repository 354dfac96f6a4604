import threading
import time

import pytest

from sentinelfs.file_locker import FileLocker, LockType


@pytest.fixture
def locker():
    with FileLocker() as instance:
        yield instance


def test_acquire_and_release(tmp_path, locker):
    path = str(tmp_path / "f.txt")
    assert locker.acquire_lock(path, LockType.WRITE) is True
    assert locker.is_locked(path)
    assert locker.get_lock_type(path) is LockType.WRITE
    assert locker.release_lock(path) is True
    assert not locker.is_locked(path)
    assert locker.release_lock(path) is False


def test_acquire_creates_missing_file(tmp_path, locker):
    path = tmp_path / "new.txt"
    assert locker.acquire_lock(str(path), LockType.READ)
    assert path.exists()


def test_same_thread_relock_succeeds(tmp_path, locker):
    path = str(tmp_path / "f.txt")
    assert locker.acquire_lock(path, LockType.WRITE)
    assert locker.acquire_lock(path, LockType.WRITE) is True


def test_other_thread_cannot_take_held_lock(tmp_path, locker):
    path = str(tmp_path / "f.txt")
    assert locker.acquire_lock(path, LockType.WRITE)
    results = []
    worker = threading.Thread(
        target=lambda: results.append(locker.acquire_lock(path, LockType.WRITE, 0.05))
    )
    worker.start()
    worker.join()
    assert results == [False]


def test_exclusive_lock_conflicts_across_lockers(tmp_path, locker):
    path = str(tmp_path / "f.txt")
    with FileLocker() as other:
        assert locker.acquire_lock(path, LockType.WRITE)
        assert other.acquire_lock(path, LockType.WRITE, timeout=0.05) is False
        assert not other.is_locked(path)
        locker.release_lock(path)
        assert other.acquire_lock(path, LockType.WRITE, timeout=0.05) is True


def test_shared_locks_coexist(tmp_path, locker):
    path = str(tmp_path / "f.txt")
    with FileLocker() as other:
        assert locker.acquire_lock(path, LockType.READ)
        assert other.acquire_lock(path, LockType.READ, timeout=0.05)
        assert other.acquire_lock(path, LockType.READ) is True
        assert other.get_lock_type(path) is LockType.READ


def test_get_lock_type_unlocked(tmp_path, locker):
    assert locker.get_lock_type(str(tmp_path / "none")) is None


def test_force_unlock(tmp_path, locker):
    path = str(tmp_path / "f.txt")
    locker.acquire_lock(path, LockType.WRITE)
    assert locker.force_unlock(path) is True
    assert locker.force_unlock(path) is False


def test_cleanup_stale_locks(tmp_path, locker):
    old = str(tmp_path / "old.txt")
    locker.acquire_lock(old, LockType.WRITE)
    time.sleep(0.02)
    locker.cleanup_stale_locks(max_age=0.0)
    assert not locker.is_locked(old)


def test_cleanup_keeps_fresh_locks(tmp_path, locker):
    path = str(tmp_path / "f.txt")
    locker.acquire_lock(path, LockType.WRITE)
    locker.cleanup_stale_locks()
    assert locker.is_locked(path)


def test_close_releases_everything(tmp_path):
    path = str(tmp_path / "f.txt")
    first = FileLocker()
    first.acquire_lock(path, LockType.WRITE)
    first.close()
    assert not first.is_locked(path)
    with FileLocker() as second:
        assert second.acquire_lock(path, LockType.WRITE, timeout=0.05) is True