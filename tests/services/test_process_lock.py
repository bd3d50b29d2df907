import os

import pytest

from timesync.exceptions import AlreadyRunningError
from timesync.services.process_lock import ProcessLock


def test_second_holder_fails_fast(tmp_path):
    path = str(tmp_path / "timesync.lock")
    first = ProcessLock(path)
    first.acquire()
    try:
        with pytest.raises(AlreadyRunningError) as excinfo:
            ProcessLock(path).acquire()
        assert excinfo.value.lock_path == path
    finally:
        first.release()


def test_lock_can_be_reacquired_after_release(tmp_path):
    path = str(tmp_path / "timesync.lock")
    with ProcessLock(path) as lock:
        assert lock.held
    assert not lock.held

    with ProcessLock(path) as again:
        assert again.held


def test_lock_file_records_pid(tmp_path):
    path = tmp_path / "timesync.lock"
    with ProcessLock(str(path)):
        assert path.read_text() == str(os.getpid())


def test_context_manager_releases_on_error(tmp_path):
    path = str(tmp_path / "timesync.lock")
    with pytest.raises(ValueError):
        with ProcessLock(path):
            raise ValueError("boom")
    ProcessLock(path).acquire()


def test_release_is_idempotent(tmp_path):
    lock = ProcessLock(str(tmp_path / "nested" / "timesync.lock"))
    lock.acquire()
    lock.release()
    lock.release()
    assert not lock.held
