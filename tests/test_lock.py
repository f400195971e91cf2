import json
import os
import socket
import time

import pytest

from recorder.lock import LockHeldError, RecorderLock


def _write_lock(directory, pid, updated):
    path = directory / ".recorder-lock"
    path.write_text(json.dumps({"hostname": socket.gethostname(), "pid": pid, "updated": updated}))
    return path


def test_acquire_fresh(tmp_path):
    lk = RecorderLock(tmp_path)
    lk.acquire()
    info = json.loads(lk.path.read_text())
    assert info["pid"] == os.getpid()
    assert info["hostname"] == socket.gethostname()
    lk.release()
    assert not lk.path.exists()


def test_acquire_self_reacquire(tmp_path):
    lk = RecorderLock(tmp_path)
    lk.acquire()
    lk.acquire()
    assert json.loads(lk.path.read_text())["pid"] == os.getpid()
    lk.release()


def test_acquire_after_release(tmp_path):
    lk = RecorderLock(tmp_path)
    lk.acquire()
    lk2 = RecorderLock(tmp_path)
    lk.release()
    lk2.acquire()
    assert lk2.path.exists()
    lk2.release()


def test_acquire_held_by_other_process(tmp_path):
    _write_lock(tmp_path, os.getpid() + 1, int(time.time()))
    with pytest.raises(LockHeldError, match="recorder already running"):
        RecorderLock(tmp_path).acquire()


def test_acquire_takes_over_stale_lock(tmp_path):
    path = _write_lock(tmp_path, os.getpid() + 1, int(time.time()) - 1000)
    RecorderLock(tmp_path).acquire()
    assert json.loads(path.read_text())["pid"] == os.getpid()


def test_acquire_malformed_lock(tmp_path):
    (tmp_path / ".recorder-lock").write_text("not json")
    with pytest.raises(ValueError):
        RecorderLock(tmp_path).acquire()


def test_heartbeat_throttled(tmp_path):
    lk = RecorderLock(tmp_path)
    lk.acquire()
    lk.path.write_text("marker")
    lk.heartbeat()
    assert lk.path.read_text() == "marker"
    lk.release()


def test_heartbeat_without_acquire_writes(tmp_path):
    lk = RecorderLock(tmp_path)
    lk.heartbeat()
    assert json.loads(lk.path.read_text())["pid"] == os.getpid()


def test_release_removes_file(tmp_path):
    lk = RecorderLock(tmp_path)
    lk.acquire()
    lk.release()
    assert not lk.path.exists()
    lk.release()
    assert not lk.path.exists()


def test_context_manager(tmp_path):
    with RecorderLock(tmp_path) as lk:
        assert lk.path.exists()
    assert not lk.path.exists()