"""Single-instance lockfile with heartbeat."""

from __future__ import annotations

import json
import os
import socket
import time
from pathlib import Path

HEARTBEAT_INTERVAL = 30.0
STALE_AFTER = 120.0


class LockHeldError(RuntimeError):
    """Another live recorder instance holds the lock."""


class RecorderLock:
    """A JSON lockfile refreshed by heartbeats."""

    def __init__(self, lock_dir: str | os.PathLike[str]) -> None:
        self.path = Path(lock_dir) / ".recorder-lock"
        self._last_heartbeat: float | None = None

    def acquire(self) -> None:
        """Claim the lock, raising LockHeldError if another instance holds it."""
        existing = self._read()
        if existing is not None and not self._is_stale(existing) and not self._is_self(existing):
            age = int(time.time() - existing["updated"])
            raise LockHeldError(
                f"recorder already running on {existing['hostname']} "
                f"(pid {existing['pid']}, last heartbeat {age}s ago)"
            )
        self._write()

    def heartbeat(self) -> None:
        """Refresh the lock if the heartbeat interval has elapsed."""
        if self._last_heartbeat is None or time.monotonic() - self._last_heartbeat >= HEARTBEAT_INTERVAL:
            self._write()

    def release(self) -> None:
        """Remove the lock file."""
        try:
            self.path.unlink()
        except OSError:
            pass

    def __enter__(self) -> RecorderLock:
        self.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()

    def _read(self) -> dict | None:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        data = json.loads(text)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"malformed lock file {self.path}")
        return {
            "hostname": str(data.get("hostname") or ""),
            "pid": int(data.get("pid") or 0),
            "updated": int(data.get("updated") or 0),
        }

    @staticmethod
    def _is_stale(info: dict) -> bool:
        return time.time() - info["updated"] > STALE_AFTER

    @staticmethod
    def _is_self(info: dict) -> bool:
        return info["hostname"] == socket.gethostname() and info["pid"] == os.getpid()

    def _write(self) -> None:
        info = {"hostname": socket.gethostname(), "pid": os.getpid(), "updated": int(time.time())}
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(info, separators=(",", ":")), encoding="utf-8")
        os.replace(tmp, self.path)
        self._last_heartbeat = time.monotonic()