"""Per-file locks shared by every repository instance in the process.

A JSON file has no conditional update of its own, so each load-check-write
cycle holds the file's lock for its whole duration.
"""

from __future__ import annotations

import threading
from pathlib import Path

_registry_lock = threading.Lock()
_locks: dict[Path, threading.RLock] = {}


def lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _registry_lock:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.RLock()
        return lock
