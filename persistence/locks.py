from __future__ import annotations

import threading
from pathlib import Path


class PathLockRegistry:
    """
    Hands out one lock per resolved file path, so unrelated files never wait on each other.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Path, threading.Lock] = {}

    def lock_for(self, path: Path) -> threading.Lock:
        key = path.resolve()
        with self._guard:
            return self._locks.setdefault(key, threading.Lock())


PATH_LOCKS = PathLockRegistry()
