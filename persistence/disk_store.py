from __future__ import annotations

from pathlib import Path
from typing import Any

from json_store import atomic_write_json, read_json

from .interfaces import KeyValueDocumentStore
from .locks import PATH_LOCKS


class DiskJsonDocumentStore(KeyValueDocumentStore):
    """
    One JSON object stored at a fixed path.

    - Loads as an empty dict when the file is missing, empty or not an object.
    - Updates are read-modify-write under the path lock and land atomically.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        with PATH_LOCKS.lock_for(self._path):
            raw = read_json(self._path)
        return raw if isinstance(raw, dict) else {}

    def update(self, **changes: Any) -> dict[str, Any]:
        """Read-modify-write under the path lock; returns the new document."""
        with PATH_LOCKS.lock_for(self._path):
            raw = read_json(self._path)
            doc = dict(raw) if isinstance(raw, dict) else {}
            doc.update(changes)
            atomic_write_json(self._path, doc)
        return doc
