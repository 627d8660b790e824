from __future__ import annotations

import logging
from pathlib import Path

from . import paths
from .disk_store import DiskJsonDocumentStore
from .interfaces import Preferences

PREFS_SCOPE = "firestore_prefs"
KEY_DOC_ID = "doc_id"

logger = logging.getLogger(__name__)


class DiskPreferences(Preferences):
    """
    One named preferences scope, stored as data/prefs/<scope>.json:

      { "doc_id": "..." }

    Reads and writes are synchronous; the file is tiny.
    """

    def __init__(self, scope: str = PREFS_SCOPE, *, base_dir: Path | None = None):
        scope = (scope.strip() or PREFS_SCOPE).replace("/", "_")
        base = base_dir if base_dir is not None else paths.prefs_dir(paths.data_dir())
        self._scope = scope
        self._store = DiskJsonDocumentStore(base / f"{scope}.json")

    @property
    def scope(self) -> str:
        return self._scope

    @property
    def path(self) -> Path:
        return self._store.path

    def get_string(self, key: str, default: str | None = None) -> str | None:
        value = self._store.load().get(key)
        if not isinstance(value, str):
            return default
        return value

    def put_string(self, key: str, value: str) -> None:
        self._store.update(**{key: value})
        logger.debug("PREFS: %s.%s updated", self._scope, key)
