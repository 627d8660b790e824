from __future__ import annotations

from typing import Any, Mapping, Protocol


class KeyValueDocumentStore(Protocol):
    """
    A single JSON-like document persisted under one key (file, row, blob...).
    """

    def load(self) -> dict[str, Any]:
        """Load and return the full document (never None)."""
        ...

    def update(self, **changes: Any) -> dict[str, Any]:
        """Merge top-level keys into the document, persist it atomically and return it."""
        ...


class Preferences(Protocol):
    """
    Named scope of string settings local to this installation.
    """

    def get_string(self, key: str, default: str | None = None) -> str | None: ...

    def put_string(self, key: str, value: str) -> None: ...


class UserDocumentStore(Protocol):
    """
    Blocking surface of a remote document database, limited to one collection.

    Implementations raise whatever their client raises; callers decide how to report it.
    """

    def new_document_id(self) -> str:
        """Allocate a fresh document id without writing anything."""
        ...

    def set_document(self, doc_id: str, data: Mapping[str, Any]) -> None:
        """Write the whole document, replacing any previous content."""
        ...

    def get_document(self, doc_id: str) -> dict[str, Any] | None:
        """Return the document's fields, or None if it does not exist."""
        ...
