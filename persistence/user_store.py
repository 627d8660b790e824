from __future__ import annotations

import copy
import logging
import secrets
import string
import threading
from typing import Any, Mapping

from google.cloud.firestore_v1 import Client, CollectionReference

from settings import Settings

from .interfaces import UserDocumentStore

USERS_COLLECTION = "users"

# Same alphabet and length Firestore uses for client-side auto ids.
AUTO_ID_ALPHABET = string.ascii_letters + string.digits
AUTO_ID_LENGTH = 20

logger = logging.getLogger(__name__)


class FirestoreUserDocumentStore(UserDocumentStore):
    """
    Cloud Firestore backed store for one collection.

    The client is built on first use, so constructing the store (and importing the
    app) does not need credentials. FIRESTORE_EMULATOR_HOST is picked up by the
    client library itself.
    """

    def __init__(
        self,
        collection: str = USERS_COLLECTION,
        *,
        project: str | None = None,
        database: str | None = None,
        client: Client | None = None,
    ) -> None:
        self._collection_name = collection
        self._project = project or None
        self._database = database or None
        self._client = client
        self._guard = threading.Lock()

    @property
    def collection_name(self) -> str:
        return self._collection_name

    def _users(self) -> CollectionReference:
        with self._guard:
            if self._client is None:
                kwargs: dict[str, Any] = {}
                if self._project:
                    kwargs["project"] = self._project
                if self._database:
                    kwargs["database"] = self._database
                self._client = Client(**kwargs)
                logger.info(
                    "FIRESTORE: client ready project=%s database=%s collection=%s",
                    self._client.project,
                    self._database or "(default)",
                    self._collection_name,
                )
            client = self._client
        return client.collection(self._collection_name)

    def new_document_id(self) -> str:
        # document() with no id only mints a reference; nothing is sent.
        return self._users().document().id

    def set_document(self, doc_id: str, data: Mapping[str, Any]) -> None:
        self._users().document(doc_id).set(dict(data))

    def get_document(self, doc_id: str) -> dict[str, Any] | None:
        snapshot = self._users().document(doc_id).get()
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}


class InMemoryUserDocumentStore(UserDocumentStore):
    """
    Process-local stand-in for the remote store (local runs and tests).

    `calls` counts reads and writes, `allocated_ids` records every auto id handed
    out, and `fail_next()` makes upcoming reads/writes raise.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._docs: dict[str, dict[str, Any]] = {}
        self._pending_errors: list[BaseException] = []
        self.calls = 0
        self.allocated_ids: list[str] = []

    def fail_next(self, error: BaseException, *, times: int = 1) -> None:
        with self._lock:
            self._pending_errors.extend([error] * times)

    def _begin_call(self) -> None:
        with self._lock:
            self.calls += 1
            if self._pending_errors:
                raise self._pending_errors.pop(0)

    def new_document_id(self) -> str:
        with self._lock:
            while True:
                doc_id = "".join(secrets.choice(AUTO_ID_ALPHABET) for _ in range(AUTO_ID_LENGTH))
                if doc_id not in self._docs and doc_id not in self.allocated_ids:
                    break
            self.allocated_ids.append(doc_id)
            return doc_id

    def set_document(self, doc_id: str, data: Mapping[str, Any]) -> None:
        self._begin_call()
        with self._lock:
            self._docs[doc_id] = copy.deepcopy(dict(data))

    def get_document(self, doc_id: str) -> dict[str, Any] | None:
        self._begin_call()
        with self._lock:
            doc = self._docs.get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def delete_document(self, doc_id: str) -> bool:
        with self._lock:
            return self._docs.pop(doc_id, None) is not None

    def document_ids(self) -> list[str]:
        with self._lock:
            return list(self._docs)


def build_user_store(settings: Settings) -> UserDocumentStore:
    if settings.user_store_backend == "memory":
        logger.info("USER STORE: using in-memory backend (data is lost on restart)")
        return InMemoryUserDocumentStore()
    if settings.user_store_backend == "firestore":
        return FirestoreUserDocumentStore(
            settings.users_collection,
            project=settings.firestore_project,
            database=settings.firestore_database,
        )
    raise ValueError(f"Unknown user store backend: {settings.user_store_backend!r}")
