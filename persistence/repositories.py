from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from .interfaces import UserDocumentStore
from .results import RemoteResult
from .user_record import User

logger = logging.getLogger(__name__)


class AsyncUserRepository(Protocol):
    """
    Non-blocking access to the users collection.

    Every call resolves exactly once, to a success value or to the error that
    ended it; nothing is raised and nothing is retried.
    """

    async def allocate_id(self) -> RemoteResult[str]: ...

    async def write_user(self, user: User) -> RemoteResult[None]: ...

    async def read_document(self, doc_id: str) -> RemoteResult[dict[str, Any] | None]: ...


class AsyncUserDocumentRepository(AsyncUserRepository):
    """
    Async wrapper around a blocking UserDocumentStore.
    Uses asyncio.to_thread so client network I/O never blocks the event loop.
    """

    def __init__(self, store: UserDocumentStore) -> None:
        self._store = store

    @property
    def store(self) -> UserDocumentStore:
        return self._store

    async def allocate_id(self) -> RemoteResult[str]:
        try:
            doc_id = await asyncio.to_thread(self._store.new_document_id)
        except Exception as e:
            logger.warning("USER ALLOCATE: failed: %r", e)
            return RemoteResult.failure(e)
        return RemoteResult.success(doc_id)

    async def write_user(self, user: User) -> RemoteResult[None]:
        if not user.uid:
            return RemoteResult.failure(ValueError("User has no document id"))
        try:
            await asyncio.to_thread(self._store.set_document, user.uid, user.to_document())
        except Exception as e:
            logger.warning("USER WRITE: %s failed: %r", user.uid, e)
            return RemoteResult.failure(e)
        logger.debug("USER WRITE: %s ok", user.uid)
        return RemoteResult.success(None)

    async def read_document(self, doc_id: str) -> RemoteResult[dict[str, Any] | None]:
        try:
            doc = await asyncio.to_thread(self._store.get_document, doc_id)
        except Exception as e:
            logger.warning("USER READ: %s failed: %r", doc_id, e)
            return RemoteResult.failure(e)
        logger.debug("USER READ: %s exists=%s", doc_id, doc is not None)
        return RemoteResult.success(doc)
