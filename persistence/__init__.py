from __future__ import annotations

from .preferences import KEY_DOC_ID, PREFS_SCOPE, DiskPreferences
from .repositories import AsyncUserDocumentRepository, AsyncUserRepository
from .results import RemoteResult
from .user_record import GUEST_EMAIL, GUEST_NAME, User, parse_score
from .user_store import (
    USERS_COLLECTION,
    FirestoreUserDocumentStore,
    InMemoryUserDocumentStore,
    build_user_store,
)

__all__ = [
    "KEY_DOC_ID",
    "PREFS_SCOPE",
    "DiskPreferences",
    "AsyncUserRepository",
    "AsyncUserDocumentRepository",
    "RemoteResult",
    "GUEST_NAME",
    "GUEST_EMAIL",
    "User",
    "parse_score",
    "USERS_COLLECTION",
    "FirestoreUserDocumentStore",
    "InMemoryUserDocumentStore",
    "build_user_store",
]
