from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

USER_STORE_BACKENDS = ("firestore", "memory")


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip()


@dataclass(frozen=True)
class Settings:
    # Remote document store
    user_store_backend: str
    users_collection: str
    firestore_project: str
    firestore_database: str

    # Local device state
    prefs_scope: str
    data_dir: Path

    # Logging
    log_level: str


def get_settings() -> Settings:
    backend = _env_str("USER_STORE_BACKEND", "firestore").lower()
    if backend not in USER_STORE_BACKENDS:
        raise ValueError(f"USER_STORE_BACKEND must be one of {USER_STORE_BACKENDS}, got {backend!r}")

    users_collection = _env_str("USERS_COLLECTION", "users") or "users"

    # Empty means "let the client library resolve it" (ADC / emulator / default database).
    firestore_project = _env_str("FIRESTORE_PROJECT", "")
    firestore_database = _env_str("FIRESTORE_DATABASE", "")

    prefs_scope = _env_str("PREFS_SCOPE", "firestore_prefs") or "firestore_prefs"

    raw_data_dir = _env_str("DATA_DIR", "")
    data_dir = Path(raw_data_dir) if raw_data_dir else Path(__file__).resolve().parent / "data"

    log_level = _env_str("LOG_LEVEL", "INFO").upper() or "INFO"

    return Settings(
        user_store_backend=backend,
        users_collection=users_collection,
        firestore_project=firestore_project,
        firestore_database=firestore_database,
        prefs_scope=prefs_scope,
        data_dir=data_dir,
        log_level=log_level,
    )
