from __future__ import annotations

import importlib
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection,
# so flat imports like `import persistence...` and `import settings` resolve.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Point local state at a temp dir and use the in-memory remote store,
    so tests never touch ./data or a real Firestore project.
    """
    data = tmp_path / "data"
    monkeypatch.setenv("DATA_DIR", str(data))
    monkeypatch.setenv("USER_STORE_BACKEND", "memory")
    monkeypatch.delenv("USERS_COLLECTION", raising=False)
    monkeypatch.delenv("PREFS_SCOPE", raising=False)
    return tmp_path


@pytest.fixture
def reload_endpoints(sandbox_project: Path):
    """
    The screen endpoints build their controller at import time; reload after sandboxing.
    """
    import endpoints.screen_endpoints as screen_endpoints

    return importlib.reload(screen_endpoints)
