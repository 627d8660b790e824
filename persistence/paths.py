from __future__ import annotations

from pathlib import Path

from settings import get_settings


def data_dir() -> Path:
    # DATA_DIR is read on every call so tests can point it at a temp dir.
    return ensure_dir(get_settings().data_dir)


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def prefs_dir(data_dir: Path) -> Path:
    return ensure_dir(data_dir / "prefs")
