from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def read_json(path: Path) -> Any | None:
    """
    Read a JSON file.

    Missing, empty, unreadable or malformed files all read as None.
    """
    if not path.exists():
        return None
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("JSON READ: could not read %s: %r", path, e)
        return None
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        logger.warning("JSON READ: ignoring malformed %s: %r", path, e)
        return None


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2, sort_keys: bool = True) -> None:
    """
    Write JSON next to the target then swap it in, so readers never see a partial file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=indent, sort_keys=sort_keys)
        f.write("\n")
    tmp_path.replace(path)
