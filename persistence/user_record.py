from __future__ import annotations

import math
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

GUEST_NAME = "Guest"
GUEST_EMAIL = "guest@example.com"

# Scores are 32-bit on every client that shares the collection.
SCORE_MIN = -(2**31)
SCORE_MAX = 2**31 - 1

_SCORE_RE = re.compile(r"[+-]?[0-9]+")


def parse_score(value: Any) -> int:
    """
    Form score -> int. Only an optional sign and ASCII digits count; anything
    else, including values outside 32-bit range, is 0. Never raises.
    """
    if not isinstance(value, str):
        return 0
    s = value.strip()
    if not _SCORE_RE.fullmatch(s):
        return 0
    n = int(s)
    if not SCORE_MIN <= n <= SCORE_MAX:
        return 0
    return n


def _narrow_score(score: Any) -> Any:
    # Stored doubles narrow to int (toward zero); None marks an unusable number.
    if isinstance(score, float):
        if not math.isfinite(score) or not SCORE_MIN <= score <= SCORE_MAX:
            return None
        return int(score)
    if isinstance(score, int) and not isinstance(score, bool):
        return score if SCORE_MIN <= score <= SCORE_MAX else None
    return score


class User(BaseModel):
    """
    The single user record kept in the `users` collection.

    Mirrors the remote document shape exactly:
      { "uid": "<doc id>", "name": "...", "email": "...", "score": 0 }

    `User()` gives an empty record; everything else is passed by keyword.
    """

    model_config = ConfigDict(extra="ignore")

    uid: str | None = None
    name: str = ""
    email: str = ""
    score: int = 0

    @classmethod
    def from_form(cls, uid: str, name: str, email: str, score: str) -> "User":
        name = (name or "").strip()
        email = (email or "").strip()
        return cls(
            uid=uid,
            name=name or GUEST_NAME,
            email=email or GUEST_EMAIL,
            score=parse_score(score),
        )

    @classmethod
    def from_document(cls, data: Any) -> "User | None":
        """
        Decode raw document fields.

        Missing fields take their defaults and unknown keys are ignored. A field
        present with the wrong type (e.g. a string or bool score) fails the whole
        conversion and returns None instead of raising. A float score is narrowed
        to int; scores outside 32-bit range fail.
        """
        if not isinstance(data, dict):
            return None
        if "score" in data:
            data = {**data, "score": _narrow_score(data["score"])}
        try:
            return cls.model_validate(data, strict=True)
        except ValidationError:
            return None

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="python")

    def describe(self) -> str:
        return f"User: {self.name}\nEmail: {self.email}\nScore: {self.score}"
