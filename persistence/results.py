from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RemoteResult(Generic[T]):
    """
    Outcome of one remote call: either a value or the error that ended it.
    """

    value: T | None = None
    error: BaseException | None = None

    @classmethod
    def success(cls, value: T | None = None) -> "RemoteResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "RemoteResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        # Passed through verbatim to the screen.
        return "" if self.error is None else str(self.error)
