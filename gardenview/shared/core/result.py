# 📄 File: gardenview/shared/core/result.py
# 🧭 Purpose (Layman Explanation):
# A small "envelope" that every call to the backend, storage or image tools
# returns, saying either "here is your answer" or "this went wrong, and here is why".
# 🧪 Purpose (Technical Summary):
# Generic tagged success/failure value. Failures carry a GardenViewException
# subclass so callers branch on the error type instead of catching generic errors.
# 🔗 Dependencies:
# dataclasses, typing, gardenview.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# Supabase gateway, media store, media pipeline, controller handlers

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from .exceptions import GardenViewException

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a collaborator call.

    Exactly one of ``value`` / ``error`` is meaningful: ``error`` is None on
    success. A successful call may still carry ``value=None`` (e.g. deletes).
    """

    value: Optional[T] = None
    error: Optional[GardenViewException] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: GardenViewException) -> "Result[T]":
        if error is None:
            raise ValueError("A failed Result needs an error")
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value

    def value_or(self, default: T) -> T:
        return self.value if self.ok and self.value is not None else default

    def map(self, func: Callable[[T], U]) -> "Result[U]":
        if not self.ok:
            return Result(error=self.error)
        return Result(value=func(self.value))


__all__ = ["Result"]
