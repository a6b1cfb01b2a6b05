from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RemoteResult(Generic[T]):
    """Outcome of a single boundary call.

    Exactly one of ``value`` / ``error`` is meaningful. Adapters never raise for
    provider failures; they return ``RemoteResult.failure`` and let the caller
    decide whether to unwrap (abort) or recover.
    """
    value: Optional[T] = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, value: T) -> "RemoteResult[T]":
        return cls(value=value, error=None)

    @classmethod
    def failure(cls, error: Exception) -> "RemoteResult[T]":
        return cls(value=None, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
