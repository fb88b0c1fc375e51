"""Tagged result for operations that degrade instead of raising."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a fallible read or fetch.

    ``value`` always holds something usable: the real value on success, or
    the empty/fallback value on failure. ``error`` describes what went wrong.
    """

    value: T
    ok: bool = True
    error: str | None = None

    @classmethod
    def success(cls, value: T) -> 'Result[T]':
        return cls(value=value)

    @classmethod
    def failure(cls, fallback: T, error: str) -> 'Result[T]':
        return cls(value=fallback, ok=False, error=error)
