# uiproducer/core/result.py

"""Tagged outcome of a single fetch attempt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A fetch that completed with a value."""

    data: T


@dataclass(frozen=True)
class Failure:
    """A fetch that completed with an error."""

    exception: BaseException


Result = Union[Success[T], Failure]


def success_or(result: "Result[T]", fallback: T) -> T:
    """Return the carried data, or ``fallback`` for a failure."""
    if isinstance(result, Success):
        return result.data
    return fallback


def result_data(result: "Result[T]") -> Optional[T]:
    if isinstance(result, Success):
        return result.data
    return None


def as_result(value: Any) -> "Result[Any]":
    """Pass a ``Result`` through, wrap anything else in ``Success``."""
    if isinstance(value, (Success, Failure)):
        return value
    return Success(value)


__all__ = ["Success", "Failure", "Result", "success_or", "result_data", "as_result"]
