# uiproducer/core/ui_state.py

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from .result import Failure, Result, Success

T = TypeVar("T")


class MergePolicy(Enum):
    """How a failed fetch treats data shown from an earlier success."""
    PRESERVE_DATA = "preserve"
    CLEAR_DATA = "clear"

    @classmethod
    def from_name(cls, name: str) -> "MergePolicy":
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = ", ".join(policy.value for policy in cls)
            raise ValueError(f"Unknown merge policy {name!r} (expected one of: {valid})") from None


@dataclass(frozen=True)
class UiState(Generic[T]):
    """Tri-state view model rendered by the view layer.

    ``None`` stands for an absent ``data`` or ``exception``.
    """

    data: Optional[T] = None
    loading: bool = False
    exception: Optional[BaseException] = None

    @property
    def initial_load(self) -> bool:
        """True while the very first fetch is running."""
        return self.data is None and self.loading and self.exception is None

    @property
    def has_error(self) -> bool:
        return self.exception is not None

    def copy(self, **changes: Any) -> "UiState[T]":
        return dataclasses.replace(self, **changes)

    def copy_with_result(
        self,
        result: "Result[T]",
        policy: MergePolicy = MergePolicy.PRESERVE_DATA,
    ) -> "UiState[T]":
        """Merge a fetch outcome into this state and clear ``loading``."""
        if isinstance(result, Success):
            return self.copy(loading=False, exception=None, data=result.data)
        if isinstance(result, Failure):
            if policy is MergePolicy.CLEAR_DATA:
                return self.copy(loading=False, exception=result.exception, data=None)
            return self.copy(loading=False, exception=result.exception)
        raise TypeError(f"Expected Success or Failure, got {type(result).__name__}")


__all__ = ["UiState", "MergePolicy"]
