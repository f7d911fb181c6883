"""Observable value holder shared between the driver task and a view layer.

Writes go through a re-entrant lock so a write from a UI callback thread and a
write from the asyncio driver never interleave. Subscribers are invoked
synchronously on the writing thread, in write order.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")

Subscriber = Callable[[T], None]

logger = logging.getLogger(__name__)


class ObservableCell(Generic[T]):
    """Mutable cell that notifies subscribers on every write."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._lock = threading.RLock()
        self._subscribers: List[Subscriber[T]] = []

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        with self._lock:
            self._value = new_value
            self._notify(new_value)

    def update(self, fn: Callable[[T], T]) -> T:
        """Atomically replace the value with ``fn(current)`` and return it."""
        with self._lock:
            new_value = fn(self._value)
            self._value = new_value
            self._notify(new_value)
        return new_value

    def subscribe(self, callback: Subscriber[T]) -> Callable[[], None]:
        """Register ``callback`` and return a function that removes it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                try:
                    self._subscribers.remove(callback)
                except ValueError:
                    pass

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _notify(self, value: T) -> None:
        for callback in list(self._subscribers):
            try:
                callback(value)
            except Exception as e:
                logger.error(f"Error in state cell subscriber {callback!r}: {e}", exc_info=True)

    async def wait_for(
        self,
        predicate: Callable[[T], bool],
        timeout: Optional[float] = None,
    ) -> T:
        """Return the first value, current or future, that satisfies ``predicate``."""
        loop = asyncio.get_running_loop()
        future: "asyncio.Future[T]" = loop.create_future()

        def resolve(value: T) -> None:
            if not future.done():
                future.set_result(value)

        def check(value: T) -> None:
            if predicate(value):
                loop.call_soon_threadsafe(resolve, value)

        unsubscribe = self.subscribe(check)
        try:
            current = self._value
            if predicate(current):
                return current
            return await asyncio.wait_for(future, timeout)
        finally:
            unsubscribe()

    def read_only(self) -> "ReadOnlyCell[T]":
        return ReadOnlyCell(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"


class ReadOnlyCell(Generic[T]):
    """View of an :class:`ObservableCell` without write access."""

    __slots__ = ("_cell",)

    def __init__(self, cell: ObservableCell[T]) -> None:
        self._cell = cell

    @property
    def value(self) -> T:
        return self._cell.value

    def subscribe(self, callback: Subscriber[T]) -> Callable[[], None]:
        return self._cell.subscribe(callback)

    async def wait_for(
        self,
        predicate: Callable[[T], bool],
        timeout: Optional[float] = None,
    ) -> T:
        return await self._cell.wait_for(predicate, timeout)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._cell.value!r})"


__all__ = ["ObservableCell", "ReadOnlyCell", "Subscriber"]
