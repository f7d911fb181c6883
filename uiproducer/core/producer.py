"""Driver that turns a single-shot async fetch into refreshable UI state.

One :class:`RefreshableProducerCell` exists per key. Starting it resets the
cell to a fresh loading state, posts one refresh signal and launches a task
that fetches every time a signal is consumed. Repeated calls to
``on_refresh`` are conflated while a request is in progress.

Typical use destructures the result at the call site::

    state, refresh, clear_error = RefreshableProducerCell(repo, load_posts).start()
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Generic, NamedTuple, Optional, TypeVar

from .conflated_channel import ConflatedChannel
from .exceptions import ChannelClosedError
from .result import Failure, Result, as_result
from .state_cell import ObservableCell, ReadOnlyCell
from .ui_state import MergePolicy, UiState

P = TypeVar("P")
T = TypeVar("T")

Fetch = Callable[[Any], Any]

logger = logging.getLogger(__name__)


class ProducerResult(NamedTuple):
    """State view plus the two caller-facing events."""
    state: ReadOnlyCell
    on_refresh: Callable[[], None]
    on_clear_error: Callable[[], None]


def clear_error(cell: ObservableCell) -> None:
    """Drop the error of the current state, leaving data and loading as they are."""
    cell.update(lambda state: state.copy(exception=None))


class RefreshableProducerCell(Generic[P, T]):
    """Single driver run bound to one ``(producer, extra)`` key."""

    def __init__(
        self,
        producer: P,
        fetch: Fetch,
        cell: Optional[ObservableCell] = None,
        merge_policy: MergePolicy = MergePolicy.PRESERVE_DATA,
        name: Optional[str] = None,
    ) -> None:
        self.producer = producer
        self._fetch = fetch
        self.cell: ObservableCell = cell if cell is not None else ObservableCell(UiState(loading=True))
        self.merge_policy = merge_policy
        self.name = name or f"producer-{type(producer).__name__}"
        self._channel: Optional[ConflatedChannel] = None
        self._task: Optional["asyncio.Task[None]"] = None
        self._active = False
        self.fetch_count = 0

    @property
    def active(self) -> bool:
        return self._active

    @property
    def task(self) -> Optional["asyncio.Task[None]"]:
        return self._task

    def start(self) -> ProducerResult:
        """Reset the cell, request the first fetch and launch the driver task.

        Must be called while an event loop is running.
        """
        if self._task is not None:
            raise RuntimeError(f"{self.name} has already been started")
        loop = asyncio.get_running_loop()

        self.cell.value = UiState(loading=True)
        self._channel = ConflatedChannel(loop)
        self._channel.offer()
        self._active = True
        self._task = loop.create_task(self._drive(), name=self.name)
        logger.debug(f"Started {self.name}")
        return self.result

    @property
    def result(self) -> ProducerResult:
        return ProducerResult(self.cell.read_only(), self.on_refresh, self.on_clear_error)

    def on_refresh(self) -> None:
        channel = self._channel
        if channel is None or not self._active:
            return
        if not channel.offer():
            logger.debug(f"Refresh for {self.name} conflated with a pending request")

    def on_clear_error(self) -> None:
        clear_error(self.cell)

    def cancel(self) -> None:
        """Stop the driver. No state write happens after this returns."""
        if not self._active and self._task is None:
            return
        self._active = False
        if self._channel is not None:
            self._channel.close()
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug(f"Cancelled {self.name}")

    async def aclose(self) -> None:
        """Cancel and wait for the driver task to unwind."""
        self.cancel()
        task = self._task
        if task is None or task is asyncio.current_task():
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    def _being_cancelled(self) -> bool:
        task = asyncio.current_task()
        return not self._active or (task is not None and task.cancelling() > 0)

    def _write(self, fn: Callable[[UiState], UiState]) -> None:
        if self._active:
            self.cell.update(fn)

    async def _drive(self) -> None:
        channel = self._channel
        if channel is None:
            raise RuntimeError(f"{self.name} has no refresh channel; call start() first")
        try:
            while True:
                await channel.receive()
                self._write(lambda state: state.copy(loading=True))
                result = await self._invoke_fetch()
                self._write(lambda state: state.copy_with_result(result, self.merge_policy))
        except ChannelClosedError:
            logger.debug(f"Refresh channel of {self.name} closed")

    async def _invoke_fetch(self) -> Result[Any]:
        self.fetch_count += 1
        try:
            outcome = self._fetch(self.producer)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except asyncio.CancelledError as e:
            if self._being_cancelled():
                raise
            # Cancelled from inside the fetch, not by our owner
            logger.warning(f"Fetch for {self.name} was cancelled internally")
            return Failure(e)
        except Exception as e:
            logger.warning(f"Fetch failed for {self.name}: {e}")
            return Failure(e)
        result = as_result(outcome)
        if isinstance(result, Failure):
            logger.warning(f"Fetch for {self.name} returned failure: {result.exception}")
        return result


__all__ = ["ProducerResult", "RefreshableProducerCell", "clear_error"]
