"""Restart-on-key-change supervision and lifetime scoping of producers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import ProducerError, ScopeClosedError
from .producer import Fetch, ProducerResult, RefreshableProducerCell, clear_error
from .state_cell import ObservableCell
from .ui_state import MergePolicy, UiState

logger = logging.getLogger(__name__)

Key = Tuple[Any, Any]


class ProducerSlot:
    """Keyed supervisor for a single call site.

    The slot owns one state cell for its whole life so views stay subscribed
    across key changes. Each key gets its own driver run; evaluating with a
    different key cancels the previous run before the next one starts.
    """

    def __init__(self, name: str, merge_policy: MergePolicy = MergePolicy.PRESERVE_DATA) -> None:
        self.name = name
        self.merge_policy = merge_policy
        self.cell: ObservableCell = ObservableCell(UiState(loading=True))
        self._key: Optional[Key] = None
        self._run: Optional[RefreshableProducerCell] = None
        self._generation = 0
        self._retired: List[RefreshableProducerCell] = []
        self.result = ProducerResult(self.cell.read_only(), self.on_refresh, self.on_clear_error)

    @property
    def key(self) -> Optional[Key]:
        return self._key

    @property
    def current_run(self) -> Optional[RefreshableProducerCell]:
        return self._run

    @property
    def generation(self) -> int:
        """Number of driver runs started by this slot."""
        return self._generation

    def evaluate(self, producer: Any, fetch: Fetch, extra: Any = None) -> ProducerResult:
        key = (producer, extra)
        if self._run is not None and self._key == key:
            return self.result

        if self._run is not None:
            logger.debug(f"Key changed for slot {self.name!r}, restarting producer")
            self._run.cancel()
            self._retired = [run for run in self._retired if run.task is not None and not run.task.done()]
            self._retired.append(self._run)

        self._key = key
        self._generation += 1
        self._run = RefreshableProducerCell(
            producer,
            fetch,
            cell=self.cell,
            merge_policy=self.merge_policy,
            name=f"{self.name}#{self._generation}",
        )
        self._run.start()
        return self.result

    def on_refresh(self) -> None:
        if self._run is not None:
            self._run.on_refresh()

    def on_clear_error(self) -> None:
        clear_error(self.cell)

    def cancel(self) -> None:
        if self._run is not None:
            self._run.cancel()
            self._retired.append(self._run)
            self._run = None
        self._key = None

    async def aclose(self) -> None:
        self.cancel()
        retired, self._retired = self._retired, []
        for run in retired:
            await run.aclose()


class ProducerScope:
    """Lifetime owner for a group of producer slots.

    Tearing the scope down cancels every driver it started::

        async with ProducerScope() as scope:
            state, refresh, clear_error = scope.launch(repo, load_posts)
    """

    def __init__(self, merge_policy: MergePolicy = MergePolicy.PRESERVE_DATA) -> None:
        self.merge_policy = merge_policy
        self._slots: Dict[str, ProducerSlot] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def slot(self, name: str) -> ProducerSlot:
        if self._closed:
            raise ScopeClosedError(f"Cannot use slot {name!r}: scope is closed")
        existing = self._slots.get(name)
        if existing is None:
            existing = ProducerSlot(name, self.merge_policy)
            self._slots[name] = existing
        return existing

    def launch(
        self,
        producer: Any,
        fetch: Fetch,
        extra: Any = None,
        *,
        slot: Optional[str] = None,
    ) -> ProducerResult:
        """Return the producer result for ``slot``, restarting it if the key changed.

        Without ``slot`` the name is derived from the producer type and ``fetch``;
        launching a different producer under a derived name raises
        :class:`ProducerError` instead of taking over the running slot.
        """
        if slot is not None:
            return self.slot(slot).evaluate(producer, fetch, extra)

        slot_name = self._default_slot_name(producer, fetch)
        existing = self._slots.get(slot_name)
        # A derived slot only follows changes of `extra`, never of the producer
        if existing is not None and existing.key is not None and existing.key[0] != producer:
            raise ProducerError(
                f"Slot {slot_name!r} is already bound to another producer; "
                f"pass slot= to launch independent producers of the same type"
            )
        return self.slot(slot_name).evaluate(producer, fetch, extra)

    @staticmethod
    def _default_slot_name(producer: Any, fetch: Fetch) -> str:
        fetch_name = getattr(fetch, "__qualname__", None) or repr(fetch)
        return f"{type(producer).__name__}.{fetch_name}"

    def close(self) -> None:
        """Cancel every slot. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        for slot in self._slots.values():
            slot.cancel()
        logger.debug(f"Producer scope closed ({len(self._slots)} slot(s))")

    async def aclose(self) -> None:
        self.close()
        await asyncio.gather(*(slot.aclose() for slot in self._slots.values()))

    async def __aenter__(self) -> "ProducerScope":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def launch_ui_state_producer(
    scope: ProducerScope,
    producer: Any,
    fetch: Fetch,
    extra: Any = None,
    *,
    slot: Optional[str] = None,
) -> ProducerResult:
    """Launch refreshable :class:`UiState` for ``fetch(producer)`` inside ``scope``.

    Args:
        scope: Owner that cancels the producer on teardown.
        producer: The data source to load data from.
        fetch: Callable producing a single value (or ``Result``) from ``producer``.
        extra: Any further key value used by ``fetch``, such as a resource id.
            Changing it restarts the producer.
        slot: Call-site name; defaults to one derived from ``producer`` and ``fetch``.
            Required when several producers of one type share ``fetch``.

    Returns:
        ``ProducerResult(state, on_refresh, on_clear_error)``.
    """
    return scope.launch(producer, fetch, extra, slot=slot)


__all__ = ["ProducerSlot", "ProducerScope", "launch_ui_state_producer"]
