"""Abandonment signal handed to blocking fetch workers.

A driver cancelled while a blocking fetch runs cannot interrupt the worker
thread. ``blocking_fetch`` owns one :class:`CancellationTokenSource` per call
and abandons it when the awaiting driver goes away; the worker sees this
through its read-only :class:`CancellationToken` and should stop early. The
result of an abandoned call is never written to any state cell, so a worker
may bail out by raising :class:`FetchAbandonedError` from
:meth:`CancellationToken.throw_if_cancellation_requested`.
"""

from __future__ import annotations

import threading
from typing import Optional


class FetchAbandonedError(RuntimeError):
    """Raised inside a fetch worker whose result will never be delivered."""


class CancellationToken:
    """Worker-side view of a fetch's abandonment state."""

    __slots__ = ("_source",)

    def __init__(self, source: "CancellationTokenSource") -> None:
        self._source = source

    @property
    def label(self) -> str:
        return self._source.label

    @property
    def reason(self) -> Optional[str]:
        return self._source.reason

    def is_cancellation_requested(self) -> bool:
        return self._source.abandoned

    def throw_if_cancellation_requested(self) -> None:
        """Raise :class:`FetchAbandonedError` once the driver stopped waiting."""
        if self._source.abandoned:
            raise FetchAbandonedError(f"{self.label} abandoned: {self.reason or 'cancelled'}")

    def sleep(self, seconds: float) -> bool:
        """Pause a polling worker. Returns ``True`` if the fetch was abandoned meanwhile."""
        return self._source._event.wait(seconds)


class CancellationTokenSource:
    """Owned by one blocking fetch call; abandoned when its driver is cancelled."""

    def __init__(self, label: str = "fetch") -> None:
        self.label = label
        self.reason: Optional[str] = None
        self._event = threading.Event()
        self._token = CancellationToken(self)

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def abandoned(self) -> bool:
        return self._event.is_set()

    def abandon(self, reason: str = "driver cancelled") -> None:
        # First reason wins
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()


__all__ = [
    "CancellationToken",
    "CancellationTokenSource",
    "FetchAbandonedError",
]
