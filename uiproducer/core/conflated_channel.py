# uiproducer/core/conflated_channel.py

"""Single-slot mailbox that coalesces redundant refresh signals."""

from __future__ import annotations

import asyncio
import threading
from typing import Optional

from .exceptions import ChannelClosedError


class ConflatedChannel:
    """Capacity-1 signal channel.

    ``offer`` sets the slot if it is empty and is a no-op otherwise, so a burst
    of requests collapses into one pending signal. ``offer`` and ``close`` may
    be called from any thread; ``receive`` runs on the owning event loop.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop
        self._lock = threading.Lock()
        self._pending = False
        self._closed = False
        self._event = asyncio.Event()

    @property
    def pending(self) -> bool:
        return self._pending

    @property
    def closed(self) -> bool:
        return self._closed

    def offer(self) -> bool:
        """Post a signal. Returns ``False`` if one was already pending."""
        with self._lock:
            if self._closed or self._pending:
                return False
            self._pending = True
        self._wake()
        return True

    async def receive(self) -> None:
        """Wait until a signal is available and consume it."""
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        while True:
            with self._lock:
                if self._closed:
                    raise ChannelClosedError("refresh channel is closed")
                if self._pending:
                    self._pending = False
                    return
                self._event.clear()
            await self._event.wait()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._pending = False
        self._wake()

    def _wake(self) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._event.set)


__all__ = ["ConflatedChannel"]
