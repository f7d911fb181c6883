"""Adapter running synchronous fetch functions off the event loop."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from functools import partial
from typing import Any, Awaitable, Callable, Optional

from .cancellation import CancellationToken, CancellationTokenSource

logger = logging.getLogger(__name__)

BlockingFetch = Callable[[Any, CancellationToken], Any]


def blocking_fetch(
    func: BlockingFetch,
    *,
    executor: Optional[Executor] = None,
    max_workers: Optional[int] = None,
) -> Callable[[Any], Awaitable[Any]]:
    """Wrap ``func(producer, token)`` into an async fetch.

    Each call runs in ``executor`` (a private thread pool when omitted). When the
    awaiting driver is cancelled the token is cancelled and the call is
    abandoned: its return value is never delivered.
    """

    own_executor: Optional[ThreadPoolExecutor] = None

    def _executor() -> Executor:
        nonlocal own_executor
        if executor is not None:
            return executor
        if own_executor is None:
            own_executor = ThreadPoolExecutor(
                max_workers=max(1, max_workers or 2),
                thread_name_prefix="uiproducer-fetch",
            )
        return own_executor

    async def fetch(producer: Any) -> Any:
        loop = asyncio.get_running_loop()
        label = getattr(func, "__name__", "fetch")
        source = CancellationTokenSource(label)
        future = loop.run_in_executor(_executor(), partial(func, producer, source.token))
        try:
            return await future
        except asyncio.CancelledError:
            source.abandon()
            logger.debug(f"Abandoned blocking fetch {label!r}")
            raise

    def shutdown(wait: bool = False) -> None:
        if own_executor is not None:
            own_executor.shutdown(wait=wait, cancel_futures=True)

    fetch.shutdown = shutdown  # type: ignore[attr-defined]
    fetch.__name__ = getattr(func, "__name__", "blocking_fetch")
    fetch.__qualname__ = getattr(func, "__qualname__", fetch.__name__)
    return fetch


__all__ = ["blocking_fetch", "BlockingFetch"]
