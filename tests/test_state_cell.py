import asyncio
import logging
import threading

import pytest

from uiproducer.core import ObservableCell


def test_subscribers_see_every_write_until_unsubscribed():
    cell = ObservableCell(0)
    seen = []
    unsubscribe = cell.subscribe(seen.append)

    cell.value = 1
    assert cell.update(lambda current: current + 10) == 11
    unsubscribe()
    cell.value = 99

    assert seen == [1, 11]
    assert cell.subscriber_count == 0
    unsubscribe()


def test_failing_subscriber_is_logged_and_others_still_run(caplog):
    cell = ObservableCell("a")
    seen = []

    def broken(_value):
        raise RuntimeError("view crashed")

    cell.subscribe(broken)
    cell.subscribe(seen.append)

    with caplog.at_level(logging.ERROR, logger="uiproducer.core.state_cell"):
        cell.value = "b"

    assert cell.value == "b"
    assert seen == ["b"]
    assert "view crashed" in caplog.text


def test_read_only_view_has_no_setter():
    cell = ObservableCell(1)
    view = cell.read_only()
    assert view.value == 1
    with pytest.raises(AttributeError):
        view.value = 2  # type: ignore[misc]
    cell.value = 3
    assert view.value == 3


def test_wait_for_returns_current_or_future_value():
    async def scenario():
        cell = ObservableCell(5)
        assert await cell.wait_for(lambda v: v == 5) == 5

        waiter = asyncio.ensure_future(cell.wait_for(lambda v: v > 10, timeout=1))
        await asyncio.sleep(0)
        cell.value = 7
        cell.value = 12
        assert await waiter == 12
        assert cell.subscriber_count == 0

        with pytest.raises(asyncio.TimeoutError):
            await cell.wait_for(lambda v: v < 0, timeout=0.01)

    asyncio.run(scenario())


def test_write_from_worker_thread_wakes_waiter():
    async def scenario():
        cell = ObservableCell("idle")
        waiter = asyncio.ensure_future(cell.wait_for(lambda v: v == "done", timeout=1))
        await asyncio.sleep(0)

        thread = threading.Thread(target=lambda: setattr(cell, "value", "done"))
        thread.start()
        assert await waiter == "done"
        thread.join()

    asyncio.run(scenario())
