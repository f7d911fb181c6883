import asyncio
from typing import List

import pytest

from uiproducer.core import (
    Failure,
    MergePolicy,
    ProducerError,
    ProducerScope,
    RefreshableProducerCell,
    ScopeClosedError,
    Success,
    UiState,
    launch_ui_state_producer,
)


class ScriptedFetch:
    """Fetch whose calls stay in flight until the test resolves them."""

    def __init__(self, shield: bool = False) -> None:
        self.calls: List[asyncio.Future] = []
        self.producers: list = []
        self.shield = shield

    async def __call__(self, producer):
        future = asyncio.get_running_loop().create_future()
        self.calls.append(future)
        self.producers.append(producer)
        if self.shield:
            return await asyncio.shield(future)
        return await future


async def settle(rounds: int = 10) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


async def until_idle(state):
    return await state.wait_for(lambda value: not value.loading, timeout=1)


def test_fetch_runs_once_on_start_without_refresh():
    async def scenario():
        fetch = ScriptedFetch()
        run = RefreshableProducerCell("repo", fetch)
        state, refresh, clear_error = run.start()

        assert state.value == UiState(loading=True)
        assert state.value.initial_load
        await settle()
        assert len(fetch.calls) == 1
        assert fetch.producers == ["repo"]

        fetch.calls[0].set_result(Success("posts"))
        assert await until_idle(state) == UiState(data="posts")

        await settle()
        assert len(fetch.calls) == 1
        await run.aclose()

    asyncio.run(scenario())


def test_refresh_burst_is_conflated_into_one_fetch():
    async def scenario():
        fetch = ScriptedFetch()
        run = RefreshableProducerCell("repo", fetch)
        state, refresh, _ = run.start()
        await settle()
        assert len(fetch.calls) == 1

        for _ in range(5):
            refresh()

        fetch.calls[0].set_result(Success(1))
        await settle()
        assert len(fetch.calls) == 2
        assert state.value.loading
        assert state.value.data == 1

        fetch.calls[1].set_result(Success(2))
        await until_idle(state)
        await settle()
        assert len(fetch.calls) == 2
        assert state.value == UiState(data=2)
        await run.aclose()

    asyncio.run(scenario())


def test_refresh_while_idle_triggers_new_fetch():
    async def scenario():
        fetch = ScriptedFetch()
        run = RefreshableProducerCell("repo", fetch)
        state, refresh, _ = run.start()
        await settle()
        fetch.calls[0].set_result(Success("a"))
        await until_idle(state)

        refresh()
        await settle()
        assert len(fetch.calls) == 2
        # Partial update: data from the previous fetch stays visible
        assert state.value == UiState(data="a", loading=True)
        await run.aclose()

    asyncio.run(scenario())


def test_error_then_refresh_recovers():
    async def scenario():
        fetch = ScriptedFetch()
        run = RefreshableProducerCell("repo", fetch)
        state, refresh, _ = run.start()
        await settle()

        error = ValueError("offline")
        fetch.calls[0].set_result(Failure(error))
        assert await until_idle(state) == UiState(exception=error)

        refresh()
        await settle()
        fetch.calls[1].set_result(Success("data"))
        assert await until_idle(state) == UiState(data="data")
        await run.aclose()

    asyncio.run(scenario())


def test_clear_error_only_touches_exception_and_never_fetches():
    async def scenario():
        fetch = ScriptedFetch()
        run = RefreshableProducerCell("repo", fetch)
        state, refresh, clear_error = run.start()
        await settle()
        fetch.calls[0].set_result(Success("kept"))
        await until_idle(state)

        refresh()
        await settle()
        error = RuntimeError("boom")
        fetch.calls[1].set_result(Failure(error))
        assert await until_idle(state) == UiState(data="kept", exception=error)

        clear_error()
        assert state.value == UiState(data="kept")
        await settle()
        assert len(fetch.calls) == 2

        refresh()
        await settle()
        assert state.value.loading
        clear_error()
        assert state.value == UiState(data="kept", loading=True)
        await run.aclose()

    asyncio.run(scenario())


def test_raised_exception_becomes_failure_and_loop_continues():
    attempts = []

    def flaky(producer):
        attempts.append(producer)
        if len(attempts) == 1:
            raise ConnectionError("no route")
        return f"{producer}-ok"

    async def scenario():
        run = RefreshableProducerCell("svc", flaky)
        state, refresh, _ = run.start()
        failed = await until_idle(state)
        assert isinstance(failed.exception, ConnectionError)
        assert failed.data is None

        refresh()
        await settle()
        assert await until_idle(state) == UiState(data="svc-ok")
        assert run.task is not None and not run.task.done()
        await run.aclose()

    asyncio.run(scenario())


def test_clear_data_policy_drops_previous_data_on_failure():
    async def scenario():
        fetch = ScriptedFetch()
        run = RefreshableProducerCell("repo", fetch, merge_policy=MergePolicy.CLEAR_DATA)
        state, refresh, _ = run.start()
        await settle()
        fetch.calls[0].set_result(Success("old"))
        await until_idle(state)

        refresh()
        await settle()
        error = IOError("gone")
        fetch.calls[1].set_result(Failure(error))
        assert await until_idle(state) == UiState(exception=error)
        await run.aclose()

    asyncio.run(scenario())


def test_start_twice_is_rejected():
    async def scenario():
        run = RefreshableProducerCell("repo", ScriptedFetch())
        run.start()
        with pytest.raises(RuntimeError):
            run.start()
        await run.aclose()

    asyncio.run(scenario())


def test_cancelled_run_ignores_late_completion():
    async def scenario():
        fetch = ScriptedFetch(shield=True)
        run = RefreshableProducerCell("repo", fetch)
        state, refresh, _ = run.start()
        await settle()

        writes = []
        state.subscribe(writes.append)
        await run.aclose()
        assert run.task.cancelled()

        fetch.calls[0].set_result(Success("late"))
        await settle()
        assert writes == []
        assert state.value == UiState(loading=True)

        refresh()
        await settle()
        assert len(fetch.calls) == 1

    asyncio.run(scenario())


def test_key_change_resets_state_and_silences_old_fetch():
    async def scenario():
        async with ProducerScope() as scope:
            fetch = ScriptedFetch(shield=True)
            state, refresh, _ = scope.launch("repo", fetch, extra=1, slot="post")
            await settle()
            fetch.calls[0].set_result(Failure(KeyError("post 1")))
            await until_idle(state)

            refresh()
            await settle()
            stale_call = fetch.calls[1]

            state_2, refresh_2, _ = scope.launch("repo", fetch, extra=2, slot="post")
            assert state_2.value == UiState(loading=True)
            await settle()
            assert len(fetch.calls) == 3

            stale_call.set_result(Success("post 1"))
            await settle()
            assert state_2.value == UiState(loading=True)

            fetch.calls[2].set_result(Success("post 2"))
            assert await until_idle(state_2) == UiState(data="post 2")
            # The view keeps observing the same cell across keys
            assert state is state_2

    asyncio.run(scenario())


def test_same_key_does_not_restart():
    async def scenario():
        async with ProducerScope() as scope:
            fetch = ScriptedFetch()
            first = scope.launch("repo", fetch, extra="id", slot="post")
            await settle()
            second = scope.launch("repo", fetch, extra="id", slot="post")
            await settle()

            assert first is second
            assert len(fetch.calls) == 1
            assert scope.slot("post").generation == 1

    asyncio.run(scenario())


def test_refresh_after_key_change_targets_new_run():
    async def scenario():
        async with ProducerScope() as scope:
            fetch = ScriptedFetch()
            state, refresh, _ = scope.launch("a", fetch, slot="s")
            await settle()
            scope.launch("b", fetch, slot="s")
            await settle()
            fetch.calls[1].set_result(Success("b"))
            await until_idle(state)

            refresh()
            await settle()
            assert fetch.producers == ["a", "b", "b"]

    asyncio.run(scenario())


def test_scope_teardown_cancels_in_flight_fetch():
    async def scenario():
        fetch = ScriptedFetch(shield=True)
        scope = ProducerScope()
        state, refresh, _ = launch_ui_state_producer(scope, "repo", fetch)
        await settle()

        writes = []
        state.subscribe(writes.append)
        await scope.aclose()

        fetch.calls[0].set_result(Success("late"))
        refresh()
        await settle()
        assert writes == []
        assert len(fetch.calls) == 1

        with pytest.raises(ScopeClosedError):
            scope.launch("repo", fetch)

    asyncio.run(scenario())


def test_scope_merge_policy_applies_to_slots():
    async def scenario():
        async with ProducerScope(MergePolicy.CLEAR_DATA) as scope:
            scope.launch("repo", ScriptedFetch(), slot="x")
            assert scope.slot("x").current_run.merge_policy is MergePolicy.CLEAR_DATA

    asyncio.run(scenario())


def test_fetch_cancelled_from_inside_is_a_failure_and_driver_survives():
    inner_futures = []

    async def fetch_via_inner_future(producer):
        inner = asyncio.get_running_loop().create_future()
        inner_futures.append(inner)
        return await inner

    async def scenario():
        run = RefreshableProducerCell("repo", fetch_via_inner_future)
        state, refresh, _ = run.start()
        await settle()
        inner_futures[0].cancel()

        failed = await until_idle(state)
        assert isinstance(failed.exception, asyncio.CancelledError)
        assert not run.task.done()

        refresh()
        await settle()
        assert len(inner_futures) == 2
        inner_futures[1].set_result(Success("recovered"))
        assert await until_idle(state) == UiState(data="recovered")
        await run.aclose()
        assert run.task.done()

    asyncio.run(scenario())


def test_default_slots_keep_same_type_producers_apart():
    async def load(producer):
        return producer

    async def scenario():
        async with ProducerScope() as scope:
            first = scope.launch("repo_a", load)
            first_idle = await until_idle(first.state)
            assert first_idle == UiState(data="repo_a")

            with pytest.raises(ProducerError, match="slot="):
                scope.launch("repo_b", load)
            await settle()
            assert first.state.value == UiState(data="repo_a")

            second = scope.launch("repo_b", load, slot="b")
            assert await until_idle(second.state) == UiState(data="repo_b")
            assert first.state.value == UiState(data="repo_a")

            # Changing extra under a derived slot still restarts it
            again = scope.launch("repo_a", load, extra=2)
            assert again is first
            assert await until_idle(first.state) == UiState(data="repo_a")

    asyncio.run(scenario())


def test_driver_refuses_to_run_without_start():
    run = RefreshableProducerCell("repo", ScriptedFetch())
    with pytest.raises(RuntimeError, match="call start"):
        asyncio.run(run._drive())
