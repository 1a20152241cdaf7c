import asyncio
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from constructx.core.notifications import ToastCenter
from constructx.core.remote import RemoteCollectionStore, fetch_all
from constructx.infrastructure.api import ApiError


class FakeEndpoint:
    def __init__(self, payloads):
        self.payloads = list(payloads)
        self.keys: list = []

    async def __call__(self, key):
        self.keys.append(key)
        payload = self.payloads.pop(0)
        if isinstance(payload, Exception):
            raise payload
        return payload


def test_successful_load_replaces_data_and_clears_error():
    endpoint = FakeEndpoint([[{"id": "1"}], [{"id": "1"}, {"id": "2"}]])
    store = RemoteCollectionStore(endpoint, key="proj-1", initial=[])

    assert asyncio.run(store.mount()) is True
    assert store.data == [{"id": "1"}]
    assert store.error is None
    assert store.is_loading is False

    asyncio.run(store.refresh())
    assert store.data == [{"id": "1"}, {"id": "2"}]
    assert endpoint.keys == ["proj-1", "proj-1"]


def test_failed_load_keeps_previous_data_and_reports_error():
    toasts = ToastCenter()
    endpoint = FakeEndpoint([[{"id": "1"}], ApiError("boom", status_code=500)])
    store = RemoteCollectionStore(endpoint, key="proj-1", initial=[], toasts=toasts, error_message="Failed to load RFIs.")

    asyncio.run(store.load())
    applied = asyncio.run(store.load())

    assert applied is False
    assert store.data == [{"id": "1"}]
    assert store.error == "Failed to load RFIs."
    assert store.is_loading is False
    drained = toasts.drain()
    assert [toast.variant for toast in drained] == ["destructive"]


def test_error_clears_after_next_success():
    endpoint = FakeEndpoint([ApiError("down"), [{"id": "9"}]])
    store = RemoteCollectionStore(endpoint, initial=[])

    asyncio.run(store.load())
    assert store.error is not None
    asyncio.run(store.load())
    assert store.error is None
    assert store.data == [{"id": "9"}]


def test_set_key_reloads_only_when_key_changes():
    endpoint = FakeEndpoint([["a"], ["b"]])
    store = RemoteCollectionStore(endpoint, key="a", initial=[])

    assert asyncio.run(store.set_key("a")) is True
    assert asyncio.run(store.set_key("a")) is False
    assert asyncio.run(store.set_key("b")) is True
    assert endpoint.keys == ["a", "b"]
    assert store.data == ["b"]


def test_stale_response_from_previous_key_is_discarded():
    async def scenario():
        gate = asyncio.Event()

        async def fetch(key):
            if key == "old":
                await gate.wait()
                return ["old-data"]
            return ["new-data"]

        store = RemoteCollectionStore(fetch, key="old", initial=[])
        first = asyncio.ensure_future(store.load())
        await asyncio.sleep(0)
        assert store.is_loading is True

        applied_new = await store.set_key("new")
        gate.set()
        applied_old = await first
        return store, applied_old, applied_new

    store, applied_old, applied_new = asyncio.run(scenario())

    assert applied_new is True
    assert applied_old is False
    assert store.data == ["new-data"]
    assert store.key == "new"
    assert store.is_loading is False


def test_stale_failure_does_not_set_error():
    async def scenario():
        gate = asyncio.Event()

        async def fetch(key):
            if key == "old":
                await gate.wait()
                raise ApiError("late failure")
            return ["fresh"]

        store = RemoteCollectionStore(fetch, key="old", initial=[])
        first = asyncio.ensure_future(store.load())
        await asyncio.sleep(0)
        await store.set_key("new")
        gate.set()
        await first
        return store

    store = asyncio.run(scenario())
    assert store.error is None
    assert store.data == ["fresh"]


def test_closed_store_ignores_in_flight_response():
    async def scenario():
        gate = asyncio.Event()

        async def fetch(key):
            await gate.wait()
            return ["late"]

        store = RemoteCollectionStore(fetch, initial=["kept"])
        pending = asyncio.ensure_future(store.load())
        await asyncio.sleep(0)
        store.close()
        gate.set()
        applied = await pending
        after_close = await store.load()
        return store, applied, after_close

    store, applied, after_close = asyncio.run(scenario())
    assert applied is False
    assert after_close is False
    assert store.closed is True
    assert store.data == ["kept"]
    assert store.is_loading is False


def test_fetch_all_returns_every_result_by_name():
    async def value(result):
        await asyncio.sleep(0)
        return result

    results = asyncio.run(fetch_all(accounts=value([1]), folders=value([2])))
    assert results == {"accounts": [1], "folders": [2]}


def test_fetch_all_fails_as_a_whole_and_cancels_the_rest():
    cancelled: list[str] = []

    async def slow():
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.append("slow")
            raise
        return ["never"]

    async def failing():
        raise ApiError("folders unavailable")

    async def scenario():
        with pytest.raises(ApiError):
            await fetch_all(messages=slow(), folders=failing())
        await asyncio.sleep(0)

    asyncio.run(scenario())
    assert cancelled == ["slow"]


def test_composite_load_failure_applies_nothing():
    async def ok():
        return [{"id": "m1"}]

    async def broken():
        raise ApiError("500")

    async def fetch(_key):
        return await fetch_all(messages=ok(), folders=broken())

    initial = {"messages": [], "folders": []}
    store = RemoteCollectionStore(fetch, initial=initial)
    asyncio.run(store.load())

    assert store.error is not None
    assert store.data == {"messages": [], "folders": []}
    assert store.loaded is False
