"""Shared test fixtures."""

import pytest

from jsonkv import Dispatcher, KeyValueService
from jsonkv.stores import InMemoryStore, SQLiteStore, Store
from jsonkv.stores.base import Value


class RecordingStore(Store):
    """In-memory store that records every call made to it."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self._inner = InMemoryStore()

    async def get_all(self) -> dict[str, Value]:
        self.calls.append(("get_all",))
        return await self._inner.get_all()

    async def get(self, key: str) -> Value | None:
        self.calls.append(("get", key))
        return await self._inner.get(key)

    async def upsert(self, key: str, value: Value) -> None:
        self.calls.append(("upsert", key, value))
        await self._inner.upsert(key, value)

    async def delete(self, key: str) -> int:
        self.calls.append(("delete", key))
        return await self._inner.delete(key)

    async def nuke(self) -> None:
        self.calls.append(("nuke",))
        await self._inner.nuke()


@pytest.fixture(params=["memory", "sqlite-memory", "sqlite-file"])
async def any_store(request, tmp_path):
    """Every shipped backing store, so the contract tests run against each."""
    if request.param == "memory":
        store = InMemoryStore()
    elif request.param == "sqlite-memory":
        store = SQLiteStore(":memory:")
    else:
        store = SQLiteStore(str(tmp_path / "kv.db"), pool_size=4)
    yield store
    await store.close()


@pytest.fixture
def recording_store():
    return RecordingStore()


@pytest.fixture
def service(recording_store):
    return KeyValueService(recording_store, allow_nuke=True)


@pytest.fixture
def dispatcher(service):
    return Dispatcher(service)
