"""InMemoryStore — zero-config, dict-backed storage for development and testing."""

from __future__ import annotations

import asyncio
import copy
import logging

from jsonkv.stores.base import Store, Value

logger = logging.getLogger(__name__)


class InMemoryStore(Store):
    """In-memory store using a single dict.  Data is lost on process exit.

    Every operation takes the same lock, so concurrent callers never see
    a half-applied mutation.  Values are deep-copied in and out; callers
    cannot change stored data by mutating what they passed or received.
    """

    def __init__(self) -> None:
        self._data: dict[str, Value] = {}
        self._lock = asyncio.Lock()

    async def get_all(self) -> dict[str, Value]:
        async with self._lock:
            result = copy.deepcopy(self._data)
        logger.debug("get_all: %d keys", len(result))
        return result

    async def get(self, key: str) -> Value | None:
        async with self._lock:
            value = self._data.get(key)
            result = copy.deepcopy(value) if value is not None else None
        logger.debug("get %r: %s", key, "found" if result is not None else "not found")
        return result

    async def upsert(self, key: str, value: Value) -> None:
        stored = copy.deepcopy(value)
        async with self._lock:
            self._data[key] = stored
        logger.debug("upsert %r", key)

    async def delete(self, key: str) -> int:
        async with self._lock:
            if key not in self._data:
                logger.debug("delete %r: not in store", key)
                return 0
            del self._data[key]
        logger.debug("delete %r", key)
        return 1

    async def nuke(self) -> None:
        async with self._lock:
            self._data = {}
        logger.debug("nuke: store emptied")
