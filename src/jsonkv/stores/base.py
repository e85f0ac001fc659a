"""Store protocol — the five-operation contract every backing store implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from jsonkv.exceptions import UnsupportedOperationError

# A stored value: the top level is always a JSON object or array.
Value = dict[str, Any] | list[Any]


class Store(ABC):
    """Abstract base for all storage backends.

    The interface is intentionally small so very different engines can
    implement it.  There are no transactions, range queries or secondary
    indexes.

    Consistency is relaxed around deletes: an upsert overlapping an
    in-flight delete of the same key may be superseded by it, and a read
    racing a delete may already observe the key as gone.
    """

    @abstractmethod
    async def get_all(self) -> dict[str, Value]:
        """Return every entry as an unordered ``{key: value}`` dict."""
        ...

    @abstractmethod
    async def get(self, key: str) -> Value | None:
        """Return the stored value, or ``None`` if the key is absent."""
        ...

    @abstractmethod
    async def upsert(self, key: str, value: Value) -> None:
        """Insert *value* under *key*, replacing any previous value."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> int:
        """Remove *key*.  Returns ``1`` if it was present, ``0`` otherwise."""
        ...

    async def nuke(self) -> None:
        """Remove every entry.  Stores that cannot do this keep the default."""
        raise UnsupportedOperationError(
            "nuke", f"{type(self).__name__} does not support deleting all keys."
        )

    async def close(self) -> None:
        """Release engine resources.  No-op unless the engine holds any."""

    async def __aenter__(self) -> Store:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
