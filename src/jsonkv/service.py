"""KeyValueService — one validator and one backing store behind a single unit."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from jsonkv.exceptions import UnsupportedOperationError
from jsonkv.stores.factory import StoreFactory
from jsonkv.stores.memory import InMemoryStore
from jsonkv.validation import KeyValidator

if TYPE_CHECKING:
    from jsonkv.config import Settings
    from jsonkv.stores.base import Store, Value

NUKE_DISALLOWED = (
    "Nuking this store is not allowed or you didn't say the magic word "
    '(send {"nuke": true}).'
)


class KeyValueService:
    """Validates input and forwards it to the store it owns.

    Every key (and value) is validated before the store is touched, so a
    :class:`~jsonkv.exceptions.ValidationError` means the store never saw
    the request.  Store failures propagate unchanged as
    :class:`~jsonkv.exceptions.StoreError`.

    Services are independent: each one owns its store, and several can
    live in the same process.

    Parameters:
        store:      Backing store.  Defaults to :class:`InMemoryStore`.
        validator:  Key/value validator.  Defaults to a 1024-byte key limit.
        allow_nuke: Whether :meth:`nuke` may run at all.
        logger:     Logger to report through.  Defaults to this module's.
    """

    def __init__(
        self,
        store: Store | None = None,
        *,
        validator: KeyValidator | None = None,
        allow_nuke: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store: Store = store or InMemoryStore()
        self._validator = validator or KeyValidator()
        self._allow_nuke = allow_nuke
        self._logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings, logger: logging.Logger | None = None) -> KeyValueService:
        """Build the configured store and wrap it in a service."""
        store = StoreFactory.create(settings.store.type, settings.store.options)
        return cls(
            store,
            validator=KeyValidator(max_key_length=settings.max_key_length),
            allow_nuke=settings.allow_nuke,
            logger=logger,
        )

    # ── operations ───────────────────────────────────────────

    async def get_all(self) -> dict[str, Value]:
        return await self._store.get_all()

    async def get(self, key: str) -> Value | None:
        self._validator.validate_key(key)
        value = await self._store.get(key)
        if value is None:
            self._logger.debug("Key `%s` not found.", key)
        return value

    async def upsert(self, key: str, value: Any) -> None:
        self._validator.validate_key(key)
        self._validator.validate_value(value)
        await self._store.upsert(key, value)
        self._logger.debug("Upsert of key `%s` successful.", key)

    async def delete(self, key: str) -> int:
        self._validator.validate_key(key)
        count = await self._store.delete(key)
        if count:
            self._logger.debug("Delete of key `%s` successful.", key)
        else:
            self._logger.debug("Key `%s` not found.", key)
        return count

    async def nuke(self, payload: Any) -> None:
        """Delete everything, if enabled and confirmed with ``{"nuke": true}``."""
        confirmed = isinstance(payload, dict) and payload.get("nuke") is True
        if not (self._allow_nuke and confirmed):
            raise UnsupportedOperationError("nuke", NUKE_DISALLOWED)
        self._logger.warning("DELETING ALL BACKING STORE CONTENT")
        await self._store.nuke()

    # ── lifecycle ────────────────────────────────────────────

    async def close(self) -> None:
        await self._store.close()

    async def __aenter__(self) -> KeyValueService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def store(self) -> Store:
        return self._store

    @property
    def validator(self) -> KeyValidator:
        return self._validator

    @property
    def allow_nuke(self) -> bool:
        return self._allow_nuke
