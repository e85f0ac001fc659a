"""Store factory for creating backing stores from configuration.

Uses the Registry pattern to map type strings to store classes,
allowing extensibility without modifying factory code.
"""

from __future__ import annotations

from typing import Any, ClassVar

from jsonkv.stores.base import Store
from jsonkv.stores.memory import InMemoryStore
from jsonkv.stores.sqlite import SQLiteStore


class StoreFactoryError(Exception):
    """Raised when store creation fails."""

    pass


class StoreFactory:
    """Creates store instances from configuration.

    Store types are registered at class level and can be extended via the
    `register` class method.  Options are passed to the store class as
    keyword arguments.

    Example:
        store = StoreFactory.create("sqlite", {"db_path": "kv.db", "pool_size": 8})
    """

    # Class-level registry mapping type strings to store classes
    _registry: ClassVar[dict[str, type[Store]]] = {
        "memory": InMemoryStore,
        "sqlite": SQLiteStore,
    }

    @classmethod
    def register(cls, type_name: str, store_class: type[Store]) -> None:
        """Register a custom store type.

        Args:
            type_name: Type string to use in configuration
            store_class: Store class to instantiate

        Raises:
            ValueError: If store_class is not a Store subclass
        """
        if not (isinstance(store_class, type) and issubclass(store_class, Store)):
            raise ValueError(f"{store_class!r} is not a Store subclass")
        cls._registry[type_name] = store_class

    @classmethod
    def registered_types(cls) -> list[str]:
        """Return list of registered store type names."""
        return list(cls._registry.keys())

    @classmethod
    def create(cls, type_name: str, options: dict[str, Any] | None = None) -> Store:
        """Create a store of the given type.

        Args:
            type_name: Registered store type
            options: Keyword arguments for the store constructor

        Returns:
            New store instance

        Raises:
            StoreFactoryError: If the type is unknown or the options are invalid
        """
        store_class = cls._registry.get(type_name)
        if store_class is None:
            available = ", ".join(sorted(cls.registered_types()))
            raise StoreFactoryError(
                f"Unknown store type: '{type_name}'. Available types: {available}"
            )

        try:
            return store_class(**(options or {}))
        except (TypeError, ValueError) as e:
            raise StoreFactoryError(f"Failed to create store of type '{type_name}': {e}") from e
