"""Storage backends for the key-value service."""

from jsonkv.stores.base import Store, Value
from jsonkv.stores.factory import StoreFactory, StoreFactoryError
from jsonkv.stores.memory import InMemoryStore
from jsonkv.stores.sqlite import SQLiteStore

__all__ = ["InMemoryStore", "SQLiteStore", "Store", "StoreFactory", "StoreFactoryError", "Value"]
