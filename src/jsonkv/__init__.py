"""jsonkv — a small JSON key-value store over HTTP.

Values are JSON objects or arrays stored under string keys in a
pluggable backing store (in-memory or SQLite).
"""

from jsonkv.dispatcher import VERSION_PREFIX, Dispatcher, Response
from jsonkv.exceptions import (
    KeyValueError,
    StoreError,
    UnsupportedOperationError,
    ValidationError,
)
from jsonkv.service import KeyValueService
from jsonkv.stores import InMemoryStore, SQLiteStore, Store, StoreFactory
from jsonkv.validation import KeyValidator

__all__ = [
    "VERSION_PREFIX",
    "Dispatcher",
    "InMemoryStore",
    "KeyValidator",
    "KeyValueError",
    "KeyValueService",
    "Response",
    "SQLiteStore",
    "Store",
    "StoreError",
    "StoreFactory",
    "UnsupportedOperationError",
    "ValidationError",
]
