"""Custom exceptions for the jsonkv package."""

from __future__ import annotations


class KeyValueError(Exception):
    """Base exception for all key-value store errors."""


class ValidationError(KeyValueError):
    """Raised when a key, value or request body is malformed.

    Always answered with 400 and never reaches a store.
    """


class StoreError(KeyValueError):
    """Raised when a backing store operation fails."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        msg = f"Store error during '{operation}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class UnsupportedOperationError(KeyValueError):
    """Raised when an operation is disabled or not supported by a store."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(reason)
