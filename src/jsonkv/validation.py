"""Key and value validation, applied before any store operation."""

from __future__ import annotations

import json
from typing import Any

from jsonkv.exceptions import ValidationError
from jsonkv.stores.base import Value

DEFAULT_MAX_KEY_LENGTH = 1024
DEFAULT_MAX_DEPTH = 256


def is_json_content_type(content_type: str | None) -> bool:
    """Return ``True`` for ``application/json`` and ``application/*+json``."""
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or (
        media_type.startswith("application/") and media_type.endswith("+json")
    )


def _reject_constant(name: str) -> Any:
    # json.loads accepts NaN, Infinity and -Infinity; JSON does not.
    raise ValidationError(f"Request body is not valid JSON: {name} is not a JSON value.")


def _nesting_depth(value: Any) -> int:
    depth = 0
    stack = [(value, 1)]
    while stack:
        node, level = stack.pop()
        if isinstance(node, dict):
            children = node.values()
        elif isinstance(node, list):
            children = node
        else:
            continue
        depth = max(depth, level)
        stack.extend((child, level + 1) for child in children)
    return depth


class KeyValidator:
    """Checks keys and request bodies.

    Keys must be non-empty ASCII without NUL characters and no longer
    than ``max_key_length`` bytes.  Values must be a JSON object or array
    at the top level, nested at most ``max_depth`` levels, and free of
    ``NaN`` and infinities.

    Parameters:
        max_key_length: Longest accepted key, in bytes.
        max_depth:      Deepest accepted object/array nesting.
    """

    def __init__(
        self,
        max_key_length: int = DEFAULT_MAX_KEY_LENGTH,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if max_key_length < 1:
            raise ValueError(f"max_key_length must be at least 1, got {max_key_length}")
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.max_key_length = max_key_length
        self.max_depth = max_depth

    def validate_key(self, key: str) -> str:
        if not key:
            raise ValidationError("Key must not be empty.")
        if not key.isascii():
            raise ValidationError("Key must contain only ASCII characters.")
        if "\x00" in key:
            raise ValidationError("Key must not contain NUL characters.")
        if len(key) > self.max_key_length:
            raise ValidationError(
                f"Key is {len(key)} bytes long; the maximum is {self.max_key_length}."
            )
        return key

    def validate_value(self, value: Any) -> Value:
        if not isinstance(value, (dict, list)):
            kind = "null" if value is None else type(value).__name__
            raise ValidationError(f"Value must be a JSON object or array, got {kind}.")
        if _nesting_depth(value) > self.max_depth:
            raise ValidationError(f"Value is nested more than {self.max_depth} levels deep.")
        try:
            # Responses are rendered with allow_nan=False.
            json.dumps(value, allow_nan=False)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"Value is not representable as JSON: {e}") from e
        return value

    def parse_body(self, raw: bytes | None, content_type: str | None) -> Any:
        """Decode a JSON request body without checking its top-level type."""
        if not is_json_content_type(content_type):
            raise ValidationError("Request type must be `application/json`.")
        if not raw or not raw.strip():
            raise ValidationError("Request body must not be empty.")
        try:
            return json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
        except UnicodeDecodeError as e:
            raise ValidationError(f"Request body is not valid UTF-8: {e}") from e
        except json.JSONDecodeError as e:
            raise ValidationError(f"Request body is not valid JSON: {e.msg}") from e
        except RecursionError as e:
            raise ValidationError("Request body is nested too deeply.") from e

    def parse_value(self, raw: bytes | None, content_type: str | None) -> Value:
        """Decode a request body and check it is a storable value."""
        return self.validate_value(self.parse_body(raw, content_type))
