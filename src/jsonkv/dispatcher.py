"""Dispatcher — maps store operations to HTTP status codes and bodies.

The dispatcher knows nothing about a web framework.  It takes a decoded
key, the raw request body and its content type, and returns a
:class:`Response`.  Store failures are not handled here: a
:class:`~jsonkv.exceptions.StoreError` propagates to whatever generic
error boundary the caller provides.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jsonkv.exceptions import UnsupportedOperationError, ValidationError
from jsonkv.service import NUKE_DISALLOWED, KeyValueService

VERSION_PREFIX = "/v1"

_KEY_PREFIX = f"{VERSION_PREFIX}/key/"

JSON = "application/json"
TEXT = "text/plain"


@dataclass(frozen=True)
class Response:
    """Status code and body produced for one request.

    Attributes:
        status:     HTTP status code.
        body:       A JSON-serialisable value when ``media_type`` is JSON,
                    otherwise a human-readable message.
        media_type: ``application/json`` or ``text/plain``.
    """

    status: int
    body: Any = ""
    media_type: str = TEXT

    # ── Factory helpers ──────────────────────────────────────

    @staticmethod
    def json(value: Any, status: int = 200) -> Response:
        return Response(status=status, body=value, media_type=JSON)

    @staticmethod
    def text(message: str, status: int = 200) -> Response:
        return Response(status=status, body=message, media_type=TEXT)


class Dispatcher:
    """Translates requests into service calls and results into responses.

    Parameters:
        service: The service instance requests are dispatched to.
    """

    def __init__(self, service: KeyValueService) -> None:
        self._service = service

    @property
    def service(self) -> KeyValueService:
        return self._service

    # ── operations ───────────────────────────────────────────

    async def get_all(self) -> Response:
        return Response.json(await self._service.get_all())

    async def get(self, key: str) -> Response:
        try:
            value = await self._service.get(key)
        except ValidationError as e:
            return Response.text(str(e), 400)
        if value is None:
            return Response.text(f"No value for key {key}", 404)
        return Response.json(value)

    async def upsert(self, key: str, body: bytes | None, content_type: str | None) -> Response:
        try:
            value = self._service.validator.parse_value(body, content_type)
            await self._service.upsert(key, value)
        except ValidationError as e:
            return Response.text(str(e), 400)
        return Response.text(f"Stored `{key}`.", 201)

    async def delete(self, key: str) -> Response:
        try:
            count = await self._service.delete(key)
        except ValidationError as e:
            return Response.text(str(e), 400)
        if not count:
            return Response.text(f"Key `{key}` was not in the store!", 404)
        return Response.text(f"Deleted {key}")

    async def nuke(self, body: bytes | None, content_type: str | None) -> Response:
        try:
            payload = self._service.validator.parse_body(body, content_type)
            await self._service.nuke(payload)
        except ValidationError:
            return Response.text(NUKE_DISALLOWED, 400)
        except UnsupportedOperationError as e:
            return Response.text(e.reason, 400)
        return Response.text("Deleted all keys.")

    # ── routing ──────────────────────────────────────────────

    async def dispatch(
        self,
        method: str,
        path: str,
        body: bytes | None = None,
        content_type: str | None = None,
    ) -> Response:
        """Route an already percent-decoded *path* to an operation.

        Unknown paths answer 404 and known paths with an unsupported
        method answer 405.
        """
        method = method.upper()

        if path == f"{VERSION_PREFIX}/all":
            if method == "GET":
                return await self.get_all()
            return _method_not_allowed(method, path)

        if path == f"{VERSION_PREFIX}/nuke":
            if method == "POST":
                return await self.nuke(body, content_type)
            return _method_not_allowed(method, path)

        if path.startswith(_KEY_PREFIX):
            key = path[len(_KEY_PREFIX) :]
            if method == "GET":
                return await self.get(key)
            if method == "PUT":
                return await self.upsert(key, body, content_type)
            if method == "DELETE":
                return await self.delete(key)
            return _method_not_allowed(method, path)

        return Response.text(f"Cannot {method} {path}", 404)


def _method_not_allowed(method: str, path: str) -> Response:
    return Response.text(f"Method {method} not allowed for {path}", 405)
