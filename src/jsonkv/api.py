"""FastAPI adapter: HTTP routes, the generic error boundary and the app factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.responses import Response as HTTPResponse

from jsonkv.config import Settings, get_settings
from jsonkv.dispatcher import JSON, VERSION_PREFIX, Dispatcher, Response
from jsonkv.exceptions import StoreError
from jsonkv.service import KeyValueService

logger = logging.getLogger(__name__)


def to_http(response: Response) -> HTTPResponse:
    """Render a dispatcher :class:`Response` as a Starlette response."""
    if response.media_type == JSON:
        return JSONResponse(content=response.body, status_code=response.status)
    return PlainTextResponse(content=response.body, status_code=response.status)


async def store_error_handler(request: Request, exc: Exception) -> HTTPResponse:
    """Answer any store failure with 500 and the error detail."""
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return PlainTextResponse(content=str(exc), status_code=500)


def install_error_handlers(app: FastAPI) -> None:
    """Register the generic failure boundary on *app*."""
    app.add_exception_handler(StoreError, store_error_handler)


def build_router(dispatcher: Dispatcher) -> APIRouter:
    """Create the versioned routes for one service instance.

    Mount the router on any app (or several routers under different
    prefixes); call :func:`install_error_handlers` on that app so store
    failures become 500 responses.
    """
    router = APIRouter(prefix=VERSION_PREFIX, tags=["kv"])

    @router.get("/all")
    async def get_all() -> HTTPResponse:
        return to_http(await dispatcher.get_all())

    @router.post("/nuke")
    async def nuke(request: Request) -> HTTPResponse:
        body = await request.body()
        return to_http(await dispatcher.nuke(body, request.headers.get("content-type")))

    # ``:path`` so percent-encoded slashes survive as part of the key.
    @router.get("/key/{key:path}")
    async def get_key(key: str) -> HTTPResponse:
        return to_http(await dispatcher.get(key))

    @router.put("/key/{key:path}")
    async def put_key(key: str, request: Request) -> HTTPResponse:
        body = await request.body()
        return to_http(await dispatcher.upsert(key, body, request.headers.get("content-type")))

    @router.delete("/key/{key:path}")
    async def delete_key(key: str) -> HTTPResponse:
        return to_http(await dispatcher.delete(key))

    return router


def create_application(settings: Settings | None = None, service: KeyValueService | None = None) -> FastAPI:
    """Create and configure the FastAPI app.

    The app owns its service: the store is built from *settings* (unless a
    *service* is passed in) and closed on shutdown.
    """
    settings = settings or get_settings()
    service = service or KeyValueService.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Using %s backing store", type(service.store).__name__)
        try:
            yield
        finally:
            await service.close()

    app = FastAPI(
        title=settings.app_name,
        description="JSON key-value store.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.service = service
    install_error_handlers(app)
    app.include_router(build_router(Dispatcher(service)))
    return app
