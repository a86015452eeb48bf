"""FastAPI application exposing the products proxy over HTTP.

Usage:
    catalog-proxy serve
    uvicorn catalog_proxy.server:create_app --factory
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.concurrency import run_in_threadpool

from catalog_proxy.config import get_config
from catalog_proxy.dispatcher import ProxyDispatcher
from catalog_proxy.services.products import build_service

logger = logging.getLogger(__name__)

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    dispatcher: ProxyDispatcher | None = None,
    on_shutdown: Callable[[], None] | None = None,
) -> FastAPI:
    """Create the FastAPI app.

    Without an explicit dispatcher one is built from get_config(), and its
    HTTP clients are closed on shutdown.
    """
    if dispatcher is None:
        config = get_config()
        client, service = build_service(config)
        dispatcher = ProxyDispatcher(service, allow_origin=config.settings.cors_allow_origin)
        on_shutdown = on_shutdown or client.close

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Products proxy started")
        yield
        if on_shutdown is not None:
            on_shutdown()
        logger.info("Products proxy stopped")

    app = FastAPI(title="catalog-proxy", lifespan=lifespan, docs_url=None, redoc_url=None)

    @app.api_route("/{path:path}", methods=PROXY_METHODS)
    async def proxy(request: Request, path: str) -> Response:
        body = await request.body()
        # The dispatcher blocks on upstream I/O; keep it off the event loop.
        result = await run_in_threadpool(
            dispatcher.dispatch,
            request.method,
            request.url.path,
            request.url.query,
            body or None,
        )
        return Response(content=result.content(), status_code=result.status_code, headers=result.headers)

    return app
