"""CLI command that runs the HTTP proxy."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
import uvicorn

from catalog_proxy.config import get_config


def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address (default from config)")] = None,
    port: Annotated[int | None, typer.Option("--port", help="Bind port (default from config)")] = None,
    reload: Annotated[bool, typer.Option("--reload", help="Reload on code changes")] = False,
) -> None:
    """Serve /products on HTTP."""
    settings = get_config().settings
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    uvicorn.run(
        "catalog_proxy.server:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )
