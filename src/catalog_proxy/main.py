"""Catalog proxy CLI — entry point.

Runs the products proxy server and exposes the same pipeline to operators
from the command line.
"""

from __future__ import annotations

import logging

import typer

from catalog_proxy.commands.auth_cmd import app as auth_app
from catalog_proxy.commands.products_cmd import app as products_app
from catalog_proxy.commands.serve_cmd import serve

app = typer.Typer(
    name="catalog-proxy",
    help="Authenticated, shape-normalizing proxy in front of an upstream product catalog API.",
    no_args_is_help=True,
)

# Register commands
app.command("serve")(serve)
app.add_typer(auth_app, name="auth")
app.add_typer(products_app, name="products")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Catalog proxy — serve, authenticate, and manage products."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
