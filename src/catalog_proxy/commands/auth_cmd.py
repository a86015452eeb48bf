"""CLI commands for authentication checks."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from catalog_proxy.auth import Authenticator, CredentialCache
from catalog_proxy.config import get_config
from catalog_proxy.utils.errors import ProxyError, handle_error
from catalog_proxy.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="auth", help="Check the upstream service identity.")


@app.callback()
def main() -> None:
    """Authentication commands."""


@app.command()
def login(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Log in upstream with the configured identity and display token status."""
    config = get_config()
    cache = CredentialCache()
    auth = Authenticator(config, cache)

    try:
        console.print(f"Authenticating against [bold]{config.login_url}[/bold]...", style="yellow")
        auth.authenticate()
        status = cache.status()
        result = {
            "status": "authenticated",
            "expires_at": str(status.expires_at),
            "seconds_remaining": status.seconds_remaining,
        }
        print_output(result, output, title="Authentication")
    except ProxyError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        auth.close()
