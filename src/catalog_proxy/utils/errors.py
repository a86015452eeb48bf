"""Proxy error taxonomy and structured error output for the CLI."""

from __future__ import annotations

import json
import sys
from typing import Any

from rich.console import Console

console = Console(stderr=True)


class ProxyError(Exception):
    """Base class for errors the dispatcher knows how to map to a response."""

    status_code = 500
    code = "PROXY_ERROR"


class AuthenticationFailed(ProxyError):
    """Upstream login was rejected or returned no usable token."""

    status_code = 502
    code = "AUTH_ERROR"

    def __init__(self, message: str, status: int | None = None, body: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class UpstreamUnavailable(ProxyError):
    """The upstream API could not be reached."""

    status_code = 500
    code = "CONNECTION_ERROR"


class UpstreamRejected(ProxyError):
    """Upstream answered with a non-2xx status."""

    code = "UPSTREAM_REJECTED"

    def __init__(self, status: int, body: Any = None) -> None:
        self.status_code = status
        self.body = body
        super().__init__(f"Upstream API error (HTTP {status}): {upstream_message(body)}")


class NotFound(ProxyError):
    status_code = 404
    code = "NOT_FOUND"


class InvalidPayload(ProxyError):
    status_code = 400
    code = "INVALID_ARGUMENT"


def upstream_message(body: Any) -> str:
    """Pick the most useful human-readable message out of an upstream error body."""
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
        return json.dumps(body, default=str)
    if body is None or body == "":
        return "no response body"
    return str(body)


# Actionable hints keyed by error substring
_ERROR_HINTS: list[tuple[str, str]] = [
    ("401", "Upstream rejected the service identity. Check CATALOG_PROXY_API_EMAIL / _PASSWORD"),
    ("authenticat", "Upstream rejected the service identity. Check CATALOG_PROXY_API_EMAIL / _PASSWORD"),
    ("token", "Login response carried no token. Extend token_paths in config/aliases.yaml"),
    ("timeout", "Request timed out. Try again or raise CATALOG_PROXY_REQUEST_TIMEOUT"),
    ("connect", "Connection error. Check network connectivity and CATALOG_PROXY_API_BASE_URL"),
    ("404", "The product does not exist. Verify the ID"),
    ("invalid product payload", "Invalid argument. Check parameter values and types"),
]


def _get_hint(error_message: str) -> str | None:
    """Match an error message to an actionable hint."""
    lower = error_message.lower()
    for pattern, hint in _ERROR_HINTS:
        if pattern.lower() in lower:
            return hint
    return None


def handle_error(error: Exception) -> None:
    """Handle an error with structured output to stdout and human-readable output to stderr.

    Outputs a JSON error object to stdout for agent consumption:
    {"error": true, "code": "AUTH_ERROR", "message": "...", "hint": "..."}
    """
    message = str(error)
    hint = _get_hint(message)
    code = error.code if isinstance(error, ProxyError) else "RUNTIME_ERROR"

    error_obj: dict[str, object] = {
        "error": True,
        "code": code,
        "message": message,
    }
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
