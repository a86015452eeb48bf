"""Helpers for reading upstream httpx responses."""

from __future__ import annotations

from typing import Any

import httpx


def is_success(response: httpx.Response) -> bool:
    return 200 <= response.status_code < 300


def decode_body(response: httpx.Response) -> Any:
    """Decoded JSON body, the raw text when it is not JSON, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
