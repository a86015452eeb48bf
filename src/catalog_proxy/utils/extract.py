"""Ordered extraction rules over nested JSON payloads.

A rule is a list of dotted paths ("data.tokens.accessToken"); the first path
that resolves to a present value wins. An empty path means the payload itself.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

MISSING: Any = object()


def lookup(data: Any, path: str) -> Any:
    """Resolve a dotted path, returning MISSING when any segment is absent."""
    if not path:
        return data
    current = data
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return MISSING
        current = current[part]
    return current


def first_present(
    data: Any,
    paths: Iterable[str],
    default: Any = None,
    accept: Callable[[Any], bool] | None = None,
) -> Any:
    """Return the value at the first path that is present (and accepted).

    None counts as absent, matching how upstream payloads signal missing fields.
    """
    for path in paths:
        value = lookup(data, path)
        if value is MISSING or value is None:
            continue
        if accept is not None and not accept(value):
            continue
        return value
    return default


def join_paths(containers: Iterable[str], keys: Iterable[str]) -> list[str]:
    """Expand keys under each container, keeping container order first."""
    keys = list(keys)
    return [f"{c}.{k}" if c else k for c in containers for k in keys]
