"""Pagination envelope normalization for upstream list responses."""

from __future__ import annotations

import math
from typing import Any

from catalog_proxy.config import AliasRules
from catalog_proxy.utils.extract import first_present, join_paths

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_TOTAL = 0
DEFAULT_TOTAL_PAGES = 1


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def build_pagination(payload: Any, rules: AliasRules) -> dict[str, int]:
    """Read page/limit/total/totalPages from whichever aliases the upstream used.

    Args:
        payload: The decoded upstream list response.
        rules: Alias rules naming the containers and keys to search.

    Returns:
        A dict with exactly the keys page, limit, total, totalPages.
        totalPages falls back to ceil(total / limit), never below 1.
    """
    values: dict[str, int | None] = {}
    for field in ("page", "limit", "total", "totalPages"):
        paths = join_paths(rules.pagination_containers, rules.pagination_fields.get(field, []))
        values[field] = _as_int(
            first_present(payload, paths, accept=lambda v: _as_int(v) is not None)
        )

    page = values["page"] if values["page"] is not None else DEFAULT_PAGE
    limit = values["limit"] if values["limit"] is not None else DEFAULT_LIMIT
    total = values["total"] if values["total"] is not None else DEFAULT_TOTAL

    total_pages = values["totalPages"]
    if total_pages is None:
        total_pages = math.ceil(total / limit) if limit > 0 else DEFAULT_TOTAL_PAGES

    return {"page": page, "limit": limit, "total": total, "totalPages": max(DEFAULT_TOTAL_PAGES, total_pages)}
