"""Mapping between the canonical product contract and upstream payloads.

Outbound payloads are validated and trimmed to the fields upstream accepts.
Inbound payloads are read through the ordered alias rules so the upstream's
key naming and nesting never leak to callers.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from catalog_proxy.config import AliasRules
from catalog_proxy.models.products import CreateProductRequest, UpdateProductRequest
from catalog_proxy.utils.errors import InvalidPayload
from catalog_proxy.utils.extract import first_present
from catalog_proxy.utils.pagination import build_pagination

# Canonical field -> default when no alias is present. Fields mapped to
# OMIT are left out of the output entirely when missing.
OMIT: Any = object()
PRODUCT_DEFAULTS: dict[str, Any] = {
    "id": OMIT,
    "name": OMIT,
    "description": OMIT,
    "price": OMIT,
    "promotionalPrice": OMIT,
    "isPromotionActive": False,
    "stockQuantity": OMIT,
    "images": OMIT,
    "isActive": OMIT,
    "createdAt": OMIT,
    "updatedAt": OMIT,
}


def _is_list(value: Any) -> bool:
    return isinstance(value, list)


def _is_dict(value: Any) -> bool:
    return isinstance(value, dict)


class ProductTransformer:
    """Converts product payloads in both directions."""

    def __init__(self, rules: AliasRules | None = None) -> None:
        self._rules = rules or AliasRules()

    # ── Outbound ─────────────────────────────────────────────────────

    def create_payload(self, data: Any) -> dict[str, Any]:
        """Validate a canonical create body and emit the upstream payload.

        isActive defaults to true and images to [] when the caller omits them.
        """
        request = _validate(CreateProductRequest, data)
        return request.model_dump(by_alias=True, exclude_none=True)

    def update_payload(self, data: Any) -> dict[str, Any]:
        """Validate a canonical partial update; only fields the caller set survive."""
        request = _validate(UpdateProductRequest, data)
        return request.model_dump(by_alias=True, exclude_unset=True)

    # ── Inbound ──────────────────────────────────────────────────────

    def product(self, raw: Any) -> dict[str, Any]:
        """Normalize one raw upstream product to the canonical shape."""
        if not isinstance(raw, dict):
            raise ValueError(f"Expected a product object, got {type(raw).__name__}")

        product: dict[str, Any] = {}
        for field, default in PRODUCT_DEFAULTS.items():
            value = first_present(raw, self._rules.product_fields.get(field, [field]), default=OMIT)
            if value is OMIT:
                value = default
            if value is OMIT:
                continue
            product[field] = value

        if "id" in product:
            product["id"] = str(product["id"])
        product["images"] = self.images(product.get("images"))
        return product

    def images(self, raw: Any) -> list[str]:
        """Flatten strings or {url: ...} objects to an ordered list of URLs."""
        if not isinstance(raw, list):
            return []
        urls: list[str] = []
        for item in raw:
            if isinstance(item, str):
                urls.append(item)
            elif isinstance(item, dict):
                url = first_present(item, self._rules.image_url_keys)
                if isinstance(url, str):
                    urls.append(url)
        return urls

    def product_list(self, payload: Any) -> list[dict[str, Any]]:
        """Locate the product list in an upstream list response and normalize it."""
        if isinstance(payload, list):
            items = payload
        else:
            items = first_present(payload, self._rules.product_list_paths, default=[], accept=_is_list)
        return [self.product(item) for item in items if isinstance(item, dict)]

    def single_product(self, payload: Any) -> dict[str, Any] | None:
        """Locate one product in a create/update/get response and normalize it.

        Returns None when the response carries no product, e.g. a bare
        {"success": true, "message": ...} acknowledgement.
        """
        raw = first_present(payload, self._rules.product_paths, default=payload, accept=_is_dict)
        if not self.is_product(raw):
            return None
        return self.product(raw)

    def is_product(self, raw: Any) -> bool:
        """True when raw has a value under any canonical product field alias."""
        if not isinstance(raw, dict):
            return False
        return any(
            first_present(raw, self._rules.product_fields.get(field, [field])) is not None
            for field in PRODUCT_DEFAULTS
        )

    def page(self, payload: Any) -> dict[str, Any]:
        """Build the canonical {data, pagination} list envelope."""
        return {
            "data": self.product_list(payload),
            "pagination": build_pagination(payload, self._rules),
        }


def _validate(model: type, data: Any) -> Any:
    if not isinstance(data, dict):
        raise InvalidPayload("Invalid product payload: request body must be a JSON object")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise InvalidPayload(f"Invalid product payload: {problems}") from e
