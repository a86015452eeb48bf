"""Product CRUD service against the upstream admin API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from catalog_proxy.auth import Authenticator, CredentialCache
from catalog_proxy.client import UpstreamClient
from catalog_proxy.config import Config
from catalog_proxy.transform import ProductTransformer
from catalog_proxy.utils.errors import UpstreamRejected
from catalog_proxy.utils.http import decode_body, is_success

logger = logging.getLogger(__name__)

PRODUCTS_PATH = "/admin/products"


@dataclass
class ServiceResult:
    """Upstream status paired with the canonical body."""
    status_code: int
    body: Any


class ProductService:
    """Runs product operations upstream and reshapes the results."""

    def __init__(self, client: UpstreamClient, transformer: ProductTransformer) -> None:
        self._client = client
        self._transformer = transformer

    def list(self, params: dict[str, str] | str | None = None) -> ServiceResult:
        """List products; params are forwarded to upstream untouched."""
        response = self._client.get(PRODUCTS_PATH, params=params)
        payload = self._checked(response)
        return ServiceResult(response.status_code, self._transformer.page(payload))

    def get(self, product_id: str) -> ServiceResult:
        response = self._client.get(_product_path(product_id))
        return self._single(response)

    def create(self, data: Any) -> ServiceResult:
        body = self._transformer.create_payload(data)
        response = self._client.post(PRODUCTS_PATH, body=body)
        return self._single(response)

    def update(self, product_id: str, data: Any) -> ServiceResult:
        body = self._transformer.update_payload(data)
        response = self._client.put(_product_path(product_id), body=body)
        return self._single(response)

    def delete(self, product_id: str) -> ServiceResult:
        """Delete a product. The upstream body is passed back as-is."""
        response = self._client.delete(_product_path(product_id))
        return ServiceResult(response.status_code, self._checked(response))

    def _single(self, response: httpx.Response) -> ServiceResult:
        """Normalize a one-product response; bodies without a product pass through."""
        payload = self._checked(response)
        product = self._transformer.single_product(payload)
        return ServiceResult(response.status_code, payload if product is None else product)

    def _checked(self, response: httpx.Response) -> Any:
        """Decode the body, raising UpstreamRejected on any non-2xx status."""
        body = decode_body(response)
        if not is_success(response):
            logger.warning(f"Upstream rejected request (HTTP {response.status_code})")
            raise UpstreamRejected(response.status_code, body)
        return body


def _product_path(product_id: str) -> str:
    return f"{PRODUCTS_PATH}/{quote(str(product_id), safe='')}"


def build_service(config: Config, verbose: bool = False) -> tuple[UpstreamClient, ProductService]:
    """Wire cache, authenticator, client and transformer for one process."""
    auth = Authenticator(config, CredentialCache())
    client = UpstreamClient(config, auth, verbose=verbose)
    return client, ProductService(client, ProductTransformer(config.aliases))
