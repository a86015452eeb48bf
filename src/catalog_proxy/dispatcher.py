"""Request routing for the products proxy.

Turns an inbound (method, path, query, body) into a service call and maps
every outcome, including failures, onto a JSON response with CORS headers.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from catalog_proxy.services.products import ProductService, ServiceResult
from catalog_proxy.utils.errors import InvalidPayload, NotFound, ProxyError, UpstreamRejected, upstream_message

logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"
RESOURCE_SEGMENT = "products"


@dataclass
class ProxyResponse:
    """Status, JSON-serializable body (None means no content), and headers."""
    status_code: int
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)

    def content(self) -> bytes:
        if self.body is None:
            return b""
        return json.dumps(self.body, default=str).encode()


class ProxyDispatcher:
    """Routes products requests to the ProductService."""

    def __init__(self, service: ProductService, allow_origin: str = "*") -> None:
        self._service = service
        self._cors = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
        }

    def dispatch(
        self,
        method: str,
        path: str,
        query: str = "",
        body: bytes | str | None = None,
    ) -> ProxyResponse:
        """Handle one inbound request.

        Args:
            method: HTTP method of the inbound request.
            path: Request path; routing keys off its last "products" segment.
            query: Raw query string, forwarded verbatim on list.
            body: Raw request body, parsed as JSON for writes.

        Returns:
            The response to send back. Never raises.
        """
        method = method.upper()
        if method == "OPTIONS":
            return ProxyResponse(200, None, dict(self._cors))

        logger.info(f"{method} request to products proxy: {path}")
        try:
            result = self._route(method, path, query, body)
        except UpstreamRejected as e:
            return self._rejected(e)
        except ProxyError as e:
            if e.status_code >= 500:
                logger.error(f"Error in products proxy: {e}")
            return self._error(e.status_code, str(e))
        except Exception as e:
            logger.exception("Unhandled error in products proxy")
            return self._error(500, str(e))

        return self._json(result.status_code, result.body)

    def _route(self, method: str, path: str, query: str, body: bytes | str | None) -> ServiceResult:
        product_id = _match(path)

        if product_id is None:
            if method == "GET":
                return self._service.list(query or None)
            if method == "POST":
                return self._service.create(_parse_json(body))
        else:
            if method == "GET":
                return self._service.get(product_id)
            if method == "PUT":
                return self._service.update(product_id, _parse_json(body))
            if method == "DELETE":
                return self._service.delete(product_id)

        raise NotFound("Endpoint not found")

    def _json(self, status_code: int, body: Any) -> ProxyResponse:
        headers = dict(self._cors)
        headers["Content-Type"] = "application/json"
        return ProxyResponse(status_code, body, headers)

    def _error(self, status_code: int, message: str) -> ProxyResponse:
        return self._json(status_code, {"error": message})

    def _rejected(self, error: UpstreamRejected) -> ProxyResponse:
        """Upstream status and message, with the upstream JSON body kept under details."""
        body: dict[str, Any] = {"error": upstream_message(error.body)}
        if isinstance(error.body, (dict, list)):
            body["details"] = error.body
        return self._json(error.status_code, body)


def _match(path: str) -> str | None:
    """Return the product id in the path, None for the collection.

    Raises NotFound when the path has no products segment or goes deeper
    than one id.
    """
    segments = [s for s in path.split("/") if s]
    if RESOURCE_SEGMENT not in segments:
        raise NotFound("Endpoint not found")
    index = len(segments) - 1 - segments[::-1].index(RESOURCE_SEGMENT)
    tail = segments[index + 1:]
    if len(tail) > 1:
        raise NotFound("Endpoint not found")
    return tail[0] if tail else None


def _parse_json(body: bytes | str | None) -> Any:
    if body is None or body in (b"", ""):
        raise InvalidPayload("Request body is required")
    try:
        return json.loads(body)
    except ValueError as e:
        raise InvalidPayload(f"Request body is not valid JSON: {e}") from e
