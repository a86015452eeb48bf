"""HTTP client for the upstream catalog API.

Handles header injection and the single re-authentication retry on 401.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from catalog_proxy.auth import Authenticator
from catalog_proxy.config import Config
from catalog_proxy.utils.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


class UpstreamClient:
    """Authenticated client for the upstream catalog API.

    Never raises on an HTTP status. The only failure it recovers from is a
    401, and only once per call: the credential is dropped, a new one is
    fetched, and the request is replayed a single time.
    """

    def __init__(self, config: Config, auth: Authenticator, verbose: bool = False) -> None:
        self._config = config
        self._auth = auth
        self._verbose = verbose
        self._http = httpx.Client(timeout=config.settings.request_timeout)

    def request(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | list | None = None,
        params: dict[str, str] | str | None = None,
    ) -> httpx.Response:
        """Make an authenticated API request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE).
            path: API path (e.g. "/admin/products"). Appended to the base URL.
            body: JSON request body.
            params: Query parameters, as a dict or an already-encoded string.

        Returns:
            The httpx.Response of the first attempt, or of the retry after a 401.

        Raises:
            UpstreamUnavailable: The request could not be sent.
            AuthenticationFailed: A credential could not be obtained.
        """
        url = self._config.api_url(path)

        token = self._current_token()
        response = self._send(method, url, token, body, params)

        if response.status_code == 401:
            logger.warning("Got 401, re-authenticating and retrying once...")
            self._auth.cache.invalidate()
            token = self._auth.authenticate().token
            response = self._send(method, url, token, body, params)

        return response

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for GET requests."""
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for POST requests."""
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for PUT requests."""
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for DELETE requests."""
        return self.request("DELETE", path, **kwargs)

    def _current_token(self) -> str:
        credential = self._auth.cache.get()
        if credential is None:
            credential = self._auth.authenticate()
        return credential.token

    def _send(
        self,
        method: str,
        url: str,
        token: str,
        body: dict[str, Any] | list | None,
        params: dict[str, str] | str | None,
    ) -> httpx.Response:
        if self._verbose:
            logger.info(f"{method} {url}")
            if body:
                logger.info(f"Body: {body}")

        try:
            response = self._http.request(
                method=method,
                url=url,
                headers=self._build_headers(token),
                json=body,
                params=params or None,
            )
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"Request to {url} failed: {e}") from e

        if self._verbose:
            logger.info(f"Response: {response.status_code}")
        return response

    def _build_headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()
        self._auth.close()
