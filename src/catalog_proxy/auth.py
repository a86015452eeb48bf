"""Service-identity authentication against the upstream catalog API.

Handles login, credential caching, and expiry tracking.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable

import httpx

from catalog_proxy.config import Config
from catalog_proxy.models.auth import Credential, TokenStatus
from catalog_proxy.utils.errors import AuthenticationFailed, UpstreamUnavailable
from catalog_proxy.utils.extract import first_present
from catalog_proxy.utils.http import decode_body, is_success

logger = logging.getLogger(__name__)


class CredentialCache:
    """Single-slot, lock-guarded holder for the current bearer credential.

    Expiry is checked on read; an expired credential is dropped and never
    handed out again.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._credential: Credential | None = None

    def now(self) -> datetime:
        return self._clock()

    def get(self) -> Credential | None:
        """Return the stored credential if it is still valid, else None."""
        with self._lock:
            credential = self._credential
            if credential is None:
                return None
            if not credential.is_valid(self._clock()):
                self._credential = None
                return None
            return credential

    def set(self, credential: Credential) -> None:
        with self._lock:
            self._credential = credential

    def invalidate(self) -> None:
        with self._lock:
            self._credential = None

    def status(self) -> TokenStatus:
        """Get the current token status."""
        with self._lock:
            credential = self._credential
        if credential is None:
            return TokenStatus(has_token=False, is_expired=True)

        now = self._clock()
        is_expired = not credential.is_valid(now)
        seconds_remaining = None
        if not is_expired:
            seconds_remaining = int((credential.expires_at - now).total_seconds())

        return TokenStatus(
            has_token=True,
            is_expired=is_expired,
            expires_at=credential.expires_at,
            seconds_remaining=seconds_remaining,
        )


class Authenticator:
    """Exchanges the configured service identity for a bearer credential."""

    def __init__(self, config: Config, cache: CredentialCache) -> None:
        self._config = config
        self._cache = cache
        self._http = httpx.Client(timeout=config.settings.request_timeout)

    @property
    def cache(self) -> CredentialCache:
        return self._cache

    def authenticate(self) -> Credential:
        """Log in upstream and install the fresh credential into the cache.

        Returns:
            The new credential.

        Raises:
            AuthenticationFailed: Login was rejected or carried no token.
            UpstreamUnavailable: The login endpoint could not be reached.
        """
        logger.info("Authenticating with upstream API...")
        settings = self._config.settings

        try:
            response = self._http.post(
                self._config.login_url,
                json={"email": settings.api_email, "password": settings.api_password},
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"Login request failed: {e}") from e

        if not is_success(response):
            body = decode_body(response)
            logger.error(f"Authentication failed (HTTP {response.status_code})")
            raise AuthenticationFailed(
                f"Failed to authenticate (HTTP {response.status_code})",
                status=response.status_code,
                body=body,
            )

        try:
            data = response.json()
        except ValueError:
            data = None

        token = first_present(
            data,
            self._config.aliases.token_paths,
            accept=lambda v: isinstance(v, str) and v != "",
        )
        if token is None:
            logger.error("No token in login response")
            raise AuthenticationFailed(
                "No authentication token received",
                status=response.status_code,
                body=data,
            )

        credential = Credential.issue(token, self._cache.now(), settings.token_ttl_seconds)
        self._cache.set(credential)
        logger.info("Authentication successful")
        return credential

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()
