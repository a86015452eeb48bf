"""Shared fixtures for the catalog-proxy test suite."""
from __future__ import annotations

from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from catalog_proxy.config import AliasRules, Config, Settings


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def fake_settings() -> Settings:
    return Settings(
        api_base_url="https://catalog.test/api/v1",
        api_email="svc@test.dev",
        api_password="s3cret",
        token_ttl_seconds=3000,
        request_timeout=5.0,
        cors_allow_origin="*",
    )


@pytest.fixture
def fake_config(fake_settings) -> Config:
    return Config(settings=fake_settings, aliases=AliasRules())


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_client():
    """MagicMock standing in for UpstreamClient."""
    client = MagicMock()
    client.get = MagicMock()
    client.post = MagicMock()
    client.put = MagicMock()
    client.delete = MagicMock()
    client.close = MagicMock()
    return client
