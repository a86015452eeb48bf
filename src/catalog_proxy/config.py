"""Configuration management for the catalog proxy.

Loads the service identity and runtime settings from .env and the
upstream field-alias rules from config/aliases.yaml.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable

import yaml
from pydantic import BaseModel, Field
from dotenv import load_dotenv


DEFAULT_TOKEN_PATHS = ["data.tokens.accessToken", "token", "access_token", "accessToken"]
DEFAULT_PRODUCT_LIST_PATHS = ["data.products", "products", "data"]
DEFAULT_PRODUCT_PATHS = ["data.product", "product", "data"]
DEFAULT_PRODUCT_FIELDS = {
    "id": ["productId", "_id", "id"],
    "name": ["name"],
    "description": ["description"],
    "price": ["price"],
    "promotionalPrice": ["promotionalPrice", "promotional_price"],
    "isPromotionActive": ["isPromotionActive", "is_promotion_active"],
    "stockQuantity": ["stockQuantity", "stock_quantity"],
    "images": ["images"],
    "isActive": ["isActive", "is_active"],
    "createdAt": ["createdAt", "created_at"],
    "updatedAt": ["updatedAt", "updated_at"],
}
DEFAULT_IMAGE_URL_KEYS = ["url"]
DEFAULT_PAGINATION_CONTAINERS = ["pagination", "data.pagination", "meta", "data", ""]
DEFAULT_PAGINATION_FIELDS = {
    "page": ["currentPage", "page"],
    "limit": ["limit", "perPage", "pageSize"],
    "total": ["totalProducts", "total", "totalItems"],
    "totalPages": ["totalPages", "pages"],
}


class AliasRules(BaseModel):
    """Ordered key lists used to read upstream payloads. First present wins."""
    token_paths: list[str] = Field(default_factory=lambda: list(DEFAULT_TOKEN_PATHS))
    product_list_paths: list[str] = Field(default_factory=lambda: list(DEFAULT_PRODUCT_LIST_PATHS))
    product_paths: list[str] = Field(default_factory=lambda: list(DEFAULT_PRODUCT_PATHS))
    product_fields: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_PRODUCT_FIELDS.items()}
    )
    image_url_keys: list[str] = Field(default_factory=lambda: list(DEFAULT_IMAGE_URL_KEYS))
    pagination_containers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PAGINATION_CONTAINERS)
    )
    pagination_fields: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_PAGINATION_FIELDS.items()}
    )

    def extended(self, extra: dict) -> AliasRules:
        """Return a copy with extra aliases appended after the existing ones."""
        data = self.model_dump()
        for key, value in extra.items():
            if key not in data:
                raise ValueError(f"Unknown alias rule '{key}'")
            current = data[key]
            if isinstance(current, dict):
                for field, aliases in (value or {}).items():
                    merged = current.setdefault(field, [])
                    merged.extend(a for a in aliases if a not in merged)
            else:
                current.extend(a for a in (value or []) if a not in current)
        return AliasRules(**data)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""
    api_base_url: str = Field(description="Upstream catalog API base URL")
    api_email: str = Field(description="Service identity email")
    api_password: str = Field(description="Service identity password")
    token_ttl_seconds: int = Field(default=3000, description="Seconds a fresh token is trusted")
    request_timeout: float = Field(default=30.0, description="Upstream request timeout in seconds")
    cors_allow_origin: str = Field(default="*", description="Access-Control-Allow-Origin value")
    host: str = Field(default="0.0.0.0", description="Bind address for `serve`")
    port: int = Field(default=8000, description="Bind port for `serve`")


class Config(BaseModel):
    """Full application configuration."""
    settings: Settings
    aliases: AliasRules = Field(default_factory=AliasRules)

    @property
    def login_url(self) -> str:
        return self.settings.api_base_url.rstrip("/") + "/auth/login"

    def api_url(self, path: str) -> str:
        """Join an upstream path onto the configured base URL."""
        return self.settings.api_base_url.rstrip("/") + "/" + path.lstrip("/")


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (where config/ lives)."""
    current = Path(__file__).resolve().parent
    for parent in [current, *current.parents]:
        if (parent / "config" / "aliases.yaml").exists():
            return parent
    # Fallback: cwd
    return Path.cwd()


def _load_aliases(project_root: Path) -> AliasRules:
    """Load alias extensions from aliases.yaml, if present."""
    aliases_path = project_root / "config" / "aliases.yaml"
    if not aliases_path.exists():
        return AliasRules()

    with open(aliases_path) as f:
        data = yaml.safe_load(f) or {}

    return AliasRules().extended(data.get("aliases", {}) or {})


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _env_number(cast: Callable[[str], Any], *keys: str, default: str) -> Any:
    """Like _env, but parse the value; a malformed value names its variable."""
    for key in keys:
        val = _env(key)
        if val:
            try:
                return cast(val)
            except ValueError:
                raise ValueError(f"Invalid value for {key}: {val!r} is not a valid {cast.__name__}") from None
    return cast(default)


def _load_settings() -> Settings:
    """Load settings from environment variables.

    Supports both CATALOG_PROXY_* and bare legacy names from .env.
    """
    return Settings(
        api_base_url=_env("CATALOG_PROXY_API_BASE_URL", "API_BASE_URL"),
        api_email=_env("CATALOG_PROXY_API_EMAIL", "API_EMAIL"),
        api_password=_env("CATALOG_PROXY_API_PASSWORD", "API_PASSWORD"),
        token_ttl_seconds=_env_number(int, "CATALOG_PROXY_TOKEN_TTL_SECONDS", "TOKEN_TTL_SECONDS", default="3000"),
        request_timeout=_env_number(float, "CATALOG_PROXY_REQUEST_TIMEOUT", "REQUEST_TIMEOUT", default="30"),
        cors_allow_origin=_env("CATALOG_PROXY_CORS_ALLOW_ORIGIN", "CORS_ALLOW_ORIGIN", default="*"),
        host=_env("CATALOG_PROXY_HOST", "HOST", default="0.0.0.0"),
        port=_env_number(int, "CATALOG_PROXY_PORT", "PORT", default="8000"),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and cache the full application configuration."""
    project_root = _find_project_root()

    # Load .env from project root if it exists
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    settings = _load_settings()
    aliases = _load_aliases(project_root)

    return Config(settings=settings, aliases=aliases)
