"""Product payload models for the canonical contract."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class CreateProductRequest(BaseModel):
    name: str
    description: str
    price: float = Field(ge=0)
    promotional_price: float | None = Field(default=None, ge=0, alias="promotionalPrice")
    is_promotion_active: bool | None = Field(default=None, alias="isPromotionActive")
    stock_quantity: int = Field(ge=0, alias="stockQuantity")
    images: list[str] = Field(default_factory=list)
    is_active: bool = Field(default=True, alias="isActive")

    model_config = {"populate_by_name": True}


class UpdateProductRequest(BaseModel):
    """Partial update. Only explicitly set fields are forwarded upstream."""
    name: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    promotional_price: float | None = Field(default=None, ge=0, alias="promotionalPrice")
    is_promotion_active: bool | None = Field(default=None, alias="isPromotionActive")
    stock_quantity: int | None = Field(default=None, ge=0, alias="stockQuantity")
    images: list[str] | None = None
    is_active: bool | None = Field(default=None, alias="isActive")

    model_config = {"populate_by_name": True}


class ProductFilters(BaseModel):
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1)
    search: str | None = None
    sort_by: Literal["name", "price", "stockQuantity"] | None = Field(default=None, alias="sortBy")
    order: Literal["asc", "desc"] | None = None
    is_active: bool | None = Field(default=None, alias="isActive")

    model_config = {"populate_by_name": True}

    def to_params(self) -> dict[str, str]:
        """Serialize set filters as upstream query parameters."""
        params: dict[str, str] = {}
        for key, value in self.model_dump(by_alias=True, exclude_none=True).items():
            params[key] = str(value).lower() if isinstance(value, bool) else str(value)
        return params
