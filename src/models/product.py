"""Product domain models and API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from src.models.common import CatalogModel

ProductStatus = Literal[
    "In Stock",
    "Out of Stock",
    "Limited Stock",
    "Pre-Order",
    "Discontinued",
]

ProductBadge = Literal[
    "",
    "Best Seller",
    "New Arrival",
    "Hot Deal",
    "Premium",
    "Limited Edition",
    "Sale",
    "Trending",
]


class Specifications(CatalogModel):
    """Technical sheet attached to a part."""

    weight: str = ""
    dimensions: str = ""
    material: str = ""
    color: str = ""
    warranty: str = ""
    compatibility: list[str] = Field(
        default_factory=list,
        description="Vehicle models the part fits",
    )
    part_number: str = ""
    origin: str = ""


class ProductFields(CatalogModel):
    """Writable product fields with their constraints."""

    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    subcategory: str = ""
    brand: str = ""
    model: str = ""
    year: int | None = None
    price: float = Field(..., ge=0, allow_inf_nan=False)
    original_price: float | None = Field(None, ge=0, allow_inf_nan=False)
    status: ProductStatus = "In Stock"
    rating: float = Field(0, ge=0, le=5)
    reviews: int = Field(0, ge=0)
    badge: ProductBadge = ""
    description: str = ""
    specifications: Specifications = Field(default_factory=Specifications)
    stock: int = Field(0, ge=0)
    discount: float = Field(0, ge=0, le=100, allow_inf_nan=False)
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    is_active: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def _trim_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class ProductUpdateFields(ProductFields):
    """Fields accepted by an update; omitted fields keep their stored value."""

    name: str | None = Field(None, min_length=1)
    category: str | None = Field(None, min_length=1)
    rating: float | None = Field(None, ge=0, le=5)


class Product(ProductFields):
    """Product as persisted and returned by the API."""

    id: str
    image: str = ""
    images: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class Pagination(CatalogModel):
    """Pagination block returned alongside a product page."""

    current: int = Field(..., ge=1)
    pages: int = Field(..., ge=0)
    total: int = Field(..., ge=0)


class ProductPage(CatalogModel):
    """Response body for the product listing endpoint."""

    products: list[Product]
    pagination: Pagination


class DeletionResponse(CatalogModel):
    message: str
