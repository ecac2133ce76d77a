"""Filter, sort and pagination helpers for the product listing."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Sentinel sent by the storefront's category picker meaning "no filter".
ALL_CATEGORIES = "All Categories"


class ProductQuery(BaseModel):
    """Listing parameters after coercion from the query string."""

    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)
    category: str | None = None
    subcategory: str | None = None
    brand: str | None = None
    status: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    featured: str | None = None
    search: str | None = None
    sort_by: str = "createdAt"
    sort_order: str = "desc"

    @field_validator(
        "category", "subcategory", "brand", "status", "featured", "search"
    )
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        return value or None

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def build_product_filter(query: ProductQuery) -> dict[str, Any]:
    """Translate listing parameters into a MongoDB filter document."""

    filters: dict[str, Any] = {"isActive": True}

    if query.category and query.category != ALL_CATEGORIES:
        filters["category"] = query.category
    if query.subcategory:
        filters["subcategory"] = query.subcategory
    if query.brand:
        filters["brand"] = query.brand
    if query.status:
        filters["status"] = query.status
    if query.featured:
        filters["featured"] = query.featured == "true"

    price_range: dict[str, float] = {}
    if query.min_price is not None:
        price_range["$gte"] = query.min_price
    if query.max_price is not None:
        price_range["$lte"] = query.max_price
    if price_range:
        filters["price"] = price_range

    if query.search:
        pattern = {"$regex": re.escape(query.search), "$options": "i"}
        # A regex against an array field matches when any element matches.
        filters["$or"] = [
            {"name": pattern},
            {"description": pattern},
            {"brand": pattern},
            {"tags": pattern},
        ]

    return filters


def build_sort(query: ProductQuery) -> list[tuple[str, int]]:
    """Single-field sort plus ``_id`` so pages stay stable across ties."""

    direction = -1 if query.sort_order == "desc" else 1
    field = "_id" if query.sort_by == "id" else query.sort_by
    if field == "_id":
        return [("_id", direction)]
    return [(field, direction), ("_id", direction)]


def page_count(total: int, limit: int) -> int:
    """Number of pages needed to show ``total`` items ``limit`` at a time."""
    return -(-total // limit)
