"""Schemas for the catalog statistics endpoint."""

from __future__ import annotations

from pydantic import Field

from src.models.common import CatalogModel


class CategoryCount(CatalogModel):
    category: str | None = Field(
        None,
        description="Category name; null groups products stored without one",
    )
    count: int = Field(..., ge=0)


class CatalogStats(CatalogModel):
    """Aggregate counts over active products."""

    total_products: int = Field(..., ge=0)
    in_stock: int = Field(..., ge=0)
    out_of_stock: int = Field(..., ge=0)
    featured: int = Field(..., ge=0)
    category_stats: list[CategoryCount] = Field(default_factory=list)
