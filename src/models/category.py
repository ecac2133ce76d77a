"""Category schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from src.models.common import CatalogModel


class Subcategory(CatalogModel):
    name: str
    description: str = ""


class CategoryCreate(CatalogModel):
    """Request body for POST /api/categories."""

    name: str = Field(..., min_length=1)
    description: str = ""
    subcategories: list[Subcategory] = Field(default_factory=list)
    is_active: bool = True


class Category(CategoryCreate):
    """Category as persisted and returned by the API."""

    id: str
    created_at: datetime
