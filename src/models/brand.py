"""Brand schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from src.models.common import CatalogModel


class BrandCreate(CatalogModel):
    """Validated brand fields taken from the multipart form."""

    name: str = Field(..., min_length=1)
    logo: str = Field("", description="Public path of the uploaded logo")
    description: str = ""
    website: str = ""
    is_active: bool = True


class Brand(BrandCreate):
    """Brand as persisted and returned by the API."""

    id: str
    created_at: datetime
