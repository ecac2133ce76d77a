"""Domain errors raised by the catalog services."""

from __future__ import annotations

from typing import Any


class CatalogError(Exception):
    """Base class for catalog failures that routes translate to HTTP errors."""


class ProductNotFoundError(CatalogError):
    """Raised when a product id does not reference a stored product."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class PayloadValidationError(CatalogError):
    """Raised when submitted fields cannot be coerced or fail validation."""

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
