"""Coercion of submitted product forms into validated store documents.

Products arrive as multipart forms where every value is a string, or as
JSON bodies carrying native values. Both are normalised here, then checked
against the pydantic field models before anything touches the store.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from src.models.brand import BrandCreate
from src.models.category import CategoryCreate
from src.models.product import ProductFields, ProductUpdateFields
from src.services.catalog.errors import PayloadValidationError

RATING_MIN = 0.0
RATING_MAX = 5.0

_TEXT_FIELDS = (
    "name",
    "category",
    "subcategory",
    "brand",
    "model",
    "status",
    "badge",
    "description",
)
_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


def _values(data: Mapping[str, Any], key: str) -> list[Any]:
    """Every value submitted under ``key``; forms may repeat a field."""
    if hasattr(data, "getlist"):
        return [value for value in data.getlist(key) if isinstance(value, str)]
    value = data.get(key)
    return [] if value is None else [value]


def _value(data: Mapping[str, Any], key: str) -> Any:
    values = _values(data, key)
    return values[0] if values else None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_number(key: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise PayloadValidationError(
            f"{key} must be a number", details={key: value}
        ) from exc
    if not math.isfinite(number):
        raise PayloadValidationError(f"{key} must be a number", details={key: value})
    return number


def _optional_number(data: Mapping[str, Any], key: str) -> float | None:
    value = _value(data, key)
    if _is_blank(value):
        return None
    return _to_number(key, value)


def _required_number(data: Mapping[str, Any], key: str) -> float:
    number = _optional_number(data, key)
    if number is None:
        raise PayloadValidationError(f"{key} is required", details={key: None})
    return number


def _number_or_zero(data: Mapping[str, Any], key: str) -> float:
    """Missing, blank and unparseable values all count as zero."""
    try:
        number = _optional_number(data, key)
    except PayloadValidationError:
        return 0
    return number or 0


def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise PayloadValidationError(f"{key} must be a boolean", details={key: value})


def _json_field(data: Mapping[str, Any], key: str, default: Any) -> Any:
    """Decode a field sent either JSON-encoded or as a native structure."""
    values = _values(data, key)
    if not values:
        return default
    if len(values) > 1:
        return values
    value = values[0]
    if not isinstance(value, str):
        return value
    if not value.strip():
        return default
    try:
        return json.loads(value)
    except ValueError as exc:
        raise PayloadValidationError(
            f"{key} must be valid JSON", details={key: value}
        ) from exc


def clamp_rating(value: float) -> float:
    """Force a rating into the 0-5 star range."""
    return min(max(value, RATING_MIN), RATING_MAX)


def _validation_details(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]


def build_product_fields(
    data: Mapping[str, Any], *, partial: bool = False
) -> dict[str, Any]:
    """Coerce and validate a product payload into a camelCase document.

    With ``partial`` the result is meant for an update: text fields that were
    not submitted and an omitted rating are left out so the stored values
    survive, while the coerced fields carrying defaults are always written.
    """

    values: dict[str, Any] = {}
    for key in _TEXT_FIELDS:
        value = _value(data, key)
        if value is not None:
            values[key] = value

    specifications = _json_field(data, "specifications", {})
    if not isinstance(specifications, dict):
        raise PayloadValidationError(
            "specifications must be an object",
            details={"specifications": specifications},
        )
    compatibility = _json_field(data, "compatibility", None)
    if compatibility is not None:
        specifications = {**specifications, "compatibility": compatibility}
    values["specifications"] = specifications
    values["tags"] = _json_field(data, "tags", [])

    values["price"] = _required_number(data, "price")
    values["originalPrice"] = _optional_number(data, "originalPrice")
    values["year"] = _optional_number(data, "year")
    values["reviews"] = _number_or_zero(data, "reviews")
    values["stock"] = _number_or_zero(data, "stock")
    values["discount"] = _number_or_zero(data, "discount")

    featured = _value(data, "featured")
    values["featured"] = featured is True or featured == "true"

    rating = _optional_number(data, "rating")
    if rating is not None:
        values["rating"] = clamp_rating(rating)

    is_active = _value(data, "isActive")
    if not _is_blank(is_active):
        values["isActive"] = _to_bool("isActive", is_active)

    model = ProductUpdateFields if partial else ProductFields
    try:
        validated = model.model_validate(values)
    except ValidationError as exc:
        raise PayloadValidationError(
            "Invalid product payload", details=_validation_details(exc)
        ) from exc

    if not partial:
        return validated.model_dump(by_alias=True)

    document = validated.model_dump(by_alias=True, exclude_unset=True)
    document["specifications"] = validated.specifications.model_dump(by_alias=True)
    return document


def build_brand_fields(data: Mapping[str, Any], logo: str = "") -> dict[str, Any]:
    """Validate the text fields of a brand form and attach the logo path."""

    values: dict[str, Any] = {"logo": logo}
    for key in ("name", "description", "website"):
        value = _value(data, key)
        if value is not None:
            values[key] = value
    is_active = _value(data, "isActive")
    if not _is_blank(is_active):
        values["isActive"] = _to_bool("isActive", is_active)

    try:
        brand = BrandCreate.model_validate(values)
    except ValidationError as exc:
        raise PayloadValidationError(
            "Invalid brand payload", details=_validation_details(exc)
        ) from exc
    return brand.model_dump(by_alias=True)


def build_category(data: Mapping[str, Any]) -> CategoryCreate:
    """Validate a category submitted as JSON or as a form."""

    values: dict[str, Any] = {}
    for key in ("name", "description"):
        value = _value(data, key)
        if value is not None:
            values[key] = value
    values["subcategories"] = _json_field(data, "subcategories", [])
    is_active = _value(data, "isActive")
    if not _is_blank(is_active):
        values["isActive"] = _to_bool("isActive", is_active)

    try:
        return CategoryCreate.model_validate(values)
    except ValidationError as exc:
        raise PayloadValidationError(
            "Invalid category payload", details=_validation_details(exc)
        ) from exc
