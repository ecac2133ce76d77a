"""Unit tests for the listing filter and pagination helpers."""

import pytest

from src.services.catalog.query import (
    ProductQuery,
    build_product_filter,
    build_sort,
    page_count,
)

pytestmark = pytest.mark.unit


def test_default_filter_only_requires_active():
    assert build_product_filter(ProductQuery()) == {"isActive": True}


def test_filter_combines_equality_and_price_range():
    query = ProductQuery(
        category="Suspension",
        subcategory="Struts",
        brand="KYB",
        status="In Stock",
        featured="true",
        min_price=0,
        max_price=250,
    )

    assert build_product_filter(query) == {
        "isActive": True,
        "category": "Suspension",
        "subcategory": "Struts",
        "brand": "KYB",
        "status": "In Stock",
        "featured": True,
        "price": {"$gte": 0, "$lte": 250},
    }


def test_all_categories_sentinel_and_blank_values_are_ignored():
    query = ProductQuery(category="All Categories", brand="", search="")

    assert build_product_filter(query) == {"isActive": True}


def test_search_escapes_regex_and_covers_tags():
    filters = build_product_filter(ProductQuery(search="5W-30 (synthetic)"))

    pattern = {"$regex": r"5W\-30\ \(synthetic\)", "$options": "i"}
    assert filters["$or"] == [
        {"name": pattern},
        {"description": pattern},
        {"brand": pattern},
        {"tags": pattern},
    ]


@pytest.mark.parametrize(
    ("sort_order", "direction"), [("desc", -1), ("asc", 1), ("anything", 1)]
)
def test_sort_direction(sort_order, direction):
    query = ProductQuery(sort_by="price", sort_order=sort_order)

    assert build_sort(query) == [("price", direction), ("_id", direction)]


def test_skip_and_page_count():
    query = ProductQuery(page=3, limit=10)

    assert query.skip == 20
    assert page_count(15, 10) == 2
    assert page_count(20, 10) == 2
    assert page_count(0, 10) == 0
