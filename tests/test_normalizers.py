"""Tests for mapping raw upstream items onto ProductRecord."""

import pytest

from sourcing.filters import filter_approved
from sourcing.models import (
    DESCRIPTION_SENTINEL,
    IMAGE_SENTINEL,
    PRICE_SENTINEL,
    RATING_SENTINEL,
)
from sourcing.normalizers import format_amount, map_item, map_items


def test_shopping_result_maps_and_survives_filtering(google_profile):
    raw = {"title": "X", "source": "amazon", "price": "$10", "link": "/x", "thumbnail": "i.png"}

    record = map_item(raw, profile=google_profile, query="x")

    assert record is not None
    assert (record.name, record.price, record.link, record.image) == ("X", "$10", "/x", "i.png")

    survivors = filter_approved([record])
    assert len(survivors) == 1
    assert survivors[0].source == "Amazon"
    assert survivors[0].to_display() == {
        "name": "X",
        "price": "$10",
        "link": "/x",
        "image": "i.png",
        "rating": RATING_SENTINEL,
        "description": DESCRIPTION_SENTINEL,
        "source": "Amazon",
    }


def test_shopping_result_optional_fields(google_profile):
    raw = {
        "title": "Kettle",
        "source": "Flipkart",
        "extracted_price": 1299,
        "product_link": "https://www.google.com/shopping/product/1",
        "rating": 4.5,
        "snippet": "1.7 L electric kettle",
    }

    record = map_item(raw, profile=google_profile, query="kettle")

    assert record.price == "$1299"
    assert record.link == "https://www.google.com/shopping/product/1"
    assert record.rating == "4.5"
    assert record.description == "1.7 L electric kettle"
    assert record.image is None


def test_retailer_api_item_uses_nested_fields(walmart_profile):
    raw = {
        "productDataShaped": {
            "productName": "HP 15.6 Laptop",
            "priceInfo": {"currentPrice": 379.0},
            "imageInfo": {"thumbnailUrl": "https://i5.walmartimages.com/hp.jpg"},
            "canonicalUrl": "/ip/HP-15-6-Laptop/123",
        }
    }

    record = map_item(raw, profile=walmart_profile, query="laptop")

    assert record.name == "HP 15.6 Laptop"
    assert record.price == "$379"
    assert record.link == "https://www.walmart.com/ip/HP-15-6-Laptop/123"
    assert record.image == "https://i5.walmartimages.com/hp.jpg"
    assert record.source == "Walmart"


def test_preformatted_price_is_preferred_over_number(walmart_profile):
    raw = {"name": "Desk", "price": {"priceString": "$89.97", "currentPrice": 89.97}}
    assert map_item(raw, profile=walmart_profile, query="desk").price == "$89.97"


def test_missing_link_falls_back_to_search_page(walmart_profile):
    record = map_item({"name": "Desk Lamp"}, profile=walmart_profile, query="desk lamp")
    assert record.link == "https://www.walmart.com/search?q=desk%20lamp"


def test_missing_optional_fields_render_sentinels(walmart_profile):
    display = map_item({"name": "Mystery box"}, profile=walmart_profile, query="box").to_display()
    assert display["price"] == PRICE_SENTINEL
    assert display["image"] == IMAGE_SENTINEL
    assert display["rating"] == RATING_SENTINEL
    assert display["description"] == DESCRIPTION_SENTINEL


@pytest.mark.parametrize(
    "raw",
    [
        {"price": "$10", "source": "amazon"},
        {"title": "", "source": "amazon"},
        {"title": "   ", "name": None, "source": "amazon"},
        {"title": 12345, "source": "amazon"},
        {"productDataShaped": {"priceInfo": {"currentPrice": 5}}, "source": "amazon"},
    ],
)
def test_item_without_name_is_dropped(google_profile, raw):
    assert map_item(raw, profile=google_profile, query="q") is None


def test_marketplace_item_without_source_is_dropped(google_profile):
    assert map_item({"title": "Orphan"}, profile=google_profile, query="q") is None


def test_low_confidence_marker_from_pattern_tier(walmart_profile):
    record = map_item(
        {"name": "Chromebook 11", "price": "$89.99", "_low_confidence": True},
        profile=walmart_profile,
        query="chromebook",
    )
    assert record.low_confidence is True
    assert record.to_display()["source"] == "Walmart (Basic)"


def test_map_items_keeps_order_and_drops_nameless(google_profile):
    items = [
        {"title": "A", "source": "amazon"},
        {"source": "amazon"},
        {"title": "C", "source": "croma"},
    ]
    records = map_items(items, profile=google_profile, query="q")
    assert [r.name for r in records] == ["A", "C"]


@pytest.mark.parametrize(
    "value, expected",
    [(379.0, "$379"), (12.5, "$12.5"), (10, "$10"), (0.99, "$0.99")],
)
def test_format_amount(value, expected):
    assert format_amount(value) == expected
