"""Map raw upstream items onto ProductRecord.

The same alias tables are used for every tier: each field is read from the
first alias that holds a usable value. Dotted aliases walk nested dicts.
"""

from __future__ import annotations

import logging
from numbers import Number
from typing import Any, Iterable, List, Optional, Sequence, TYPE_CHECKING

from sourcing.extractors.pattern import LOW_CONFIDENCE_KEY
from sourcing.models import ProductRecord, RawUpstreamItem
from sourcing.utils import resolve_link

if TYPE_CHECKING:
    from sourcing.profiles import UpstreamProfile

logger = logging.getLogger(__name__)

NAME_FIELDS: Sequence[str] = (
    "title",
    "name",
    "productName",
    "product_name",
    "productDataShaped.productName",
    "productDataShaped.name",
)
PRICE_TEXT_FIELDS: Sequence[str] = (
    "price",
    "price.priceString",
    "priceInfo.priceString",
    "productDataShaped.priceInfo.priceString",
)
PRICE_NUMBER_FIELDS: Sequence[str] = (
    "extracted_price",
    "price",
    "price.currentPrice",
    "priceInfo.currentPrice",
    "productDataShaped.priceInfo.currentPrice",
)
LINK_FIELDS: Sequence[str] = (
    "link",
    "product_link",
    "canonicalUrl",
    "productDataShaped.canonicalUrl",
)
IMAGE_FIELDS: Sequence[str] = (
    "thumbnail",
    "imageUrl",
    "image",
    "imageInfo.thumbnailUrl",
    "productDataShaped.imageInfo.thumbnailUrl",
)
RATING_FIELDS: Sequence[str] = ("rating", "averageRating")
DESCRIPTION_FIELDS: Sequence[str] = ("description", "snippet", "shortDescription")


def _lookup(item: RawUpstreamItem, alias: str) -> Any:
    node: Any = item
    for key in alias.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def first_text(item: RawUpstreamItem, aliases: Iterable[str]) -> Optional[str]:
    for alias in aliases:
        value = _lookup(item, alias)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def first_number(item: RawUpstreamItem, aliases: Iterable[str]) -> Optional[float]:
    for alias in aliases:
        value = _lookup(item, alias)
        if _is_number(value):
            return value
    return None


def format_amount(value: float) -> str:
    """``379.0`` -> ``"$379"``, ``12.5`` -> ``"$12.5"``."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"${value}"


def extract_price(item: RawUpstreamItem) -> Optional[str]:
    text = first_text(item, PRICE_TEXT_FIELDS)
    if text:
        return text
    amount = first_number(item, PRICE_NUMBER_FIELDS)
    if amount is not None:
        return format_amount(amount)
    return None


def extract_rating(item: RawUpstreamItem) -> Optional[str]:
    for alias in RATING_FIELDS:
        value = _lookup(item, alias)
        if _is_number(value):
            return str(value)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def map_item(
    item: RawUpstreamItem,
    *,
    profile: "UpstreamProfile",
    query: str,
) -> Optional[ProductRecord]:
    """Build a ProductRecord, or None when the item has no usable name or source."""
    if not isinstance(item, dict):
        return None

    name = first_text(item, NAME_FIELDS)
    if not name:
        return None

    source = profile.retailer_name or first_text(item, ("source", "seller"))
    if not source:
        return None

    link = resolve_link(first_text(item, LINK_FIELDS), profile.origin)
    if not link:
        link = profile.search_results_url(query)

    return ProductRecord(
        name=name,
        price=extract_price(item),
        link=link,
        image=first_text(item, IMAGE_FIELDS),
        rating=extract_rating(item),
        description=first_text(item, DESCRIPTION_FIELDS),
        source=source,
        low_confidence=bool(item.get(LOW_CONFIDENCE_KEY)),
    )


def map_items(
    items: Iterable[RawUpstreamItem],
    *,
    profile: "UpstreamProfile",
    query: str,
) -> List[ProductRecord]:
    records: List[ProductRecord] = []
    dropped = 0
    for item in items:
        record = map_item(item, profile=profile, query=query)
        if record is None:
            dropped += 1
            continue
        records.append(record)
    if dropped:
        logger.info(f"Dropped {dropped} items without a usable name or source")
    return records


__all__ = [
    "extract_price",
    "extract_rating",
    "first_number",
    "first_text",
    "format_amount",
    "map_item",
    "map_items",
]
