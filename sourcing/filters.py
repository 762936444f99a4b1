"""Approved-source filtering for marketplace results.

A raw source label ("Amazon.in", "Flipkart - Seller XYZ") is matched against
a fixed list of merchant keys. The list is ordered: when a label contains
more than one key, the first key in declaration order wins.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from sourcing.models import ProductRecord

logger = logging.getLogger(__name__)

APPROVED_MERCHANTS: Tuple[Tuple[str, str], ...] = (
    ("amazon", "Amazon"),
    ("flipkart", "Flipkart"),
    ("meesho", "Meesho"),
    ("snapdeal", "Snapdeal"),
    ("walmart", "Walmart"),
    ("reliancedigital", "Reliance Digital"),
    ("ajio", "AJIO"),
    ("tatacliq", "Tata Cliq"),
    ("myntra", "Myntra"),
    ("shopclues", "ShopClues"),
    ("croma", "Croma"),
    ("nykaa", "Nykaa"),
    ("firstcry", "FirstCry"),
    ("paytmmall", "Paytm Mall"),
    ("pepperfry", "Pepperfry"),
    ("bigbasket", "BigBasket"),
    ("jiomart", "JioMart"),
    ("blinkit", "Blinkit"),
    ("purplle", "Purplle"),
    ("lifestylestores", "Lifestyle Stores"),
    ("decathlon", "Decathlon"),
    ("indiamart", "IndiaMART"),
    ("ebay", "eBay"),
    ("aliexpress", "AliExpress"),
    ("bestbuy", "BestBuy"),
    ("homeshop18", "HomeShop18"),
    ("reliancetrends", "Reliance Trends"),
    ("fabindia", "FabIndia"),
    ("maxfashion", "Max Fashion"),
    ("healthkart", "HealthKart"),
    ("lenskart", "Lenskart"),
    ("bewakoof", "Bewakoof"),
    ("chumbak", "Chumbak"),
    ("tata1mg", "Tata 1MG"),
    ("pharmeasy", "PharmEasy"),
    ("apple", "Apple Store"),
)


def normalize_source(raw_label: Optional[str]) -> Optional[str]:
    """Return the canonical merchant name for a raw label, or None if unapproved."""
    if not raw_label:
        return None
    label = raw_label.lower()
    for key, display_name in APPROVED_MERCHANTS:
        if key in label:
            return display_name
    return None


def filter_approved(records: Iterable[ProductRecord]) -> List[ProductRecord]:
    """Keep records from approved merchants, rewriting their source label.

    Stable: surviving records keep their relative order.
    """
    approved: List[ProductRecord] = []
    for record in records:
        if not record.name or not record.source:
            logger.debug(f"[FILTER] Dropping record with empty name/source: {record.name!r}")
            continue
        canonical = normalize_source(record.source)
        if canonical is None:
            logger.debug(f"[FILTER] Dropping '{record.name}' from unapproved source '{record.source}'")
            continue
        approved.append(record.model_copy(update={"source": canonical}))
    return approved
