"""Tier C: last-resort scan of item tiles in raw page markup.

Low confidence by construction. Items produced here carry a marker so the
output can label them as degraded.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Optional

from bs4 import BeautifulSoup, SoupStrainer
from bs4.element import Tag

from sourcing.extractors.base import ExtractionStrategy
from sourcing.models import RawUpstreamItem

logger = logging.getLogger(__name__)

MAX_CONTAINERS = 100
MAX_CONTAINER_CHARS = 5000

PRICE_PATTERN = re.compile(r"\$(\d+\.\d{2})")
_WHITESPACE = re.compile(r"\s+")

LOW_CONFIDENCE_KEY = "_low_confidence"

# Only item tiles are built into the tree; the rest of the page is skipped
_ITEM_TILES = SoupStrainer("div", attrs={"data-item-id": True})


def parse_container(container: Tag) -> Optional[RawUpstreamItem]:
    title_tag = container.find("span")
    if title_tag is None:
        return None
    title = _WHITESPACE.sub(" ", title_tag.get_text(" ", strip=True)).strip()
    if not title:
        return None

    price_match = PRICE_PATTERN.search(container.get_text(" ")[:MAX_CONTAINER_CHARS])
    if not price_match:
        return None

    return {
        "name": title,
        "price": f"${price_match.group(1)}",
        LOW_CONFIDENCE_KEY: True,
    }


class MarkupPatternStrategy(ExtractionStrategy):
    name = "pattern"
    content_kinds = frozenset({"html"})

    def try_extract(self, raw: Any, query: str, profile) -> List[RawUpstreamItem]:
        if not isinstance(raw, str):
            return []

        soup = BeautifulSoup(raw, "html.parser", parse_only=_ITEM_TILES)
        containers = soup.find_all("div", attrs={"data-item-id": True}, limit=MAX_CONTAINERS)

        items: List[RawUpstreamItem] = []
        for container in containers:
            item = parse_container(container)
            if item:
                items.append(item)

        logger.info(f"Extracted {len(items)} products from {len(containers)} item tiles")
        return items
