"""Tier B: search state serialized into the results page's script block."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Optional

from sourcing.extractors.base import ExtractionStrategy
from sourcing.models import RawUpstreamItem

logger = logging.getLogger(__name__)

PRELOADED_STATE_PATTERN = re.compile(
    r"<script[^>]*>\s*window\.__PRELOADED_STATE__\s*=\s*(\{.*?\})\s*;\s*</script>",
    re.DOTALL,
)

# JavaScript literals that are not valid JSON
_JS_ONLY_TOKENS = re.compile(r"\b(?:undefined|NaN)\b")

ITEM_STACKS_PATH = ("search", "searchResult", "itemStacks")


def sanitize_js_object(blob: str) -> str:
    return _JS_ONLY_TOKENS.sub("null", blob)


def find_preloaded_state(html: str) -> Optional[str]:
    match = PRELOADED_STATE_PATTERN.search(html)
    return match.group(1) if match else None


def _walk(data: Any, path) -> Any:
    node = data
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


class EmbeddedStateStrategy(ExtractionStrategy):
    name = "embedded_json"
    content_kinds = frozenset({"html"})

    def try_extract(self, raw: Any, query: str, profile) -> List[RawUpstreamItem]:
        if not isinstance(raw, str):
            return []

        blob = find_preloaded_state(raw)
        if blob is None:
            logger.info(f"[{self.name}] No preloaded state block in page")
            return []

        try:
            data = json.loads(sanitize_js_object(blob))
        except json.JSONDecodeError as e:
            logger.warning(f"Error parsing embedded JSON: {e}")
            return []

        stacks = _walk(data, ITEM_STACKS_PATH)
        if not isinstance(stacks, list):
            logger.info(f"[{self.name}] Preloaded state has no item stacks")
            return []

        items: List[RawUpstreamItem] = []
        for stack in stacks:
            if not isinstance(stack, dict):
                continue
            stack_items = stack.get("items")
            if isinstance(stack_items, list):
                items.extend(item for item in stack_items if isinstance(item, dict))
        return items
