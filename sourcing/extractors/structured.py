"""Tier A: results already delivered as structured JSON."""

from __future__ import annotations

import json
import logging
from typing import Any, List

from sourcing.extractors.base import ExtractionStrategy
from sourcing.models import RawUpstreamItem

logger = logging.getLogger(__name__)


class StructuredResultsStrategy(ExtractionStrategy):
    name = "structured"
    content_kinds = frozenset({"json"})

    def try_extract(self, raw: Any, query: str, profile) -> List[RawUpstreamItem]:
        data = raw
        if isinstance(raw, (str, bytes)):
            try:
                data = json.loads(raw)
            except ValueError as e:
                logger.warning(f"[{self.name}] Upstream body is not valid JSON: {e}")
                return []

        if not isinstance(data, dict):
            logger.error(f"Unexpected response format from {profile.provider_id}: top level is {type(data).__name__}")
            return []

        items = data.get(profile.results_field)
        if not isinstance(items, list):
            logger.error(f"Unexpected response format from {profile.provider_id}: no '{profile.results_field}' list")
            return []

        logger.info(f"Found {len(items)} items in response")
        return [item for item in items if isinstance(item, dict)]
