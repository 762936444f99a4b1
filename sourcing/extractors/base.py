"""Extraction strategy interface and the tier dispatcher."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Optional, Sequence, TYPE_CHECKING

from sourcing.models import ContentKind, RawUpstreamItem

if TYPE_CHECKING:
    from sourcing.profiles import UpstreamProfile

logger = logging.getLogger(__name__)


class ExtractionStrategy(ABC):
    """One fallback tier. Returns raw items, or an empty list when it finds none."""

    name: str
    content_kinds: FrozenSet[str]

    def applies_to(self, content_kind: ContentKind) -> bool:
        return content_kind in self.content_kinds

    @abstractmethod
    def try_extract(self, raw: Any, query: str, profile: "UpstreamProfile") -> List[RawUpstreamItem]:
        raise NotImplementedError


@dataclass
class ExtractionResult:
    items: List[RawUpstreamItem] = field(default_factory=list)
    tier: Optional[str] = None
    attempted: List[str] = field(default_factory=list)


def run_strategies(
    strategies: Sequence[ExtractionStrategy],
    raw: Any,
    content_kind: ContentKind,
    query: str,
    profile: "UpstreamProfile",
) -> ExtractionResult:
    """Try each applicable strategy in order; stop at the first non-empty one."""
    result = ExtractionResult()
    for strategy in strategies:
        if not strategy.applies_to(content_kind):
            continue
        result.attempted.append(strategy.name)
        started = time.monotonic()
        try:
            items = strategy.try_extract(raw, query, profile)
        except Exception as e:
            logger.warning(
                f"[{strategy.name}] Extraction error: {type(e).__name__}: {e}",
                extra={"tier": strategy.name, "provider": profile.provider_id},
            )
            items = []
        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            f"[{strategy.name}] Extracted {len(items)} items",
            extra={"tier": strategy.name, "item_count": len(items), "latency_ms": elapsed_ms},
        )
        if items:
            result.items = items
            result.tier = strategy.name
            return result
    return result
