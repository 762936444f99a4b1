"""Tiered extraction of raw product items from upstream payloads.

Tiers, in priority order:
    structured     JSON API response with a known results list
    embedded_json  search state serialized into an HTML script block
    pattern        regex over item containers in raw HTML
"""

from __future__ import annotations

from typing import Any, List, Sequence, TYPE_CHECKING

from sourcing.extractors.base import ExtractionResult, ExtractionStrategy, run_strategies
from sourcing.extractors.embedded_json import EmbeddedStateStrategy, sanitize_js_object
from sourcing.extractors.pattern import LOW_CONFIDENCE_KEY, MarkupPatternStrategy
from sourcing.extractors.structured import StructuredResultsStrategy
from sourcing.models import ContentKind, RawUpstreamItem

if TYPE_CHECKING:
    from sourcing.profiles import UpstreamProfile

DEFAULT_STRATEGIES: Sequence[ExtractionStrategy] = (
    StructuredResultsStrategy(),
    EmbeddedStateStrategy(),
    MarkupPatternStrategy(),
)


def extract_with_tier(
    raw: Any,
    content_kind: ContentKind,
    query: str,
    *,
    profile: "UpstreamProfile",
    strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES,
) -> ExtractionResult:
    return run_strategies(strategies, raw, content_kind, query, profile)


def extract(
    raw: Any,
    content_kind: ContentKind,
    query: str,
    *,
    profile: "UpstreamProfile",
) -> List[RawUpstreamItem]:
    """Raw items from the first tier that yields any. Never raises."""
    return extract_with_tier(raw, content_kind, query, profile=profile).items


__all__ = [
    "DEFAULT_STRATEGIES",
    "ExtractionResult",
    "ExtractionStrategy",
    "EmbeddedStateStrategy",
    "LOW_CONFIDENCE_KEY",
    "MarkupPatternStrategy",
    "StructuredResultsStrategy",
    "extract",
    "extract_with_tier",
    "sanitize_js_object",
]
