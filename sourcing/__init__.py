"""Product search pipeline: upstream fetch, tiered extraction, mapping and source filtering."""

from .models import (
    FetchResponse,
    ProductRecord,
    RawUpstreamItem,
    SearchOutcome,
)
from .extractors import extract, extract_with_tier
from .filters import APPROVED_MERCHANTS, filter_approved, normalize_source
from .normalizers import map_item, map_items
from .profiles import GoogleShoppingProfile, UpstreamProfile, WalmartProfile, build_profile
from .fetcher import UpstreamFetcher
from .service import ProductSearchService, build_search_service

__all__ = [
    "APPROVED_MERCHANTS",
    "FetchResponse",
    "GoogleShoppingProfile",
    "ProductRecord",
    "ProductSearchService",
    "RawUpstreamItem",
    "SearchOutcome",
    "UpstreamFetcher",
    "UpstreamProfile",
    "WalmartProfile",
    "build_profile",
    "build_search_service",
    "extract",
    "extract_with_tier",
    "filter_approved",
    "map_item",
    "map_items",
    "normalize_source",
]
