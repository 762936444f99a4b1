"""Upstream profiles: what to fetch for a query and how to read the answer.

Each deployment variant of the service talks to exactly one upstream. A
profile holds everything that differs between them (request URLs and
headers, the JSON field holding results, the retailer origin used to
resolve relative links, the response envelope style).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Literal, Optional

from config import Settings, SEARCH_BACKENDS
from exceptions import ConfigurationError
from sourcing.utils import build_search_url

EnvelopeStyle = Literal["detailed", "results_only"]

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class UpstreamRequest:
    url: str
    params: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)


class UpstreamProfile(ABC):
    provider_id: str
    results_field: str
    envelope: EnvelopeStyle = "detailed"
    # Fixed source label for single-retailer upstreams; None means the
    # item's own source label is used (marketplace aggregators).
    retailer_name: Optional[str] = None
    origin: Optional[str] = None

    @abstractmethod
    def primary_request(self, query: str) -> UpstreamRequest:
        raise NotImplementedError

    def fallback_request(self, query: str) -> Optional[UpstreamRequest]:
        return None

    @abstractmethod
    def search_results_url(self, query: str) -> str:
        raise NotImplementedError


class GoogleShoppingProfile(UpstreamProfile):
    """SerpAPI Google Shopping engine."""

    provider_id = "google_shopping"
    results_field = "shopping_results"
    envelope: EnvelopeStyle = "results_only"

    def __init__(self, api_key: str, gl: str = "IN", hl: str = "en"):
        self.api_key = api_key
        self.gl = gl
        self.hl = hl
        self.base_url = "https://serpapi.com/search"

    def primary_request(self, query: str) -> UpstreamRequest:
        return UpstreamRequest(
            url=self.base_url,
            params={
                "engine": "google_shopping",
                "q": query,
                "api_key": self.api_key,
                "gl": self.gl,
                "hl": self.hl,
            },
            headers={"Accept": "application/json"},
        )

    def search_results_url(self, query: str) -> str:
        return build_search_url("https://www.google.com/search", query, {"tbm": "shop"})


class WalmartProfile(UpstreamProfile):
    """Walmart's internal search API, with the public search page as fallback."""

    provider_id = "walmart"
    results_field = "items"
    envelope: EnvelopeStyle = "detailed"
    retailer_name = "Walmart"
    origin = "https://www.walmart.com"

    def __init__(self):
        self.api_url = f"{self.origin}/search/api/preso"
        self.search_page_url = f"{self.origin}/search"

    def primary_request(self, query: str) -> UpstreamRequest:
        return UpstreamRequest(
            url=self.api_url,
            params={"q": query, "page": "1", "prg": "desktop"},
            headers={
                "User-Agent": BROWSER_USER_AGENT,
                "Accept": "application/json",
                "Accept-Language": "en-US,en;q=0.9",
                "Referer": self.search_results_url(query),
                "Connection": "keep-alive",
                "Cache-Control": "no-cache",
                "Pragma": "no-cache",
            },
        )

    def fallback_request(self, query: str) -> Optional[UpstreamRequest]:
        return UpstreamRequest(
            url=self.search_page_url,
            params={"q": query},
            headers={
                "User-Agent": BROWSER_USER_AGENT,
                "Accept": "text/html",
                "Accept-Language": "en-US,en;q=0.9",
            },
        )

    def search_results_url(self, query: str) -> str:
        return build_search_url(self.search_page_url, query)


def build_profile(settings: Settings) -> UpstreamProfile:
    """Instantiate the profile selected by ``SEARCH_BACKEND``."""
    backend = settings.search_backend
    if backend == "google_shopping":
        return GoogleShoppingProfile(settings.serpapi_key, gl=settings.serpapi_gl, hl=settings.serpapi_hl)
    if backend == "walmart":
        return WalmartProfile()
    raise ConfigurationError(
        f"Unknown search backend {backend!r}",
        detail={"supported": list(SEARCH_BACKENDS)},
    )
