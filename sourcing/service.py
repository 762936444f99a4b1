"""Search orchestration: fetch, extract, map, filter."""

from __future__ import annotations

import logging
import time
from typing import Optional, Tuple

from config import Settings
from exceptions import UpstreamTransportError
from sourcing.demo import demo_message_for, demo_records_for
from sourcing.extractors import extract_with_tier
from sourcing.fetcher import UpstreamFetcher
from sourcing.filters import filter_approved
from sourcing.metrics import SearchMetrics, track_search
from sourcing.models import FetchResponse, SearchOutcome
from sourcing.normalizers import map_items
from sourcing.profiles import UpstreamProfile, UpstreamRequest, build_profile

logger = logging.getLogger(__name__)


class ProductSearchService:
    """Runs one product search against a single upstream profile.

    At most two outbound requests per search: the primary one and, when it
    fails at the transport level and the profile defines one, a single
    sequential fallback.
    """

    def __init__(
        self,
        profile: UpstreamProfile,
        fetcher: UpstreamFetcher,
        *,
        demo_fallback: bool = False,
    ):
        self.profile = profile
        self.fetcher = fetcher
        self.demo_fallback = demo_fallback

    async def search(self, query: str) -> SearchOutcome:
        query = query.strip()
        logger.info(f"Processing search for: {query}")

        with track_search(self.profile.provider_id, query) as metrics:
            response, used_fallback = await self._fetch_with_fallback(query, metrics)

            extraction = extract_with_tier(
                response.body,
                response.content_kind,
                query,
                profile=self.profile,
            )
            metrics.record_extraction(extraction.tier, extraction.attempted, len(extraction.items))

            records = map_items(extraction.items, profile=self.profile, query=query)
            approved = filter_approved(records)
            metrics.record_records(len(records), len(approved))

            if not approved and self.demo_fallback:
                demo = demo_records_for(self.profile.provider_id)
                if demo:
                    retailer = self.profile.retailer_name or self.profile.provider_id
                    logger.warning(f"No products found - {retailer} may be blocking automated access")
                    metrics.demo_data = True
                    return SearchOutcome(
                        query=query,
                        results=demo,
                        status="demo_data",
                        message=demo_message_for(retailer),
                        tier=extraction.tier,
                        used_fallback=used_fallback,
                    )

            logger.info(f"Returning {len(approved)} formatted products")
            return SearchOutcome(
                query=query,
                results=approved,
                status="success",
                tier=extraction.tier,
                used_fallback=used_fallback,
            )

    async def _fetch_with_fallback(
        self, query: str, metrics: SearchMetrics
    ) -> Tuple[FetchResponse, bool]:
        provider = self.profile.provider_id
        try:
            response = await self._timed_fetch(self.profile.primary_request(query), "primary", metrics)
            return response, False
        except UpstreamTransportError as primary_error:
            fallback = self.profile.fallback_request(query)
            if fallback is None:
                logger.error(f"[{provider}] Upstream request failed: {primary_error.message}")
                raise
            logger.warning(
                f"[{provider}] Primary request failed ({primary_error.message}); trying HTML fallback"
            )

        try:
            response = await self._timed_fetch(fallback, "fallback", metrics)
        except UpstreamTransportError as fallback_error:
            logger.error(f"[{provider}] Fallback scraping also failed: {fallback_error.message}")
            raise
        return response, True

    async def _timed_fetch(self, request: UpstreamRequest, kind: str, metrics: SearchMetrics) -> FetchResponse:
        started = time.monotonic()
        try:
            response = await self.fetcher.fetch(request, provider=self.profile.provider_id, kind=kind)
        except UpstreamTransportError as e:
            metrics.record_fetch(kind, "error", (time.monotonic() - started) * 1000, e.message)
            raise
        metrics.record_fetch(kind, "ok", (time.monotonic() - started) * 1000)
        return response


def build_search_service(settings: Settings, fetcher: Optional[UpstreamFetcher] = None) -> ProductSearchService:
    """Wire a service from settings."""
    fetcher = fetcher or UpstreamFetcher(
        timeout_seconds=settings.upstream_timeout_seconds,
        max_bytes=settings.upstream_max_bytes,
    )
    return ProductSearchService(
        build_profile(settings),
        fetcher,
        demo_fallback=settings.demo_fallback_enabled,
    )
