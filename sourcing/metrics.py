"""Search pipeline observability.

Each search gets a SearchMetrics record that is filled in as the pipeline
runs and logged as one structured ``search_complete`` line at the end.
Metrics tracked:
- upstream fetch attempts (primary / fallback) with status and latency
- which extraction tier produced items
- item counts through extraction, mapping and source filtering
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from observability.metrics import (
    demo_responses_total,
    extraction_tier_total,
    records_filtered_total,
    search_results_count,
)

logger = logging.getLogger("sourcing.metrics")


@dataclass
class FetchMetrics:
    """One outbound upstream request."""
    kind: str  # primary, fallback
    status: str  # ok, error
    latency_ms: float
    error_message: Optional[str] = None


@dataclass
class SearchMetrics:
    """Aggregated metrics for a single search."""
    provider_id: str = ""
    query: str = ""
    fetches: List[FetchMetrics] = field(default_factory=list)
    tiers_attempted: List[str] = field(default_factory=list)
    tier: Optional[str] = None
    extracted_items: int = 0
    mapped_records: int = 0
    approved_records: int = 0
    used_fallback: bool = False
    demo_data: bool = False
    failed: bool = False
    total_latency_ms: float = 0.0

    def record_fetch(self, kind: str, status: str, latency_ms: float, error_message: Optional[str] = None):
        self.fetches.append(FetchMetrics(kind, status, latency_ms, error_message))
        if kind == "fallback":
            self.used_fallback = True

    def record_extraction(self, tier: Optional[str], attempted: List[str], extracted: int):
        self.tier = tier
        self.tiers_attempted = list(attempted)
        self.extracted_items = extracted

    def record_records(self, mapped: int, approved: int):
        self.mapped_records = mapped
        self.approved_records = approved

    @property
    def filtered_out(self) -> int:
        return max(self.mapped_records - self.approved_records, 0)

    def has_results(self) -> bool:
        return self.approved_records > 0


@contextmanager
def track_search(provider_id: str, query: str) -> Iterator[SearchMetrics]:
    """Time a search and log its metrics when it finishes (or fails)."""
    metrics = SearchMetrics(provider_id=provider_id, query=query)
    started = time.time()
    try:
        yield metrics
    except Exception:
        metrics.failed = True
        raise
    finally:
        metrics.total_latency_ms = (time.time() - started) * 1000
        _export(metrics)
        _log_metrics(metrics)


def _export(m: SearchMetrics) -> None:
    if m.failed:
        return
    extraction_tier_total.labels(provider=m.provider_id, tier=m.tier or "none").inc()
    search_results_count.labels(provider=m.provider_id).observe(m.approved_records)
    if m.filtered_out:
        records_filtered_total.labels(provider=m.provider_id).inc(m.filtered_out)
    if m.demo_data:
        demo_responses_total.labels(provider=m.provider_id).inc()


def _log_metrics(m: SearchMetrics) -> None:
    log_data = {
        "event": "search_complete",
        "provider_id": m.provider_id,
        "query_length": len(m.query),
        "fetches": [
            {
                "kind": f.kind,
                "status": f.status,
                "latency_ms": round(f.latency_ms, 1),
            }
            for f in m.fetches
        ],
        "extraction": {
            "tier": m.tier,
            "attempted": m.tiers_attempted,
            "items": m.extracted_items,
        },
        "records": {
            "mapped": m.mapped_records,
            "approved": m.approved_records,
            "filtered_out": m.filtered_out,
        },
        "used_fallback": m.used_fallback,
        "demo_data": m.demo_data,
        "latency_ms": round(m.total_latency_ms, 1),
    }

    if m.failed:
        logger.error("Search failed - upstream unavailable", extra=log_data)
    elif m.demo_data:
        logger.warning("Search answered with demo data", extra=log_data)
    elif not m.has_results():
        logger.warning("Search completed but no results", extra=log_data)
    else:
        logger.info("Search completed successfully", extra=log_data)
