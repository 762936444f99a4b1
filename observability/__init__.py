"""
Observability infrastructure for the Product Search API.

Provides:
- Structured logging with correlation IDs
- Prometheus metrics
- Readiness checks
"""

from .logging import get_logger, correlation_id_context, get_correlation_id
from .metrics import (
    metrics_registry,
    http_requests_total,
    http_request_duration_seconds,
    http_requests_in_progress,
    upstream_fetch_duration_seconds,
    upstream_errors_total,
    extraction_tier_total,
    search_results_count,
    records_filtered_total,
    demo_responses_total,
)

__all__ = [
    "get_logger",
    "correlation_id_context",
    "get_correlation_id",
    "metrics_registry",
    "http_requests_total",
    "http_request_duration_seconds",
    "http_requests_in_progress",
    "upstream_fetch_duration_seconds",
    "upstream_errors_total",
    "extraction_tier_total",
    "search_results_count",
    "records_filtered_total",
    "demo_responses_total",
]
