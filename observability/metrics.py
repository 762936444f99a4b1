"""
Prometheus metrics collection for the Product Search API.

Provides RED metrics (Rate, Errors, Duration) for HTTP traffic plus
upstream and extraction metrics for the search pipeline.
"""

from prometheus_client import (
    Counter,
    Histogram,
    Gauge,
    REGISTRY,
)

# Use the default registry
metrics_registry = REGISTRY

# HTTP Metrics (RED - Rate, Errors, Duration)
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=metrics_registry,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
    registry=metrics_registry,
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests in progress",
    ["method", "endpoint"],
    registry=metrics_registry,
)

# Upstream Metrics
upstream_fetch_duration_seconds = Histogram(
    "upstream_fetch_duration_seconds",
    "Upstream search fetch duration in seconds",
    ["provider", "kind"],  # kind: primary, fallback
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
    registry=metrics_registry,
)

upstream_errors_total = Counter(
    "upstream_errors_total",
    "Total upstream fetch failures",
    ["provider", "error_type"],
    registry=metrics_registry,
)

# Extraction Metrics
extraction_tier_total = Counter(
    "extraction_tier_total",
    "Searches resolved by each extraction tier",
    ["provider", "tier"],  # tier: structured, embedded_json, pattern, none
    registry=metrics_registry,
)

search_results_count = Histogram(
    "search_results_count",
    "Number of records returned per search",
    ["provider"],
    buckets=[0, 1, 5, 10, 20, 50, 100],
    registry=metrics_registry,
)

records_filtered_total = Counter(
    "records_filtered_total",
    "Records dropped by the approved-source filter",
    ["provider"],
    registry=metrics_registry,
)

demo_responses_total = Counter(
    "demo_responses_total",
    "Searches answered with placeholder demo data",
    ["provider"],
    registry=metrics_registry,
)
