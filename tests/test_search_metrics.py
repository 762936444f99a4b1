"""Tests for search pipeline observability metrics."""

import logging

import pytest
from sourcing.metrics import (
    FetchMetrics,
    SearchMetrics,
    track_search,
)


class TestSearchMetrics:
    """Tests for SearchMetrics dataclass."""

    def test_has_results_true(self):
        metrics = SearchMetrics(approved_records=5)
        assert metrics.has_results() is True

    def test_has_results_false(self):
        metrics = SearchMetrics(approved_records=0)
        assert metrics.has_results() is False

    def test_filtered_out(self):
        metrics = SearchMetrics()
        metrics.record_records(mapped=10, approved=4)
        assert metrics.filtered_out == 6

    def test_record_fetch_marks_fallback(self):
        metrics = SearchMetrics()
        metrics.record_fetch("primary", "error", 120.0, "HTTP 412")
        metrics.record_fetch("fallback", "ok", 300.0)

        assert metrics.used_fallback is True
        assert [f.kind for f in metrics.fetches] == ["primary", "fallback"]
        assert metrics.fetches[0].error_message == "HTTP 412"

    def test_record_extraction(self):
        metrics = SearchMetrics()
        metrics.record_extraction("pattern", ["embedded_json", "pattern"], 7)
        assert metrics.tier == "pattern"
        assert metrics.tiers_attempted == ["embedded_json", "pattern"]
        assert metrics.extracted_items == 7


class TestFetchMetrics:

    def test_fetch_metrics_defaults(self):
        fm = FetchMetrics(kind="primary", status="ok", latency_ms=250.5)
        assert fm.error_message is None


class TestTrackSearch:

    def test_context_manager_yields_fresh_metrics(self):
        with track_search("walmart", "laptop") as first:
            first.record_records(3, 3)
        with track_search("walmart", "laptop") as second:
            pass
        assert first is not second
        assert second.approved_records == 0

    def test_latency_recorded(self):
        with track_search("walmart", "laptop") as metrics:
            pass
        assert metrics.total_latency_ms >= 0
        assert metrics.failed is False

    def test_failure_is_marked_and_reraised(self, caplog):
        with caplog.at_level(logging.ERROR, logger="sourcing.metrics"):
            with pytest.raises(RuntimeError):
                with track_search("walmart", "laptop") as metrics:
                    raise RuntimeError("upstream down")

        assert metrics.failed is True
        assert any(r.getMessage() == "Search failed - upstream unavailable" for r in caplog.records)

    def test_completion_log_carries_structured_fields(self, caplog):
        with caplog.at_level(logging.INFO, logger="sourcing.metrics"):
            with track_search("google_shopping", "kettle") as metrics:
                metrics.record_extraction("structured", ["structured"], 2)
                metrics.record_records(2, 1)

        record = next(r for r in caplog.records if r.getMessage() == "Search completed successfully")
        assert record.event == "search_complete"
        assert record.records == {"mapped": 2, "approved": 1, "filtered_out": 1}
