"""Tests for search orchestration: fallback, tiers, filtering, demo policy."""

import pytest

from conftest import (
    FakeFetcher,
    html_response,
    json_response,
    page_with_state,
    transport_error,
)
from exceptions import UpstreamTransportError
from sourcing.models import FetchResponse
from sourcing.service import ProductSearchService


@pytest.mark.asyncio
async def test_structured_api_results_are_mapped_and_filtered(google_profile):
    fetcher = FakeFetcher(json_response({
        "shopping_results": [
            {"title": "Redmi Note 13", "source": "Amazon.in", "price": "₹17,999", "link": "https://amazon.in/dp/1"},
            {"title": "Redmi Note 13", "source": "gadgetbazaar.example", "price": "₹16,500"},
            {"title": "Redmi Note 13 5G", "source": "Flipkart", "price": "₹18,499"},
        ]
    }))
    service = ProductSearchService(google_profile, fetcher)

    outcome = await service.search("redmi note 13")

    assert outcome.status == "success"
    assert outcome.tier == "structured"
    assert [r.source for r in outcome.results] == ["Amazon", "Flipkart"]
    assert fetcher.kinds == ["primary"]
    params = fetcher.calls[0].params
    assert params["engine"] == "google_shopping"
    assert params["q"] == "redmi note 13"
    assert params["api_key"] == "test-key"


@pytest.mark.asyncio
async def test_primary_transport_failure_uses_html_fallback_once(walmart_profile, walmart_search_page):
    fetcher = FakeFetcher(transport_error("HTTP 412", status=412), html_response(walmart_search_page))
    service = ProductSearchService(walmart_profile, fetcher)

    outcome = await service.search("laptop")

    assert fetcher.kinds == ["primary", "fallback"]
    assert fetcher.calls[0].url == "https://www.walmart.com/search/api/preso"
    assert fetcher.calls[1].url == "https://www.walmart.com/search"
    assert outcome.used_fallback is True
    assert outcome.tier == "embedded_json"
    assert [r.name for r in outcome.results] == ["Acer Aspire 5 Laptop", "ASUS Vivobook 15", "Dell Inspiron 14"]
    assert all(r.source == "Walmart" for r in outcome.results)


@pytest.mark.asyncio
async def test_fallback_failure_surfaces_transport_error(walmart_profile):
    fetcher = FakeFetcher(transport_error("HTTP 412"), transport_error("Read timed out"))
    service = ProductSearchService(walmart_profile, fetcher)

    with pytest.raises(UpstreamTransportError) as exc_info:
        await service.search("laptop")

    assert exc_info.value.message == "Read timed out"
    assert len(fetcher.calls) == 2


@pytest.mark.asyncio
async def test_profile_without_fallback_raises_immediately(google_profile):
    fetcher = FakeFetcher(transport_error("Invalid API key", status=401))
    service = ProductSearchService(google_profile, fetcher)

    with pytest.raises(UpstreamTransportError):
        await service.search("laptop")

    assert len(fetcher.calls) == 1


@pytest.mark.asyncio
async def test_html_answer_to_primary_request_goes_through_html_tiers(walmart_profile, walmart_page_without_state):
    fetcher = FakeFetcher(html_response(walmart_page_without_state))
    service = ProductSearchService(walmart_profile, fetcher)

    outcome = await service.search("laptop")

    assert outcome.tier == "pattern"
    assert outcome.used_fallback is False
    displayed = outcome.display_results()
    assert [d["source"] for d in displayed] == ["Walmart (Basic)", "Walmart (Basic)"]
    assert displayed[0]["link"] == "https://www.walmart.com/search?q=laptop"


@pytest.mark.asyncio
async def test_empty_result_without_demo_policy(walmart_profile):
    fetcher = FakeFetcher(json_response({"items": []}))
    service = ProductSearchService(walmart_profile, fetcher)

    outcome = await service.search("laptop")

    assert outcome.status == "success"
    assert outcome.results == []
    assert outcome.tier is None


@pytest.mark.asyncio
async def test_demo_policy_substitutes_labelled_placeholders(walmart_profile):
    fetcher = FakeFetcher(html_response(page_with_state('{"search": {}}')))
    service = ProductSearchService(walmart_profile, fetcher, demo_fallback=True)

    outcome = await service.search("laptop")

    assert outcome.status == "demo_data"
    assert outcome.count == 2
    assert "blocking automated access" in outcome.message
    assert all(r.source == "Walmart (Demo Data)" for r in outcome.results)


@pytest.mark.asyncio
async def test_demo_policy_has_no_effect_for_marketplace_profile(google_profile):
    fetcher = FakeFetcher(json_response({"shopping_results": [{"title": "X", "source": "unknown.example"}]}))
    service = ProductSearchService(google_profile, fetcher, demo_fallback=True)

    outcome = await service.search("x")

    assert outcome.status == "success"
    assert outcome.results == []


@pytest.mark.asyncio
async def test_query_is_trimmed_before_use(walmart_profile):
    fetcher = FakeFetcher(json_response({"items": [{"productDataShaped": {"name": "Mouse"}}]}))
    service = ProductSearchService(walmart_profile, fetcher)

    outcome = await service.search("  wireless mouse ")

    assert outcome.query == "wireless mouse"
    assert fetcher.calls[0].params["q"] == "wireless mouse"
    assert outcome.results[0].link == "https://www.walmart.com/search?q=wireless%20mouse"


@pytest.mark.asyncio
async def test_html_served_as_json_goes_through_html_tiers(walmart_profile, walmart_page_without_state):
    mislabelled = FetchResponse(
        status=200,
        body=walmart_page_without_state,
        content_type="application/json",
        url="https://www.walmart.com/search/api/preso",
    )
    assert mislabelled.content_kind == "html"

    outcome = await ProductSearchService(walmart_profile, FakeFetcher(mislabelled)).search("laptop")

    assert outcome.tier == "pattern"
    assert [r.name for r in outcome.results] == ['Gateway 14.1" Ultra Slim', "Chromebook 11"]
