import json
import os
import sys
from typing import List, Optional, Union

import pytest

# Add parent directory to path to allow importing main and the packages
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

os.environ.setdefault("SEARCH_BACKEND", "walmart")
os.environ.setdefault("DEMO_FALLBACK_ENABLED", "false")

from exceptions import UpstreamTransportError
from sourcing.models import FetchResponse
from sourcing.profiles import GoogleShoppingProfile, UpstreamRequest, WalmartProfile


PRELOADED_STATE = {
    "search": {
        "searchResult": {
            "itemStacks": [
                {
                    "items": [
                        {
                            "name": "Acer Aspire 5 Laptop",
                            "price": {"priceString": "$449.00", "currentPrice": 449},
                            "canonicalUrl": "/ip/Acer-Aspire-5/111",
                            "imageUrl": "https://i5.walmartimages.com/acer.jpg",
                        },
                        {
                            "name": "ASUS Vivobook 15",
                            "price": {"currentPrice": 299.5},
                            "canonicalUrl": "/ip/ASUS-Vivobook/222",
                        },
                    ]
                },
                {"items": [{"name": "Dell Inspiron 14", "price": {"priceString": "$529.99"}}]},
            ]
        }
    }
}

ITEM_DIVS = """
<div class="grid">
  <div class="tile" data-item-id="A1"><span class="title">Gateway 14.1&quot; Ultra Slim</span><b>$199.00</b></div>
  <div class="tile" data-item-id="A2"><span>No price on this one</span></div>
  <div class="tile" data-item-id="A3"><span>Chromebook 11</span> now $89.99</div>
</div>
"""


def page_with_state(state_json: str, body: str = "") -> str:
    return (
        "<html><head><title>Walmart.com</title></head><body>"
        f"<script id=\"state\">window.__PRELOADED_STATE__ = {state_json};</script>"
        f"{body}</body></html>"
    )


@pytest.fixture
def walmart_profile():
    return WalmartProfile()


@pytest.fixture
def google_profile():
    return GoogleShoppingProfile("test-key", gl="IN", hl="en")


@pytest.fixture
def preloaded_state():
    return json.loads(json.dumps(PRELOADED_STATE))


@pytest.fixture
def walmart_search_page():
    return page_with_state(json.dumps(PRELOADED_STATE), ITEM_DIVS)


@pytest.fixture
def walmart_page_without_state():
    return f"<html><body>{ITEM_DIVS}</body></html>"


def json_response(payload, url: str = "https://upstream.test/") -> FetchResponse:
    return FetchResponse(status=200, body=json.dumps(payload), content_type="application/json", url=url)


def html_response(body: str, url: str = "https://upstream.test/") -> FetchResponse:
    return FetchResponse(status=200, body=body, content_type="text/html; charset=utf-8", url=url)


class FakeFetcher:
    """Stands in for UpstreamFetcher: replays queued responses or errors in order."""

    def __init__(self, *outcomes: Union[FetchResponse, Exception]):
        self.outcomes: List[Union[FetchResponse, Exception]] = list(outcomes)
        self.calls: List[UpstreamRequest] = []
        self.kinds: List[str] = []

    async def fetch(self, request: UpstreamRequest, *, provider: str, kind: str = "primary") -> FetchResponse:
        self.calls.append(request)
        self.kinds.append(kind)
        if not self.outcomes:
            raise AssertionError("FakeFetcher called more times than expected")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def transport_error(message: str = "connect failed", status: Optional[int] = None) -> UpstreamTransportError:
    return UpstreamTransportError(message, provider="test", status=status)
