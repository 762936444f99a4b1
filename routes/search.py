"""
Product search endpoint.

GET /search?q=<query> runs one search against the configured upstream:
  1. primary upstream request (JSON API), one HTML fallback on transport failure
  2. tiered extraction (structured JSON -> embedded page state -> markup patterns)
  3. field mapping onto the product record contract
  4. approved-merchant filtering

Results are not stored anywhere.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from config import get_settings
from exceptions import MissingQueryError, ValidationError
from sourcing.models import SearchOutcome
from sourcing.service import ProductSearchService, build_search_service

router = APIRouter(tags=["search"])

MAX_QUERY_LENGTH = 500

# ---------------------------------------------------------------------------
# Lazy search service
# ---------------------------------------------------------------------------
_search_service: Optional[ProductSearchService] = None


def get_search_service() -> ProductSearchService:
    global _search_service
    if _search_service is None:
        _search_service = build_search_service(get_settings())
    return _search_service


def build_envelope(outcome: SearchOutcome, style: str) -> Dict[str, Any]:
    """Wrap search results in the response shape of the active deployment."""
    results = outcome.display_results()
    if style == "results_only":
        return {"results": results}

    envelope: Dict[str, Any] = {
        "query": outcome.query,
        "count": outcome.count,
        "status": outcome.status,
    }
    if outcome.message:
        envelope["message"] = outcome.message
    envelope["results"] = results
    return envelope


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@router.get("/", response_class=HTMLResponse)
async def home() -> str:
    return """
    <h1>Product Search API</h1>
    <p>Use the /search endpoint with a query parameter:</p>
    <a href="/search?q=laptop">Example: /search?q=laptop</a>
    """


@router.get("/search")
async def search_products(
    q: Optional[str] = Query(None, description="Product name to search for"),
    service: ProductSearchService = Depends(get_search_service),
):
    query = (q or "").strip()
    if not query:
        raise MissingQueryError()
    if len(query) > MAX_QUERY_LENGTH:
        raise ValidationError(f"Query too long (max {MAX_QUERY_LENGTH} chars)")

    outcome = await service.search(query)
    return build_envelope(outcome, service.profile.envelope)
