"""Typed models for the product search pipeline."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

ContentKind = Literal["json", "html"]
SearchStatus = Literal["success", "demo_data"]

RawUpstreamItem = Dict[str, Any]

PRICE_SENTINEL = "Price not available"
IMAGE_SENTINEL = "No image available"
RATING_SENTINEL = "No rating available"
DESCRIPTION_SENTINEL = "No description available"
LOW_CONFIDENCE_MARKER = " (Basic)"


class ProductRecord(BaseModel):
    """Normalized product listing.

    Absent optional fields stay ``None`` inside the pipeline; the display
    sentinels only appear in :meth:`to_display`.
    """

    name: str
    price: Optional[str] = None
    link: str
    image: Optional[str] = None
    rating: Optional[str] = None
    description: Optional[str] = None
    source: str
    low_confidence: bool = False

    @field_validator("name", "source", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    def to_display(self) -> Dict[str, str]:
        source = self.source
        if self.low_confidence:
            source = f"{source}{LOW_CONFIDENCE_MARKER}"
        return {
            "name": self.name,
            "price": self.price or PRICE_SENTINEL,
            "link": self.link,
            "image": self.image or IMAGE_SENTINEL,
            "rating": self.rating or RATING_SENTINEL,
            "description": self.description or DESCRIPTION_SENTINEL,
            "source": source,
        }


class FetchResponse(BaseModel):
    """Raw upstream answer handed from the fetcher to the extraction pipeline."""

    status: int
    body: str
    content_type: str = ""
    url: str = ""

    @property
    def content_kind(self) -> ContentKind:
        # Bot-check and search pages are sometimes served under a JSON content type
        head = self.body.lstrip()[:1]
        if head == "<":
            return "html"
        if head in ("{", "[") or "json" in self.content_type.lower():
            return "json"
        return "html"


class SearchOutcome(BaseModel):
    """Result of one search, before it is wrapped in a response envelope."""

    query: str
    results: List[ProductRecord] = Field(default_factory=list)
    status: SearchStatus = "success"
    message: Optional[str] = None
    tier: Optional[str] = None
    used_fallback: bool = False

    @property
    def count(self) -> int:
        return len(self.results)

    def display_results(self) -> List[Dict[str, str]]:
        return [record.to_display() for record in self.results]
