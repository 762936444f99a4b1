"""URL helpers for product links."""

from __future__ import annotations

from typing import Dict, Optional
from urllib.parse import quote, urlencode


def resolve_link(raw_url: Optional[str], origin: Optional[str]) -> str:
    """Turn an upstream link into an absolute URL where an origin is known.

    Links from marketplace APIs have no single origin to resolve against,
    so without ``origin`` a relative value is returned unchanged.
    """
    url = (raw_url or "").strip()
    if not url:
        return ""
    lowered = url.lower()
    if lowered.startswith(("http://", "https://")):
        return url
    if url.startswith("//"):
        return f"https:{url}"
    if not origin:
        return url
    if url.startswith("www."):
        return f"https://{url}"
    origin = origin.rstrip("/")
    if url.startswith("/"):
        return f"{origin}{url}"
    return f"{origin}/{url}"


def build_search_url(base_url: str, query: str, extra: Optional[Dict[str, str]] = None) -> str:
    """Search-results page URL for a query, e.g. ``https://www.walmart.com/search?q=laptop``.

    Spaces are percent-encoded (``%20``), not turned into ``+``.
    """
    params = {"q": query}
    if extra:
        params.update(extra)
    return f"{base_url}?{urlencode(params, quote_via=quote)}"


__all__ = ["resolve_link", "build_search_url"]
