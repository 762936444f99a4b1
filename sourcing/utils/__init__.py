"""Utility helpers shared by the extraction and mapping stages."""

from .url import build_search_url, resolve_link

__all__ = [
    "build_search_url",
    "resolve_link",
]
