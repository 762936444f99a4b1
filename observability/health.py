"""
Readiness checks for the search backend configuration.

The upstream APIs are metered, so readiness only inspects configuration
and never pings them.
"""

from typing import Dict, Any, Optional

from config import Settings, SEARCH_BACKENDS
from .logging import get_logger

logger = get_logger(__name__)


class HealthCheckResult:
    """Result of a health check."""

    def __init__(self, name: str, status: str, details: Optional[Dict[str, Any]] = None, error: Optional[str] = None):
        self.name = name
        self.status = status  # "ok", "degraded", "error"
        self.details = details or {}
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "status": self.status,
            "details": self.details,
        }
        if self.error:
            result["error"] = self.error
        return result

    @property
    def is_healthy(self) -> bool:
        return self.status == "ok"


def check_search_backend(settings: Settings) -> HealthCheckResult:
    """
    Check that the selected search backend can be used.

    Args:
        settings: Active service settings

    Returns:
        HealthCheckResult for the search backend
    """
    backend = settings.search_backend

    if backend not in SEARCH_BACKENDS:
        return HealthCheckResult(
            name="search_backend",
            status="error",
            error=f"Unknown SEARCH_BACKEND {backend!r}",
        )

    if backend == "google_shopping" and not settings.serpapi_key:
        logger.warning("SerpAPI backend selected without SERPAPI_KEY")
        return HealthCheckResult(
            name="search_backend",
            status="degraded",
            details={"backend": backend, "message": "SERPAPI_KEY not set"},
        )

    return HealthCheckResult(
        name="search_backend",
        status="ok",
        details={
            "backend": backend,
            "demo_fallback": settings.demo_fallback_enabled,
        },
    )
