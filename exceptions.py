"""
Custom exception hierarchy for the Product Search API.

All exceptions inherit from a base ProductSearchError class so route
handlers can catch and serialize them in one place.

Exception Hierarchy:
    ProductSearchError (base)
    ├── ValidationError
    │   └── MissingQueryError
    ├── ConfigurationError
    └── ExternalServiceError
        └── UpstreamTransportError

Extraction problems (an empty tier, malformed embedded JSON, every record
filtered out) are not exceptions. They are absorbed inside the pipeline.

Usage:
    from exceptions import MissingQueryError, UpstreamTransportError

    raise MissingQueryError()
    raise UpstreamTransportError("Read timed out", provider="walmart")
"""

from typing import Optional, Dict, Any


class ProductSearchError(Exception):
    """
    Base exception for all Product Search application errors.

    Attributes:
        message: Human-readable error message
        detail: Optional dict with additional error context
        status_code: Suggested HTTP status code (for API errors)
    """

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.detail = detail
        self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for JSON serialization."""
        result = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.detail:
            result["detail"] = self.detail
        return result


class ValidationError(ProductSearchError):
    """
    Raised when request input is unusable.

    Examples:
        raise ValidationError("Query too long")
    """

    def __init__(self, message: str, *, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message, detail=detail, status_code=400)


class MissingQueryError(ValidationError):
    """
    Raised when the search query parameter is missing or blank.

    The route answers with a fixed example-usage payload, so the message
    rarely needs overriding.
    """

    EXAMPLE = "/search?q=laptop"

    def __init__(self, message: str = "Product name is required"):
        super().__init__(message, detail={"example": self.EXAMPLE})

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "example": self.EXAMPLE}


class ConfigurationError(ProductSearchError):
    """Raised when the service is started with an unusable configuration."""

    def __init__(self, message: str, *, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message, detail=detail, status_code=500)


class ExternalServiceError(ProductSearchError):
    """
    Base exception for external service failures.
    """

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
        service_name: Optional[str] = None,
    ):
        if service_name and detail is None:
            detail = {"service": service_name}
        elif service_name and detail:
            detail["service"] = service_name

        super().__init__(message, detail=detail, status_code=502)


class UpstreamTransportError(ExternalServiceError):
    """
    Raised when an upstream search endpoint is unreachable, times out,
    answers with a non-success status or exceeds the response size ceiling.

    Examples:
        raise UpstreamTransportError("Read timed out", provider="walmart")
        raise UpstreamTransportError("HTTP 403", provider="walmart", status=403)
    """

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
        provider: Optional[str] = None,
        status: Optional[int] = None,
    ):
        detail = dict(detail or {})
        if provider:
            detail["provider"] = provider
        if status is not None:
            detail["status"] = status
        self.provider = provider
        self.upstream_status = status

        super().__init__(message, detail=detail, service_name="upstream")

    def to_response(self) -> Dict[str, Any]:
        """Payload surfaced to API clients on a failed search."""
        return {"error": "Failed to fetch products", "details": self.message}
