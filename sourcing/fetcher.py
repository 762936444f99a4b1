"""Outbound HTTP for upstream search endpoints."""

from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

from exceptions import UpstreamTransportError
from observability.metrics import upstream_errors_total, upstream_fetch_duration_seconds
from sourcing.models import FetchResponse
from sourcing.profiles import UpstreamRequest

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_BYTES = 10 * 1024 * 1024


class UpstreamFetcher:
    """GET one upstream URL with a timeout and a response size ceiling.

    Any transport problem (connect failure, timeout, non-2xx status, oversized
    body) is raised as :class:`UpstreamTransportError`.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_bytes: int = DEFAULT_MAX_BYTES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = httpx.Timeout(timeout_seconds)
        self.max_bytes = max_bytes
        self._transport = transport

    async def fetch(
        self,
        request: UpstreamRequest,
        *,
        provider: str,
        kind: str = "primary",
    ) -> FetchResponse:
        started = time.monotonic()
        try:
            return await self._fetch(request, provider=provider)
        except UpstreamTransportError as e:
            upstream_errors_total.labels(provider=provider, error_type="status" if e.upstream_status else "size").inc()
            raise
        except httpx.TimeoutException as e:
            upstream_errors_total.labels(provider=provider, error_type="timeout").inc()
            raise UpstreamTransportError(
                f"Upstream request timed out after {self.timeout.read}s",
                provider=provider,
            ) from e
        except httpx.HTTPError as e:
            upstream_errors_total.labels(provider=provider, error_type=type(e).__name__).inc()
            raise UpstreamTransportError(str(e) or type(e).__name__, provider=provider) from e
        finally:
            upstream_fetch_duration_seconds.labels(provider=provider, kind=kind).observe(
                time.monotonic() - started
            )

    async def _fetch(self, request: UpstreamRequest, *, provider: str) -> FetchResponse:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            async with client.stream(
                "GET", request.url, params=request.params, headers=request.headers
            ) as response:
                logger.info(f"[{provider}] Response status: {response.status_code}")
                if not response.is_success:
                    raise UpstreamTransportError(
                        f"Request failed with status code {response.status_code}",
                        provider=provider,
                        status=response.status_code,
                    )

                declared = response.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > self.max_bytes:
                    raise self._too_large(provider)

                chunks = []
                received = 0
                async for chunk in response.aiter_bytes():
                    received += len(chunk)
                    if received > self.max_bytes:
                        raise self._too_large(provider)
                    chunks.append(chunk)

                body = b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")
                return FetchResponse(
                    status=response.status_code,
                    body=body,
                    content_type=response.headers.get("content-type", ""),
                    url=str(response.url),
                )

    def _too_large(self, provider: str) -> UpstreamTransportError:
        return UpstreamTransportError(
            f"Upstream response exceeded {self.max_bytes} bytes",
            provider=provider,
            detail={"max_bytes": self.max_bytes},
        )
