"""
Structured logging for the Product Search API.

Every record carries the request ID of the HTTP request that produced it
(``"none"`` outside a request), and upstream credentials are masked before
anything is written. SerpAPI takes its key as a URL query parameter, so
masking covers logged URLs as well as ``extra`` fields.

Usage:
    from observability import get_logger

    logger = get_logger(__name__)
    logger.info("Upstream fetched", extra={"provider": "walmart", "status": 200})
"""

import logging
import os
import re
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "product-search-api"
REDACTED = "[REDACTED]"

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_URL_CREDENTIAL = re.compile(r"(?i)\b(api_key|apikey|key|token)=([^&\s\"']+)")

_CREDENTIAL_FIELDS = frozenset({
    "api_key",
    "apikey",
    "serpapi_key",
    "authorization",
    "token",
    "secret",
    "password",
})

_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(correlation_id)s | %(name)s | %(message)s"
_JSON_FORMAT = "%(timestamp)s %(level)s %(logger)s %(correlation_id)s %(message)s"

# Libraries that log every outbound request at INFO
_NOISY_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "uvicorn.error": logging.INFO,
}


def get_correlation_id() -> Optional[str]:
    return _request_id.get()


@contextmanager
def correlation_id_context(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Bind a request ID (caller-supplied or freshly generated) for the enclosed block."""
    request_id = correlation_id or f"req-{uuid.uuid4().hex[:16]}"
    token = _request_id.set(request_id)
    try:
        yield request_id
    finally:
        _request_id.reset(token)


def redact_query_secrets(text: str) -> str:
    """``...?q=tv&api_key=abc`` -> ``...?q=tv&api_key=[REDACTED]``."""
    return _URL_CREDENTIAL.sub(lambda m: f"{m.group(1)}={REDACTED}", text)


class CorrelationIDFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _request_id.get() or "none"
        return True


class SensitiveDataFilter(logging.Filter):
    """Mask upstream credentials in the message, its args and extra fields."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = redact_query_secrets(record.msg)
        if record.args:
            record.args = _mask(record.args)
        for attr in list(vars(record)):
            if attr.lower() in _CREDENTIAL_FIELDS:
                setattr(record, attr, REDACTED)
        return True


def _mask(value: Any) -> Any:
    if isinstance(value, str):
        return redact_query_secrets(value)
    if isinstance(value, dict):
        return {
            k: REDACTED if str(k).lower() in _CREDENTIAL_FIELDS else _mask(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(_mask(item) for item in value)
    return value


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """One JSON object per line, tagged with service, environment and request ID."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.update(
            timestamp=self.formatTime(record, self.datefmt),
            level=record.levelname,
            logger=record.name,
            correlation_id=getattr(record, "correlation_id", "none"),
            service=SERVICE_NAME,
            environment=os.getenv("ENVIRONMENT", "development"),
        )
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return CustomJsonFormatter(_JSON_FORMAT, rename_fields={"timestamp": "@timestamp"})
    return logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging() -> None:
    """
    Configure the root logger from the environment.

    LOG_LEVEL   DEBUG..CRITICAL (default INFO)
    LOG_FORMAT  json or text (default json when ENVIRONMENT=production)
    """
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    default_format = "json" if os.getenv("ENVIRONMENT") == "production" else "text"
    log_format = os.getenv("LOG_FORMAT", default_format).lower()

    handler = logging.StreamHandler()
    handler.setFormatter(_build_formatter(log_format))
    handler.addFilter(CorrelationIDFilter())
    handler.addFilter(SensitiveDataFilter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level)

    for name, level in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


setup_logging()
